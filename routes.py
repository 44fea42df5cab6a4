import io
import logging

from flask import Response, current_app, jsonify, request, send_file, session
from werkzeug.exceptions import HTTPException, RequestEntityTooLarge

from analyzers.column_profiler import ColumnProfiler
from analyzers.distribution_visualizer import DistributionVisualizer
from analyzers.missingness_analyzer import MissingnessAnalyzer
from analyzers.overview_analyzer import OverviewAnalyzer
from errors import DatasetError, InvalidOptions, UnsupportedFormat
from models import LoadOptions
from parsers.file_parser import allowed_file, file_extension
from utils.serialization import make_json_serializable
from utils.text_report import full_report


def _store():
    return current_app.extensions['dataset_store']


def _loader():
    return current_app.extensions['dataset_loader']


def _table(dataset_id):
    """Table of a dataset, parsed on first use"""
    return _store().get(dataset_id).table(_loader())


def _success(**payload):
    return jsonify(make_json_serializable({'status': 'success', **payload}))


def _plot_response(result):
    """PNG body when a plot was drawn, otherwise the explanatory message as JSON"""
    if result.has_plot:
        return send_file(io.BytesIO(result.image), mimetype='image/png')
    return _success(plot=False, message=result.message, data=result.data)


def register_routes(app):
    """Register all routes with the Flask app"""

    overview_analyzer = OverviewAnalyzer(app.config['PAGE_LENGTH'])
    missingness_analyzer = MissingnessAnalyzer()
    column_profiler = ColumnProfiler()
    distribution_visualizer = DistributionVisualizer()

    # =======================
    # ERROR HANDLERS
    # =======================
    @app.errorhandler(DatasetError)
    def handle_dataset_error(e):
        return jsonify({
            'status': 'error',
            'message': e.message
        }), e.status_code

    @app.errorhandler(RequestEntityTooLarge)
    def handle_too_large(e):
        limit_mb = app.config['MAX_CONTENT_LENGTH'] / (1024 * 1024)
        return jsonify({
            'status': 'error',
            'message': f'File is larger than the {limit_mb:g} MB upload limit.'
        }), 413

    @app.errorhandler(Exception)
    def handle_unexpected_error(e):
        if isinstance(e, HTTPException):
            return jsonify({'status': 'error', 'message': e.description}), e.code
        logging.error(f"Unexpected error: {str(e)}", exc_info=True)
        return jsonify({
            'status': 'error',
            'message': f'Analysis failed: {str(e)}'
        }), 500

    # =======================
    # API ROUTES (JSON Only)
    # =======================
    @app.route('/api/health')
    def api_health():
        return _success(datasets=len(_store()))

    @app.route('/api/upload', methods=['POST'])
    def api_upload_file():
        """Accept one csv/xls/xlsx file; nothing is parsed until an analysis asks for it"""
        file = request.files.get('file')
        if not file or not file.filename:
            return jsonify({
                'status': 'error',
                'message': 'No file selected'
            }), 400

        filename = file.filename
        if not allowed_file(filename):
            raise UnsupportedFormat(file_extension(filename))

        file_type = file_extension(filename)
        options = LoadOptions.from_form(request.form)
        content = file.read()
        sheet_names = _loader().sheet_names(content, file_type)

        # A new upload replaces the previous dataset of this browser session
        previous_id = session.get('dataset_id')
        if previous_id:
            _store().delete(previous_id)

        dataset = _store().create(filename, file_type, content, options=options, sheet_names=sheet_names)
        session['dataset_id'] = dataset.id
        logging.info(f"Uploaded '{filename}' ({dataset.file_size} bytes) as dataset {dataset.id}")

        return _success(message=f"Successfully uploaded {filename}", **dataset.to_dict())

    @app.route('/api/datasets/<dataset_id>')
    def api_get_dataset(dataset_id):
        return _success(**_store().get(dataset_id).to_dict())

    @app.route('/api/datasets/<dataset_id>', methods=['DELETE'])
    def api_delete_dataset(dataset_id):
        _store().get(dataset_id)
        _store().delete(dataset_id)
        if session.get('dataset_id') == dataset_id:
            session.pop('dataset_id')
        return _success(message='Dataset deleted successfully', dataset_id=dataset_id)

    @app.route('/api/datasets/<dataset_id>/options', methods=['PUT'])
    def api_update_options(dataset_id):
        """Change header/delimiter/sheet choices; the table is rebuilt on next use"""
        form = request.get_json(silent=True) or request.form
        dataset = _store().update_options(dataset_id, form)
        return _success(**dataset.to_dict())

    @app.route('/api/datasets/<dataset_id>/sheets')
    def api_sheets(dataset_id):
        dataset = _store().get(dataset_id)
        return _success(sheet_names=dataset.sheet_names)

    @app.route('/api/datasets/<dataset_id>/overview')
    def api_overview(dataset_id):
        return _success(overview=overview_analyzer.analyze(_table(dataset_id)))

    @app.route('/api/datasets/<dataset_id>/rows')
    def api_rows(dataset_id):
        page = request.args.get('page', 1, type=int)
        return _success(**overview_analyzer.page(_table(dataset_id), page))

    @app.route('/api/datasets/<dataset_id>/missingness')
    def api_missingness(dataset_id):
        return _success(missingness=missingness_analyzer.analyze(_table(dataset_id)))

    @app.route('/api/datasets/<dataset_id>/missingness/plot')
    def api_missingness_plot(dataset_id):
        return _plot_response(missingness_analyzer.upset_plot(_table(dataset_id)))

    @app.route('/api/datasets/<dataset_id>/columns')
    def api_columns(dataset_id):
        return _success(columns=column_profiler.analyze(_table(dataset_id)))

    @app.route('/api/datasets/<dataset_id>/distribution')
    def api_distribution(dataset_id):
        column = request.args.get('column')
        if not column:
            raise InvalidOptions('Select a column to plot.')
        return _plot_response(distribution_visualizer.plot(_table(dataset_id), column))

    @app.route('/api/datasets/<dataset_id>/report')
    def api_report(dataset_id):
        """All text summaries as one preformatted document"""
        table = _table(dataset_id)
        text = full_report(
            overview_analyzer.analyze(table),
            missingness_analyzer.analyze(table),
            column_profiler.analyze(table),
        )
        return Response(text, mimetype='text/plain')
