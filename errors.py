class DatasetError(Exception):
    """Base class for errors that are reported to the user as a message"""

    status_code = 400

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class NoFileSelected(DatasetError):
    """No dataset is loaded for the request"""

    status_code = 404

    def __init__(self, message="No dataset loaded. Upload a file first."):
        super().__init__(message)


class UnsupportedFormat(DatasetError):
    """File extension is not one of csv, xls or xlsx"""

    def __init__(self, extension):
        shown = f".{extension}" if extension else "(no extension)"
        super().__init__(f"Unsupported file format: {shown}. Please upload a csv, xls or xlsx file.")
        self.extension = extension


class InvalidOptions(DatasetError):
    """Load options outside the accepted values"""


class FileTooLarge(DatasetError):
    status_code = 413


class ParseError(DatasetError):
    """File could not be turned into a table"""

    status_code = 422


class UnknownColumn(DatasetError):
    status_code = 404

    def __init__(self, column):
        super().__init__(f"Column '{column}' does not exist in the loaded dataset.")
        self.column = column
