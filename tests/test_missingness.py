from analyzers.missingness_analyzer import (
    NEEDS_TWO_COLUMNS_MESSAGE,
    NO_BLANK_ROWS_MESSAGE,
    NO_MISSING_MESSAGE,
    MissingnessAnalyzer,
)

PNG_SIGNATURE = b"\x89PNG"


def test_summary_counts_every_missing_cell(load_csv):
    table = load_csv("a,b\n1,x\n2,\n,x\n")
    summary = MissingnessAnalyzer().summarize(table)

    assert summary["total_missing"] == int(table.frame.isna().sum().sum()) == 2
    assert summary["total_cells"] == 6
    assert summary["columns_with_missing"] == 2
    by_name = {col["name"]: col for col in summary["columns"]}
    assert by_name["a"]["missing_count"] == 1
    assert abs(by_name["b"]["missing_fraction"] - 1 / 3) < 1e-9


def test_summary_sorted_by_missing_fraction(load_csv):
    table = load_csv("a,b,c\n1,,\n2,,x\n3,y,\n4,z,w\n")
    columns = MissingnessAnalyzer().summarize(table)["columns"]

    assert [col["name"] for col in columns] == ["b", "c", "a"]
    assert [col["missing_count"] for col in columns] == [2, 2, 0]


def test_no_blank_rows(load_csv):
    blank = MissingnessAnalyzer().blank_rows(load_csv("a,b\n1,x\n2,\n,x\n"))
    assert blank == {"count": 0, "rows": [], "message": NO_BLANK_ROWS_MESSAGE}


def test_blank_rows_are_one_based(load_csv):
    table = load_csv("a,b\n1,x\n,\n3,y\n,\n")
    blank = MissingnessAnalyzer().blank_rows(table)

    assert blank["count"] == 2
    assert blank["rows"] == [2, 4]
    assert blank["message"] is None

    row_missing = table.frame.isna().sum(axis=1)
    assert blank["count"] == int((row_missing == table.column_count).sum())


def test_combinations(load_csv):
    table = load_csv("a,b,c\n1,,\n2,,x\n3,y,\n4,,\n5,z,w\n")
    combinations = MissingnessAnalyzer().combinations(table)

    assert combinations == [
        {"columns": ["b", "c"], "count": 2},
        {"columns": ["b"], "count": 1},
        {"columns": ["c"], "count": 1},
    ]


def test_combinations_without_missing_values(load_csv):
    assert MissingnessAnalyzer().combinations(load_csv("a,b\n1,x\n")) == []


def test_upset_plot_without_missing_values(load_csv):
    result = MissingnessAnalyzer().upset_plot(load_csv("a,b\n1,x\n2,y\n"))
    assert result.image is None
    assert result.message == NO_MISSING_MESSAGE


def test_upset_plot_needs_two_columns(load_csv):
    result = MissingnessAnalyzer().upset_plot(load_csv("a,b\n1,x\n,y\n3,z\n"))
    assert not result.has_plot
    assert result.message == NEEDS_TWO_COLUMNS_MESSAGE
    assert result.data["columns_with_missing"] == ["a"]


def test_upset_plot_is_drawn(load_csv):
    result = MissingnessAnalyzer().upset_plot(load_csv("a,b,c\n1,,\n2,,x\n3,y,\n"))
    assert result.has_plot
    assert result.message is None
    assert result.image.startswith(PNG_SIGNATURE)
    assert result.data["set_sizes"] == {"b": 2, "c": 2}
    assert sum(combo["count"] for combo in result.data["combinations"]) == 3


def test_analysis_is_repeatable(load_csv):
    table = load_csv("a,b,c\n1,,\n2,,x\n,,\n")
    analyzer = MissingnessAnalyzer()
    assert analyzer.analyze(table) == analyzer.analyze(table)
