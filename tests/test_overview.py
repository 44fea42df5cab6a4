from analyzers.overview_analyzer import OverviewAnalyzer


def _rows_csv(n):
    return "n,label\n" + "".join(f"{i},row{i}\n" for i in range(1, n + 1))


def test_overview_counts(load_csv):
    overview = OverviewAnalyzer().analyze(load_csv("a,b\n1,x\n2,\n,x\n"))

    assert overview["file_name"] == "test.csv"
    assert overview["row_count"] == 3
    assert overview["column_count"] == 2
    assert overview["columns"] == [
        {"name": "a", "kind": "numeric"},
        {"name": "b", "kind": "categorical"},
    ]
    assert overview["page_length"] == 10
    assert overview["page_count"] == 1


def test_pages_of_ten_rows(load_csv):
    table = load_csv(_rows_csv(25))
    analyzer = OverviewAnalyzer()

    first = analyzer.page(table, 1)
    assert first["page_count"] == 3
    assert first["total_rows"] == 25
    assert len(first["rows"]) == 10
    assert first["rows"][0] == [1, "row1"]

    last = analyzer.page(table, 3)
    assert [row[0] for row in last["rows"]] == [21, 22, 23, 24, 25]

    assert analyzer.page(table, 4)["rows"] == []
    assert analyzer.page(table, 0)["rows"] == []


def test_missing_cells_are_null(load_csv):
    page = OverviewAnalyzer().page(load_csv("a,b\n1,x\n2,\n,x\n"))
    assert page["rows"] == [[1.0, "x"], [2.0, None], [None, "x"]]


def test_overview_is_repeatable(load_csv):
    table = load_csv(_rows_csv(12))
    analyzer = OverviewAnalyzer()
    assert analyzer.analyze(table) == analyzer.analyze(table)
    assert analyzer.page(table, 2) == analyzer.page(table, 2)
