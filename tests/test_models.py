import pytest

from errors import NoFileSelected
from models import DatasetStore, LoadOptions


class CountingLoader:
    def __init__(self, loader):
        self.loader = loader
        self.calls = 0

    def load(self, *args, **kwargs):
        self.calls += 1
        return self.loader.load(*args, **kwargs)


def test_store_create_get_delete():
    store = DatasetStore()
    dataset = store.create("data.csv", "csv", b"a\n1\n")

    assert dataset.id in store
    assert store.get(dataset.id) is dataset
    assert store.delete(dataset.id)
    assert not store.delete(dataset.id)
    with pytest.raises(NoFileSelected):
        store.get(dataset.id)


def test_table_is_parsed_once(loader):
    store = DatasetStore()
    dataset = store.create("data.csv", "csv", b"a;b\n1;2\n", options=LoadOptions(delimiter=";"))
    counting = CountingLoader(loader)

    first = dataset.table(counting)
    second = dataset.table(counting)
    assert first is second
    assert counting.calls == 1
    assert first.columns == ["a", "b"]


def test_changing_options_rebuilds_table(loader):
    store = DatasetStore()
    dataset = store.create("data.csv", "csv", b"1,2\n3,4\n")
    assert dataset.table(loader).row_count == 1

    store.update_options(dataset.id, {"has_header": "false"})
    assert dataset.options.has_header is False
    assert dataset.table(loader).row_count == 2


def test_to_dict():
    dataset = DatasetStore().create("book.xlsx", "xlsx", b"xx", sheet_names=["S1", "S2"])
    info = dataset.to_dict()

    assert info["file_name"] == "book.xlsx"
    assert info["file_size"] == 2
    assert info["sheet_names"] == ["S1", "S2"]
    assert info["options"] == {"has_header": True, "delimiter": ",", "sheet_name": None}


def test_store_cap_evicts_oldest_upload():
    store = DatasetStore(max_datasets=2)
    first = store.create("one.csv", "csv", b"a\n1\n")
    second = store.create("two.csv", "csv", b"a\n2\n")
    third = store.create("three.csv", "csv", b"a\n3\n")

    assert len(store) == 2
    assert first.id not in store
    assert second.id in store
    assert third.id in store


def test_store_without_cap_keeps_everything():
    store = DatasetStore()
    for i in range(30):
        store.create(f"{i}.csv", "csv", b"a\n1\n")
    assert len(store) == 30


def test_upload_time_is_timezone_aware():
    dataset = DatasetStore().create("data.csv", "csv", b"a\n1\n")
    assert dataset.uploaded_at.tzinfo is not None
    assert dataset.to_dict()["uploaded_at"].endswith("+00:00")
