import pytest

from taxlca.errors import RecordStoreError
from taxlca.record_store import RecordStore
from taxlca.records import parse_record

from conftest import write_store


@pytest.fixture
def store_paths(tmp_path):
    return write_store(tmp_path / "db", [
        ("0", "q1\t14\nq1\t15\n"),
        ("1", "17\n16\n"),
        ("7", ""),
    ])


def test_size_keys_and_data(store_paths):
    with RecordStore(*store_paths) as store:
        assert store.size() == 3
        assert len(store) == 3
        assert store.key_at(2) == "7"
        assert store.data_at(0) == "q1\t14\nq1\t15\n"
        assert store.data_at(1) == "17\n16\n"
        assert store.data_at(2) == ""


def test_default_index_path(store_paths):
    with RecordStore(store_paths[0]) as store:
        assert store.size() == 3


def test_string_keys(tmp_path):
    paths = write_store(tmp_path / "db", [("NA", "1"), ("read_1", "2")])
    with RecordStore(*paths) as store:
        assert store.key_at(0) == "NA"
        assert store.key_at(1) == "read_1"


def test_empty_store(tmp_path):
    paths = write_store(tmp_path / "db", [])
    with RecordStore(*paths) as store:
        assert store.size() == 0


def test_out_of_range(store_paths):
    with RecordStore(*store_paths) as store:
        with pytest.raises(RecordStoreError):
            store.data_at(3)
        with pytest.raises(RecordStoreError):
            store.key_at(-1)


def test_record_past_end_of_data(tmp_path):
    data = tmp_path / "db"
    data.write_bytes(b"14\0")
    index = tmp_path / "db.index"
    index.write_text("0\t0\t3\n1\t3\t10\n")
    with RecordStore(str(data), str(index)) as store:
        assert store.data_at(0) == "14"
        with pytest.raises(RecordStoreError, match="past the end"):
            store.data_at(1)


def test_malformed_index(tmp_path):
    data = tmp_path / "db"
    data.write_bytes(b"14\0")
    index = tmp_path / "db.index"
    index.write_text("0\tzero\t3\n")
    with pytest.raises(RecordStoreError, match="Malformed"):
        RecordStore(str(data), str(index))


def test_missing_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        RecordStore(str(tmp_path / "nope"))
    (tmp_path / "db.index").write_text("0\t0\t1\n")
    with pytest.raises(FileNotFoundError):
        RecordStore(str(tmp_path / "db"))


class TestParseRecord:
    def test_query_taxid_lines(self):
        assert parse_record("q1\t14\nq1\t15\n", "0") == ("q1", [14, 15])

    def test_bare_taxids_use_store_key(self):
        assert parse_record("17\n16\n", "5") == ("5", [17, 16])

    def test_extra_columns_ignored(self):
        assert parse_record("q\t14\t0.98\t1e-30\n", "0") == ("q", [14])

    def test_blank_record(self):
        assert parse_record("", "0") is None
        assert parse_record("\n\n", "0") is None

    def test_blank_lines_skipped(self):
        assert parse_record("\n14\n\n15", "k") == ("k", [14, 15])

    def test_non_integer_taxid(self):
        assert parse_record("q\tNA\nq\t14\n", "0") == ("q", [None, 14])

    def test_whitespace_only_record(self):
        assert parse_record("\t\n", "key7") is None
        assert parse_record(" \t \n\t\t\n", "key7") is None

    def test_empty_query_keeps_store_key(self):
        assert parse_record("\t14\n", "key7") == ("key7", [14])
        assert parse_record("\t14\t0.9\n", "key7") == ("key7", [14])

    def test_numeric_literal_syntax_not_a_taxid(self):
        assert parse_record("1_4\n", "k") == ("k", [None])
        assert parse_record("q\t+14\nq\t-3\nq\t1e3\n", "k") == \
            ("q", [None, None, None])


def test_mmap_failure_closes_data_file(store_paths, monkeypatch):
    import taxlca.record_store as record_store

    opened = []

    def tracking_open(*args, **kwargs):
        f = open(*args, **kwargs)
        opened.append(f)
        return f

    def failing_mmap(*args, **kwargs):
        raise OSError("mmap failed")

    monkeypatch.setattr(record_store, "open", tracking_open, raising=False)
    monkeypatch.setattr(record_store.mmap, "mmap", failing_mmap)
    with pytest.raises(OSError, match="mmap failed"):
        RecordStore(*store_paths)
    assert len(opened) == 1
    assert opened[0].closed
