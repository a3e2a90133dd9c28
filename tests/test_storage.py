import pytest

from errors import PersistenceUnavailable
from storage import JsonFileStore, MemoryStore


@pytest.fixture(params=["memory", "file"])
def kv(request, tmp_path):
    if request.param == "memory":
        return MemoryStore()
    return JsonFileStore(str(tmp_path / "saves"))


def test_get_set_delete(kv):
    assert kv.get("detective_game_case_001") is None
    assert not kv.has("detective_game_case_001")

    kv.set("detective_game_case_001", '{"caseId": "case_001"}')
    assert kv.get("detective_game_case_001") == '{"caseId": "case_001"}'
    assert kv.has("detective_game_case_001")
    assert kv.keys() == ["detective_game_case_001"]

    kv.delete("detective_game_case_001")
    kv.delete("detective_game_case_001")
    assert kv.get("detective_game_case_001") is None
    assert kv.keys() == []


def test_memory_store_initial_contents():
    kv = MemoryStore({"a": "1"})
    assert kv.get("a") == "1"


def test_file_store_leaves_no_temp_files(tmp_path):
    kv = JsonFileStore(str(tmp_path))
    kv.set("key", "one")
    kv.set("key", "two")
    assert sorted(p.name for p in tmp_path.iterdir()) == ["key.json"]
    assert kv.get("key") == "two"


def test_file_store_rejects_unsafe_keys(tmp_path):
    kv = JsonFileStore(str(tmp_path))
    with pytest.raises(ValueError):
        kv.set("../escape", "x")


def test_file_store_write_failure(tmp_path):
    blocker = tmp_path / "not_a_dir"
    blocker.write_text("", encoding="utf-8")
    kv = JsonFileStore(str(blocker))
    with pytest.raises(PersistenceUnavailable):
        kv.set("key", "value")


def test_file_store_non_utf8_blob(tmp_path):
    (tmp_path / "key.json").write_bytes(b'{"caseId": "\xff"}')
    kv = JsonFileStore(str(tmp_path))
    with pytest.raises(PersistenceUnavailable):
        kv.get("key")
