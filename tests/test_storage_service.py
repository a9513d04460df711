from tafa.models.kv_entry import KVEntry


def test_missing_key_returns_default(storage):
    assert storage.load("tafa-habits", []) == []


def test_save_then_overwrite(storage):
    assert storage.save("tafa-user-stats", {"level": 1}) is True
    assert storage.save("tafa-user-stats", {"level": 2}) is True
    assert storage.load("tafa-user-stats") == {"level": 2}


def test_corrupt_json_is_treated_as_missing(storage, db_session):
    db_session.add(KVEntry(key="tafa-goals", value="{not json"))
    db_session.commit()
    assert storage.load("tafa-goals", []) == []

