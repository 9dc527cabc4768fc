import json

import pytest

from physioai.models.storage import StorageEntry
from physioai.services.roster_service import DuplicatePatientError, append_log, build_log, find_patient
from physioai.services.seed_service import seed_roster
from physioai.services.state_store import RosterStore

KEY = "physio_app_data_v1"


def _put(session_factory, value: str) -> None:
    with session_factory() as db:
        db.add(StorageEntry(key=KEY, value=value))
        db.commit()


def _stored(session_factory) -> list:
    with session_factory() as db:
        return json.loads(db.get(StorageEntry, KEY).value)


def test_load_seeds_when_storage_empty(session_factory):
    store = RosterStore(session_factory, KEY)
    patients = store.load()

    assert [p.id for p in patients] == ["p1", "p2"]
    assert [p["id"] for p in _stored(session_factory)] == ["p1", "p2"]


@pytest.mark.parametrize("raw", ["{not json", '{"id": "p1"}', "[]", '[{"id": "p1"}]'])
def test_malformed_storage_is_replaced_by_seed(session_factory, raw):
    _put(session_factory, raw)
    store = RosterStore(session_factory, KEY)

    patients = store.load()

    assert [p.id for p in patients] == ["p1", "p2"]
    assert len(_stored(session_factory)) == 2


def test_storage_with_duplicate_ids_is_discarded(session_factory):
    roster = seed_roster()
    doubled = [p.model_dump(mode="json") for p in roster + roster]
    _put(session_factory, json.dumps(doubled))

    patients = RosterStore(session_factory, KEY).load()
    assert [p.id for p in patients] == ["p1", "p2"]


def test_mutations_are_persisted_and_reloaded(session_factory):
    store = RosterStore(session_factory, KEY)
    store.load()
    log = build_log(pain_score=3, max_rom=44, reps_completed=12)

    store.apply(append_log, "p1", log)

    reloaded = RosterStore(session_factory, KEY).load()
    assert find_patient(reloaded, "p1").logs[-1] == log
    assert len(find_patient(reloaded, "p1").logs) == 6


def test_commit_rejects_duplicate_ids(session_factory):
    store = RosterStore(session_factory, KEY)
    roster = store.load()

    with pytest.raises(DuplicatePatientError):
        store.commit(roster + [roster[0]])
    assert [p.id for p in store.patients] == ["p1", "p2"]


def test_reset_restores_seed(session_factory):
    store = RosterStore(session_factory, KEY)
    store.load()
    store.apply(append_log, "p2", build_log(pain_score=1, max_rom=90, reps_completed=10))

    store.reset()

    assert len(find_patient(store.patients, "p2").logs) == 2
    assert len(find_patient(_load_fresh(session_factory), "p2").logs) == 2


def _load_fresh(session_factory):
    return RosterStore(session_factory, KEY).load()


def test_patients_returns_snapshot(session_factory):
    store = RosterStore(session_factory, KEY)
    store.load()
    snapshot = store.patients
    snapshot.clear()
    assert len(store.patients) == 2
