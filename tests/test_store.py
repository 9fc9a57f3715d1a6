"""
Tests for the persisted store: insertion order, derived counts, lookups
by email, status groups and the load/save round-trip.
"""
import json

import pytest

from backend.config import STORE_KEY
from backend.errors import DuplicateCandidateError, NotFoundError
from backend.store import RecruitStore


def test_seed_roles_on_empty_storage(store):
    """A fresh store starts with the three open seed roles and no results."""
    assert [r.id for r in store.roles] == ["role-001", "role-002", "role-003"]
    assert all(r.status == "Open" for r in store.roles)
    assert all(r.candidate_count == 0 for r in store.roles)
    assert store.get_all_candidates() == []


def test_candidates_by_role_keep_insertion_order(store, make_result):
    emails = ["a@example.com", "b@example.com", "c@example.com"]
    for email in emails:
        store.add_screening_result("role-001", make_result(email=email))
    store.add_screening_result("role-002", make_result(email="d@example.com", job_id="role-002"))

    assert [r.candidate.email for r in store.get_candidates_by_role_id("role-001")] == emails
    assert [r.candidate.email for r in store.get_candidates_by_role_id("role-002")] == ["d@example.com"]
    assert store.get_candidates_by_role_id("role-003") == []


def test_candidate_count_tracks_results(store, make_result):
    for i in range(4):
        store.add_screening_result("role-002", make_result(email=f"c{i}@example.com"))

    assert store.get_role_by_id("role-002").candidate_count == 4
    assert store.get_role_by_id("role-001").candidate_count == 0


def test_adding_results_leaves_role_identity_unchanged(store, make_result):
    before = store.get_role_by_id("role-001").model_dump(exclude={"candidate_count"})
    store.add_screening_result("role-001", make_result())
    after = store.get_role_by_id("role-001").model_dump(exclude={"candidate_count"})
    assert before == after


def test_unknown_role_results_go_to_orphan_bucket(store, make_result):
    store.add_screening_result("role-999", make_result())

    assert store.get_role_by_id("role-999") is None
    assert len(store.get_candidates_by_role_id("role-999")) == 1
    assert all(r.candidate_count == 0 for r in store.roles)


def test_get_candidate_by_email(store, make_result):
    store.add_screening_result("role-001", make_result(email="x@example.com", name="X"))
    store.add_screening_result("role-003", make_result(email="y@example.com", name="Y"))

    assert store.get_candidate_by_id("y@example.com").candidate.name == "Y"
    assert store.get_candidate_by_id("nobody@example.com") is None


def test_duplicate_email_rejected_when_enforced(store, make_result):
    store.add_screening_result("role-001", make_result(email="dup@example.com"))

    with pytest.raises(DuplicateCandidateError):
        store.add_screening_result("role-002", make_result(email="dup@example.com"))

    assert store.get_candidates_by_role_id("role-002") == []
    assert store.get_role_by_id("role-002").candidate_count == 0


def test_duplicate_email_first_match_wins_when_allowed(storage, make_result):
    store = RecruitStore(storage, enforce_unique_emails=False)
    store.load()
    store.add_screening_result("role-001", make_result(email="dup@example.com", name="First"))
    store.add_screening_result("role-002", make_result(email="dup@example.com", name="Second"))

    assert len(store.get_all_candidates()) == 2
    assert store.get_candidate_by_id("dup@example.com").candidate.name == "First"


def test_status_groups_partition_all_candidates(store, make_result):
    statuses = ["Qualified/High", "Qualified/Medium", "Borderline", "Rejected", "Rejected", "Qualified/High"]
    for i, status in enumerate(statuses):
        store.add_screening_result("role-001", make_result(email=f"s{i}@example.com", status=status))

    qualified = store.get_qualified_candidates()
    borderline = store.get_borderline_candidates()
    rejected = store.get_rejected_candidates()

    assert len(qualified) == 3
    assert len(borderline) == 1
    assert len(rejected) == 2
    groups = [set(r.candidate.email for r in g) for g in (qualified, borderline, rejected)]
    assert groups[0].isdisjoint(groups[1]) and groups[0].isdisjoint(groups[2]) and groups[1].isdisjoint(groups[2])
    assert set().union(*groups) == set(r.candidate.email for r in store.get_all_candidates())
    assert [r.status for r in store.get_candidates_by_status("Qualified/Medium")] == ["Qualified/Medium"]


def test_require_accessors_raise_not_found(store):
    with pytest.raises(NotFoundError):
        store.require_role("role-404")
    with pytest.raises(NotFoundError):
        store.require_candidate("ghost@example.com")


def test_round_trip_reproduces_snapshot(storage, store, make_result):
    store.add_screening_result("role-001", make_result(email="a@example.com"))
    store.add_screening_result("role-003", make_result(email="b@example.com", status="Borderline", fit_score=58.5))
    snapshot = store.snapshot()

    reloaded = RecruitStore(storage)
    reloaded.load()

    assert reloaded.snapshot() == snapshot
    assert reloaded.get_role_by_id("role-003").candidate_count == 1


def test_persisted_record_layout(storage, store, make_result):
    store.add_screening_result("role-001", make_result())

    record = json.loads(storage.path.read_text(encoding="utf-8"))[STORE_KEY]
    assert record["version"] == 0
    assert set(record["state"]) == {"roles", "screeningResults"}
    assert list(record["state"]["screeningResults"]) == ["role-001"]


def test_corrupt_storage_falls_back_to_seed(storage, make_result):
    storage.path.write_text("{not json", encoding="utf-8")

    store = RecruitStore(storage)
    store.load()
    assert len(store.roles) == 3
    assert store.get_all_candidates() == []

    store.add_screening_result("role-001", make_result())
    reloaded = RecruitStore(storage)
    reloaded.load()
    assert len(reloaded.get_all_candidates()) == 1


def test_invalid_persisted_shape_falls_back_to_seed(storage):
    storage.set_item(STORE_KEY, {"state": {"roles": [{"id": "broken"}]}, "version": 0})

    store = RecruitStore(storage)
    store.load()
    assert [r.id for r in store.roles] == ["role-001", "role-002", "role-003"]


def test_failed_save_leaves_memory_unchanged(full_disk_store, make_result):
    before = full_disk_store.snapshot()

    with pytest.raises(OSError):
        full_disk_store.add_screening_result("role-001", make_result())

    assert full_disk_store.snapshot() == before
    assert full_disk_store.get_candidate_by_id("ada@example.com") is None
    assert full_disk_store.get_role_by_id("role-001").candidate_count == 0
