from __future__ import annotations

import pytest

from tender_api.models.bid import Bid, BidAuthorType
from tender_api.models.bid_version import BidVersion
from tender_api.models.tender import Tender, TenderStatus
from tender_api.models.tender_version import TenderVersion
from tender_api.schemas.bid import BidPatch
from tender_api.schemas.tender import TenderPatch
from tender_api.services.exceptions import ConflictError, InvalidInputError, NotFoundError
from tender_api.services.versioning import bid_store, tender_store


@pytest.fixture
def tender(db, world):
    t = Tender(
        name="A",
        description="first",
        service_type="Delivery",
        status=TenderStatus.CREATED,
        organization_id=world.acme_id,
    )
    return tender_store.create(db, t)


def test_create_writes_version_one_snapshot(db, tender):
    assert tender.version == 1
    history = tender_store.history(db, tender.id)
    assert [(s.version, s.name, s.description, s.service_type) for s in history] == [(1, "A", "first", "Delivery")]


def test_edit_applies_only_present_fields(db, tender):
    tender_store.edit(db, tender, TenderPatch(name="B"))
    assert tender.version == 2
    assert tender.name == "B"
    assert tender.description == "first"
    snap = tender_store.get_snapshot(db, tender.id, 2)
    assert (snap.name, snap.description, snap.service_type) == ("B", "first", "Delivery")


def test_empty_patch_still_creates_version(db, tender):
    tender_store.edit(db, tender, TenderPatch())
    assert tender.version == 2
    assert len(tender_store.history(db, tender.id)) == 2


def test_edit_then_rollback_sequence(db, tender):
    tender_store.edit(db, tender, TenderPatch(name="B"))
    tender_store.edit(db, tender, TenderPatch(name="C", service_type="Manufacture"))
    tender_store.rollback(db, tender, 1)

    assert tender.version == 4
    assert tender.name == "A"
    assert tender.service_type == "Delivery"
    history = tender_store.history(db, tender.id)
    assert [s.version for s in history] == [1, 2, 3, 4]
    assert [s.name for s in history] == ["A", "B", "C", "A"]


def test_snapshot_count_matches_operations(db, tender):
    ops = 0
    for i in range(3):
        tender_store.edit(db, tender, TenderPatch(description=f"rev {i}"))
        ops += 1
    tender_store.rollback(db, tender, 2)
    tender_store.rollback(db, tender, 5)
    ops += 2
    history = tender_store.history(db, tender.id)
    assert len(history) == ops + 1
    assert [s.version for s in history] == list(range(1, ops + 2))
    assert tender.version == history[-1].version


def test_rollback_to_current_version_still_advances(db, tender):
    tender_store.rollback(db, tender, 1)
    assert tender.version == 2
    assert tender.name == "A"


@pytest.mark.parametrize("version", [0, -1])
def test_rollback_rejects_non_positive_version(db, tender, version):
    with pytest.raises(InvalidInputError):
        tender_store.rollback(db, tender, version)
    assert tender.version == 1


def test_rollback_unknown_version(db, tender):
    tender_store.edit(db, tender, TenderPatch(name="B"))
    tender_store.edit(db, tender, TenderPatch(name="C"))
    with pytest.raises(NotFoundError):
        tender_store.rollback(db, tender, 9999)
    assert tender.version == 3
    assert len(tender_store.history(db, tender.id)) == 3


def test_status_is_not_versioned(db, tender):
    assert not hasattr(TenderVersion, "status")
    assert not hasattr(BidVersion, "status")
    tender.status = TenderStatus.PUBLISHED
    tender_store.edit(db, tender, TenderPatch(name="B"))
    tender.status = TenderStatus.CLOSED
    db.commit()
    tender_store.rollback(db, tender, 1)
    assert tender.status == TenderStatus.CLOSED


def test_lost_version_race_commits_nothing(db, tender):
    # a concurrent writer already took version 2
    db.add(TenderVersion(tender_id=tender.id, version=2, name="other", description="x"))
    db.commit()

    with pytest.raises(ConflictError):
        tender_store.edit(db, tender, TenderPatch(name="B"))

    reloaded = db.get(Tender, tender.id)
    assert reloaded.version == 1
    assert reloaded.name == "A"


def test_bid_store_versions_name_and_description(db, world, tender):
    bid = bid_store.create(db, Bid(
        name="offer",
        description="v1 text",
        tender_id=tender.id,
        author_type=BidAuthorType.ORGANIZATION,
        author_id=world.builders_id,
    ))
    bid_store.edit(db, bid, BidPatch(description="v2 text"))
    bid_store.rollback(db, bid, 1)
    history = bid_store.history(db, bid.id)
    assert [(s.version, s.description) for s in history] == [(1, "v1 text"), (2, "v2 text"), (3, "v1 text")]
    assert bid.version == 3
