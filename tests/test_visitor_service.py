# tests/test_visitor_service.py
"""Unit tests for the visitor record store (check-in, check-out, listing)."""

from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError

from app.models.visitor import Visitor
from app.schemas.visitor import VisitorCreate
from app.services.visitor_service import VisitorService
from app.utils.exceptions import NotFoundException, ValidationException, StorageException
from app.utils.timestamps import now_epoch


def make_visitor(name="Alice", **fields):
    return VisitorCreate(name=name, **fields)


def insert_visitor(db, checkin_time, name="Legacy", checkout_time=None, **fields):
    visitor = Visitor(name=name, checkin_time=checkin_time, checkout_time=checkout_time, **fields)
    db.add(visitor)
    db.commit()
    return visitor


class TestCheckIn:
    def test_creates_checked_in_visitor(self, db_session):
        visitor = VisitorService.check_in(db_session, make_visitor(phone="555-1111"))

        assert visitor.id
        assert visitor.name == "Alice"
        assert visitor.phone == "555-1111"
        assert visitor.checkout_time is None
        assert db_session.query(Visitor).count() == 1

    def test_ids_are_unique(self, db_session):
        first = VisitorService.check_in(db_session, make_visitor())
        second = VisitorService.check_in(db_session, make_visitor())
        assert first.id != second.id

    def test_client_checkin_time_is_ignored(self, db_session):
        data = VisitorCreate.model_validate({"name": "Bob", "checkin_time": 42})
        with patch("app.services.visitor_service.now_epoch", return_value=1_700_000_000):
            visitor = VisitorService.check_in(db_session, data)
        assert visitor.checkin_time == 1_700_000_000

    def test_optional_fields_default_to_empty(self, db_session):
        visitor = VisitorService.check_in(db_session, make_visitor())
        assert visitor.address == ""
        assert visitor.company == ""
        assert visitor.person_to_meet == ""
        assert visitor.photo is None
        assert visitor.created_by is None

    def test_records_photo_and_actor(self, db_session):
        visitor = VisitorService.check_in(
            db_session, make_visitor(), photo_reference="/uploads/a.jpg", actor_id="user-1"
        )
        assert visitor.photo == "/uploads/a.jpg"
        assert visitor.created_by == "user-1"

    @pytest.mark.parametrize("name", ["", "   ", "\t\n"])
    def test_blank_name_rejected_and_nothing_persisted(self, db_session, name):
        with pytest.raises(ValidationException):
            VisitorService.check_in(db_session, make_visitor(name=name))
        assert db_session.query(Visitor).count() == 0

    def test_storage_failure_is_rolled_back(self, db_session):
        with patch.object(db_session, "commit", side_effect=OperationalError("INSERT", {}, Exception("disk full"))):
            with pytest.raises(StorageException):
                VisitorService.check_in(db_session, make_visitor())
        assert db_session.query(Visitor).count() == 0


class TestCheckOut:
    def test_sets_checkout_time(self, db_session):
        visitor = VisitorService.check_in(db_session, make_visitor())
        before = now_epoch()

        checked_out = VisitorService.check_out(db_session, visitor.id)

        assert checked_out.checkout_time is not None
        assert checked_out.checkout_time >= before

    def test_second_checkout_keeps_first_time(self, db_session):
        visitor = VisitorService.check_in(db_session, make_visitor())
        with patch("app.services.visitor_service.now_epoch", return_value=1_700_000_600):
            first = VisitorService.check_out(db_session, visitor.id)
        with patch("app.services.visitor_service.now_epoch", return_value=1_700_009_999):
            second = VisitorService.check_out(db_session, visitor.id)

        assert first.checkout_time == 1_700_000_600
        assert second.checkout_time == 1_700_000_600

    def test_blank_legacy_checkout_is_treated_as_checked_in(self, db_session):
        visitor = insert_visitor(db_session, 1_700_000_000, checkout_time="")
        assert visitor.is_checked_out is False

        with patch("app.services.visitor_service.now_epoch", return_value=1_700_000_600):
            checked_out = VisitorService.check_out(db_session, visitor.id)

        assert checked_out.checkout_time == 1_700_000_600
        assert VisitorService.get_visitor_by_id(db_session, visitor.id).is_checked_out is True

    def test_unknown_id_raises_and_store_unchanged(self, db_session):
        visitor = VisitorService.check_in(db_session, make_visitor())

        with pytest.raises(NotFoundException):
            VisitorService.check_out(db_session, "does-not-exist")

        assert VisitorService.get_visitor(db_session, visitor.id).checkout_time is None


class TestListVisitors:
    def test_alice_end_to_end(self, db_session):
        with patch("app.services.visitor_service.now_epoch", return_value=1_700_000_000):
            alice = VisitorService.check_in(db_session, make_visitor(phone="555-1111"))
            listed = VisitorService.list_visitors(db_session)

        assert len(listed) == 1
        assert listed[0].checkout_time is None

        with patch("app.services.visitor_service.now_epoch", return_value=1_700_003_600):
            VisitorService.check_out(db_session, alice.id)
            after = VisitorService.list_visitors(db_session)

        assert after[0].checkout_time == 1_700_003_600
        assert after[0].model_dump(exclude={"checkout_time"}) == listed[0].model_dump(exclude={"checkout_time"})

    def test_ordered_newest_first(self, db_session):
        insert_visitor(db_session, 1_700_000_000, name="old")
        insert_visitor(db_session, 1_700_000_500, name="new")
        insert_visitor(db_session, 1_700_000_200, name="mid")

        names = [v.name for v in VisitorService.list_visitors(db_session)]
        assert names == ["new", "mid", "old"]

    def test_bounds_are_inclusive(self, db_session):
        insert_visitor(db_session, 100, name="a")
        insert_visitor(db_session, 200, name="b")
        insert_visitor(db_session, 300, name="c")

        names = [v.name for v in VisitorService.list_visitors(db_session, 200, 300)]
        assert names == ["c", "b"]

    def test_legacy_millisecond_rows_are_normalized(self, db_session):
        insert_visitor(db_session, 1_700_000_000_123, name="ms", checkout_time=1_700_000_100_999)

        listed = VisitorService.list_visitors(db_session, 1_700_000_000, 1_700_000_000)

        assert len(listed) == 1
        assert listed[0].checkin_time == 1_700_000_000
        assert listed[0].checkout_time == 1_700_000_100

    def test_millisecond_bounds_are_normalized(self, db_session):
        insert_visitor(db_session, 1_700_000_000)
        listed = VisitorService.list_visitors(db_session, "1699999999000", "1700000001000")
        assert len(listed) == 1

    def test_string_timestamps_normalized_on_read(self):
        visitor = Visitor(id="v1", name="Text", checkin_time="2023-11-14T22:13:20Z", checkout_time="")
        record = VisitorService.to_record(visitor)
        assert record.checkin_time == 1_700_000_000
        assert record.checkout_time is None

    def test_future_checkins_excluded_by_default(self, db_session):
        insert_visitor(db_session, now_epoch() + 3600, name="future")
        assert VisitorService.list_visitors(db_session) == []

    def test_invalid_bound_rejected(self, db_session):
        with pytest.raises(ValidationException):
            VisitorService.list_visitors(db_session, "yesterday-ish")

    def test_status_filter(self, db_session):
        insert_visitor(db_session, 100, name="inside")
        insert_visitor(db_session, 200, name="left", checkout_time=250)

        assert [v.name for v in VisitorService.list_visitors(db_session, status="in")] == ["inside"]
        assert [v.name for v in VisitorService.list_visitors(db_session, status="out")] == ["left"]
        assert len(VisitorService.list_visitors(db_session, status="all")) == 2
        with pytest.raises(ValidationException):
            VisitorService.list_visitors(db_session, status="gone")

    def test_search_matches_name_phone_purpose(self, db_session):
        insert_visitor(db_session, 100, name="Alice", phone="555-1111", purpose="Interview")
        insert_visitor(db_session, 200, name="Bob", phone="555-2222", purpose="Delivery")

        assert [v.name for v in VisitorService.list_visitors(db_session, search="alice")] == ["Alice"]
        assert [v.name for v in VisitorService.list_visitors(db_session, search="2222")] == ["Bob"]
        assert [v.name for v in VisitorService.list_visitors(db_session, search="INTERVIEW")] == ["Alice"]
        assert VisitorService.list_visitors(db_session, search="nobody") == []

    def test_paginate(self, db_session):
        for i in range(5):
            insert_visitor(db_session, 100 + i, name=f"v{i}")
        records = VisitorService.list_visitors(db_session)

        items, total = VisitorService.paginate(records, page=2, per_page=2)

        assert total == 5
        assert [v.name for v in items] == ["v2", "v1"]
        assert VisitorService.paginate(records, page=9, per_page=2)[0] == []
