"""Tests for the pure seat-allocation query builders and rejection classifier."""

from uuid import uuid4

from haven.core.modules.event.service import (
    build_cancel_filter,
    build_cancel_update,
    build_register_filter,
    build_register_update,
    classify_rejection,
)
from haven.errors import AlreadyRegisteredError, NotFoundError, SoldOutError


class TestRegisterQuery:
    def test_filter_requires_free_seat_and_absent_registrant(self):
        event_id, user_id = uuid4(), uuid4()
        assert build_register_filter(event_id, user_id) == {
            "_id": event_id,
            "available_seats": {"$gt": 0},
            "registrations": {"$ne": user_id},
        }

    def test_update_takes_seat_and_records_registrant(self):
        user_id = uuid4()
        assert build_register_update(user_id) == {
            "$inc": {"available_seats": -1},
            "$push": {"registrations": user_id},
        }


class TestCancelQuery:
    def test_filter_requires_existing_registration(self):
        event_id, user_id = uuid4(), uuid4()
        assert build_cancel_filter(event_id, user_id) == {"_id": event_id, "registrations": user_id}

    def test_update_is_inverse_of_register(self):
        user_id = uuid4()
        assert build_cancel_update(user_id) == {
            "$inc": {"available_seats": 1},
            "$pull": {"registrations": user_id},
        }


class TestClassifyRejection:
    def test_missing_event(self):
        assert isinstance(classify_rejection(None, uuid4()), NotFoundError)

    def test_already_registered(self):
        user_id = uuid4()
        error = classify_rejection({"available_seats": 2, "registrations": [user_id]}, user_id)
        assert isinstance(error, AlreadyRegisteredError)
        assert error.status_code == 409

    def test_already_registered_wins_over_sold_out(self):
        user_id = uuid4()
        error = classify_rejection({"available_seats": 0, "registrations": [uuid4(), user_id]}, user_id)
        assert isinstance(error, AlreadyRegisteredError)

    def test_sold_out(self):
        error = classify_rejection({"available_seats": 0, "registrations": [uuid4()]}, uuid4())
        assert isinstance(error, SoldOutError)
        assert error.status_code == 400
        assert error.error_type == "sold_out"

    def test_seat_freed_after_rejection_still_reports_sold_out(self):
        # The conditional update saw no seat; a later cancellation does not turn it into a success
        error = classify_rejection({"available_seats": 1, "registrations": []}, uuid4())
        assert isinstance(error, SoldOutError)
