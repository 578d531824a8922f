from datetime import timedelta

import pytest
from django.core.exceptions import ValidationError
from django.utils import timezone

from carcruise.listings.domain import status as st
from .helpers import stub_booking


def code_of(current, target):
    with pytest.raises(ValidationError) as exc:
        st.apply_transition(current, target)
    return exc.value.code


def test_pending_can_be_approved_or_rejected():
    assert st.apply_transition(st.PENDING, st.APPROVED) is True
    assert st.apply_transition(st.PENDING, st.REJECTED) is True


def test_same_status_is_a_noop():
    assert st.apply_transition(st.APPROVED, st.APPROVED) is False
    assert st.apply_transition(st.REJECTED, st.REJECTED) is False


def test_approved_is_final():
    assert code_of(st.APPROVED, st.REJECTED) == "status_locked"
    assert code_of(st.APPROVED, st.PENDING) == "status_locked"


def test_rejected_cannot_be_approved_later():
    assert code_of(st.REJECTED, st.APPROVED) == "status_locked"


def test_back_to_pending_is_refused():
    assert code_of(st.PENDING, st.PENDING) == "pending_not_allowed"
    assert code_of(st.REJECTED, st.PENDING) == "pending_not_allowed"


def test_unknown_status_is_refused():
    assert code_of(st.PENDING, "cancelled") == "invalid_status"
    assert code_of(st.PENDING, "completed") == "invalid_status"


def test_display_status_marks_finished_approved_bookings_completed():
    today = timezone.localdate()
    now = timezone.now()
    past = stub_booking(st.APPROVED, today - timedelta(days=5), today - timedelta(days=2))
    future = stub_booking(st.APPROVED, today + timedelta(days=1), today + timedelta(days=3))
    rejected_past = stub_booking(st.REJECTED, today - timedelta(days=5), today - timedelta(days=2))

    assert st.display_status(past, now) == st.COMPLETED
    assert st.display_status(future, now) == st.APPROVED
    assert st.display_status(rejected_past, now) == st.REJECTED

    assert st.is_approved_locked(future, now) is True
    assert st.is_approved_locked(past, now) is False
