"""
Tests for creating, updating, cancelling and deleting appointments.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from storebooking.application.exceptions import (
    BadRequestError,
    ConflictError,
    ForbiddenError,
    NotFoundError,
)
from storebooking.domain.entities.appointment import AppointmentPatch, AppointmentStatus

from conftest import MONDAY, NOW, SUNDAY


def _at(hour: int, minute: int = 0, day=MONDAY) -> datetime:
    return datetime(day.year, day.month, day.day, hour, minute, tzinfo=timezone.utc)


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


def test_create_persists_pending_appointment(lifecycle, appointments):
    appointment = lifecycle.create("store-1", "service-60", "client-1", "2030-01-07T10:00:00Z", notes="first visit")

    assert appointment.status == AppointmentStatus.PENDING
    assert appointment.start_time == _at(10)
    assert appointment.notes == "first visit"
    assert appointment.created_at == NOW
    assert appointments.find_by_id(appointment.id) == appointment


def test_create_truncates_seconds(lifecycle):
    appointment = lifecycle.create("store-1", "service-60", "client-1", "2030-01-07T10:00:42.500+00:00")
    assert appointment.start_time == _at(10)


def test_create_converts_offset_to_business_time(lifecycle):
    """07:00 at UTC-3 is 10:00 UTC, inside opening hours."""
    appointment = lifecycle.create("store-1", "service-60", "client-1", "2030-01-07T07:00:00-03:00")
    assert appointment.start_time == _at(10)


def test_create_unknown_store(lifecycle):
    with pytest.raises(NotFoundError, match="Store not found"):
        lifecycle.create("store-x", "service-60", "client-1", _at(10))


def test_create_unknown_service(lifecycle):
    with pytest.raises(NotFoundError, match="Service not found"):
        lifecycle.create("store-1", "service-x", "client-1", _at(10))


def test_create_service_from_other_store(lifecycle):
    with pytest.raises(BadRequestError, match="does not belong"):
        lifecycle.create("store-1", "service-other", "client-1", _at(10))


def test_create_in_the_past(lifecycle):
    with pytest.raises(BadRequestError, match="future"):
        lifecycle.create("store-1", "service-60", "client-1", NOW - timedelta(days=1))


def test_create_at_current_minute_is_not_future(lifecycle):
    with pytest.raises(BadRequestError, match="future"):
        lifecycle.create("store-1", "service-60", "client-1", NOW)


def test_create_outside_working_hours(lifecycle):
    with pytest.raises(BadRequestError, match="working hours"):
        lifecycle.create("store-1", "service-60", "client-1", _at(18))
    with pytest.raises(BadRequestError, match="working hours"):
        lifecycle.create("store-1", "service-60", "client-1", _at(10, day=SUNDAY))


def test_create_rejects_long_notes(lifecycle):
    with pytest.raises(BadRequestError, match="Notes"):
        lifecycle.create("store-1", "service-60", "client-1", _at(10), notes="x" * 501)


def test_create_rejects_malformed_start(lifecycle):
    with pytest.raises(BadRequestError, match="ISO-8601"):
        lifecycle.create("store-1", "service-60", "client-1", "next monday at ten")


def test_create_conflict_with_pending(lifecycle):
    lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(ConflictError):
        lifecycle.create("store-1", "service-60", "client-2", _at(10, 30))


def test_create_conflict_with_confirmed(lifecycle, operator_ctx):
    first = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(first.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)

    with pytest.raises(ConflictError):
        lifecycle.create("store-1", "service-30", "client-2", _at(10, 30))


def test_create_identical_start_in_another_store_succeeds(lifecycle):
    lifecycle.create("store-1", "service-60", "client-1", _at(10))
    other = lifecycle.create("store-2", "service-other", "client-1", _at(10))
    assert other.store_id == "store-2"


def test_identical_start_same_store_conflicts(lifecycle):
    lifecycle.create("store-1", "service-60", "client-1", _at(10))
    with pytest.raises(ConflictError):
        lifecycle.create("store-1", "service-60", "client-2", _at(10))


def test_cancelled_slot_can_be_rebooked(lifecycle, client_ctx):
    first = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.cancel(first.id, client_ctx)

    second = lifecycle.create("store-1", "service-60", "client-2", _at(10))
    assert second.status == AppointmentStatus.PENDING


def test_back_to_back_bookings_are_allowed(lifecycle):
    lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.create("store-1", "service-60", "client-2", _at(11))
    lifecycle.create("store-1", "service-60", "client-2", _at(9))


def test_no_active_overlaps_after_mixed_operations(lifecycle, appointments, client_ctx, directory):
    """Sequential create/cancel never leaves two active appointments overlapping."""
    booked = []
    for hour, minute in [(9, 0), (9, 30), (10, 0), (11, 0), (11, 30), (12, 0), (14, 0)]:
        try:
            booked.append(lifecycle.create("store-1", "service-60", "client-1", _at(hour, minute)))
        except ConflictError:
            pass
    lifecycle.cancel(booked[1].id, client_ctx)
    for hour, minute in [(10, 0), (10, 30), (12, 30), (13, 0)]:
        try:
            lifecycle.create("store-1", "service-60", "client-1", _at(hour, minute))
        except ConflictError:
            pass

    active = [a for a in appointments.find_by_store("store-1") if a.is_active]
    for i, first in enumerate(active):
        for second in active[i + 1:]:
            first_end = first.end_time(directory.get_duration_minutes(first.service_id))
            second_end = second.end_time(directory.get_duration_minutes(second.service_id))
            assert not (first.start_time < second_end and first_end > second.start_time)


# ---------------------------------------------------------------------------
# update
# ---------------------------------------------------------------------------


def test_update_missing_appointment(lifecycle, client_ctx):
    with pytest.raises(NotFoundError):
        lifecycle.update("nope", AppointmentPatch(notes="x"), client_ctx)


def test_update_by_stranger_is_forbidden(lifecycle, other_client_ctx, other_operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(ForbiddenError):
        lifecycle.update(appointment.id, AppointmentPatch(notes="x"), other_client_ctx)
    with pytest.raises(ForbiddenError):
        lifecycle.update(appointment.id, AppointmentPatch(notes="x"), other_operator_ctx)


def test_update_notes_by_client(lifecycle, client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10), notes="old")

    updated = lifecycle.update(appointment.id, AppointmentPatch(notes="new"), client_ctx)
    assert updated.notes == "new"

    cleared = lifecycle.update(appointment.id, AppointmentPatch(notes=""), client_ctx)
    assert cleared.notes is None


def test_update_cancelled_appointment_is_rejected(lifecycle, client_ctx, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.cancel(appointment.id, client_ctx)

    with pytest.raises(BadRequestError, match="cancelled"):
        lifecycle.update(appointment.id, AppointmentPatch(notes="x"), client_ctx)
    with pytest.raises(BadRequestError, match="cancelled"):
        lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)


def test_client_reschedule_is_validated(lifecycle, client_ctx):
    lifecycle.create("store-1", "service-60", "client-2", _at(14))
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(ConflictError):
        lifecycle.update(appointment.id, AppointmentPatch(start_time=_at(13, 30)), client_ctx)
    with pytest.raises(BadRequestError, match="working hours"):
        lifecycle.update(appointment.id, AppointmentPatch(start_time=_at(19)), client_ctx)
    with pytest.raises(BadRequestError, match="future"):
        lifecycle.update(appointment.id, AppointmentPatch(start_time=NOW - timedelta(hours=1)), client_ctx)


def test_client_reschedule_ignores_own_slot(lifecycle, client_ctx):
    """Moving 10:00 to 10:30 overlaps only the appointment itself."""
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    updated = lifecycle.update(appointment.id, AppointmentPatch(start_time=_at(10, 30)), client_ctx)
    assert updated.start_time == _at(10, 30)


def test_operator_reschedule_skips_slot_validation(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    updated = lifecycle.update(appointment.id, AppointmentPatch(start_time=_at(19)), operator_ctx)
    assert updated.start_time == _at(19)


def test_operator_reschedule_onto_identical_start_conflicts(lifecycle, operator_ctx):
    lifecycle.create("store-1", "service-60", "client-2", _at(14))
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(ConflictError):
        lifecycle.update(appointment.id, AppointmentPatch(start_time=_at(14)), operator_ctx)


def test_operator_confirms_then_completes(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    confirmed = lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)
    assert confirmed.status == AppointmentStatus.CONFIRMED

    completed = lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.COMPLETED), operator_ctx)
    assert completed.status == AppointmentStatus.COMPLETED


def test_operator_can_cancel_confirmed_through_update(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)

    cancelled = lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CANCELLED), operator_ctx)
    assert cancelled.status == AppointmentStatus.CANCELLED


def test_illegal_status_transition(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(BadRequestError, match="pending to completed"):
        lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.COMPLETED), operator_ctx)


def test_completed_is_terminal(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.COMPLETED), operator_ctx)

    with pytest.raises(BadRequestError):
        lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CANCELLED), operator_ctx)


def test_client_cannot_change_status(lifecycle, client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    with pytest.raises(ForbiddenError):
        lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), client_ctx)


def test_same_status_is_a_no_op(lifecycle, client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    unchanged = lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.PENDING), client_ctx)
    assert unchanged == appointment


# ---------------------------------------------------------------------------
# cancel
# ---------------------------------------------------------------------------


def test_client_cancels_pending(lifecycle, client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))

    cancelled = lifecycle.cancel(appointment.id, client_ctx)
    assert cancelled.status == AppointmentStatus.CANCELLED


def test_operator_cancels_pending(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    assert lifecycle.cancel(appointment.id, operator_ctx).status == AppointmentStatus.CANCELLED


def test_cancel_twice_fails(lifecycle, client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.cancel(appointment.id, client_ctx)

    with pytest.raises(BadRequestError, match="already cancelled"):
        lifecycle.cancel(appointment.id, client_ctx)


def test_cancel_confirmed_fails(lifecycle, client_ctx, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)

    with pytest.raises(BadRequestError, match="confirmed"):
        lifecycle.cancel(appointment.id, client_ctx)
    with pytest.raises(BadRequestError, match="confirmed"):
        lifecycle.cancel(appointment.id, operator_ctx)


def test_cancel_completed_fails(lifecycle, client_ctx, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.COMPLETED), operator_ctx)

    with pytest.raises(BadRequestError, match="Cannot cancel a completed appointment"):
        lifecycle.cancel(appointment.id, client_ctx)


def test_cancel_by_stranger_is_forbidden(lifecycle, other_client_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    with pytest.raises(ForbiddenError):
        lifecycle.cancel(appointment.id, other_client_ctx)


def test_cancel_missing(lifecycle, client_ctx):
    with pytest.raises(NotFoundError):
        lifecycle.cancel("nope", client_ctx)


# ---------------------------------------------------------------------------
# delete
# ---------------------------------------------------------------------------


def test_client_deletes_regardless_of_status(lifecycle, appointments, client_ctx, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    lifecycle.update(appointment.id, AppointmentPatch(status=AppointmentStatus.CONFIRMED), operator_ctx)

    lifecycle.delete(appointment.id, client_ctx)
    assert appointments.find_by_id(appointment.id) is None


def test_operator_cannot_delete(lifecycle, operator_ctx):
    appointment = lifecycle.create("store-1", "service-60", "client-1", _at(10))
    with pytest.raises(ForbiddenError):
        lifecycle.delete(appointment.id, operator_ctx)


def test_delete_missing(lifecycle, client_ctx):
    with pytest.raises(NotFoundError):
        lifecycle.delete("nope", client_ctx)
