"""Booking admission rules.

Pure decision functions: every input, including the current instant, is
passed in by the caller and nothing here touches the database or the clock.
Intervals are closed-open, ``[start_at, end_at)``, so a booking ending at
10:00 and another starting at 10:00 on the same vehicle are both legal.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Iterable, Optional, Union

from utils import format_window


class RejectionKind(str, Enum):
    INVALID_INTERVAL = "InvalidInterval"
    PAST_BOOKING = "PastBooking"
    VEHICLE_NOT_FOUND = "VehicleNotFound"
    CONFLICT = "Conflict"
    FORBIDDEN = "Forbidden"


@dataclass(frozen=True)
class Candidate:
    """A proposed booking, not yet committed."""

    vehicle_id: int
    start_at: datetime
    end_at: datetime
    user_id: Optional[int] = None
    booking_id: Optional[int] = None


@dataclass(frozen=True)
class Admitted:
    candidate: Optional[Candidate] = None

    admitted = True


@dataclass(frozen=True)
class Rejected:
    kind: RejectionKind
    message: str
    conflicting_booking_id: Optional[int] = None

    admitted = False


Decision = Union[Admitted, Rejected]


def intervals_overlap(start_a, end_a, start_b, end_b) -> bool:
    """Return True when ``[start_a, end_a)`` and ``[start_b, end_b)`` share an instant."""
    return start_a < end_b and start_b < end_a


def find_conflict(candidate: Candidate, existing: Iterable, exclude_booking_id=None):
    """Return the first booking of ``existing`` overlapping ``candidate``.

    ``existing`` holds objects exposing ``id``, ``start_at`` and ``end_at``.
    The booking whose id equals ``exclude_booking_id`` is skipped.
    """
    for booking in existing:
        if exclude_booking_id is not None and booking.id == exclude_booking_id:
            continue
        if intervals_overlap(
            candidate.start_at, candidate.end_at, booking.start_at, booking.end_at
        ):
            return booking
    return None


def authorize(requesting_user_id, owner_user_id, is_admin, message="Forbidden"):
    """Return a ``Forbidden`` rejection unless the caller owns the booking or is admin."""
    if is_admin or requesting_user_id == owner_user_id:
        return None
    return Rejected(RejectionKind.FORBIDDEN, message)


def _check_candidate(candidate, existing, vehicle_exists, now, exclude_booking_id=None):
    if candidate is None:
        raise ValueError("candidate is required")
    if candidate.end_at <= candidate.start_at:
        return Rejected(
            RejectionKind.INVALID_INTERVAL, "End time must be after start time"
        )
    if candidate.start_at < now:
        return Rejected(
            RejectionKind.PAST_BOOKING, "Cannot book a vehicle in the past"
        )
    if not vehicle_exists:
        return Rejected(RejectionKind.VEHICLE_NOT_FOUND, "Vehicle not found")
    conflict = find_conflict(candidate, existing, exclude_booking_id)
    if conflict is not None:
        return Rejected(
            RejectionKind.CONFLICT,
            "This time slot overlaps an existing booking ({}). "
            "Please choose a different time.".format(
                format_window(conflict.start_at, conflict.end_at)
            ),
            conflicting_booking_id=conflict.id,
        )
    return Admitted(candidate)


def evaluate_create(candidate, existing, vehicle_exists, now) -> Decision:
    """Decide whether a new booking may be committed.

    Checks run in a fixed order and the first failure is reported: interval
    shape, past start, vehicle existence, then overlap with ``existing``.
    """
    return _check_candidate(candidate, list(existing), vehicle_exists, now)


def evaluate_update(
    candidate,
    existing,
    vehicle_exists,
    now,
    target_booking_id,
    requesting_user_id,
    owner_user_id,
    is_admin,
) -> Decision:
    """Decide whether booking ``target_booking_id`` may be moved to ``candidate``.

    Ownership is checked before anything else so that an unauthorized caller
    never learns whether the requested slot is free.
    """
    forbidden = authorize(
        requesting_user_id,
        owner_user_id,
        is_admin,
        "You can only edit your own bookings",
    )
    if forbidden is not None:
        return forbidden
    return _check_candidate(
        candidate,
        list(existing),
        vehicle_exists,
        now,
        exclude_booking_id=target_booking_id,
    )


def evaluate_delete(target_booking_id, requesting_user_id, owner_user_id, is_admin) -> Decision:
    """Decide whether booking ``target_booking_id`` may be cancelled; only ownership matters."""
    forbidden = authorize(
        requesting_user_id,
        owner_user_id,
        is_admin,
        "You can only cancel your own bookings",
    )
    if forbidden is not None:
        return forbidden
    return Admitted()
