"""Persistence helpers around booking admission.

The admission engine only sees data that is already loaded. This module
loads it, and makes sure that loading, deciding and committing happen as one
serialized step per vehicle so two requests cannot both claim the same slot.
"""

import threading
from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import IntegrityError

from admission import RejectionKind, Rejected
from models import db, Booking, Vehicle

_locks_guard = threading.Lock()
# vehicle_id -> [lock, number of holders and waiters]
_vehicle_locks = {}


@contextmanager
def vehicle_lock(vehicle_id):
    """Hold the process-wide lock dedicated to ``vehicle_id``.

    The entry is dropped once nobody holds or waits for it, so the map only
    ever contains vehicles with an admission in flight.
    """
    with _locks_guard:
        entry = _vehicle_locks.setdefault(vehicle_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _locks_guard:
            entry[1] -= 1
            if not entry[1]:
                del _vehicle_locks[vehicle_id]


def find_bookings_for_vehicle(vehicle_id):
    return (
        Booking.query.filter(Booking.vehicle_id == vehicle_id)
        .order_by(Booking.start_at.asc())
        .all()
    )


def vehicle_exists(vehicle_id):
    """Return True when the vehicle exists and can still be booked."""
    if vehicle_id is None:
        return False
    vehicle = db.session.get(Vehicle, vehicle_id)
    return bool(vehicle and vehicle.is_active)


def _lock_vehicle_row(vehicle_id):
    # FOR UPDATE is a no-op on SQLite, the process lock covers that case
    return (
        Vehicle.query.filter(Vehicle.id == vehicle_id).with_for_update().first()
    )


def admit(vehicle_id, evaluate, apply):
    """Run one admission for ``vehicle_id`` and commit it when accepted.

    ``evaluate(existing, vehicle_exists)`` returns a decision from the
    admission engine. ``apply(decision)`` stages the accepted change on the
    session and returns the affected booking. Returns ``(decision, booking)``;
    ``booking`` is None on rejection.
    """
    with vehicle_lock(vehicle_id):
        if vehicle_id is not None:
            _lock_vehicle_row(vehicle_id)
        decision = evaluate(
            find_bookings_for_vehicle(vehicle_id), vehicle_exists(vehicle_id)
        )
        if not decision.admitted:
            db.session.rollback()
            return decision, None
        booking = apply(decision)
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            current_app.logger.warning(
                "Overlap constraint rejected booking on vehicle %s", vehicle_id
            )
            return (
                Rejected(
                    RejectionKind.CONFLICT,
                    "This time slot was just booked by someone else. "
                    "Please choose a different time.",
                ),
                None,
            )
        return decision, booking


def purge_past_bookings(now):
    """Delete every booking that ended before ``now`` and return how many went."""
    deleted = Booking.query.filter(Booking.end_at < now).delete(
        synchronize_session=False
    )
    db.session.commit()
    return deleted or 0
