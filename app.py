#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import os
import tempfile
from collections import namedtuple
from collections.abc import Iterable
from functools import wraps
from datetime import datetime, timedelta
import random
from flask import (
    Flask,
    request,
    session,
    abort,
    jsonify,
)
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect, generate_csrf
from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from werkzeug.exceptions import HTTPException

from admission import (
    Candidate,
    RejectionKind,
    authorize,
    evaluate_create,
    evaluate_delete,
    evaluate_update,
    find_conflict,
)
from config import Config
from forms import (
    LoginForm,
    SignupForm,
    BookingForm,
    BookingUpdateForm,
    BookingFilterForm,
    AvailabilityForm,
    VehicleForm,
    VehicleUpdateForm,
    submitted,
)
from models import db, User, Vehicle, Booking
from store import admit, purge_past_bookings
from utils import utc_now, split_upcoming_past

REJECTION_STATUS = {
    RejectionKind.INVALID_INTERVAL: 400,
    RejectionKind.PAST_BOOKING: 400,
    RejectionKind.VEHICLE_NOT_FOUND: 404,
    RejectionKind.CONFLICT: 409,
    RejectionKind.FORBIDDEN: 403,
}

PUBLIC_PATHS = {
    "/api/auth/login",
    "/api/auth/signup",
    "/api/auth/logout",
    "/api/auth/csrf",
    "/__ping__",
}

Principal = namedtuple("Principal", "id email is_admin")


def _coerce_int_ids(values):
    """Return a de-duplicated list of integers from an iterable of arbitrary values.

    Accepts ints, numeric strings, comma separated strings and nested
    iterables; anything that is not a valid id is skipped.
    """

    result = []
    if not values:
        return result

    def _add(value):
        if value not in result:
            result.append(value)

    for value in values:
        if value is None or isinstance(value, bool):
            continue
        if isinstance(value, int):
            _add(value)
            continue
        if isinstance(value, str):
            text = value.strip()
            if "," in text:
                for part in _coerce_int_ids(text.split(",")):
                    _add(part)
                continue
            try:
                _add(int(text))
            except ValueError:
                continue
            continue
        if isinstance(value, Iterable):
            for part in _coerce_int_ids(list(value)):
                _add(part)
    return result


app = Flask(__name__)
app.config.from_object(Config)
app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))
csrf = CSRFProtect(app)

_storage_root = app.instance_path
try:
    os.makedirs(_storage_root, exist_ok=True)
except PermissionError:
    _fallback_root = os.path.join(tempfile.gettempdir(), "fleet-instance")
    os.makedirs(_fallback_root, exist_ok=True)
    app.logger.warning(
        "Instance path '%s' is not writable. Using fallback '%s' instead.",
        _storage_root,
        _fallback_root,
    )
    _storage_root = _fallback_root

_database_uri = app.config.get("SQLALCHEMY_DATABASE_URI")
if _database_uri and _database_uri.startswith("sqlite:///"):
    _db_path = _database_uri.replace("sqlite:///", "", 1)
    if _db_path and not _db_path.startswith(":") and not os.path.isabs(_db_path):
        app.config["SQLALCHEMY_DATABASE_URI"] = (
            f"sqlite:///{os.path.join(_storage_root, _db_path)}"
        )
db.init_app(app)
Migrate(app, db)


@app.cli.command("purge-past-bookings")
def purge_past_bookings_command():
    """Delete every booking whose end time has passed.

    Usage: ``flask purge-past-bookings``
    """
    deleted = purge_past_bookings(utc_now())
    print("Deleted {} past booking(s).".format(deleted))


@app.cli.command("seed-demo")
def seed_demo_command():
    """Reset the database content with demo users, vehicles and bookings."""
    from seed import seed_demo_data

    db.create_all()
    counts = seed_demo_data()
    print(
        "Seeded {users} user(s), {vehicles} vehicle(s), {bookings} booking(s).".format(
            **counts
        )
    )


def _bearer_token():
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return None


def current_user():
    token = _bearer_token()
    if token:
        return User.verify_auth_token(token)
    uid = session.get("uid")
    return db.session.get(User, uid) if uid else None


def current_principal():
    """Return the acting principal; the admin flag comes from the stored role."""
    u = current_user()
    if u is None:
        abort(401, description="Authentication required")
    return Principal(u.id, u.email, u.is_admin)


def role_required(*roles):
    def wrapper(fn):
        @wraps(fn)
        def decorated(*args, **kwargs):
            u = current_user()
            if not u or u.role not in roles:
                abort(403, description="Admin access required")
            return fn(*args, **kwargs)
        return decorated
    return wrapper


@app.errorhandler(HTTPException)
def _http_error(exc):
    return jsonify({"error": exc.description}), exc.code


# --- Health
@app.route("/__ping__", methods=["GET"])
def __ping__():
    return "OK", 200


@app.before_request
def _check_session_timeout():
    timeout = app.config.get("SESSION_TIMEOUT_MINUTES")
    if not timeout or _bearer_token():
        return None
    uid = session.get("uid")
    if not uid:
        return None
    last_activity = session.get("last_activity")
    now = utc_now()
    if last_activity:
        try:
            last_dt = datetime.fromisoformat(last_activity)
        except (TypeError, ValueError):
            last_dt = None
        if last_dt is not None and now - last_dt > timedelta(minutes=timeout):
            session.pop("uid", None)
            session.pop("last_activity", None)
            return jsonify({"error": "Session expired due to inactivity"}), 401
    session["last_activity"] = now.isoformat()
    session.permanent = True
    return None


@app.before_request
def _require_identity():
    if request.path in PUBLIC_PATHS:
        return None
    if current_user() is None:
        return jsonify({"error": "Authentication required"}), 401
    return None


@app.before_request
def _csrf_for_cookie_sessions():
    # bearer token requests are exempt
    if not app.config.get("WTF_CSRF_ENABLED", True) or _bearer_token():
        return None
    csrf.protect()
    return None


def _iso(value):
    return value.isoformat() if value else None


def _user_payload(user, with_email=True):
    payload = {
        "id": user.id,
        "name": user.name,
        "avatar_color": user.avatar_color,
    }
    if with_email:
        payload.update(
            email=user.email,
            is_admin=user.is_admin,
            created_at=_iso(user.created_at),
        )
    return payload


def _vehicle_payload(vehicle):
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "category": vehicle.category,
        "license_plate": vehicle.license_plate,
        "color": vehicle.color,
        "image_url": vehicle.image_url,
        "is_active": vehicle.is_active,
    }


def _booking_payload(booking):
    return {
        "id": booking.id,
        "user_id": booking.user_id,
        "vehicle_id": booking.vehicle_id,
        "title": booking.title,
        "description": booking.description,
        "start_time": _iso(booking.start_at),
        "end_time": _iso(booking.end_at),
        "created_at": _iso(booking.created_at),
        "updated_at": _iso(booking.updated_at),
        "user": _user_payload(booking.user, with_email=False) if booking.user else None,
        "vehicle": {
            "id": booking.vehicle.id,
            "name": booking.vehicle.name,
            "category": booking.vehicle.category,
            "color": booking.vehicle.color,
        }
        if booking.vehicle
        else None,
    }


def _form_error(form):
    fields = form.error_payload()
    message = ", ".join(msg for errors in fields.values() for msg in errors)
    return jsonify({"error": message or "Invalid request", "fields": fields}), 400


def _rejection_response(decision):
    body = {"error": decision.message, "kind": decision.kind.value}
    if decision.conflicting_booking_id is not None:
        body["conflicting_booking_id"] = decision.conflicting_booking_id
    return jsonify(body), REJECTION_STATUS[decision.kind]


def _booking_count(*criteria):
    return db.session.query(func.count(Booking.id)).filter(*criteria).scalar() or 0


# --- Authentication
@app.route("/api/auth/csrf", methods=["GET"])
def auth_csrf():
    return jsonify({"csrf_token": generate_csrf()})


@app.route("/api/auth/signup", methods=["POST"])
def signup():
    form = SignupForm()
    if not form.validate_on_submit():
        return _form_error(form)
    email = form.email.data.strip().lower()
    role = User.ROLE_USER
    if email in app.config.get("ADMIN_EMAILS", []):
        role = User.ROLE_ADMIN
    user = User(
        name=form.name.data.strip(),
        email=email,
        role=role,
        avatar_color=random.choice(User.AVATAR_COLORS),
    )
    user.set_password(form.password.data)
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "An account with this email already exists"}), 409
    app.logger.info("New account %s (role %s)", user.email, user.role)
    session["uid"] = user.id
    session["last_activity"] = utc_now().isoformat()
    return (
        jsonify(
            {
                "message": "Account created successfully",
                "user": _user_payload(user),
                "token": user.generate_auth_token(),
            }
        ),
        201,
    )


@app.route("/api/auth/login", methods=["POST"])
def login():
    form = LoginForm()
    if not form.validate_on_submit():
        return _form_error(form)
    u = User.query.filter_by(email=form.email.data.strip().lower()).first()
    if not u or not u.check_password(form.password.data):
        return jsonify({"error": "Invalid email or password"}), 401
    session["uid"] = u.id
    session["last_activity"] = utc_now().isoformat()
    session.permanent = True
    return jsonify(
        {
            "message": "Login successful",
            "user": _user_payload(u),
            "token": u.generate_auth_token(),
        }
    )


@app.route("/api/auth/logout", methods=["POST"])
def logout():
    session.pop("uid", None)
    session.pop("last_activity", None)
    return jsonify({"message": "Logged out successfully"})


@app.route("/api/auth/me", methods=["GET"])
def me():
    u = current_user()
    payload = _user_payload(u)
    payload["booking_count"] = _booking_count(Booking.user_id == u.id)
    return jsonify({"user": payload})


# --- Vehicles
@app.route("/api/vehicles", methods=["GET"])
def list_vehicles():
    vehicles = (
        Vehicle.query.filter(Vehicle.is_active.is_(True)).order_by(Vehicle.name).all()
    )
    return jsonify({"vehicles": [_vehicle_payload(v) for v in vehicles]})


def vehicles_availability(start, end):
    """Return ``(vehicle, free)`` pairs for every active vehicle over ``[start, end)``."""
    out = []
    probe = Candidate(vehicle_id=None, start_at=start, end_at=end)
    vehicles = (
        Vehicle.query.filter(Vehicle.is_active.is_(True)).order_by(Vehicle.name).all()
    )
    for v in vehicles:
        overlapping = Booking.query.filter(
            Booking.vehicle_id == v.id,
            Booking.start_at < end,
            Booking.end_at > start,
        ).all()
        out.append((v, find_conflict(probe, overlapping) is None))
    return out


@app.route("/api/vehicles/availability", methods=["GET"])
def vehicle_availability():
    form = AvailabilityForm(request.args)
    if not form.validate():
        return _form_error(form)
    if form.end.data <= form.start.data:
        return jsonify({"error": "End time must be after start time"}), 400
    return jsonify(
        {
            "start": _iso(form.start.data),
            "end": _iso(form.end.data),
            "vehicles": [
                dict(_vehicle_payload(v), free=free)
                for v, free in vehicles_availability(form.start.data, form.end.data)
            ],
        }
    )


@app.route("/api/vehicles/<int:vehicle_id>", methods=["GET"])
def get_vehicle(vehicle_id):
    vehicle = db.get_or_404(Vehicle, vehicle_id, description="Vehicle not found")
    payload = _vehicle_payload(vehicle)
    payload["booking_count"] = _booking_count(Booking.vehicle_id == vehicle.id)
    return jsonify({"vehicle": payload})


# --- Bookings
def _filtered_bookings(form, *, admin_view=False):
    query = Booking.query
    if form.vehicle_id.data:
        query = query.filter(Booking.vehicle_id == form.vehicle_id.data)
    if form.user_id.data:
        query = query.filter(Booking.user_id == form.user_id.data)
    if admin_view:
        if form.start_date.data:
            query = query.filter(Booking.start_at >= form.start_date.data)
        if form.end_date.data:
            query = query.filter(Booking.start_at <= form.end_date.data)
        return query.order_by(Booking.start_at.desc()).all()
    if form.start.data:
        query = query.filter(Booking.start_at >= form.start.data)
    if form.end.data:
        query = query.filter(Booking.end_at <= form.end.data)
    return query.order_by(Booking.start_at.asc()).all()


@app.route("/api/bookings", methods=["GET"])
def list_bookings():
    form = BookingFilterForm(request.args)
    if not form.validate():
        return _form_error(form)
    bookings = _filtered_bookings(form)
    return jsonify({"bookings": [_booking_payload(b) for b in bookings]})


@app.route("/api/bookings/my", methods=["GET"])
def my_bookings():
    u = current_user()
    bookings = (
        Booking.query.filter(Booking.user_id == u.id)
        .order_by(Booking.start_at.desc())
        .all()
    )
    upcoming, past = split_upcoming_past(bookings, utc_now())
    return jsonify(
        {
            "bookings": [_booking_payload(b) for b in bookings],
            "upcoming": [_booking_payload(b) for b in upcoming],
            "past": [_booking_payload(b) for b in past],
        }
    )


@app.route("/api/bookings/<int:booking_id>", methods=["GET"])
def get_booking(booking_id):
    booking = db.get_or_404(Booking, booking_id, description="Booking not found")
    payload = _booking_payload(booking)
    payload["vehicle"]["license_plate"] = booking.vehicle.license_plate
    return jsonify({"booking": payload, "is_owner": booking.user_id == current_user().id})


@app.route("/api/bookings", methods=["POST"])
def create_booking():
    principal = current_principal()
    form = BookingForm()
    if not form.validate_on_submit():
        return _form_error(form)
    owner_id = form.user_id.data or principal.id
    forbidden = authorize(
        principal.id,
        owner_id,
        principal.is_admin,
        "Only administrators can book on behalf of another user",
    )
    if forbidden is not None:
        return _rejection_response(forbidden)
    if owner_id != principal.id and db.session.get(User, owner_id) is None:
        abort(404, description="User not found")

    now = utc_now()
    candidate = Candidate(
        vehicle_id=form.vehicle_id.data,
        start_at=form.start_time.data,
        end_at=form.end_time.data,
        user_id=owner_id,
    )

    def _apply(decision):
        booking = Booking(
            user_id=decision.candidate.user_id,
            vehicle_id=decision.candidate.vehicle_id,
            start_at=decision.candidate.start_at,
            end_at=decision.candidate.end_at,
            title=(form.title.data or "").strip() or None,
            description=(form.description.data or "").strip() or None,
        )
        db.session.add(booking)
        return booking

    decision, booking = admit(
        candidate.vehicle_id,
        lambda existing, exists: evaluate_create(candidate, existing, exists, now),
        _apply,
    )
    if not decision.admitted:
        app.logger.warning(
            "Booking refused for user %s on vehicle %s: %s",
            principal.id,
            candidate.vehicle_id,
            decision.kind.value,
        )
        return _rejection_response(decision)
    app.logger.info(
        "Booking %s created on vehicle %s by user %s",
        booking.id,
        booking.vehicle_id,
        principal.id,
    )
    return (
        jsonify({"message": "Booking created successfully", "booking": _booking_payload(booking)}),
        201,
    )


def _update_booking(booking_id, principal):
    booking = db.get_or_404(Booking, booking_id, description="Booking not found")
    form = BookingUpdateForm()
    if not form.validate_on_submit():
        return _form_error(form)
    now = utc_now()
    # null or missing fields keep the current value
    candidate = Candidate(
        vehicle_id=form.vehicle_id.data if form.vehicle_id.data is not None else booking.vehicle_id,
        start_at=form.start_time.data if form.start_time.data is not None else booking.start_at,
        end_at=form.end_time.data if form.end_time.data is not None else booking.end_at,
        user_id=booking.user_id,
        booking_id=booking.id,
    )
    owner_id = booking.user_id

    def _apply(decision):
        booking.vehicle_id = decision.candidate.vehicle_id
        booking.start_at = decision.candidate.start_at
        booking.end_at = decision.candidate.end_at
        if submitted(form.title):
            booking.title = (form.title.data or "").strip() or None
        if submitted(form.description):
            booking.description = (form.description.data or "").strip() or None
        return booking

    decision, updated = admit(
        candidate.vehicle_id,
        lambda existing, exists: evaluate_update(
            candidate,
            existing,
            exists,
            now,
            booking_id,
            principal.id,
            owner_id,
            principal.is_admin,
        ),
        _apply,
    )
    if not decision.admitted:
        app.logger.warning(
            "Update of booking %s refused for user %s: %s",
            booking_id,
            principal.id,
            decision.kind.value,
        )
        return _rejection_response(decision)
    app.logger.info("Booking %s updated by user %s", booking_id, principal.id)
    return jsonify({"message": "Booking updated successfully", "booking": _booking_payload(updated)})


def _delete_booking(booking_id, principal, describe):
    booking = db.get_or_404(Booking, booking_id, description="Booking not found")
    decision = evaluate_delete(booking.id, principal.id, booking.user_id, principal.is_admin)
    if not decision.admitted:
        return _rejection_response(decision)
    message = describe(booking)
    db.session.delete(booking)
    db.session.commit()
    app.logger.info("Booking %s deleted by user %s", booking_id, principal.id)
    return jsonify({"message": message})


@app.route("/api/bookings/<int:booking_id>", methods=["PUT"])
def update_booking(booking_id):
    return _update_booking(booking_id, current_principal())


@app.route("/api/bookings/<int:booking_id>", methods=["DELETE"])
def delete_booking(booking_id):
    return _delete_booking(
        booking_id,
        current_principal(),
        lambda booking: "Booking cancelled successfully",
    )


# --- Administration
@app.route("/api/admin/check", methods=["GET"])
@role_required(User.ROLE_ADMIN)
def admin_check():
    return jsonify({"is_admin": True, "email": current_user().email})


@app.route("/api/admin/stats", methods=["GET"])
@role_required(User.ROLE_ADMIN)
def admin_stats():
    recent = Booking.query.order_by(Booking.created_at.desc(), Booking.id.desc()).limit(5).all()
    return jsonify(
        {
            "stats": {
                "users": User.query.count(),
                "vehicles": Vehicle.query.count(),
                "bookings": Booking.query.count(),
            },
            "recent_bookings": [_booking_payload(b) for b in recent],
        }
    )


@app.route("/api/admin/users", methods=["GET"])
@role_required(User.ROLE_ADMIN)
def admin_users():
    counts = dict(
        db.session.query(Booking.user_id, func.count(Booking.id))
        .group_by(Booking.user_id)
        .all()
    )
    users = User.query.order_by(User.created_at.desc(), User.id.desc()).all()
    return jsonify(
        {
            "users": [
                dict(_user_payload(u), booking_count=counts.get(u.id, 0)) for u in users
            ]
        }
    )


@app.route("/api/admin/users/<int:user_id>", methods=["DELETE"])
@role_required(User.ROLE_ADMIN)
def admin_user_delete(user_id):
    target = db.get_or_404(User, user_id, description="User not found")
    if target.id == current_user().id:
        abort(400, description="Cannot delete your own account")
    # bookings go with their owner
    Booking.query.filter_by(user_id=target.id).delete()
    db.session.delete(target)
    db.session.commit()
    app.logger.info("User %s deleted by admin %s", user_id, current_user().id)
    return jsonify({"message": "User deleted successfully"})


@app.route("/api/admin/vehicles", methods=["GET"])
@role_required(User.ROLE_ADMIN)
def admin_vehicles():
    counts = dict(
        db.session.query(Booking.vehicle_id, func.count(Booking.id))
        .group_by(Booking.vehicle_id)
        .all()
    )
    vehicles = Vehicle.query.order_by(Vehicle.name).all()
    return jsonify(
        {
            "vehicles": [
                dict(_vehicle_payload(v), booking_count=counts.get(v.id, 0))
                for v in vehicles
            ]
        }
    )


@app.route("/api/admin/vehicles", methods=["POST"])
@role_required(User.ROLE_ADMIN)
def admin_vehicle_new():
    form = VehicleForm()
    if not form.validate_on_submit():
        return _form_error(form)
    v = Vehicle(
        name=form.name.data.strip(),
        category=form.category.data,
        license_plate=form.license_plate.data.strip(),
        color=(form.color.data or "").strip() or None,
        image_url=(form.image_url.data or "").strip() or None,
        is_active=form.is_active.data if submitted(form.is_active) else True,
    )
    db.session.add(v)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "A vehicle with this license plate already exists"}), 409
    return jsonify({"vehicle": _vehicle_payload(v), "message": "Vehicle created"}), 201


@app.route("/api/admin/vehicles/<int:vehicle_id>", methods=["PUT"])
@role_required(User.ROLE_ADMIN)
def admin_vehicle_edit(vehicle_id):
    vehicle = db.get_or_404(Vehicle, vehicle_id, description="Vehicle not found")
    form = VehicleUpdateForm()
    if not form.validate_on_submit():
        return _form_error(form)
    if submitted(form.name) and form.name.data:
        vehicle.name = form.name.data.strip()
    if submitted(form.category) and form.category.data:
        vehicle.category = form.category.data
    if submitted(form.license_plate) and form.license_plate.data:
        vehicle.license_plate = form.license_plate.data.strip()
    if submitted(form.color):
        vehicle.color = (form.color.data or "").strip() or None
    if submitted(form.image_url):
        vehicle.image_url = (form.image_url.data or "").strip() or None
    if submitted(form.is_active):
        vehicle.is_active = form.is_active.data
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        return jsonify({"error": "A vehicle with this license plate already exists"}), 409
    return jsonify({"vehicle": _vehicle_payload(vehicle), "message": "Vehicle updated"})


@app.route("/api/admin/vehicles/<int:vehicle_id>", methods=["DELETE"])
@role_required(User.ROLE_ADMIN)
def admin_vehicle_delete(vehicle_id):
    vehicle = db.get_or_404(Vehicle, vehicle_id, description="Vehicle not found")
    booking_count = _booking_count(Booking.vehicle_id == vehicle.id)
    if booking_count:
        abort(
            400,
            description=(
                f"Cannot delete vehicle with {booking_count} existing bookings. "
                "Delete bookings first or deactivate the vehicle."
            ),
        )
    db.session.delete(vehicle)
    db.session.commit()
    return jsonify({"message": "Vehicle deleted successfully"})


@app.route("/api/admin/bookings", methods=["GET"])
@role_required(User.ROLE_ADMIN)
def admin_bookings():
    form = BookingFilterForm(request.args)
    if not form.validate():
        return _form_error(form)
    bookings = _filtered_bookings(form, admin_view=True)
    payload = []
    for b in bookings:
        item = _booking_payload(b)
        if b.user:
            item["user"]["email"] = b.user.email
        payload.append(item)
    return jsonify({"bookings": payload, "total": len(payload)})


@app.route("/api/admin/bookings/<int:booking_id>", methods=["PUT"])
@role_required(User.ROLE_ADMIN)
def admin_booking_edit(booking_id):
    return _update_booking(booking_id, current_principal())


@app.route("/api/admin/bookings/<int:booking_id>", methods=["DELETE"])
@role_required(User.ROLE_ADMIN)
def admin_booking_delete(booking_id):
    return _delete_booking(
        booking_id,
        current_principal(),
        lambda booking: f"Booking for {booking.vehicle.name} by {booking.user.name} deleted",
    )


@app.route("/api/admin/bookings/bulk-delete", methods=["POST"])
@role_required(User.ROLE_ADMIN)
def admin_bookings_bulk_delete():
    raw_ids = (request.get_json(silent=True) or {}).get("ids")
    ids = _coerce_int_ids(raw_ids) if isinstance(raw_ids, list) else []
    if not ids:
        abort(400, description="Provide an array of booking IDs")
    deleted = Booking.query.filter(Booking.id.in_(ids)).delete(synchronize_session=False)
    db.session.commit()
    app.logger.info("Admin %s bulk deleted %s booking(s)", current_user().id, deleted)
    return jsonify({"message": f"{deleted} bookings deleted", "deleted": deleted})


@app.route("/api/admin/bookings/cleanup/past", methods=["DELETE"])
@role_required(User.ROLE_ADMIN)
def admin_bookings_cleanup():
    deleted = purge_past_bookings(utc_now())
    app.logger.info("Admin %s purged %s past booking(s)", current_user().id, deleted)
    return jsonify({"message": f"{deleted} past bookings deleted", "deleted": deleted})


# --- Local development entry point
if __name__ == "__main__":
    app.run(host="127.0.0.1", port=8000, debug=True)
