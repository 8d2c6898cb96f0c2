from datetime import datetime, timezone
from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import DDL, event
from werkzeug.security import generate_password_hash, check_password_hash
from flask import current_app
from itsdangerous import URLSafeTimedSerializer, BadSignature, SignatureExpired
db = SQLAlchemy()


def _utcnow():
    return datetime.now(timezone.utc).replace(tzinfo=None)


class User(db.Model):
    ROLE_ADMIN = "admin"
    ROLE_USER = "user"

    AVATAR_COLORS = (
        "#06b6d4", "#8b5cf6", "#f59e0b", "#10b981", "#ec4899",
        "#3b82f6", "#ef4444", "#84cc16", "#6366f1", "#14b8a6",
    )

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    role = db.Column(db.String(20), default=ROLE_USER, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    avatar_color = db.Column(db.String(20), default=AVATAR_COLORS[0])
    created_at = db.Column(db.DateTime, default=_utcnow)

    bookings = db.relationship(
        "Booking",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    def set_password(self, pwd):
        self.password_hash = generate_password_hash(pwd)

    def check_password(self, pwd):
        return check_password_hash(self.password_hash, pwd)

    def generate_auth_token(self):
        """Return a signed bearer token identifying this user."""
        s = URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt="auth")
        return s.dumps({"user_id": self.id})

    @staticmethod
    def verify_auth_token(token, max_age=None):
        """Validate a bearer token and return the associated user if valid."""
        if max_age is None:
            max_age = current_app.config.get("AUTH_TOKEN_MAX_AGE")
        s = URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt="auth")
        try:
            data = s.loads(token, max_age=max_age)
        except (BadSignature, SignatureExpired):
            return None
        return db.session.get(User, data.get("user_id"))


class Vehicle(db.Model):
    CATEGORY_CAR = "CAR"
    CATEGORY_VAN = "VAN"
    CATEGORY_SUV = "SUV"
    CATEGORY_TRUCK = "TRUCK"
    CATEGORIES = (CATEGORY_CAR, CATEGORY_VAN, CATEGORY_SUV, CATEGORY_TRUCK)

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    category = db.Column(db.String(10), nullable=False, default=CATEGORY_CAR)
    license_plate = db.Column(db.String(20), unique=True, nullable=False)
    color = db.Column(db.String(20), default="#3b82f6")
    image_url = db.Column(db.String(500), nullable=True)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    bookings = db.relationship("Booking", back_populates="vehicle")


class Booking(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(
        db.Integer, db.ForeignKey("user.id", ondelete="CASCADE"), nullable=False
    )
    vehicle_id = db.Column(
        db.Integer, db.ForeignKey("vehicle.id"), nullable=False, index=True
    )
    start_at = db.Column(db.DateTime, nullable=False)
    end_at = db.Column(db.DateTime, nullable=False)
    title = db.Column(db.String(200), nullable=True)
    description = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        db.CheckConstraint("end_at > start_at", name="booking_end_after_start"),
    )

    user = db.relationship("User", back_populates="bookings")
    vehicle = db.relationship("Vehicle", back_populates="bookings")


# Overlap backstop: PostgreSQL rejects two bookings of one vehicle whose
# [start_at, end_at) ranges intersect, whatever the application did before.
event.listen(
    Booking.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Booking.__table__,
    "after_create",
    DDL(
        "ALTER TABLE booking ADD CONSTRAINT booking_no_overlap "
        "EXCLUDE USING gist (vehicle_id WITH =, "
        "tsrange(start_at, end_at, '[)') WITH &&)"
    ).execute_if(dialect="postgresql"),
)
