"""Demo data: a few users, five vehicles and a week of bookings.

Usage: ``flask seed-demo`` or ``python seed.py``. Existing rows are wiped.
"""

from datetime import datetime, time, timedelta

from models import db, User, Vehicle, Booking
from utils import utc_now

DEMO_PASSWORD = "password123"

USERS = [
    ("Alice Johnson", "alice@example.com", "#06b6d4", User.ROLE_USER),
    ("Bob Smith", "bob@example.com", "#8b5cf6", User.ROLE_USER),
    ("Carol Davis", "carol@example.com", "#f59e0b", User.ROLE_USER),
    ("Demo User", "demo@example.com", "#10b981", User.ROLE_ADMIN),
]

VEHICLES = [
    ("Blue Toyota Corolla", Vehicle.CATEGORY_CAR, "ABC-1234", "#3b82f6"),
    ("Red Honda CR-V", Vehicle.CATEGORY_SUV, "XYZ-5678", "#ef4444"),
    ("White Ford Transit", Vehicle.CATEGORY_VAN, "VAN-9012", "#6b7280"),
    ("Green Tesla Model Y", Vehicle.CATEGORY_SUV, "EV-3456", "#22c55e"),
    ("Orange Ford F-150", Vehicle.CATEGORY_TRUCK, "TRK-7890", "#f97316"),
]

# (user index, vehicle index, days from today, start hour, end hour, title, description)
BOOKINGS = [
    (0, 0, 0, 8, 10, "Morning commute", "Going to the office"),
    (1, 1, 0, 9, 12, "Client meeting", "Meeting at downtown office"),
    (2, 2, 0, 14, 17, "Delivery run", "Delivering equipment to warehouse"),
    (0, 3, 1, 10, 15, "Team outing", "Trip to the park"),
    (1, 0, 1, 16, 19, "Airport pickup", None),
    (2, 4, 2, 8, 14, "Moving supplies", "Picking up office furniture"),
    (0, 1, 2, 13, 16, "Site visit", None),
    (1, 2, 3, 11, 13, "Grocery run", "Weekly shopping for office"),
]


def seed_demo_data(now=None):
    """Replace the database content with demo data and return the row counts."""
    now = now or utc_now()
    today = datetime.combine(now.date(), time.min)

    Booking.query.delete()
    Vehicle.query.delete()
    User.query.delete()

    users = []
    for name, email, color, role in USERS:
        user = User(name=name, email=email, avatar_color=color, role=role)
        user.set_password(DEMO_PASSWORD)
        users.append(user)
    vehicles = [
        Vehicle(name=name, category=category, license_plate=plate, color=color)
        for name, category, plate, color in VEHICLES
    ]
    db.session.add_all(users + vehicles)
    db.session.flush()

    bookings = []
    for user_idx, vehicle_idx, days, start_h, end_h, title, description in BOOKINGS:
        day = today + timedelta(days=days)
        bookings.append(
            Booking(
                user_id=users[user_idx].id,
                vehicle_id=vehicles[vehicle_idx].id,
                start_at=day + timedelta(hours=start_h),
                end_at=day + timedelta(hours=end_h),
                title=title,
                description=description,
            )
        )
    db.session.add_all(bookings)
    db.session.commit()
    return {"users": len(users), "vehicles": len(vehicles), "bookings": len(bookings)}


if __name__ == "__main__":
    from app import app

    with app.app_context():
        db.create_all()
        counts = seed_demo_data()
        print("Seeded {users} user(s), {vehicles} vehicle(s), {bookings} booking(s).".format(**counts))
