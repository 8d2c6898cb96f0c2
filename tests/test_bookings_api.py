import pytest
from datetime import timedelta
from app import app
from models import db, User, Vehicle, Booking
from utils import utc_now


@pytest.fixture
def app_ctx():
    app.config['TESTING'] = True
    app.config['WTF_CSRF_ENABLED'] = False
    with app.app_context():
        db.session.remove()
        db.drop_all()
        db.create_all()
        yield
        db.session.remove()
        db.drop_all()


def create_user(email='user@example.com', role=User.ROLE_USER, name='User'):
    u = User(name=name, email=email, role=role, password_hash='x')
    db.session.add(u)
    db.session.commit()
    return u


def create_vehicle(plate='ABC-1234', name='Blue Toyota Corolla', active=True):
    v = Vehicle(name=name, category=Vehicle.CATEGORY_CAR, license_plate=plate, is_active=active)
    db.session.add(v)
    db.session.commit()
    return v


def client_for(user):
    client = app.test_client()
    with client.session_transaction() as sess:
        sess['uid'] = user.id
    return client


def slot(start_hour, end_hour, days=3):
    day = utc_now().replace(hour=0, minute=0, second=0, microsecond=0) + timedelta(days=days)
    return day + timedelta(hours=start_hour), day + timedelta(hours=end_hour)


def booking_json(vehicle, start, end, **extra):
    data = {
        'vehicle_id': vehicle.id,
        'start_time': start.isoformat(),
        'end_time': end.isoformat(),
    }
    data.update(extra)
    return data


def add_booking(user, vehicle, start, end, title=None):
    b = Booking(user_id=user.id, vehicle_id=vehicle.id, start_at=start, end_at=end, title=title)
    db.session.add(b)
    db.session.commit()
    return b


def test_requires_authentication(app_ctx):
    rv = app.test_client().get('/api/bookings')
    assert rv.status_code == 401
    assert rv.get_json()['error'] == 'Authentication required'


def test_create_booking(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post(
        '/api/bookings',
        json=booking_json(v, start, end, title=' Morning commute ', description=''),
    )
    assert rv.status_code == 201
    body = rv.get_json()['booking']
    assert body['user_id'] == user.id
    assert body['vehicle']['name'] == 'Blue Toyota Corolla'
    assert body['title'] == 'Morning commute'
    assert body['description'] is None
    stored = Booking.query.one()
    assert stored.start_at == start
    assert stored.end_at == end


def test_create_accepts_utc_designator(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    data = {
        'vehicle_id': v.id,
        'start_time': start.isoformat() + 'Z',
        'end_time': (end.isoformat() + '+00:00'),
    }
    rv = client_for(user).post('/api/bookings', json=data)
    assert rv.status_code == 201
    assert Booking.query.one().start_at == start


def test_create_conflict_is_409(app_ctx):
    user = create_user()
    other = create_user(email='other@example.com')
    v = create_vehicle()
    start, end = slot(8, 10)
    existing = add_booking(other, v, start, end)
    rv = client_for(user).post(
        '/api/bookings', json=booking_json(v, start + timedelta(hours=1), end + timedelta(hours=1))
    )
    assert rv.status_code == 409
    body = rv.get_json()
    assert body['kind'] == 'Conflict'
    assert body['conflicting_booking_id'] == existing.id
    assert Booking.query.count() == 1


def test_back_to_back_bookings_are_accepted(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    add_booking(user, v, start, end)
    client = client_for(user)
    rv = client.post('/api/bookings', json=booking_json(v, end, end + timedelta(hours=2)))
    assert rv.status_code == 201
    rv = client.post('/api/bookings', json=booking_json(v, start - timedelta(hours=2), start))
    assert rv.status_code == 201
    assert Booking.query.count() == 3


def test_same_slot_on_another_vehicle_is_free(app_ctx):
    user = create_user()
    v1 = create_vehicle()
    v2 = create_vehicle(plate='XYZ-5678', name='Red Honda CR-V')
    start, end = slot(8, 10)
    add_booking(user, v1, start, end)
    rv = client_for(user).post('/api/bookings', json=booking_json(v2, start, end))
    assert rv.status_code == 201


def test_create_in_the_past_is_rejected(app_ctx):
    user = create_user()
    v = create_vehicle()
    start = utc_now() - timedelta(hours=1)
    rv = client_for(user).post(
        '/api/bookings', json=booking_json(v, start, start + timedelta(hours=3))
    )
    assert rv.status_code == 400
    assert rv.get_json()['kind'] == 'PastBooking'


def test_create_with_inverted_interval_is_rejected(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post('/api/bookings', json=booking_json(v, end, start))
    assert rv.status_code == 400
    assert rv.get_json()['kind'] == 'InvalidInterval'


def test_create_on_unknown_or_inactive_vehicle_is_404(app_ctx):
    user = create_user()
    inactive = create_vehicle(active=False)
    start, end = slot(8, 10)
    client = client_for(user)
    rv = client.post(
        '/api/bookings',
        json={'vehicle_id': 999, 'start_time': start.isoformat(), 'end_time': end.isoformat()},
    )
    assert rv.status_code == 404
    assert rv.get_json()['kind'] == 'VehicleNotFound'
    rv = client.post('/api/bookings', json=booking_json(inactive, start, end))
    assert rv.status_code == 404
    assert rv.get_json()['kind'] == 'VehicleNotFound'


def test_malformed_timestamps_are_rejected_before_admission(app_ctx):
    user = create_user()
    v = create_vehicle()
    rv = client_for(user).post(
        '/api/bookings',
        json={'vehicle_id': v.id, 'start_time': 'tomorrow morning', 'end_time': '2030-01-01T10:00'},
    )
    assert rv.status_code == 400
    body = rv.get_json()
    assert 'start_time' in body['fields']
    assert 'kind' not in body


def test_title_length_is_validated(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post('/api/bookings', json=booking_json(v, start, end, title='x' * 201))
    assert rv.status_code == 400
    assert rv.get_json()['fields']['title'] == ['Title too long']


def test_user_cannot_book_for_someone_else(app_ctx):
    user = create_user()
    other = create_user(email='other@example.com')
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post('/api/bookings', json=booking_json(v, start, end, user_id=other.id))
    assert rv.status_code == 403
    assert rv.get_json()['kind'] == 'Forbidden'
    assert Booking.query.count() == 0


def test_admin_can_book_on_behalf_of_a_user(app_ctx):
    admin = create_user(email='admin@example.com', role=User.ROLE_ADMIN)
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(admin).post('/api/bookings', json=booking_json(v, start, end, user_id=user.id))
    assert rv.status_code == 201
    assert Booking.query.one().user_id == user.id


def test_owner_can_move_booking(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(user, v, start, end)
    rv = client_for(user).put(
        f'/api/bookings/{b.id}',
        json=booking_json(v, start + timedelta(hours=1), end + timedelta(hours=1), title='Moved'),
    )
    assert rv.status_code == 200
    assert rv.get_json()['booking']['title'] == 'Moved'
    b = db.session.get(Booking, b.id)
    assert b.start_at == start + timedelta(hours=1)


def test_update_with_same_interval_does_not_self_conflict(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(user, v, start, end)
    rv = client_for(user).put(f'/api/bookings/{b.id}', json=booking_json(v, start, end))
    assert rv.status_code == 200


def test_partial_update_keeps_current_values(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(user, v, start, end, title='Old')
    rv = client_for(user).put(f'/api/bookings/{b.id}', json={'description': 'Airport run'})
    assert rv.status_code == 200
    b = db.session.get(Booking, b.id)
    assert (b.start_at, b.end_at, b.title) == (start, end, 'Old')
    assert b.description == 'Airport run'


def test_update_into_other_booking_conflicts(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    mine = add_booking(user, v, start, end)
    theirs = add_booking(create_user(email='other@example.com'), v, end, end + timedelta(hours=2))
    rv = client_for(user).put(
        f'/api/bookings/{mine.id}', json=booking_json(v, start, end + timedelta(minutes=30))
    )
    assert rv.status_code == 409
    assert rv.get_json()['conflicting_booking_id'] == theirs.id


def test_update_by_stranger_is_forbidden_even_with_bad_interval(app_ctx):
    owner = create_user()
    stranger = create_user(email='stranger@example.com')
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(owner, v, start, end)
    rv = client_for(stranger).put(f'/api/bookings/{b.id}', json=booking_json(v, end, start))
    assert rv.status_code == 403
    body = rv.get_json()
    assert body['kind'] == 'Forbidden'
    assert body['error'] == 'You can only edit your own bookings'


def test_update_missing_booking_is_404(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).put('/api/bookings/42', json=booking_json(v, start, end))
    assert rv.status_code == 404
    assert rv.get_json()['error'] == 'Booking not found'


def test_delete_booking_permissions(app_ctx):
    owner = create_user()
    stranger = create_user(email='stranger@example.com')
    admin = create_user(email='admin@example.com', role=User.ROLE_ADMIN)
    v = create_vehicle()
    start, end = slot(8, 10)
    first = add_booking(owner, v, start, end)
    second = add_booking(owner, v, end, end + timedelta(hours=1))

    rv = client_for(stranger).delete(f'/api/bookings/{first.id}')
    assert rv.status_code == 403
    assert rv.get_json()['error'] == 'You can only cancel your own bookings'

    rv = client_for(owner).delete(f'/api/bookings/{first.id}')
    assert rv.status_code == 200
    assert rv.get_json()['message'] == 'Booking cancelled successfully'

    rv = client_for(admin).delete(f'/api/bookings/{second.id}')
    assert rv.status_code == 200
    assert Booking.query.count() == 0


def test_list_bookings_with_filters(app_ctx):
    alice = create_user(email='alice@example.com', name='Alice')
    bob = create_user(email='bob@example.com', name='Bob')
    v1 = create_vehicle()
    v2 = create_vehicle(plate='XYZ-5678', name='Red Honda CR-V')
    s1, e1 = slot(8, 10)
    s2, e2 = slot(8, 10, days=4)
    add_booking(alice, v1, s2, e2, title='later')
    add_booking(alice, v1, s1, e1, title='sooner')
    add_booking(bob, v2, s1, e1, title='bob')
    client = client_for(alice)

    titles = [b['title'] for b in client.get('/api/bookings').get_json()['bookings']]
    assert sorted(titles[:2]) == ['bob', 'sooner']
    assert titles[-1] == 'later'

    rv = client.get(f'/api/bookings?vehicle_id={v1.id}')
    assert [b['title'] for b in rv.get_json()['bookings']] == ['sooner', 'later']

    rv = client.get(f'/api/bookings?user_id={bob.id}')
    assert [b['title'] for b in rv.get_json()['bookings']] == ['bob']

    rv = client.get('/api/bookings', query_string={'start': s2.isoformat()})
    assert [b['title'] for b in rv.get_json()['bookings']] == ['later']

    rv = client.get('/api/bookings', query_string={'end': e1.isoformat()})
    assert sorted(b['title'] for b in rv.get_json()['bookings']) == ['bob', 'sooner']

    rv = client.get('/api/bookings?start=not-a-date')
    assert rv.status_code == 400


def test_my_bookings_split_upcoming_and_past(app_ctx):
    user = create_user()
    v = create_vehicle()
    now = utc_now()
    add_booking(user, v, now - timedelta(days=2), now - timedelta(days=2) + timedelta(hours=1), title='two days ago')
    add_booking(user, v, now - timedelta(days=1), now - timedelta(days=1) + timedelta(hours=1), title='yesterday')
    add_booking(user, v, now + timedelta(days=2), now + timedelta(days=2, hours=1), title='far')
    add_booking(user, v, now + timedelta(days=1), now + timedelta(days=1, hours=1), title='near')
    add_booking(create_user(email='x@example.com'), v, now + timedelta(days=3), now + timedelta(days=3, hours=1))

    body = client_for(user).get('/api/bookings/my').get_json()
    assert len(body['bookings']) == 4
    assert [b['title'] for b in body['upcoming']] == ['near', 'far']
    assert [b['title'] for b in body['past']] == ['yesterday', 'two days ago']


def test_booking_detail_reports_ownership(app_ctx):
    owner = create_user()
    other = create_user(email='other@example.com')
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(owner, v, start, end)

    body = client_for(owner).get(f'/api/bookings/{b.id}').get_json()
    assert body['is_owner'] is True
    assert body['booking']['vehicle']['license_plate'] == 'ABC-1234'
    assert body['booking']['user'] == {'id': owner.id, 'name': 'User', 'avatar_color': owner.avatar_color}

    body = client_for(other).get(f'/api/bookings/{b.id}').get_json()
    assert body['is_owner'] is False

    assert client_for(other).get('/api/bookings/999').status_code == 404


def test_null_user_id_books_for_the_caller(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post('/api/bookings', json=booking_json(v, start, end, user_id=None))
    assert rv.status_code == 201
    assert Booking.query.one().user_id == user.id


@pytest.mark.parametrize('vehicle_id', [None, True, 1.5, {'id': 1}, 'abc'])
def test_create_rejects_bad_vehicle_id(app_ctx, vehicle_id):
    user = create_user()
    create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post(
        '/api/bookings',
        json={'vehicle_id': vehicle_id, 'start_time': start.isoformat(), 'end_time': end.isoformat()},
    )
    assert rv.status_code == 400
    assert 'vehicle_id' in rv.get_json()['fields']
    assert Booking.query.count() == 0


@pytest.mark.parametrize('field', ['title', 'description'])
@pytest.mark.parametrize('value', [123, 4.5, {'a': 1}])
def test_create_rejects_non_string_text(app_ctx, field, value):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    rv = client_for(user).post('/api/bookings', json=booking_json(v, start, end, **{field: value}))
    assert rv.status_code == 400
    assert field in rv.get_json()['fields']


def test_update_with_null_fields_keeps_current_values(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(user, v, start, end)
    rv = client_for(user).put(
        f'/api/bookings/{b.id}',
        json={'vehicle_id': None, 'start_time': None, 'end_time': (end + timedelta(hours=1)).isoformat()},
    )
    assert rv.status_code == 200
    b = db.session.get(Booking, b.id)
    assert (b.vehicle_id, b.start_at, b.end_at) == (v.id, start, end + timedelta(hours=1))


def test_update_rejects_non_string_title(app_ctx):
    user = create_user()
    v = create_vehicle()
    start, end = slot(8, 10)
    b = add_booking(user, v, start, end, title='Kept')
    rv = client_for(user).put(f'/api/bookings/{b.id}', json={'title': 42})
    assert rv.status_code == 400
    assert rv.get_json()['fields']['title'] == ['Not a valid string.']
    assert db.session.get(Booking, b.id).title == 'Kept'
