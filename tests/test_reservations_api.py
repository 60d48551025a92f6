from datetime import date

from deskbook.models.presence import PresenceMode
from deskbook.models.user import UserRole


def _set_office(client, headers, day="2026-02-10"):
    r = client.put("/api/presence", json={"date": day, "mode": "OFFICE"}, headers=headers)
    assert r.status_code == 200
    return r


def test_booking_scenario(client, make_user, make_desk, make_spot, auth_headers):
    first, second = make_user(name="Jan"), make_user(name="Anna")
    a01 = make_desk(code="A-01")
    o01 = make_desk(code="O-01")
    spot = make_spot(code="P-01")
    h1, h2 = auth_headers(first), auth_headers(second)

    _set_office(client, h1)
    _set_office(client, h2)

    r = client.post("/api/reservations", json={"resource_id": a01.id, "date": "2026-02-10"}, headers=h1)
    assert r.status_code == 201
    body = r.json()
    assert body["code"] == "A-01"
    assert body["date"] == "2026-02-10"

    r = client.post("/api/reservations", json={"resource_id": a01.id, "date": "2026-02-10"}, headers=h2)
    assert r.status_code == 409
    assert r.json()["error"] == "ResourceAlreadyBooked"

    r = client.post("/api/reservations", json={"resource_id": o01.id, "date": "2026-02-10"}, headers=h1)
    assert r.status_code == 409
    assert r.json()["error"] == "UserAlreadyBooked"

    r = client.post("/api/parking/reservations", json={"resource_id": spot.id, "date": "2026-02-10"}, headers=h1)
    assert r.status_code == 201
    assert r.json()["code"] == "P-01"


def test_reserve_without_presence_is_forbidden(client, make_user, make_desk, auth_headers):
    user = make_user()
    desk = make_desk()
    r = client.post("/api/reservations", json={"resource_id": desk.id, "date": "2026-02-10"},
                    headers=auth_headers(user))
    assert r.status_code == 403
    assert r.json()["error"] == "PresenceRequired"


def test_reserve_in_the_past(client, make_user, make_desk, set_presence, auth_headers):
    user = make_user()
    desk = make_desk()
    set_presence(user, date(2026, 2, 6))
    r = client.post("/api/reservations", json={"resource_id": desk.id, "date": "2026-02-06"},
                    headers=auth_headers(user))
    assert r.status_code == 400
    assert r.json()["error"] == "PastDate"


def test_malformed_date_is_a_validation_error(client, make_user, make_desk, auth_headers):
    user = make_user()
    desk = make_desk()
    r = client.post("/api/reservations", json={"resource_id": desk.id, "date": "10-02-2026"},
                    headers=auth_headers(user))
    assert r.status_code == 400
    assert r.json()["error"] == "ValidationError"


def test_requires_authentication(client):
    r = client.get("/api/desks", params={"date": "2026-02-10"})
    assert r.status_code == 401


def test_desk_grid_marks_own_and_others(client, make_user, make_desk, set_presence, auth_headers):
    me, other = make_user(name="Me"), make_user(name="Other")
    a01, a02 = make_desk(code="A-01"), make_desk(code="A-02")
    make_desk(code="Z-99", is_active=False)
    day = date(2026, 2, 10)
    set_presence(me, day)
    set_presence(other, day)

    client.post("/api/reservations", json={"resource_id": a01.id, "date": "2026-02-10"}, headers=auth_headers(me))
    client.post("/api/reservations", json={"resource_id": a02.id, "date": "2026-02-10"},
                headers=auth_headers(other))

    r = client.get("/api/desks", params={"date": "2026-02-10"}, headers=auth_headers(me))
    assert r.status_code == 200
    grid = {d["code"]: d for d in r.json()}
    assert set(grid) == {"A-01", "A-02"}
    assert grid["A-01"]["is_mine"] is True
    assert grid["A-02"]["is_mine"] is False
    assert grid["A-02"]["reserved_by"] == "Other"


def test_cancel_endpoint(client, make_user, make_desk, set_presence, auth_headers):
    owner, other = make_user(), make_user()
    desk = make_desk()
    set_presence(owner, date(2026, 2, 10))
    created = client.post("/api/reservations", json={"resource_id": desk.id, "date": "2026-02-10"},
                          headers=auth_headers(owner)).json()

    r = client.delete(f"/api/reservations/{created['id']}", headers=auth_headers(other))
    assert r.status_code == 403
    assert r.json()["error"] == "Forbidden"

    r = client.delete(f"/api/reservations/{created['id']}", headers=auth_headers(owner))
    assert r.status_code == 200

    r = client.delete(f"/api/reservations/{created['id']}", headers=auth_headers(owner))
    assert r.status_code == 404
    assert r.json()["error"] == "NotFound"


def test_my_reservations_sorted(client, make_user, make_desk, set_presence, auth_headers):
    user = make_user()
    desk = make_desk()
    headers = auth_headers(user)
    for day in ("2026-02-12", "2026-02-10"):
        set_presence(user, date.fromisoformat(day))
        client.post("/api/reservations", json={"resource_id": desk.id, "date": day}, headers=headers)

    r = client.get("/api/reservations/mine", headers=headers)
    assert [x["date"] for x in r.json()] == ["2026-02-10", "2026-02-12"]


def test_my_daily_and_clear(client, make_user, make_desk, make_spot, set_presence, auth_headers):
    user = make_user()
    desk, spot = make_desk(), make_spot()
    headers = auth_headers(user)
    set_presence(user, date(2026, 2, 10))
    client.post("/api/reservations", json={"resource_id": desk.id, "date": "2026-02-10"}, headers=headers)
    client.post("/api/parking/reservations", json={"resource_id": spot.id, "date": "2026-02-10"}, headers=headers)

    r = client.get("/api/reservations/my-daily", params={"date": "2026-02-10"}, headers=headers)
    assert r.json()["desk"]["code"] == "A-01"
    assert r.json()["parking"]["code"] == "P-01"

    r = client.delete("/api/reservations/my-daily", params={"date": "2026-02-10"}, headers=headers)
    assert r.json() == {"deleted_desks": ["A-01"], "deleted_parking": ["P-01"]}

    r = client.get("/api/reservations/my-daily", params={"date": "2026-02-10"}, headers=headers)
    assert r.json() == {"desk": None, "parking": None}


def test_office_occupancy(client, make_user, make_desk, set_presence, auth_headers):
    user = make_user(name="Jan")
    desk = make_desk(code="B-01")
    make_desk(code="B-02")
    set_presence(user, date(2026, 2, 10), PresenceMode.OFFICE)
    client.post("/api/reservations", json={"resource_id": desk.id, "date": "2026-02-10"},
                headers=auth_headers(user))

    r = client.get("/api/office", params={"date": "2026-02-10"}, headers=auth_headers(user))
    assert r.json() == {
        "date": "2026-02-10",
        "reserved_count": 1,
        "capacity": 2,
        "people": [{"desk_code": "B-01", "user_name": "Jan"}],
    }


def test_admin_cancels_via_admin_endpoint(client, make_user, make_spot, set_presence, auth_headers):
    user = make_user()
    admin = make_user(role=UserRole.ADMIN)
    spot = make_spot()
    set_presence(user, date(2026, 2, 10))
    created = client.post("/api/parking/reservations", json={"resource_id": spot.id, "date": "2026-02-10"},
                          headers=auth_headers(user)).json()

    r = client.delete(f"/api/admin/reservations/{created['id']}", params={"type": "parking"},
                      headers=auth_headers(admin))
    assert r.status_code == 200
    assert client.get("/api/parking/reservations/mine", headers=auth_headers(user)).json() == []
