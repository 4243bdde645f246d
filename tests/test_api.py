from datetime import time

from conftest import PASSWORD, booking_payload, future_day, set_full_day
from eventhub.services import bookings as booking_service


def booking_body(day, service_id, at="11:00"):
    return {
        "customer_name": "Asha Rao",
        "customer_phone": "+919812345678",
        "customer_email": "Asha@Example.com",
        "event_type": "Wedding",
        "date": day.isoformat(),
        "time": at,
        "location": "Palace Grounds, Bengaluru",
        "service_ids": [service_id],
        "total_amount": 40000,
    }


def test_root(client):
    r = client.get("/")
    assert r.status_code == 200
    assert r.json()["success"] is True


def test_register_login_and_me(client):
    body = {
        "name": "Ravi Events",
        "email": "Ravi@Example.com",
        "phone": "+919876500001",
        "password": PASSWORD,
        "address": "12 MG Road, Bengaluru",
    }
    r = client.post("/api/auth/register", json=body)
    assert r.status_code == 201
    assert r.json()["user"]["email"] == "ravi@example.com"

    r = client.post("/api/auth/register", json=body)
    assert r.status_code == 400
    assert r.json()["code"] == "conflict"

    r = client.post("/api/auth/login", json={"email": "ravi@example.com", "password": PASSWORD})
    assert r.status_code == 200
    token = r.json()["access_token"]
    assert r.json()["user"]["last_login"] is not None

    r = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Ravi Events"


def test_weak_password_lists_the_field(client):
    r = client.post(
        "/api/auth/register",
        json={
            "name": "Ravi Events",
            "email": "ravi@example.com",
            "phone": "+919876500001",
            "password": "weakpass",
            "address": "12 MG Road, Bengaluru",
        },
    )
    assert r.status_code == 400
    body = r.json()
    assert body["success"] is False
    assert body["code"] == "validation_failed"
    assert [e["field"] for e in body["errors"]] == ["password"]


def test_wrong_password_and_missing_token(client, manager):
    r = client.post("/api/auth/login", json={"email": manager.email, "password": "Wrong@123"})
    assert r.status_code == 401
    assert r.json()["success"] is False

    r = client.get("/api/bookings/")
    assert r.status_code == 401
    assert r.json()["success"] is False


def test_change_password(client, manager, auth_headers):
    r = client.put(
        "/api/auth/change-password",
        json={"current_password": PASSWORD, "new_password": "Fresh#456"},
        headers=auth_headers,
    )
    assert r.status_code == 200

    r = client.post("/api/auth/login", json={"email": manager.email, "password": "Fresh#456"})
    assert r.status_code == 200


def test_profile_update_and_deactivation(client, make_manager, auth_headers):
    other = make_manager("Meera Planners")

    r = client.put("/api/users/profile", json={"phone": other.phone}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "conflict"

    r = client.put("/api/users/profile", json={"name": "Ravi Grand Events"}, headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["user"]["name"] == "Ravi Grand Events"

    r = client.delete("/api/users/account", headers=auth_headers)
    assert r.status_code == 200
    r = client.get("/api/users/profile", headers=auth_headers)
    assert r.status_code == 401


def test_service_catalog(client, auth_headers):
    r = client.get("/api/services/categories/list")
    assert r.status_code == 200
    assert "DJ Services" in r.json()["categories"]

    r = client.post(
        "/api/services/",
        json={"title": "DJ Night", "category": "Not a category", "description": "Sound system and DJ for 4 hours", "price": 500},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "category"

    r = client.post(
        "/api/services/",
        json={"title": "DJ Night", "category": "DJ Services", "description": "Sound system and DJ for 4 hours", "price": 500},
        headers=auth_headers,
    )
    assert r.status_code == 201
    service_id = r.json()["service"]["id"]

    r = client.put(f"/api/services/{service_id}", json={"price": 650}, headers=auth_headers)
    assert r.json()["service"]["price"] == 650

    r = client.get("/api/services/", params={"category": "DJ Services"}, headers=auth_headers)
    assert r.json()["pagination"]["total"] == 1

    r = client.delete(f"/api/services/{service_id}", headers=auth_headers)
    assert r.status_code == 200
    r = client.get(f"/api/services/{service_id}", headers=auth_headers)
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"


def test_availability_errors_use_the_envelope(client, auth_headers):
    first = future_day(month=8, day=1)
    r = client.post("/api/availability/", json={"date": first.isoformat(), "is_full_day": True}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "locked"

    day = future_day()
    r = client.post("/api/availability/", json={"date": day.isoformat(), "time_slots": []}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "validation_failed"

    r = client.post(
        "/api/availability/",
        json={"date": day.isoformat(), "time_slots": [{"start_time": "10:00", "end_time": "2:00 PM"}]},
        headers=auth_headers,
    )
    assert r.status_code == 201
    record = r.json()["availability"]
    assert record["time_slots"][0]["end_time"] == "14:00:00"

    r = client.post(
        "/api/availability/",
        json={"date": day.isoformat(), "is_full_day": True, "status": "booked"},
        headers=auth_headers,
    )
    assert r.status_code == 400


def test_set_all_weekends_from_single_date(client, auth_headers):
    day = future_day(month=7, day=12)
    r = client.post(
        "/api/availability/",
        json={"date": day.isoformat(), "is_full_day": True, "set_all_weekends": True},
        headers=auth_headers,
    )
    assert r.status_code == 201
    results = r.json()["results"]
    assert results
    assert all(item["success"] for item in results)

    r = client.get("/api/availability/", params={"month": 7, "year": day.year}, headers=auth_headers)
    assert len(r.json()["availability"]) == len(results)


def test_booking_flow_over_http(client, manager, service, auth_headers, db):
    day = future_day()
    set_full_day(db, manager.id, day)

    r = client.post("/api/bookings/", json=booking_body(day, service.id), headers=auth_headers)
    assert r.status_code == 201
    booking = r.json()["booking"]
    assert booking["status"] == "Pending"
    assert booking["customer_email"] == "asha@example.com"
    assert booking["service_ids"] == [service.id]

    r = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "Completed"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "invalid_transition"

    r = client.put(f"/api/bookings/{booking['id']}/status", json={"status": "Confirmed"}, headers=auth_headers)
    assert r.status_code == 200

    r = client.post("/api/availability/check", json={"manager_id": manager.id, "date": day.isoformat()})
    assert r.json()["available"] is False

    r = client.get(f"/api/availability/calendar/{day.month}/{day.year}", headers=auth_headers)
    assert r.json()["availability"][0]["status"] == "booked"
    assert r.json()["events"][0]["title"] == "Wedding - Asha Rao"

    r = client.get("/api/bookings/stats/dashboard", headers=auth_headers)
    assert r.json()["stats"]["confirmed_bookings"] == 1

    r = client.get("/api/bookings/analytics/dashboard", headers=auth_headers)
    assert r.status_code == 200
    analytics = r.json()["analytics"]
    assert analytics["total_bookings"] == 1
    assert analytics["total_revenue"] == 40000
    assert len(analytics["weekly_performance"]) == 1

    r = client.get("/api/bookings/999", headers=auth_headers)
    assert r.status_code == 404


def test_booking_without_services_is_rejected(client, manager, auth_headers, db):
    day = future_day()
    set_full_day(db, manager.id, day)
    body = booking_body(day, 1)
    body["service_ids"] = []
    r = client.post("/api/bookings/", json=body, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["errors"][0]["field"] == "service_ids"


def test_broadcast_accept_over_http(client, auth_headers):
    day = future_day(month=11, day=20)
    r = client.post(
        "/api/broadcasts/",
        json={
            "customer_name": "Nisha Verma",
            "customer_phone": "+919900112233",
            "customer_email": "nisha@example.com",
            "event_type": "Engagement",
            "guest_count": 150,
            "date": day.isoformat(),
            "time": "18:00",
            "location": "Taj West End, Bengaluru",
            "budget": 5000,
            "requirements": "Stage decor, DJ and catering for 150 guests",
        },
    )
    assert r.status_code == 201
    broadcast_id = r.json()["broadcast"]["id"]

    r = client.get("/api/broadcasts/", headers=auth_headers)
    assert [b["id"] for b in r.json()["broadcasts"]] == [broadcast_id]

    r = client.put(f"/api/broadcasts/{broadcast_id}/accept", headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["broadcast"]["status"] == "Accepted"
    assert body["booking"]["total_amount"] == 5000
    assert body["booking"]["service_ids"] == []

    r = client.put(f"/api/broadcasts/{broadcast_id}/accept", headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "conflict"

    r = client.get("/api/broadcasts/my/accepted", headers=auth_headers)
    assert r.json()["pagination"]["total"] == 1


def test_reviews_require_completed_booking(client, manager, service, auth_headers, db):
    day = future_day()
    set_full_day(db, manager.id, day)
    booking = booking_service.create_booking(db, manager.id, booking_payload(day, time(11, 0), [service.id]))

    review = {
        "booking_id": booking.id,
        "customer_name": "Asha Rao",
        "customer_email": "asha@example.com",
        "rating": 5,
        "comment": "Beautiful decoration, on time",
    }
    r = client.post("/api/reviews/", json=review)
    assert r.status_code == 400
    assert r.json()["code"] == "validation_failed"

    booking_service.update_status(db, manager.id, booking.id, "Confirmed")
    booking_service.update_status(db, manager.id, booking.id, "Completed")

    r = client.post("/api/reviews/", json=review)
    assert r.status_code == 201
    assert r.json()["review"]["is_verified"] is True

    r = client.post("/api/reviews/", json=review)
    assert r.status_code == 400
    assert r.json()["code"] == "conflict"

    r = client.get("/api/reviews/", headers=auth_headers)
    assert r.json()["stats"] == {"average_rating": 5.0, "total_reviews": 1}

    r = client.get("/api/reviews/stats/dashboard", headers=auth_headers)
    stats = r.json()["stats"]
    assert stats["five_stars"] == 1
    assert stats["customer_satisfaction"] == 100.0

    r = client.get("/api/auth/me", headers=auth_headers)
    assert r.json()["user"]["avg_rating"] == 5.0
    assert r.json()["user"]["rating_count"] == 1
