"""Tests for the Event HTTP API.

Covers:
- Create with staged crew: event saved, one pending booking per crew member
- Partial crew failure still returns 201 with per-crew results
- Required-field validation → 422, nothing persisted
- Update / status and null-field validation / not found
- Delete cascades bookings
- Month listing and inquiry linking on a draft
"""
from datetime import date

import pytest

from crew_booking.models.booking import Booking
from crew_booking.models.event import Event
from crew_booking.services.exceptions import ValidationError
from crew_booking.services.sql_stores import SqlEventStore
from tests.conftest import create_test_crew, create_test_inquiry


def _make_event(client, title: str = "Sunset Shoot", date: str = "2025-06-01", time: str = "10:00",
                assigned_crew: list = None, **fields):
    """Create an event via the API."""
    payload = {"title": title, "date": date, "time": time, "assigned_crew": assigned_crew or []}
    payload.update(fields)
    return client.post("/api/events/", json=payload)


class TestEventCreate:

    def test_create_event_with_staged_crew(self, client, db):
        crew_a = create_test_crew(db, "Alice")
        crew_b = create_test_crew(db, "Bob")

        resp = _make_event(client, assigned_crew=[{"crew_id": crew_a["crew_id"]}, {"crew_id": crew_b["crew_id"]}])

        assert resp.status_code == 201, resp.text
        data = resp.json()
        assert data["event"]["title"] == "Sunset Shoot"
        assert data["event"]["status"] == "scheduled"
        assert [r["ok"] for r in data["crew_results"]] == [True, True]

        bookings = db.query(Booking).filter(Booking.event_id == data["event"]["event_id"]).all()
        assert {b.crew_id for b in bookings} == {crew_a["crew_id"], crew_b["crew_id"]}
        for booking in bookings:
            assert booking.status.value == "pending"
            assert booking.salary == ""
            assert booking.payment_status.value == "pending"

    def test_staged_salary_is_kept(self, client, db):
        crew = create_test_crew(db, "Alice")
        resp = _make_event(client, assigned_crew=[
            {"crew_id": crew["crew_id"], "salary": "350", "payment_status": "completed"},
        ])
        assert resp.status_code == 201
        booking = db.query(Booking).filter(Booking.crew_id == crew["crew_id"]).one()
        assert booking.salary == "350"
        assert booking.payment_status.value == "completed"

    def test_unknown_crew_reported_not_fatal(self, client, db):
        crew = create_test_crew(db, "Alice")
        resp = _make_event(client, assigned_crew=[{"crew_id": crew["crew_id"]}, {"crew_id": "no-such-crew"}])

        assert resp.status_code == 201
        results = {r["crew_id"]: r for r in resp.json()["crew_results"]}
        assert results[crew["crew_id"]]["ok"] is True
        assert results["no-such-crew"]["ok"] is False
        assert "not found" in results["no-such-crew"]["error"]
        assert db.query(Event).count() == 1

    def test_duplicate_staged_crew_conflict(self, client, db):
        crew = create_test_crew(db, "Alice")
        resp = _make_event(client, assigned_crew=[{"crew_id": crew["crew_id"]}, {"crew_id": crew["crew_id"]}])
        assert resp.status_code == 409
        assert resp.json()["crew_id"] == crew["crew_id"]
        assert db.query(Event).count() == 0

    def test_missing_title_rejected(self, client, db):
        crew = create_test_crew(db, "Alice")
        resp = _make_event(client, title="", assigned_crew=[{"crew_id": crew["crew_id"]}])
        assert resp.status_code == 422
        assert db.query(Event).count() == 0
        assert db.query(Booking).count() == 0

    def test_invalid_status_rejected(self, client):
        resp = _make_event(client, status="archived")
        assert resp.status_code == 422

    def test_create_linked_to_inquiry(self, client, db):
        inquiry = create_test_inquiry(db)
        resp = _make_event(client, inquiry_id=inquiry["inquiry_id"], customer_name=inquiry["name"])
        assert resp.status_code == 201
        assert resp.json()["event"]["inquiry_id"] == inquiry["inquiry_id"]

    def test_create_linked_to_missing_inquiry(self, client):
        resp = _make_event(client, inquiry_id="missing")
        assert resp.status_code == 404

    def test_blank_inquiry_id_means_unlinked(self, client, db):
        resp = _make_event(client, inquiry_id="")
        assert resp.status_code == 201, resp.text
        assert resp.json()["event"]["inquiry_id"] is None
        assert db.query(Event).one().inquiry_id is None


class TestEventUpdate:

    def test_update_status_and_location(self, client):
        event = _make_event(client).json()["event"]
        resp = client.patch(f"/api/events/{event['event_id']}", json={
            "status": "sent-to-customer",
            "location": "Old Town",
        })
        assert resp.status_code == 200
        assert resp.json()["status"] == "sent-to-customer"
        assert resp.json()["location"] == "Old Town"
        assert resp.json()["title"] == "Sunset Shoot"

    def test_update_cannot_blank_title(self, client):
        event = _make_event(client).json()["event"]
        resp = client.patch(f"/api/events/{event['event_id']}", json={"title": " "})
        assert resp.status_code == 422

    def test_update_not_found(self, client):
        resp = client.patch("/api/events/missing", json={"notes": "x"})
        assert resp.status_code == 404

    def test_update_null_text_field_rejected(self, client):
        event = _make_event(client, location="Studio A").json()["event"]

        resp = client.patch(f"/api/events/{event['event_id']}", json={"location": None})

        assert resp.status_code == 422
        assert resp.json()["detail"].startswith("Use an empty string")
        assert client.get(f"/api/events/{event['event_id']}").json()["location"] == "Studio A"

    def test_update_empty_string_clears_text_field(self, client):
        event = _make_event(client, location="Studio A").json()["event"]
        resp = client.patch(f"/api/events/{event['event_id']}", json={"location": ""})
        assert resp.status_code == 200
        assert resp.json()["location"] == ""

    def test_update_blank_inquiry_unlinks(self, client, db):
        inquiry = create_test_inquiry(db)
        event = _make_event(client, inquiry_id=inquiry["inquiry_id"]).json()["event"]

        resp = client.patch(f"/api/events/{event['event_id']}", json={"inquiry_id": ""})

        assert resp.status_code == 200
        assert resp.json()["inquiry_id"] is None

    async def test_constraint_violation_is_validation_error(self, db):
        event = Event(title="Sunset Shoot", date=date(2025, 6, 1), time="10:00", location="Studio A")
        db.add(event)
        db.commit()

        with pytest.raises(ValidationError):
            await SqlEventStore(db).update_event(event.event_id, {"location": None})

        db.expire_all()
        assert db.query(Event).filter(Event.event_id == event.event_id).one().location == "Studio A"


class TestEventDelete:

    def test_delete_cascades_bookings(self, client, db):
        crew_a = create_test_crew(db, "Alice")
        crew_b = create_test_crew(db, "Bob")
        event = _make_event(client, assigned_crew=[
            {"crew_id": crew_a["crew_id"]}, {"crew_id": crew_b["crew_id"]},
        ]).json()["event"]

        resp = client.delete(f"/api/events/{event['event_id']}")

        assert resp.status_code == 200
        assert resp.json()["deleted_bookings_count"] == 2
        assert db.query(Booking).count() == 0
        assert client.get(f"/api/events/{event['event_id']}").status_code == 404

    def test_delete_not_found(self, client):
        assert client.delete("/api/events/missing").status_code == 404


class TestEventList:

    def test_list_by_month(self, client):
        _make_event(client, title="May Shoot", date="2025-05-31")
        _make_event(client, title="June Shoot", date="2025-06-15")

        resp = client.get("/api/events/?month=6&year=2025")
        assert resp.status_code == 200
        assert [e["title"] for e in resp.json()] == ["June Shoot"]

        all_titles = [e["title"] for e in client.get("/api/events/").json()]
        assert all_titles == ["May Shoot", "June Shoot"]

    @pytest.mark.parametrize("query", ["month=6", "year=2025"])
    def test_month_and_year_go_together(self, client, query):
        _make_event(client)
        resp = client.get(f"/api/events/?{query}")
        assert resp.status_code == 422


class TestInquiryLink:

    def test_link_and_clear_inquiry(self, client, db):
        inquiry = create_test_inquiry(db, name="Jane Doe", email="jane@customer.test")
        draft = {"title": "Engagement", "customer_name": "typed", "customer_phone": "555-0100"}

        resp = client.post("/api/events/draft/inquiry", json={"draft": draft, "inquiry_id": inquiry["inquiry_id"]})
        assert resp.status_code == 200
        linked = resp.json()
        assert linked["customer_name"] == "Jane Doe"
        assert linked["customer_email"] == "jane@customer.test"
        assert linked["customer_phone"] == "555-0100"

        resp = client.post("/api/events/draft/inquiry", json={"draft": linked, "inquiry_id": None})
        cleared = resp.json()
        assert cleared["inquiry_id"] is None
        assert cleared["customer_name"] == ""
        assert cleared["customer_phone"] == "555-0100"

    def test_link_unknown_inquiry(self, client):
        resp = client.post("/api/events/draft/inquiry", json={"draft": {}, "inquiry_id": "nope"})
        assert resp.status_code == 404
