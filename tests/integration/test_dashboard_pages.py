"""Integration tests for the dashboard page controllers"""

from slotly.models import EventType, Profile
from tests.conftest import ALICE, ALICE_TOKEN, BOB, BOB_TOKEN, make_event_type, make_profile, sign_in


class TestSessionGate:
    def test_redirects_without_session_cookie(self, client):
        response = client.get("/dashboard/event-types", follow_redirects=False)

        assert response.status_code == 307
        assert response.headers["location"] == "/auth/sign-in"

    def test_bearer_header_alone_does_not_pass_gate(self, client):
        response = client.get(
            "/dashboard",
            headers={"Authorization": f"Bearer {ALICE_TOKEN}"},
            follow_redirects=False,
        )
        assert response.status_code == 307

    def test_invalid_cookie_passes_gate_but_not_handler(self, client):
        sign_in(client, "expired-token")

        response = client.get("/dashboard/event-types", follow_redirects=False)

        assert response.status_code == 401

    def test_non_dashboard_paths_not_gated(self, client):
        assert client.get("/health").status_code == 200


class TestDashboardHome:
    def test_creates_profile_on_first_visit(self, client, db):
        sign_in(client, ALICE_TOKEN)

        response = client.get("/dashboard")

        assert response.status_code == 200
        body = response.json()
        assert body["profile"]["id"] == ALICE.user_id
        assert body["profile"]["full_name"] == "Alice Example"
        assert body["event_type_count"] == 0
        assert body["needs_username"] is True
        assert db.get(Profile, ALICE.user_id) is not None

    def test_counts_event_types(self, client, db):
        make_profile(db, ALICE, username="alice")
        make_event_type(db, ALICE, event_slug="one")
        make_event_type(db, ALICE, event_slug="two", minutes_after_base=1)
        sign_in(client, ALICE_TOKEN)

        body = client.get("/dashboard").json()

        assert body["event_type_count"] == 2
        assert body["needs_username"] is False


class TestEventTypeList:
    def test_lists_own_newest_first(self, client, db):
        make_profile(db, ALICE, username="alice")
        make_profile(db, BOB, username="bob")
        make_event_type(db, ALICE, title="Oldest", event_slug="oldest", minutes_after_base=0)
        make_event_type(db, ALICE, title="Newest", event_slug="newest", minutes_after_base=10)
        make_event_type(db, ALICE, title="Middle", event_slug="middle", minutes_after_base=5)
        make_event_type(db, BOB, title="Bob's", event_slug="bobs")
        sign_in(client, ALICE_TOKEN)

        response = client.get("/dashboard/event-types")

        assert response.status_code == 200
        titles = [item["title"] for item in response.json()["data"]]
        assert titles == ["Newest", "Middle", "Oldest"]

    def test_empty(self, client):
        sign_in(client, ALICE_TOKEN)
        assert client.get("/dashboard/event-types").json() == {"data": []}


class TestCreateEventType:
    def test_new_form_defaults(self, client):
        sign_in(client, ALICE_TOKEN)

        body = client.get("/dashboard/event-types/new").json()

        assert body["values"]["duration_minutes"] == 30
        assert body["values"]["color"] == "#3B82F6"
        assert body["slug_manually_edited"] is False
        assert body["options"]["durations"] == [15, 30, 45, 60, 90, 120]

    def test_slug_derived_from_title(self, client, db):
        sign_in(client, ALICE_TOKEN)

        response = client.post("/dashboard/event-types/new", json={"title": "30 Minute Meeting"})

        assert response.status_code == 201
        body = response.json()
        assert body["redirect"] == "/dashboard/event-types"
        assert body["data"]["event_slug"] == "30-minute-meeting"
        stored = db.query(EventType).filter(EventType.user_id == ALICE.user_id).one()
        assert stored.event_slug == "30-minute-meeting"
        assert stored.min_notice_hours == 1

    def test_manual_slug_kept(self, client):
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            "/dashboard/event-types/new",
            json={"title": "Later Title", "event_slug": "custom-link", "duration_minutes": "60"},
        )

        assert response.status_code == 201
        assert response.json()["data"]["event_slug"] == "custom-link"
        assert response.json()["data"]["duration_minutes"] == 60

    def test_creates_profile_if_missing(self, client, db):
        sign_in(client, BOB_TOKEN)

        client.post("/dashboard/event-types/new", json={"title": "Chat"})

        assert db.get(Profile, BOB.user_id) is not None

    def test_validation_errors_inline(self, client, db):
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            "/dashboard/event-types/new",
            json={"title": "Call", "duration_minutes": "0", "location_type": "custom"},
        )

        assert response.status_code == 400
        fields = response.json()["fields"]
        assert fields["duration_minutes"] == "Duration must be a positive number"
        assert fields["location_value"] == "Location details are required for a custom location"
        assert db.query(EventType).count() == 0

    def test_duplicate_slug(self, client, db):
        make_profile(db, ALICE, username="alice")
        make_event_type(db, ALICE, event_slug="intro-call")
        sign_in(client, ALICE_TOKEN)

        response = client.post("/dashboard/event-types/new", json={"title": "Intro Call"})

        assert response.status_code == 400
        assert response.json()["fields"] == {
            "event_slug": "You already have an event type with this slug"
        }

    def test_non_object_body(self, client):
        sign_in(client, ALICE_TOKEN)

        response = client.post("/dashboard/event-types/new", json=["title"])

        assert response.status_code == 400
        assert response.json()["details"] == [
            {"path": [], "message": "Request body must be a JSON object"}
        ]


class TestEditEventType:
    def test_load_form_latched(self, client, db):
        make_profile(db, ALICE, username="alice")
        event_type = make_event_type(db, ALICE, description="Notes")
        sign_in(client, ALICE_TOKEN)

        body = client.get(f"/dashboard/event-types/{event_type.id}/edit").json()

        assert body["id"] == event_type.id
        assert body["values"]["event_slug"] == "intro-call"
        assert body["values"]["description"] == "Notes"
        assert body["slug_manually_edited"] is True

    def test_other_owner_not_found(self, client, db):
        make_profile(db, ALICE, username="alice")
        event_type = make_event_type(db, ALICE)
        sign_in(client, BOB_TOKEN)

        response = client.get(f"/dashboard/event-types/{event_type.id}/edit")

        assert response.status_code == 404
        assert response.json() == {"error": "Event type not found"}

    def test_title_change_keeps_slug(self, client, db):
        make_profile(db, ALICE, username="alice")
        event_type = make_event_type(db, ALICE)
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            f"/dashboard/event-types/{event_type.id}/edit",
            json={"title": "Discovery Call", "is_active": False},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["redirect"] == "/dashboard/event-types"
        assert body["data"]["title"] == "Discovery Call"
        assert body["data"]["event_slug"] == "intro-call"
        assert body["data"]["is_active"] is False

    def test_other_owner_cannot_update(self, client, db):
        make_profile(db, ALICE, username="alice")
        event_type = make_event_type(db, ALICE)
        sign_in(client, BOB_TOKEN)

        response = client.post(
            f"/dashboard/event-types/{event_type.id}/edit", json={"title": "Mine now"}
        )

        assert response.status_code == 404
        db.refresh(event_type)
        assert event_type.title == "Intro Call"

    def test_invalid_submission(self, client, db):
        make_profile(db, ALICE, username="alice")
        event_type = make_event_type(db, ALICE)
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            f"/dashboard/event-types/{event_type.id}/edit", json={"color": "red"}
        )

        assert response.status_code == 400
        assert response.json()["fields"] == {"color": "Color must be a hex value like #3B82F6"}


class TestProfilePage:
    def test_load_values(self, client, db):
        make_profile(db, ALICE, username="alice", timezone="Europe/London")
        sign_in(client, ALICE_TOKEN)

        body = client.get("/dashboard/profile").json()

        assert body["values"] == {
            "username": "alice",
            "full_name": "Alice Example",
            "timezone": "Europe/London",
            "locale": "en-US",
        }

    def test_missing_profile(self, client):
        sign_in(client, BOB_TOKEN)

        response = client.get("/dashboard/profile")

        assert response.status_code == 404
        assert response.json() == {"error": "Profile not found"}

    def test_update(self, client, db):
        make_profile(db, ALICE)
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            "/dashboard/profile",
            json={
                "username": "alice-x",
                "full_name": "Alice X",
                "timezone": "Asia/Tokyo",
                "locale": "ja-JP",
            },
        )

        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "Profile updated successfully!"
        assert body["data"]["username"] == "alice-x"
        db.expire_all()
        assert db.get(Profile, ALICE.user_id).timezone == "Asia/Tokyo"

    def test_invalid_username(self, client, db):
        make_profile(db, ALICE)
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            "/dashboard/profile",
            json={"username": "a b", "full_name": "", "timezone": "UTC", "locale": "en-US"},
        )

        assert response.status_code == 400
        assert "username" in response.json()["fields"]

    def test_username_taken(self, client, db):
        make_profile(db, ALICE, username="alice")
        make_profile(db, BOB, username="bob")
        sign_in(client, BOB_TOKEN)

        response = client.post(
            "/dashboard/profile",
            json={"username": "alice", "full_name": "Bob", "timezone": "UTC", "locale": "en-US"},
        )

        assert response.status_code == 400
        assert response.json()["fields"] == {"username": "Username is already taken"}

    def test_reserved_username(self, client, db):
        make_profile(db, ALICE)
        sign_in(client, ALICE_TOKEN)

        response = client.post(
            "/dashboard/profile",
            json={"username": "api", "full_name": "Alice", "timezone": "UTC", "locale": "en-US"},
        )

        assert response.status_code == 400
        assert response.json()["fields"] == {"username": "This username is reserved"}
