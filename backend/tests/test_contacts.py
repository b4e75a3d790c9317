"""Tests for emergency contact endpoints."""
import pytest

from daily_checkin.exceptions import ContactLimitReached
from daily_checkin.models.check_in import CheckIn
from daily_checkin.models.contact import EmergencyContact
from daily_checkin.models.user import User
from daily_checkin.services import contact_service
from tests.conftest import add_check_ins, add_contact, add_contacts, login, make_user, register_user


class TestContacts:

    def test_empty_list(self, client):
        register_user(client)
        resp = client.get("/api/contacts/")
        assert resp.status_code == 200
        assert resp.json() == {"contacts": [], "max_contacts": 3, "can_add_more": True}

    def test_add_and_list(self, client):
        register_user(client)
        contact = add_contact(client, "Mom", "mom@example.com")
        assert contact["name"] == "Mom"
        assert contact["email"] == "mom@example.com"

        data = client.get("/api/contacts/").json()
        assert [c["email"] for c in data["contacts"]] == ["mom@example.com"]
        assert data["can_add_more"] is True

    def test_limit_of_three(self, client):
        register_user(client)
        for i in range(3):
            add_contact(client, f"Contact {i}", f"c{i}@example.com")

        assert client.get("/api/contacts/").json()["can_add_more"] is False
        resp = client.post("/api/contacts/", json={"name": "Fourth", "email": "c4@example.com"})
        assert resp.status_code == 400
        assert len(client.get("/api/contacts/").json()["contacts"]) == 3

    def test_duplicate_email(self, client):
        register_user(client)
        add_contact(client, "Mom", "mom@example.com")
        resp = client.post("/api/contacts/", json={"name": "Mother", "email": "mom@example.com"})
        assert resp.status_code == 409

    def test_same_email_for_different_users(self, client):
        register_user(client, username="alice")
        add_contact(client, "Mom", "mom@example.com")
        register_user(client, username="bob")
        add_contact(client, "Mom", "mom@example.com")

    def test_validation(self, client):
        register_user(client)
        assert client.post("/api/contacts/", json={"name": "", "email": "a@example.com"}).status_code == 422
        assert client.post("/api/contacts/", json={"name": "A", "email": "nope"}).status_code == 422
        assert client.post("/api/contacts/", json={"name": "x" * 101, "email": "a@example.com"}).status_code == 422

    def test_delete(self, client):
        register_user(client)
        contact = add_contact(client, "Mom", "mom@example.com")
        resp = client.delete(f"/api/contacts/{contact['id']}")
        assert resp.status_code == 200
        assert resp.json() == {"success": True}
        assert client.get("/api/contacts/").json()["contacts"] == []

    def test_delete_frees_a_slot(self, client):
        register_user(client)
        contacts = [add_contact(client, f"C{i}", f"c{i}@example.com") for i in range(3)]
        client.delete(f"/api/contacts/{contacts[0]['id']}")
        add_contact(client, "New", "new@example.com")

    def test_delete_missing(self, client):
        register_user(client)
        assert client.delete("/api/contacts/999").status_code == 404

    def test_cannot_delete_other_users_contact(self, client):
        register_user(client, username="alice")
        contact = add_contact(client, "Mom", "mom@example.com")
        register_user(client, username="bob")

        resp = client.delete(f"/api/contacts/{contact['id']}")
        assert resp.status_code == 404

        login(client, "alice")
        assert len(client.get("/api/contacts/").json()["contacts"]) == 1

    def test_requires_login(self, client):
        assert client.get("/api/contacts/").status_code == 401
        assert client.post("/api/contacts/", json={"name": "A", "email": "a@example.com"}).status_code == 401


class TestAccountDeletionCascade:

    def test_deleting_user_removes_contacts_and_check_ins(self, client, db):
        user = register_user(client)
        add_contact(client, "Mom", "mom@example.com")
        add_check_ins(db, user["id"], "2024-01-14", "2024-01-15")

        db.delete(db.query(User).filter(User.id == user["id"]).one())
        db.commit()

        assert db.query(EmergencyContact).count() == 0
        assert db.query(CheckIn).count() == 0


class TestContactLimitUnderRace:

    def test_recount_after_insert_rejects_a_fourth_contact(self, db, monkeypatch):
        """The first count is stale (another request filled the last slot); the recount catches it."""
        user = make_user(db, "alice")
        add_contacts(db, user.id, "a@example.com", "b@example.com", "c@example.com")

        real_count = contact_service.count_contacts
        calls = []

        def stale_then_real(session, user_id):
            calls.append(user_id)
            return 2 if len(calls) == 1 else real_count(session, user_id)

        monkeypatch.setattr(contact_service, "count_contacts", stale_then_real)
        with pytest.raises(ContactLimitReached):
            contact_service.add_contact(db, user.id, name="Late", email="late@example.com")

        assert db.query(EmergencyContact).filter(EmergencyContact.user_id == user.id).count() == 3
