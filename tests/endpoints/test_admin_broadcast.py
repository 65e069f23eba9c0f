"""
Admin broadcast endpoint tests.
"""

from unittest.mock import AsyncMock

import pytest


def subscribe_many(store, n):
    for i in range(n):
        store.subscribe(f"U{i}", f"User {i}")


class TestAdminBroadcast:

    def test_broadcast_to_all_subscribers(self, client, store, fake_client, fake_clock):
        subscribe_many(store, 3)

        response = client.post("/admin/broadcast", json={"key": "s3cret", "message": "Sale!"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "sent": 3, "total": 3}
        assert sorted(to for to, _ in fake_client.sent) == ["U0", "U1", "U2"]
        assert fake_clock.sleeps == [0.25, 0.25]

    def test_partial_failure_reported_as_sent_lt_total(self, client, store, fake_client):
        subscribe_many(store, 4)
        fake_client.failing_recipients = {"U2"}

        response = client.post("/admin/broadcast", json={"key": "s3cret", "message": "hi"})

        assert response.status_code == 200
        assert response.json() == {"ok": True, "sent": 3, "total": 4}

    def test_wrong_key_is_401_and_sends_nothing(self, client, store, fake_client):
        subscribe_many(store, 3)

        response = client.post("/admin/broadcast", json={"key": "nope", "message": "hi"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert fake_client.sent == []

    def test_missing_key_is_401(self, client, fake_client):
        response = client.post("/admin/broadcast", json={"message": "hi"})

        assert response.status_code == 401

    def test_missing_body_is_401(self, client):
        assert client.post("/admin/broadcast").status_code == 401

    @pytest.mark.parametrize("key", [123, None, ["s3cret"], {"k": "s3cret"}, True])
    def test_non_string_key_is_401(self, client, store, fake_client, key):
        subscribe_many(store, 2)

        response = client.post("/admin/broadcast", json={"key": key, "message": "hi"})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}
        assert fake_client.sent == []

    def test_wrong_key_checked_before_message_shape(self, client, fake_client):
        response = client.post("/admin/broadcast", json={"key": "nope", "message": {"x": 1}})

        assert response.status_code == 401
        assert response.json() == {"error": "Unauthorized"}

    @pytest.mark.parametrize("message", [{"x": 1}, 42, ["hi"]])
    def test_non_string_message_is_400(self, client, store, fake_client, message):
        subscribe_many(store, 1)

        response = client.post("/admin/broadcast", json={"key": "s3cret", "message": message})

        assert response.status_code == 400
        assert response.json() == {"error": "Message required"}
        assert fake_client.sent == []

    def test_missing_message_is_400(self, client, store, fake_client):
        subscribe_many(store, 1)

        response = client.post("/admin/broadcast", json={"key": "s3cret"})

        assert response.status_code == 400
        assert response.json() == {"error": "Message required"}
        assert fake_client.sent == []

    def test_empty_message_is_400(self, client):
        response = client.post("/admin/broadcast", json={"key": "s3cret", "message": ""})

        assert response.status_code == 400

    def test_unexpected_failure_is_500(self, client, bot, monkeypatch):
        monkeypatch.setattr(bot.dispatcher, "dispatch", AsyncMock(side_effect=RuntimeError("boom")))

        response = client.post("/admin/broadcast", json={"key": "s3cret", "message": "hi"})

        assert response.status_code == 500
        assert response.json() == {"error": "server_error"}
