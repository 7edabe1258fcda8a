from types import SimpleNamespace

import pytest
from pywebpush import WebPushException

import services.push_service as push_service
from core.config import settings
from services.notifications import click_url


SUBSCRIPTION = {"endpoint": "https://push.example/abc", "keys": {"p256dh": "key", "auth": "secret"}}


@pytest.fixture
def push_keys(monkeypatch):
    monkeypatch.setattr(settings, "VAPID_PUBLIC_KEY", "public-key")
    monkeypatch.setattr(settings, "VAPID_PRIVATE_KEY", "private-key")


def test_vapid_public_key(client, push_keys):
    assert client.get("/api/push/vapid-public-key").json() == {"publicKey": "public-key"}


def test_subscription_upsert_and_delete(client, make_user):
    alice, alice_headers = make_user()
    bob, bob_headers = make_user()

    created = client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=alice_headers)
    assert created.status_code == 201
    assert created.json()["userId"] == alice["id"]

    moved = client.post(
        "/api/push/subscriptions",
        json={**SUBSCRIPTION, "keys": {"p256dh": "new", "auth": "new"}},
        headers=bob_headers,
    ).json()
    assert moved["id"] == created.json()["id"]
    assert moved["userId"] == bob["id"]

    params = {"endpoint": SUBSCRIPTION["endpoint"]}
    assert client.delete("/api/push/subscriptions", params=params, headers=alice_headers).status_code == 404
    assert client.delete("/api/push/subscriptions", params=params, headers=bob_headers).status_code == 200


def test_subscription_requires_keys(client, make_user):
    _, headers = make_user()
    response = client.post("/api/push/subscriptions", json={"endpoint": "https://push.example/x"}, headers=headers)
    assert response.status_code == 400


def test_send_push_delivers_and_prunes_gone_subscriptions(client, make_user, push_keys, monkeypatch):
    alice, headers = make_user()
    client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=headers)
    client.post(
        "/api/push/subscriptions",
        json={**SUBSCRIPTION, "endpoint": "https://push.example/gone"},
        headers=headers,
    )

    sent = []

    def fake_send(subscription_info, data):
        if subscription_info["endpoint"].endswith("gone"):
            raise WebPushException("gone", response=SimpleNamespace(status_code=410, text="gone"))
        sent.append((subscription_info, data))

    monkeypatch.setattr(push_service, "_send", fake_send)
    payload = push_service.build_payload("hello", url="/chat/1", tag="message-1")

    delivered = client.portal.call(push_service.send_push_to_user, alice["id"], payload)
    assert delivered == 1
    assert sent[0][0] == SUBSCRIPTION
    assert '"url": "/chat/1"' in sent[0][1]

    # the 410 subscription is gone, so a second round only reaches the live one
    assert client.portal.call(push_service.send_push_to_user, alice["id"], payload) == 1
    assert len(sent) == 2


def test_push_is_skipped_without_vapid_keys(client, make_user, monkeypatch):
    alice, headers = make_user()
    client.post("/api/push/subscriptions", json=SUBSCRIPTION, headers=headers)
    monkeypatch.setattr(push_service, "_send", lambda *args: pytest.fail("push must not be sent"))

    assert not push_service.push_enabled()
    assert client.portal.call(push_service.send_push_to_user, alice["id"], {"body": "x"}) == 0


def test_payload_and_click_urls():
    payload = push_service.build_payload("body", url="/posts/5", tag="post-like-5")
    assert payload == {
        "title": "BoxFit Notification",
        "body": "body",
        "icon": "/assets/icons/logo2.jpeg",
        "badge": "/assets/icons/logo2.jpeg",
        "url": "/posts/5",
        "tag": "post-like-5",
    }

    assert click_url(SimpleNamespace(type="message", sender_id=7, related_id="7")) == "/chat/7"
    assert click_url(SimpleNamespace(type="follow", sender_id=7, related_id="7")) == "/profile/7"
    assert click_url(SimpleNamespace(type="comment", sender_id=7, related_id="12")) == "/posts/12"
    assert click_url(SimpleNamespace(type="comment", sender_id=7, related_id=None)) == "/notifications"


def test_service_worker_is_served(client):
    response = client.get("/service-worker.js")
    assert response.status_code == 200
    assert response.headers["content-type"].startswith("application/javascript")
    assert "notificationclick" in response.text
