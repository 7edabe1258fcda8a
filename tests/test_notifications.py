def notify(client, headers, recipient_id, **extra):
    body = {"userId": recipient_id, "type": "message", "content": "hello", **extra}
    return client.post("/api/notifications/", json=body, headers=headers)


def test_create_then_list(client, make_user):
    alice, alice_headers = make_user("Alice")
    bob, bob_headers = make_user()

    created = notify(client, alice_headers, bob["id"], relatedId="42")
    assert created.status_code == 201
    note = created.json()
    assert note["userId"] == bob["id"]
    assert note["senderId"] == alice["id"]
    assert note["senderName"] == "Alice"
    assert note["relatedId"] == "42"
    assert note["isRead"] is False

    page = client.get("/api/notifications/", params={"userId": bob["id"]}, headers=bob_headers).json()
    assert page["total"] == 1
    assert page["documents"] == [note]

    legacy = client.get(f"/api/notifications/{bob['id']}", headers=bob_headers).json()
    assert legacy["documents"] == [note]


def test_invalid_type_and_self_notification(client, make_user):
    alice, alice_headers = make_user()
    bob, _ = make_user()

    assert notify(client, alice_headers, bob["id"], type="poke").status_code == 400
    assert notify(client, alice_headers, alice["id"]).status_code == 400
    assert notify(client, alice_headers, 99999901).status_code == 404


def test_cursor_pages_newest_first(client, make_user):
    _, alice_headers = make_user()
    bob, bob_headers = make_user()
    ids = [notify(client, alice_headers, bob["id"], content=f"n{i}").json()["id"] for i in range(5)]

    first = client.get("/api/notifications/", params={"limit": 3}, headers=bob_headers).json()
    assert [n["id"] for n in first["documents"]] == [ids[4], ids[3], ids[2]]
    assert first["nextCursor"] == ids[2]

    second = client.get(
        "/api/notifications/", params={"limit": 3, "cursor": first["nextCursor"]}, headers=bob_headers
    ).json()
    assert [n["id"] for n in second["documents"]] == [ids[1], ids[0]]
    assert second["nextCursor"] is None


def test_mark_read(client, make_user):
    _, alice_headers = make_user()
    bob, bob_headers = make_user()
    notes = [notify(client, alice_headers, bob["id"]).json() for _ in range(3)]

    assert client.patch(f"/api/notifications/{notes[0]['id']}/read", headers=alice_headers).status_code == 403
    one = client.patch(f"/api/notifications/{notes[0]['id']}/read", headers=bob_headers)
    assert one.json()["isRead"] is True

    everything = client.patch("/api/notifications/read-all", headers=bob_headers)
    assert everything.json() == {"updated": 2, "deleted": 0}

    page = client.get("/api/notifications/", params={"userId": bob["id"]}, headers=bob_headers).json()
    assert all(n["isRead"] for n in page["documents"])

    other = client.patch("/api/notifications/read-all", params={"userId": bob["id"]}, headers=alice_headers)
    assert other.status_code == 403


def test_delete_and_clear(client, make_user):
    _, alice_headers = make_user()
    bob, bob_headers = make_user()
    notes = [notify(client, alice_headers, bob["id"]).json() for _ in range(3)]

    assert client.delete(f"/api/notifications/{notes[0]['id']}", headers=bob_headers).json() == {
        "updated": 0,
        "deleted": 1,
    }
    assert client.delete(f"/api/notifications/{notes[0]['id']}", headers=bob_headers).status_code == 404

    cleared = client.delete("/api/notifications/", params={"userId": bob["id"]}, headers=bob_headers)
    assert cleared.json()["deleted"] == 2
    assert client.get("/api/notifications/", headers=bob_headers).json()["total"] == 0


def test_notifications_are_private(client, make_user):
    _, alice_headers = make_user()
    bob, bob_headers = make_user()
    notify(client, alice_headers, bob["id"])

    assert client.get("/api/notifications/", params={"userId": bob["id"]}).status_code == 401
    assert client.get(f"/api/notifications/{bob['id']}").status_code == 401

    snooping = client.get("/api/notifications/", params={"userId": bob["id"]}, headers=alice_headers)
    assert snooping.status_code == 403
    assert client.get(f"/api/notifications/{bob['id']}", headers=alice_headers).status_code == 403

    own = client.get("/api/notifications/", headers=bob_headers).json()
    assert own["total"] == 1
    assert client.get("/api/notifications/", headers=alice_headers).json()["total"] == 0
