def test_follow_is_idempotent_and_counted(client, make_user):
    alice, alice_headers = make_user("Alice")
    bob, _ = make_user("Bob")

    created = client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert created.status_code == 201
    edge = created.json()
    assert edge["userId"] == alice["id"]
    assert edge["followsUserId"] == bob["id"]

    again = client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert again.status_code == 200
    assert again.json()["id"] == edge["id"]

    assert client.get(f"/api/users/{bob['id']}/relationships").json() == {"followers": 1, "following": 0}
    assert client.get(f"/api/users/{alice['id']}/relationships").json() == {"followers": 0, "following": 1}

    lists = client.get(f"/api/users/{alice['id']}/relationships/list").json()
    assert [u["id"] for u in lists["following"]] == [bob["id"]]
    assert lists["followers"] == []

    followers = client.get(f"/api/users/{bob['id']}/followers").json()
    assert [u["id"] for u in followers] == [alice["id"]]


def test_cannot_follow_self_or_unknown_user(client, make_user):
    alice, headers = make_user()

    self_follow = client.post("/api/relationships", json={"followsUserId": alice["id"]}, headers=headers)
    assert self_follow.status_code == 400

    unknown = client.post("/api/relationships", json={"followsUserId": 99999901}, headers=headers)
    assert unknown.status_code == 404


def test_follow_requires_authentication(client, make_user):
    bob, _ = make_user()
    response = client.post("/api/relationships", json={"followsUserId": bob["id"]})
    assert response.status_code == 401


def test_toggle_twice_restores_state(client, make_user):
    _, alice_headers = make_user()
    bob, _ = make_user()

    on = client.post("/api/relationships/toggle", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert on.json() == {"following": True, "followers": 1}

    off = client.post("/api/relationships/toggle", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert off.json() == {"following": False, "followers": 0}


def test_check_and_unfollow_by_pair(client, make_user):
    alice, alice_headers = make_user()
    bob, _ = make_user()
    params = {"userId": alice["id"], "followsUserId": bob["id"]}

    assert client.get("/api/relationships/check", params=params).json() is None

    client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert client.get("/api/relationships/check", params=params).json()["followsUserId"] == bob["id"]

    removed = client.delete(
        "/api/relationships", params={"followsUserId": bob["id"]}, headers=alice_headers
    )
    assert removed.status_code == 200
    assert client.get("/api/relationships/check", params=params).json() is None

    missing = client.delete(
        "/api/relationships", params={"followsUserId": bob["id"]}, headers=alice_headers
    )
    assert missing.status_code == 404


def test_unfollow_by_edge_id_only_by_owner(client, make_user):
    _, alice_headers = make_user()
    bob, bob_headers = make_user()

    edge = client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers).json()

    assert client.delete(f"/api/relationships/{edge['id']}", headers=bob_headers).status_code == 403
    assert client.delete(f"/api/relationships/{edge['id']}", headers=alice_headers).status_code == 200
    assert client.delete(f"/api/relationships/{edge['id']}", headers=alice_headers).status_code == 404


def test_legacy_follow_routes_share_the_same_edges(client, make_user):
    alice, alice_headers = make_user()
    bob, _ = make_user()

    created = client.post("/api/follow/", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert created.status_code == 201

    status = client.get("/api/follow/status", params={"userId": alice["id"], "followsUserId": bob["id"]})
    assert status.json()["id"] == created.json()["id"]

    duplicate = client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers)
    assert duplicate.status_code == 200

    counts = client.get(f"/api/follow/relationships/{bob['id']}").json()
    assert counts == {"followers": 1, "following": 0}

    removed = client.delete(f"/api/follow/{created.json()['id']}", headers=alice_headers)
    assert removed.json() == {"message": "Unfollowed successfully."}


def test_follow_and_unfollow_notify_the_followee(client, make_user):
    alice, alice_headers = make_user("Alice")
    bob, bob_headers = make_user("Bob")

    client.post("/api/relationships", json={"followsUserId": bob["id"]}, headers=alice_headers)
    client.delete("/api/relationships", params={"followsUserId": bob["id"]}, headers=alice_headers)

    page = client.get("/api/notifications/", params={"userId": bob["id"]}, headers=bob_headers).json()
    assert [n["type"] for n in page["documents"]] == ["unfollow", "follow"]
    assert all(n["senderId"] == alice["id"] for n in page["documents"])
    assert page["documents"][1]["senderName"] == "Alice"
