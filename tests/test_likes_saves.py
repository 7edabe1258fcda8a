def make_post(client, headers):
    return client.post("/api/posts", data={"caption": "Bench"}, headers=headers).json()


def test_like_create_is_idempotent(client, make_user):
    author, author_headers = make_user()
    fan, fan_headers = make_user()
    post = make_post(client, author_headers)

    created = client.post("/api/likes/", json={"postId": post["id"]}, headers=fan_headers)
    assert created.status_code == 201
    like = created.json()
    assert like["userId"] == fan["id"]
    assert like["postId"] == post["id"]

    again = client.post("/api/likes/", json={"postId": post["id"]}, headers=fan_headers)
    assert again.status_code == 200
    assert again.json()["id"] == like["id"]

    # both like paths share one relation
    assert client.get(f"/api/posts/{post['id']}").json()["likes"] == [fan["id"]]
    assert [l["id"] for l in client.get(f"/api/likes/post/{post['id']}").json()] == [like["id"]]
    assert client.get(f"/api/likes/user/{author['id']}/total").json() == {"totalLikes": 1}


def test_like_delete_by_id(client, make_user):
    _, author_headers = make_user()
    _, fan_headers = make_user()
    post = make_post(client, author_headers)
    like = client.post("/api/likes/", json={"postId": post["id"]}, headers=fan_headers).json()

    forbidden = client.request("DELETE", "/api/likes/", json={"likeId": like["id"]}, headers=author_headers)
    assert forbidden.status_code == 403

    removed = client.request("DELETE", "/api/likes/", json={"likeId": like["id"]}, headers=fan_headers)
    assert removed.status_code == 200
    assert client.get(f"/api/posts/{post['id']}").json()["likes"] == []

    gone = client.request("DELETE", "/api/likes/", json={"likeId": like["id"]}, headers=fan_headers)
    assert gone.status_code == 404


def test_like_unknown_post(client, make_user):
    _, headers = make_user()
    assert client.post("/api/likes/", json={"postId": 99999902}, headers=headers).status_code == 404
    assert client.post("/api/likes/", json={}, headers=headers).status_code == 400


def test_saves_collection(client, make_user):
    _, author_headers = make_user()
    reader, reader_headers = make_user()
    first = make_post(client, author_headers)
    second = make_post(client, author_headers)

    created = client.post("/api/saves/", json={"postId": first["id"]}, headers=reader_headers)
    assert created.status_code == 201
    again = client.post("/api/saves/", json={"postId": first["id"]}, headers=reader_headers)
    assert again.status_code == 200
    assert again.json()["id"] == created.json()["id"]
    client.post("/api/saves/", json={"postId": second["id"]}, headers=reader_headers)

    saved = client.get(f"/api/saves/user/{reader['id']}").json()
    assert [s["postId"] for s in saved] == [second["id"], first["id"]]
    assert saved[0]["post"]["caption"] == "Bench"

    toggled = client.post(f"/api/posts/{first['id']}/save", headers=reader_headers).json()
    assert toggled == {"saved": False, "saveId": None}

    save_id = saved[0]["id"]
    assert client.delete(f"/api/saves/{save_id}", headers=author_headers).status_code == 403
    assert client.delete(f"/api/saves/{save_id}", headers=reader_headers).status_code == 200
    assert client.get(f"/api/saves/user/{reader['id']}").json() == []
