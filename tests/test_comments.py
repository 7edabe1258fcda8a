def make_post(client, headers):
    return client.post("/api/posts", data={"caption": "Deadlift PR"}, headers=headers).json()


def test_comment_create_then_list(client, make_user):
    author, author_headers = make_user("Author")
    reader, reader_headers = make_user("Reader")
    post = make_post(client, author_headers)

    created = client.post(
        "/api/comments/", json={"postId": post["id"], "text": "  Strong!  "}, headers=reader_headers
    )
    assert created.status_code == 201
    comment = created.json()
    assert comment["text"] == "Strong!"
    assert comment["userId"] == reader["id"]
    assert comment["userName"] == "Reader"
    assert comment["likes"] == []

    second = client.post(
        "/api/comments/", json={"postId": post["id"], "text": "Again"}, headers=author_headers
    ).json()

    listed = client.get(f"/api/comments/post/{post['id']}").json()
    assert [c["id"] for c in listed] == [second["id"], comment["id"]]
    assert client.get(f"/api/posts/{post['id']}").json()["commentsCount"] == 2

    notes = client.get(
        "/api/notifications/", params={"userId": author["id"]}, headers=author_headers
    ).json()["documents"]
    assert [n["type"] for n in notes] == ["comment"]
    assert notes[0]["referenceId"] == str(comment["id"])


def test_comment_validation(client, make_user):
    _, headers = make_user()
    post = make_post(client, headers)

    missing = client.post("/api/comments/", json={"postId": post["id"]}, headers=headers)
    assert missing.status_code == 400

    blank = client.post("/api/comments/", json={"postId": post["id"], "text": "   "}, headers=headers)
    assert blank.status_code == 400

    no_post = client.post("/api/comments/", json={"postId": 99999902, "text": "hi"}, headers=headers)
    assert no_post.status_code == 404

    assert client.get("/api/comments/post/99999902").status_code == 404


def test_comment_like_is_a_set(client, make_user):
    author, author_headers = make_user()
    fan, fan_headers = make_user()
    post = make_post(client, author_headers)
    comment = client.post("/api/comments/", json={"postId": post["id"], "text": "hey"}, headers=author_headers).json()

    liked = client.post("/api/comments/like", json={"commentId": comment["id"]}, headers=fan_headers)
    assert liked.json()["likes"] == [fan["id"]]
    twice = client.post("/api/comments/like", json={"commentId": comment["id"]}, headers=fan_headers)
    assert twice.json()["likes"] == [fan["id"]]

    unliked = client.post("/api/comments/unlike", json={"commentId": comment["id"]}, headers=fan_headers)
    assert unliked.json()["likes"] == []
    again = client.post("/api/comments/unlike", json={"commentId": comment["id"]}, headers=fan_headers)
    assert again.json()["likes"] == []

    notes = client.get(
        "/api/notifications/", params={"userId": author["id"]}, headers=author_headers
    ).json()["documents"]
    assert [n["type"] for n in notes] == ["comment-like"]


def test_comment_delete_permissions(client, make_user):
    _, author_headers = make_user()
    _, commenter_headers = make_user()
    _, stranger_headers = make_user()
    post = make_post(client, author_headers)

    first = client.post("/api/comments/", json={"postId": post["id"], "text": "1"}, headers=commenter_headers).json()
    second = client.post("/api/comments/", json={"postId": post["id"], "text": "2"}, headers=commenter_headers).json()

    assert client.delete(f"/api/comments/{first['id']}", headers=stranger_headers).status_code == 403
    assert client.delete(f"/api/comments/{first['id']}", headers=commenter_headers).status_code == 200
    assert client.delete(f"/api/comments/{second['id']}", headers=author_headers).status_code == 200
    assert client.delete(f"/api/comments/{second['id']}", headers=author_headers).status_code == 404
    assert client.get(f"/api/comments/post/{post['id']}").json() == []
