import json
import uuid

import pytest

PASSWORD = "Str0ng!pass"


def signup(client, username):
    response = client.post(
        "/api/auth/signup",
        json={"email": f"{username}@example.com", "username": username, "name": username.title(), "password": PASSWORD},
    )
    assert response.status_code == 201, response.text
    body = response.json()
    return body["user_id"], {"Authorization": f"Bearer {body['access_token']}"}


def test_health(client):
    response = client.get("/api/health/")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_login_and_me(client):
    user_id, _ = signup(client, "ana")

    response = client.post("/api/auth/login", json={"username": "ana", "password": PASSWORD})
    assert response.status_code == 200
    headers = {"Authorization": f"Bearer {response.json()['access_token']}"}

    me = client.get("/api/users/me", headers=headers)
    assert me.status_code == 200
    assert me.json()["user"]["id"] == user_id


def test_wrong_password(client):
    signup(client, "ana")

    response = client.post("/api/auth/login", json={"email": "ana@example.com", "password": "Wr0ng!pass"})

    assert response.status_code == 401
    assert response.json()["errors"] == {"error_code": "INCORRECT_PASSWORD"}


def test_missing_token(client):
    response = client.get("/api/posts/feed")

    assert response.status_code == 401
    assert response.json() == {
        "message": "Unauthorized. You must login to access this content.",
        "code": 401,
        "errors": {"error_code": "MISSING_TOKEN"},
    }


def test_request_body_validation_shape(client):
    response = client.post("/api/auth/signup", json={"email": "nope", "username": "ana", "name": "Ana"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation Error"
    assert {violation["field"] for violation in body["errors"]} == {"email", "password"}


def test_post_lifecycle(client, signer):
    _, headers = signup(client, "ana")

    created = client.post("/api/posts/", json={"content": "hola"}, headers=headers)
    assert created.status_code == 201
    assert created.json()["images"] == []

    with_images = client.post("/api/posts/", json={"content": "pics", "images": ["a.png", "b.png"]}, headers=headers)
    assert with_images.json()["images"] == signer.issued

    feed = client.get("/api/posts/feed", params={"limit": 1}, headers=headers)
    assert feed.status_code == 200
    assert [item["post"]["id"] for item in feed.json()] == [with_images.json()["id"]]

    post_id = created.json()["id"]
    assert client.get(f"/api/posts/{post_id}", headers=headers).json()["post"]["content"] == "hola"
    assert client.delete(f"/api/posts/{post_id}", headers=headers).status_code == 204
    assert client.get(f"/api/posts/{post_id}", headers=headers).status_code == 404


def test_empty_feed_is_not_found(client):
    _, headers = signup(client, "ana")

    response = client.get("/api/posts/feed", headers=headers)

    assert response.status_code == 404
    assert response.json()["message"] == "Not found. Couldn't find posts"


def test_malformed_id_is_validation_error(client):
    _, headers = signup(client, "ana")

    response = client.get("/api/posts/not-a-uuid", headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "post_id"


def test_private_author_needs_follow(client):
    _, viewer = signup(client, "viewer")
    author_id, author = signup(client, "bea")
    assert client.patch("/api/users/me", json={"visibility": "PRIVATE"}, headers=author).status_code == 200
    post_id = client.post("/api/posts/", json={"content": "secret"}, headers=author).json()["id"]

    denied = client.get(f"/api/posts/{post_id}", headers=viewer)
    assert denied.status_code == 404
    assert denied.json()["message"] == "You don't have permission to perform this action on user"

    assert client.post(f"/api/follows/{author_id}", headers=viewer).status_code == 201
    assert client.get(f"/api/posts/{post_id}", headers=viewer).status_code == 200
    assert client.post(f"/api/follows/{author_id}", headers=viewer).json()["errors"] == {
        "error_code": "FOLLOW_ALREADY_EXISTS"
    }


def test_comments_and_reactions(client):
    _, ana = signup(client, "ana")
    _, bob = signup(client, "bob")
    post_id = client.post("/api/posts/", json={"content": "topic"}, headers=ana).json()["id"]

    comment = client.post(f"/api/comments/post/{post_id}", json={"content": "reply"}, headers=bob)
    assert comment.status_code == 201
    assert client.post(f"/api/reactions/post/{post_id}", json={"action": "LIKE"}, headers=bob).status_code == 201
    duplicate = client.post(f"/api/reactions/post/{post_id}", json={"action": "LIKE"}, headers=bob)
    assert duplicate.status_code == 409

    extended = client.get(f"/api/posts/{post_id}", headers=ana).json()
    assert (extended["qty_comments"], extended["qty_likes"], extended["qty_retweets"]) == (1, 1, 0)

    assert client.delete(f"/api/reactions/post/{post_id}", params={"action": "LIKE"}, headers=bob).status_code == 204
    missing = client.delete(f"/api/reactions/post/{post_id}", params={"action": "LIKE"}, headers=bob)
    assert missing.json()["errors"] == {"error_code": "REACTION_DOES_NOT_EXIST"}


def test_websocket_rejects_missing_token(client):
    with client.websocket_connect("/api/messages/ws") as websocket:
        frame = websocket.receive_json()
    assert frame["event"] == "error"
    assert frame["data"]["errors"] == {"error_code": "MISSING_TOKEN"}


def test_websocket_message_roundtrip(client):
    sender_id, sender = signup(client, "sender")
    receiver_id, receiver = signup(client, "receiver")
    client.post(f"/api/follows/{receiver_id}", headers=sender)
    client.post(f"/api/follows/{sender_id}", headers=receiver)
    sender_token = sender["Authorization"].split()[1]

    with client.websocket_connect("/api/messages/ws", headers=receiver) as receiver_ws:
        with client.websocket_connect(f"/api/messages/ws?token={sender_token}") as sender_ws:
            presence = receiver_ws.receive_json()
            assert presence["event"] == "user connected"
            assert presence["data"]["user_id"] == sender_id

            sender_ws.send_json({"event": "message", "data": {"receiver_id": receiver_id, "content": "hi"}})
            assert receiver_ws.receive_json()["data"]["content"] == "hi"
            assert sender_ws.receive_json()["event"] == "message"

            sender_ws.send_json({"event": "message", "data": {"receiver_id": str(uuid.uuid4()), "content": "?"}})
            assert sender_ws.receive_json()["event"] == "error"

    history = client.get(f"/api/messages/chat/{receiver_id}", headers=sender)
    assert history.status_code == 200
    assert [message["content"] for message in history.json()] == ["hi"]


def test_websocket_binary_frames_keep_the_connection(client):
    sender_id, sender = signup(client, "sender")
    receiver_id, receiver = signup(client, "receiver")
    client.post(f"/api/follows/{receiver_id}", headers=sender)
    token = sender["Authorization"].split()[1]

    with client.websocket_connect(f"/api/messages/ws?token={token}") as websocket:
        websocket.send_bytes(b"\xff\xfe not json")
        error = websocket.receive_json()
        assert error["event"] == "error"
        assert error["data"]["message"] == "Validation Error"

        frame = {"event": "message", "data": {"receiver_id": receiver_id, "content": "bytes work"}}
        websocket.send_bytes(json.dumps(frame).encode())
        assert websocket.receive_json()["data"]["content"] == "bytes work"


def test_path_and_query_violations_are_reported_together(client):
    _, headers = signup(client, "ana")

    response = client.get("/api/posts/author/not-a-uuid", params={"limit": "0"}, headers=headers)

    assert response.status_code == 400
    assert {violation["field"] for violation in response.json()["errors"]} == {"author_id", "limit"}


def test_likes_and_retweets_by_author(client):
    ana_id, ana = signup(client, "ana")
    post_id = client.post("/api/posts/", json={"content": "topic"}, headers=ana).json()["id"]
    client.post(f"/api/reactions/post/{post_id}", json={"action": "RETWEET"}, headers=ana)

    retweets = client.get(f"/api/reactions/author/{ana_id}/retweets", headers=ana)
    assert [reaction["action"] for reaction in retweets.json()] == ["RETWEET"]
    assert client.get(f"/api/reactions/author/{ana_id}/likes", headers=ana).status_code == 404


def test_profile_picture_without_extension(client):
    _, headers = signup(client, "ana")

    response = client.patch("/api/users/me", json={"profile_picture": "avatar"}, headers=headers)

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "profile_picture"
