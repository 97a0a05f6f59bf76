import pytest

pytest.importorskip("fastapi")
from fastapi.testclient import TestClient

import app.main as m
from app import repo


def _register(client, **overrides):
    body = {
        "email": "a@campus.edu",
        "password": "secret1",
        "name": "Ana",
        "age": 20,
        "gender": "FEMALE",
        "interestedIn": "MALE",
        "image": "https://img.example/a.jpg",
        "instagram": "ana",
    }
    body.update(overrides)
    res = client.post("/auth/register", json=body)
    assert res.status_code == 200
    return res.json()["user"]


def test_register_swipe_match_and_chat_flow():
    alice_client = TestClient(m.app)
    bob_client = TestClient(m.app)
    alice = _register(alice_client)
    bob = _register(
        bob_client,
        email="b@campus.edu",
        name="Ben",
        gender="MALE",
        interestedIn="FEMALE",
        image="https://img.example/b.jpg",
        instagram="ben",
    )

    feed = alice_client.get("/users").json()["users"]
    assert [u["id"] for u in feed] == [bob["id"]]
    assert feed[0]["hasFriendedMe"] is False
    assert "email" not in feed[0]

    first = alice_client.post("/swipe", json={"toId": bob["id"], "direction": "right"})
    assert first.json() == {"success": True, "match": False}
    assert alice_client.get("/users").json()["users"] == []

    second = bob_client.post("/swipe", json={"toId": alice["id"], "direction": "RIGHT"})
    assert second.json() == {"success": True, "match": True}

    (match,) = alice_client.get("/matches").json()["matches"]
    assert match["type"] == "DATE"
    assert match["user"] == {"id": bob["id"], "name": "Ben", "image": "https://img.example/b.jpg", "instagram": "ben"}
    assert match["lastMessage"] == "New Match!"
    assert match["lastMessageAt"] is None

    sent = alice_client.post("/messages", json={"matchId": match["id"], "content": "  hey Ben  "})
    assert sent.status_code == 200
    message = sent.json()["message"]
    assert message["content"] == "hey Ben"
    assert message["senderId"] == alice["id"]
    assert message["receiverId"] == bob["id"]
    assert bob_client.post("/messages", json={"matchId": match["id"], "content": "hi Ana"}).status_code == 200

    thread = bob_client.get("/messages", params={"matchId": match["id"]}).json()
    assert [msg["content"] for msg in thread["messages"]] == ["hey Ben", "hi Ana"]
    assert thread["otherUser"] == {"id": alice["id"], "name": "Ana", "image": "https://img.example/a.jpg"}

    (bob_view,) = bob_client.get("/matches").json()["matches"]
    assert bob_view["user"]["id"] == alice["id"]
    assert bob_view["lastMessage"] == "hi Ana"
    assert bob_view["lastMessageAt"]


def test_reswipe_after_match_reports_no_new_match(client, make_user, auth_headers):
    a = make_user(gender="FEMALE", interested_in="MALE")
    b = make_user(gender="MALE", interested_in="FEMALE")
    client.post("/swipe", headers=auth_headers(a), json={"toId": b["id"], "direction": "RIGHT"})
    assert client.post("/swipe", headers=auth_headers(b), json={"toId": a["id"], "direction": "RIGHT"}).json()["match"]

    again = client.post("/swipe", headers=auth_headers(a), json={"toId": b["id"], "direction": "RIGHT"})
    assert again.json() == {"success": True, "match": False}
    assert len(client.get("/matches", headers=auth_headers(a)).json()["matches"]) == 1


def test_friend_and_right_make_friend_match(client, make_user, auth_headers):
    a = make_user(gender="FEMALE", interested_in="FRIENDS")
    b = make_user(gender="MALE", interested_in="FRIENDS")

    client.post("/swipe", headers=auth_headers(a), json={"toId": b["id"], "direction": "FRIEND"})
    candidates = client.get("/users", headers=auth_headers(b)).json()["users"]
    assert candidates[0]["hasFriendedMe"] is True

    res = client.post("/swipe", headers=auth_headers(b), json={"toId": a["id"], "direction": "RIGHT"})
    assert res.json()["match"] is True
    (match,) = client.get("/matches", headers=auth_headers(b)).json()["matches"]
    assert match["type"] == "FRIEND"


@pytest.mark.parametrize(
    "body,status",
    [
        ({"direction": "RIGHT"}, 400),
        ({"toId": "someone", "direction": "UP"}, 400),
        ({"toId": "00000000-0000-0000-0000-000000000000", "direction": "LEFT"}, 404),
    ],
)
def test_swipe_rejects_bad_input(client, make_user, auth_headers, body, status):
    me = make_user()
    assert client.post("/swipe", headers=auth_headers(me), json=body).status_code == status


def test_self_swipe_is_bad_request(client, make_user, auth_headers):
    me = make_user()
    res = client.post("/swipe", headers=auth_headers(me), json={"toId": me["id"], "direction": "RIGHT"})
    assert res.status_code == 400
    assert res.json()["detail"] == "You cannot swipe on yourself"


@pytest.mark.parametrize("path", ["/users", "/matches", "/messages"])
def test_protected_reads_require_session(client, path):
    assert client.get(path).status_code == 401


@pytest.mark.parametrize("path", ["/swipe", "/messages"])
def test_protected_writes_require_session(client, path):
    assert client.post(path, json={}).status_code == 401


@pytest.fixture
def matched_pair(client, make_user, auth_headers):
    a = make_user(gender="FEMALE", interested_in="MALE")
    b = make_user(gender="MALE", interested_in="FEMALE")
    client.post("/swipe", headers=auth_headers(a), json={"toId": b["id"], "direction": "RIGHT"})
    client.post("/swipe", headers=auth_headers(b), json={"toId": a["id"], "direction": "RIGHT"})
    (match,) = client.get("/matches", headers=auth_headers(a)).json()["matches"]
    return a, b, match["id"]


def test_outsider_cannot_read_or_write_thread(client, make_user, auth_headers, matched_pair):
    _, _, match_id = matched_pair
    outsider = make_user(email="eve@campus.edu")

    read = client.get("/messages", headers=auth_headers(outsider), params={"matchId": match_id})
    assert read.status_code == 403
    write = client.post("/messages", headers=auth_headers(outsider), json={"matchId": match_id, "content": "hi"})
    assert write.status_code == 403
    assert repo.get_match_messages(match_id) == []


def test_unknown_match_is_not_found(client, auth_headers, matched_pair):
    a, _, _ = matched_pair
    res = client.get("/messages", headers=auth_headers(a), params={"matchId": "no-such-match"})
    assert res.status_code == 404
    assert res.json()["detail"] == "Match not found"


def test_message_input_validation(client, auth_headers, matched_pair):
    a, _, match_id = matched_pair
    assert client.get("/messages", headers=auth_headers(a)).json()["detail"] == "Missing matchId"

    for body in [{"matchId": match_id}, {"matchId": match_id, "content": "   "}, {"content": "hi"}]:
        res = client.post("/messages", headers=auth_headers(a), json=body)
        assert res.status_code == 400
        assert res.json()["detail"] == "Missing fields"

    long = client.post("/messages", headers=auth_headers(a), json={"matchId": match_id, "content": "x" * 2001})
    assert long.status_code == 400
    assert long.json()["detail"] == "Message too long"


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_unexpected_failure_is_opaque_500(make_user, auth_headers, monkeypatch):
    user = make_user()

    def _explode(user_id):
        raise RuntimeError("connection reset")

    monkeypatch.setattr(repo, "get_user_matches", _explode)
    client = TestClient(m.app, raise_server_exceptions=False)
    res = client.get("/matches", headers=auth_headers(user))
    assert res.status_code == 500
    assert res.json() == {"detail": "Internal error"}
