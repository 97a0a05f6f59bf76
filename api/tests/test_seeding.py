from app import repo
from app.database import SessionLocal
from app.services.seeding import DEMO_USERS, seed_demo_users


def test_seed_is_idempotent():
    with SessionLocal() as db:
        first = seed_demo_users(db, password="pw1234", n_random=3)
    assert first["created"] == len(DEMO_USERS) + 3
    assert first["total_users"] == len(DEMO_USERS) + 3

    with SessionLocal() as db:
        second = seed_demo_users(db, password="pw1234", n_random=3)
    assert second["created"] == 0
    assert second["skipped_existing"] == len(DEMO_USERS) + 3
    assert second["total_users"] == len(DEMO_USERS) + 3


def test_seed_reset_replaces_everything(make_user):
    make_user(email="leftover@campus.edu")
    with SessionLocal() as db:
        summary = seed_demo_users(db, reset=True)
    assert summary["total_users"] == len(DEMO_USERS)
    assert repo.get_user_by_email("leftover@campus.edu") is None


def test_seeded_users_can_sign_in(client):
    with SessionLocal() as db:
        seed_demo_users(db, password="demo-pass")
    alex = repo.get_user_by_email("alex@example.com")
    assert alex["instagram"] == "alex"

    res = client.post("/auth/login", json={"email": "alex@example.com", "password": "demo-pass"})
    assert res.status_code == 200
    feed = client.get("/users").json()["users"]
    assert {u["name"] for u in feed} == {"Sarah Smith", "Emily Davis", "Jessica Lee"}
