from datetime import datetime, timedelta

from conftest import PASSWORD, auth_header, make_user
from hirehub.core.auth import create_access_token, verify_password

REGISTRATION = {
    "email": "Ada@Example.com",
    "password": "s3cret-pass",
    "first_name": "Ada",
    "last_name": "Lovelace",
    "role": "candidate",
}


def test_register(client, db, email):
    resp = client.post("/api/auth/register", json=REGISTRATION)

    assert resp.status_code == 201
    body = resp.json()
    assert body["email"] == "ada@example.com"
    assert body["is_verified"] is False
    assert "password_hash" not in body and "verification_token" not in body

    stored = db.users.find_one({"email": "ada@example.com"})
    assert stored["verification_token_expiry"] > datetime.utcnow() + timedelta(hours=23)
    assert len(email.sent) == 1
    assert stored["verification_token"] in email.sent[0]["html"]


def test_register_duplicate_email(client):
    client.post("/api/auth/register", json=REGISTRATION)
    resp = client.post("/api/auth/register", json={**REGISTRATION, "email": "ada@example.com"})

    assert resp.status_code == 400
    assert resp.json()["detail"] == "Email already registered"


def test_register_validation(client):
    resp = client.post("/api/auth/register", json={**REGISTRATION, "password": "short"})

    assert resp.status_code == 400
    assert resp.json()["errors"][0]["field"] == "password"


def test_login_and_me(client, db):
    user = make_user(db, email="bob@example.com")

    resp = client.post("/api/auth/login", json={"email": "bob@example.com", "password": PASSWORD})

    assert resp.status_code == 200
    token = resp.json()["access_token"]
    assert resp.json()["user_id"] == str(user["_id"])
    assert db.users.find_one({"_id": user["_id"]})["last_login"] is not None

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.json()["email"] == "bob@example.com"


def test_login_wrong_password(client, db):
    make_user(db, email="bob@example.com")
    resp = client.post("/api/auth/login", json={"email": "bob@example.com", "password": "wrong-password"})
    assert resp.status_code == 401


def test_me_requires_valid_token(client, db):
    assert client.get("/api/auth/me").status_code == 401
    assert client.get("/api/auth/me", headers={"Authorization": "Bearer garbage"}).status_code == 401

    ghost = create_access_token({"sub": "64b000000000000000000000", "role": "candidate"})
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {ghost}"}).status_code == 401

    expired = create_access_token({"sub": "64b000000000000000000000"}, expires_delta=timedelta(minutes=-1))
    assert client.get("/api/auth/me", headers={"Authorization": f"Bearer {expired}"}).status_code == 401


def test_verify_email(client, db):
    client.post("/api/auth/register", json=REGISTRATION)
    token = db.users.find_one({})["verification_token"]

    assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 200
    assert db.users.find_one({})["is_verified"] is True
    assert client.post("/api/auth/verify-email", json={"token": token}).status_code == 400


def test_verify_email_expired(client, db):
    make_user(db, is_verified=False, verification_token="tok",
              verification_token_expiry=datetime.utcnow() - timedelta(minutes=1))

    assert client.post("/api/auth/verify-email", json={"token": "tok"}).status_code == 400


def test_password_reset_flow(client, db, email):
    user = make_user(db, email="carol@example.com")

    resp = client.post("/api/auth/forgot-password", json={"email": "carol@example.com"})
    assert resp.status_code == 200
    token = db.users.find_one({"_id": user["_id"]})["reset_password_token"]
    assert token in email.sent[0]["html"]

    resp = client.post("/api/auth/reset-password", json={"token": token, "password": "brand-new-pass"})
    assert resp.status_code == 200

    stored = db.users.find_one({"_id": user["_id"]})
    assert verify_password("brand-new-pass", stored["password_hash"])
    assert "reset_password_token" not in stored
    assert client.post("/api/auth/reset-password", json={"token": token, "password": "another-pass"}).status_code == 400


def test_forgot_password_unknown_email(client, email):
    resp = client.post("/api/auth/forgot-password", json={"email": "nobody@example.com"})
    assert resp.status_code == 200
    assert email.sent == []


def test_profile_update(client, db):
    user = make_user(db)

    resp = client.put(
        "/api/users/profile",
        json={"title": "Backend Engineer", "skills": ["Python", "Go"]},
        headers=auth_header(user),
    )

    assert resp.status_code == 200
    assert resp.json()["title"] == "Backend Engineer"
    assert resp.json()["first_name"] == user["first_name"]
    profile = client.get("/api/users/profile", headers=auth_header(user)).json()
    assert profile["skills"] == ["Python", "Go"]
