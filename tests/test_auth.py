"""
Tests for authentication endpoints.

This module covers sign-in (including the station security code and the
one-session-per-user rule), sign-out and the current-user endpoint.
"""

from datetime import datetime, timedelta, timezone

from sqlalchemy import func, select

from obsdesk.core.security import create_access_token, get_password_hash, verify_password
from obsdesk.models.user import UserSession

from conftest import PASSWORD

SIGN_IN = "/api/v1/auth/sign-in"


def test_password_hashing():
    hashed = get_password_hash("secret-password")
    assert hashed != "secret-password"
    assert verify_password("secret-password", hashed)
    assert not verify_password("wrong-password", hashed)


async def test_super_admin_signs_in_without_station(client, super_admin):
    response = await client.post(SIGN_IN, json={"email": super_admin.email, "password": PASSWORD})

    assert response.status_code == 200
    data = response.json()
    assert data["token_type"] == "bearer"
    assert data["access_token"]
    assert data["user"]["role"] == "super_admin"
    assert data["user"]["station_id"] is None


async def test_observer_signs_in_with_security_code(client, observer, station):
    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": PASSWORD,
            "station_code": station.station_code,
            "security_code": station.security_code,
        },
    )

    assert response.status_code == 200
    token = response.json()["access_token"]

    me = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert me.status_code == 200
    assert me.json()["email"] == observer.email
    assert me.json()["station_id"] == station.id


async def test_wrong_password_is_unauthorized(client, observer, station):
    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": "not-the-password",
            "station_code": station.station_code,
            "security_code": station.security_code,
        },
    )

    assert response.status_code == 401
    assert response.json() == {"detail": "Incorrect email or password", "status_code": 401}


async def test_unknown_email_is_unauthorized(client):
    response = await client.post(SIGN_IN, json={"email": "nobody@obsdesk.org", "password": PASSWORD})
    assert response.status_code == 401


async def test_wrong_security_code_is_unauthorized(client, observer, station):
    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": PASSWORD,
            "station_code": station.station_code,
            "security_code": "WRONG",
        },
    )
    assert response.status_code == 401


async def test_station_code_is_required_for_observers(client, observer):
    response = await client.post(SIGN_IN, json={"email": observer.email, "password": PASSWORD})
    assert response.status_code == 400


async def test_unknown_station_is_not_found(client, observer):
    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": PASSWORD,
            "station_code": "00000",
            "security_code": "DHK-1234",
        },
    )
    assert response.status_code == 404


async def test_observer_cannot_sign_in_at_another_station(client, observer, other_station):
    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": PASSWORD,
            "station_code": other_station.station_code,
            "security_code": other_station.security_code,
        },
    )
    assert response.status_code == 403


async def test_second_sign_in_is_rejected_while_session_is_live(client, super_admin):
    credentials = {"email": super_admin.email, "password": PASSWORD}

    first = await client.post(SIGN_IN, json=credentials)
    second = await client.post(SIGN_IN, json=credentials)

    assert first.status_code == 200
    assert second.status_code == 403
    assert second.json()["detail"] == "You are already logged in from another device"


async def test_expired_session_does_not_block_sign_in(client, db, super_admin):
    db.add(UserSession(
        user_id=super_admin.id,
        token="stale-session",
        expires_at=datetime.now(timezone.utc) - timedelta(minutes=1),
    ))
    await db.commit()

    response = await client.post(SIGN_IN, json={"email": super_admin.email, "password": PASSWORD})

    assert response.status_code == 200
    result = await db.execute(select(func.count()).select_from(UserSession).where(UserSession.token == "stale-session"))
    assert result.scalar_one() == 0


async def test_sign_out_ends_the_session(client, super_admin):
    token = (await client.post(
        SIGN_IN, json={"email": super_admin.email, "password": PASSWORD}
    )).json()["access_token"]
    headers = {"Authorization": f"Bearer {token}"}

    response = await client.post("/api/v1/auth/sign-out", headers=headers)
    assert response.status_code == 204

    assert (await client.get("/api/v1/auth/me", headers=headers)).status_code == 401
    again = await client.post(SIGN_IN, json={"email": super_admin.email, "password": PASSWORD})
    assert again.status_code == 200


async def test_missing_token_is_unauthorized(client):
    response = await client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"] == "Not authenticated"


async def test_garbage_token_is_unauthorized(client):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_token_for_unknown_session_is_unauthorized(client, super_admin):
    token = create_access_token(str(super_admin.id), "no-such-session")
    response = await client.get("/api/v1/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401


async def test_inactive_user_is_forbidden(client, db, observer, station):
    observer.is_active = False
    db.add(observer)
    await db.commit()

    response = await client.post(
        SIGN_IN,
        json={
            "email": observer.email,
            "password": PASSWORD,
            "station_code": station.station_code,
            "security_code": station.security_code,
        },
    )
    assert response.status_code == 403
