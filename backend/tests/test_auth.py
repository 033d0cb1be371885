"""
Tests for player account endpoints: registration, login and profile.
"""

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_register_user(client: AsyncClient):
    """Successful registration returns the account without its password hash."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "New.Player@Example.com",
        "username": "newplayer",
        "password": "securepassword123",
        "full_name": "New Player",
        "phone": "+1 555 123 4567",
    })
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "new.player@example.com"
    assert data["username"] == "newplayer"
    assert data["full_name"] == "New Player"
    assert "hashed_password" not in data


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user):
    """Email uniqueness ignores case."""
    response = await client.post("/api/v1/auth/register", json={
        "email": "TEST@example.com",
        "username": "different",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["detail"] == "Email already registered"


@pytest.mark.asyncio
async def test_register_duplicate_username(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/register", json={
        "email": "different@example.com",
        "username": "testuser",
        "password": "securepassword123",
    })
    assert response.status_code == 409
    assert response.json()["detail"] == "Username already taken"


@pytest.mark.asyncio
@pytest.mark.parametrize("overrides", [
    {"password": "short"},
    {"email": "not-an-email"},
    {"username": "has spaces"},
    {"phone": "call me"},
])
async def test_register_invalid_input(client: AsyncClient, overrides):
    payload = {
        "email": "valid@example.com",
        "username": "validuser",
        "password": "securepassword123",
        **overrides,
    }
    response = await client.post("/api/v1/auth/register", json=payload)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user):
    """Valid credentials return a bearer token, email matched case-insensitively."""
    response = await client.post("/api/v1/auth/login", json={
        "email": "Test@Example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 200
    data = response.json()
    assert data["access_token"]
    assert data["token_type"] == "bearer"
    assert data["expires_in"] == 30 * 60


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user):
    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "wrongpassword",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_nonexistent_email(client: AsyncClient):
    response = await client.post("/api/v1/auth/login", json={
        "email": "nobody@example.com",
        "password": "anypassword123",
    })
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_login_deactivated(client: AsyncClient, test_user, db_session):
    test_user.is_active = False
    await db_session.commit()

    response = await client.post("/api/v1/auth/login", json={
        "email": "test@example.com",
        "password": "testpassword123",
    })
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_profile_counts_upcoming_bookings(client: AsyncClient, auth_headers, indoor_court):
    """Only confirmed bookings count."""
    for start, end in [("10:00", "11:00"), ("12:00", "13:00")]:
        await client.post("/api/v1/bookings/", json={
            "court_id": indoor_court.id,
            "booking_date": "2026-03-03",
            "start_time": start,
            "end_time": end,
        }, headers=auth_headers)
    listed = await client.get("/api/v1/bookings/", headers=auth_headers)
    await client.delete(f"/api/v1/bookings/{listed.json()[0]['id']}", headers=auth_headers)

    response = await client.get("/api/v1/auth/me", headers=auth_headers)
    assert response.status_code == 200
    profile = response.json()
    assert profile["username"] == "testuser"
    assert profile["upcoming_bookings"] == 1


@pytest.mark.asyncio
async def test_profile_requires_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401
