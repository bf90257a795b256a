"""
Unit tests for authentication endpoints and the auth service.

Tests:
- User registration
- Login
- Duplicate email handling
- Credential error indistinguishability
- Request validation
"""

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.deps import get_token_service
from app.core.exceptions import AuthenticationError, DuplicateUserError
from app.core.security import verify_password
from app.crud import user as user_crud
from app.models.user import User
from app.services.auth_service import AuthService


class TestUserRegistration:
    """Test user registration endpoint"""

    def test_register_success(self, client, sample_user_data):
        """Test successful user registration"""
        response = client.post("/api/v1/auth/register", json=sample_user_data)

        assert response.status_code == 201
        data = response.json()
        assert data["user"] == {"name": "Alice", "email": "a@x.com"}
        assert data["token"]
        assert "password" not in data["user"]

    def test_register_token_identifies_user(self, client, db_session, sample_user_data):
        response = client.post("/api/v1/auth/register", json=sample_user_data)

        identity = get_token_service().verify(response.json()["token"])
        user = db_session.query(User).filter(User.email == "a@x.com").one()
        assert identity.user_id == user.id
        assert identity.name == "Alice"

    def test_register_stores_hashed_password(self, client, db_session, sample_user_data):
        client.post("/api/v1/auth/register", json=sample_user_data)

        user = db_session.query(User).filter(User.email == "a@x.com").one()
        assert user.hashed_password != "secret123"
        assert verify_password("secret123", user.hashed_password)

    def test_register_duplicate_email(self, client, db_session, sample_user_data):
        """Test registration with duplicate email fails with 409"""
        first = client.post("/api/v1/auth/register", json=sample_user_data)
        assert first.status_code == 201
        original = db_session.query(User).filter(User.email == "a@x.com").one()
        original_hash = original.hashed_password

        response = client.post("/api/v1/auth/register", json={
            "name": "Impostor",
            "email": "a@x.com",
            "password": "different456"
        })

        assert response.status_code == 409
        assert "duplicate" in response.json()["msg"].lower()

        db_session.expire_all()
        users = db_session.query(User).filter(User.email == "a@x.com").all()
        assert len(users) == 1
        assert users[0].name == "Alice"
        assert users[0].hashed_password == original_hash

    def test_register_duplicate_email_different_case(self, client, sample_user_data):
        client.post("/api/v1/auth/register", json=sample_user_data)

        response = client.post("/api/v1/auth/register", json={
            **sample_user_data,
            "email": "A@X.COM"
        })

        assert response.status_code == 409

    def test_register_short_password(self, client):
        """Test registration with a too-short password fails"""
        response = client.post("/api/v1/auth/register", json={
            "name": "Alice",
            "email": "a@x.com",
            "password": "abc"
        })

        assert response.status_code == 400
        data = response.json()
        assert "msg" in data
        assert any(error["field"] == "password" for error in data["errors"])

    def test_register_invalid_email(self, client):
        """Test registration with invalid email fails"""
        response = client.post("/api/v1/auth/register", json={
            "name": "Alice",
            "email": "not-an-email",
            "password": "secret123"
        })

        assert response.status_code == 400
        assert any(error["field"] == "email" for error in response.json()["errors"])

    @pytest.mark.parametrize("missing", ["name", "email", "password"])
    def test_register_missing_field(self, client, sample_user_data, missing):
        payload = {k: v for k, v in sample_user_data.items() if k != missing}

        response = client.post("/api/v1/auth/register", json=payload)

        assert response.status_code == 400
        assert any(error["field"] == missing for error in response.json()["errors"])

    def test_register_blank_name(self, client):
        response = client.post("/api/v1/auth/register", json={
            "name": "   ",
            "email": "a@x.com",
            "password": "secret123"
        })

        assert response.status_code == 400

    def test_register_validation_writes_nothing(self, client, db_session):
        client.post("/api/v1/auth/register", json={"name": "Al", "email": "a@x.com", "password": "x"})

        assert db_session.query(User).count() == 0


class TestUserLogin:
    """Test user login endpoint"""

    def test_login_success(self, client, registered_user):
        """Test successful login"""
        response = client.post("/api/v1/auth/login", json={
            "email": "a@x.com",
            "password": "secret123"
        })

        assert response.status_code == 200
        data = response.json()
        assert data["user"] == {"name": "Alice", "email": "a@x.com"}

        identity = get_token_service().verify(data["token"])
        assert identity.user_id == get_token_service().verify(registered_user["token"]).user_id

    def test_login_email_case_insensitive(self, client, registered_user):
        response = client.post("/api/v1/auth/login", json={
            "email": "A@X.com",
            "password": "secret123"
        })

        assert response.status_code == 200

    def test_login_wrong_password(self, client, registered_user):
        """Test login with wrong password fails"""
        response = client.post("/api/v1/auth/login", json={
            "email": "a@x.com",
            "password": "wrongpass"
        })

        assert response.status_code == 401
        assert response.json() == {"msg": "Invalid Credentials"}

    def test_login_nonexistent_user(self, client):
        """Test login with nonexistent user fails"""
        response = client.post("/api/v1/auth/login", json={
            "email": "nobody@x.com",
            "password": "secret123"
        })

        assert response.status_code == 401

    def test_login_failures_indistinguishable(self, client, registered_user):
        wrong_password = client.post("/api/v1/auth/login", json={
            "email": "a@x.com",
            "password": "wrongpass"
        })
        unknown_email = client.post("/api/v1/auth/login", json={
            "email": "nobody@x.com",
            "password": "secret123"
        })

        assert wrong_password.status_code == unknown_email.status_code == 401
        assert wrong_password.json() == unknown_email.json()
        assert wrong_password.headers.get("WWW-Authenticate") == unknown_email.headers.get("WWW-Authenticate")

    def test_login_missing_password(self, client):
        response = client.post("/api/v1/auth/login", json={"email": "a@x.com"})

        assert response.status_code == 400


class TestAuthService:
    """Test the auth service directly against the database"""

    @pytest.fixture
    def service(self, db_session):
        return AuthService(db_session, get_token_service(), bcrypt_rounds=4)

    def test_register_then_login(self, service):
        registered = service.register("a@x.com", "Alice", "secret123")
        logged_in = service.login("a@x.com", "secret123")

        token_service = get_token_service()
        assert token_service.verify(registered.token).user_id == registered.user.id
        assert token_service.verify(logged_in.token).user_id == registered.user.id

    def test_register_duplicate_raises(self, service):
        service.register("a@x.com", "Alice", "secret123")

        with pytest.raises(DuplicateUserError):
            service.register("a@x.com", "Someone", "other123")

    def test_register_race_on_unique_constraint(self, service, db_session, monkeypatch):
        """A store-level unique violation is reported as a duplicate user"""
        service.register("a@x.com", "Alice", "secret123")

        # Pretend the pre-check lost the race
        monkeypatch.setattr(user_crud, "get_by_email", lambda db, email: None)

        with pytest.raises(DuplicateUserError):
            service.register("a@x.com", "Alice Again", "secret123")

        assert db_session.query(User).count() == 1

    def test_integrity_error_from_store_is_not_leaked(self, service, monkeypatch):
        def failing_create(db, email, name, hashed_password):
            raise IntegrityError("INSERT INTO users", {}, Exception("UNIQUE constraint failed"))

        monkeypatch.setattr(user_crud, "create", failing_create)

        with pytest.raises(DuplicateUserError):
            service.register("a@x.com", "Alice", "secret123")

    def test_login_unknown_email(self, service):
        with pytest.raises(AuthenticationError) as exc_info:
            service.login("nobody@x.com", "secret123")

        assert exc_info.value.message == "Invalid Credentials"

    def test_login_wrong_password(self, service):
        service.register("a@x.com", "Alice", "secret123")

        with pytest.raises(AuthenticationError) as exc_info:
            service.login("a@x.com", "nope")

        assert exc_info.value.message == "Invalid Credentials"

    def test_login_does_not_write(self, service, db_session):
        service.register("a@x.com", "Alice", "secret123")
        before = db_session.query(User).one()
        snapshot = (before.email, before.name, before.hashed_password)

        service.login("a@x.com", "secret123")

        assert not db_session.dirty
        after = db_session.query(User).one()
        assert (after.email, after.name, after.hashed_password) == snapshot


class TestNameSanitisation:
    """Display names are HTML-escaped at registration"""

    def test_markup_in_name_is_escaped(self, client):
        response = client.post("/api/v1/auth/register", json={
            "name": "<b>Alice</b>",
            "email": "a@x.com",
            "password": "secret123"
        })

        assert response.status_code == 201
        assert response.json()["user"]["name"] == "&lt;b&gt;Alice&lt;/b&gt;"
        identity = get_token_service().verify(response.json()["token"])
        assert identity.name == "&lt;b&gt;Alice&lt;/b&gt;"
