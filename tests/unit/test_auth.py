"""Unit tests for the credential and auth services."""

from datetime import timedelta
import pytest
from auth import issue_token, verify_token
from errors import AuthError, ConflictError, ValidationError


class TestSignup:
    """Test account creation rules."""

    def test_signup_returns_token_for_new_user(self, app, auth_service, store):
        with app.app_context():
            token = auth_service.signup("a@example.com", "secret1", "A", "B")
            identity = verify_token(token)

        stored = store.find_user_by_email("a@example.com")
        assert identity == {'id': stored['id'], 'email': "a@example.com"}
        assert stored['password_hash'] != "secret1"
        assert stored['name'] == "A B"

    @pytest.mark.parametrize("password", ["", "a", "12345"])
    def test_short_password_rejected(self, auth_service, password):
        with pytest.raises(ValidationError):
            auth_service.create_user("a@example.com", password, "A", "B")

    @pytest.mark.parametrize("missing", ["email", "first_name", "last_name"])
    def test_missing_field_rejected(self, auth_service, missing):
        fields = {'email': "a@example.com", 'password': "secret1", 'first_name': "A", 'last_name': "B"}
        fields[missing] = ""
        with pytest.raises(ValidationError):
            auth_service.create_user(**fields)

    @pytest.mark.parametrize("other", [
        ("secret1", "A", "B"),
        ("different-password", "Other", "Person"),
    ])
    def test_duplicate_email_conflicts(self, auth_service, other):
        auth_service.create_user("a@example.com", "secret1", "A", "B")
        with pytest.raises(ConflictError):
            auth_service.create_user("a@example.com", *other)


class TestLogin:
    """Test credential checks."""

    def test_login_returns_token_and_profile(self, app, auth_service):
        auth_service.create_user("a@example.com", "secret1", "A", "B")
        with app.app_context():
            token, profile = auth_service.login("a@example.com", "secret1")
            assert verify_token(token)['email'] == "a@example.com"
        assert profile == {'email': "a@example.com", 'firstName': "A", 'lastName': "B"}

    def test_wrong_password_and_unknown_email_look_the_same(self, auth_service):
        auth_service.create_user("a@example.com", "secret1", "A", "B")

        with pytest.raises(AuthError) as wrong_password:
            auth_service.login("a@example.com", "wrong-password")
        with pytest.raises(AuthError) as unknown_email:
            auth_service.login("nobody@example.com", "secret1")

        assert wrong_password.value.message == unknown_email.value.message
        assert wrong_password.value.status_code == unknown_email.value.status_code == 401


class TestTokens:
    """Test token issue/verify."""

    def test_token_verifies_before_expiry(self, app):
        with app.app_context():
            token = issue_token("user-1", "a@example.com")
            assert verify_token(token) == {'id': "user-1", 'email': "a@example.com"}

    def test_token_fails_after_expiry(self, app):
        with app.app_context():
            token = issue_token("user-1", "a@example.com", expires_delta=timedelta(seconds=-1))
            with pytest.raises(AuthError):
                verify_token(token)

    @pytest.mark.parametrize("token", [None, "", "not-a-jwt", "a.b.c"])
    def test_missing_or_garbage_token_rejected(self, app, token):
        with app.app_context():
            with pytest.raises(AuthError):
                verify_token(token)

    def test_tampered_token_rejected(self, app):
        with app.app_context():
            token = issue_token("user-1", "a@example.com")
            header, payload, signature = token.split(".")
            flipped = signature[:-2] + ("AA" if signature[-2:] != "AA" else "BB")
            with pytest.raises(AuthError):
                verify_token(f"{header}.{payload}.{flipped}")
