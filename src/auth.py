"""Authentication service with JWT and user management."""

import logging
import uuid
from datetime import datetime, timedelta
from typing import Optional, Dict
from flask_jwt_extended import create_access_token, decode_token, get_jwt, get_jwt_identity
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from errors import AuthError, ConflictError, ValidationError
from models import User

logger = logging.getLogger(__name__)


# ==================== Tokens ====================
# These need an active Flask app context with JWTManager initialized.

def issue_token(user_id: str, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Sign a token carrying the user's id (subject) and email."""
    kwargs = {}
    if expires_delta is not None:
        kwargs['expires_delta'] = expires_delta
    return create_access_token(identity=user_id, additional_claims={'email': email}, **kwargs)


def verify_token(token: Optional[str]) -> Dict[str, str]:
    """
    Check a token's signature and expiry.

    Returns:
        dict: {'id': ..., 'email': ...}

    Raises:
        AuthError: token missing, malformed, badly signed or expired
    """
    if not token:
        logger.info("Token verification failed: no token")
        raise AuthError("Missing or invalid token")
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException) as e:
        logger.info(f"Token verification failed: {e}")
        raise AuthError("Invalid token")
    return {'id': claims['sub'], 'email': claims.get('email')}


def current_identity() -> Dict[str, str]:
    """Identity attached to the request by @jwt_required()."""
    return {'id': get_jwt_identity(), 'email': get_jwt().get('email')}


class AuthService:
    """Handle user signup and login."""

    def __init__(self, store):
        self.store = store

    def create_user(self, email: str, password: str, first_name: str, last_name: str) -> User:
        """Create a new user account."""
        if not (email and password and first_name and last_name):
            raise ValidationError("All fields are required")
        if len(password) < 6:
            raise ValidationError("Password must be at least 6 characters long")

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=User.hash_password(password),
            first_name=first_name,
            last_name=last_name,
            created_at=datetime.utcnow(),
        )

        if not self.store.insert_user(user.to_record()):
            raise ConflictError("User already exists")

        return user

    def get_user_by_email(self, email: str) -> Optional[User]:
        data = self.store.find_user_by_email(email)
        return User.from_record(data) if data else None

    def authenticate(self, email: str, password: str) -> User:
        """
        Authenticate user with email and password.

        Unknown email and wrong password raise the same error.
        """
        user = self.get_user_by_email(email)

        if not user or not user.verify_password(password):
            raise AuthError("Invalid credentials")

        return user

    def signup(self, email: str, password: str, first_name: str, last_name: str) -> str:
        """Register a user and return a token for the new session."""
        user = self.create_user(email, password, first_name, last_name)
        logger.info(f"New user registered: {user.email}")
        return issue_token(user.id, user.email)

    def login(self, email: str, password: str):
        """
        Returns:
            tuple: (token, public profile dict)
        """
        user = self.authenticate(email, password)
        logger.info(f"User logged in: {user.email}")
        return issue_token(user.id, user.email), user.public_profile()
