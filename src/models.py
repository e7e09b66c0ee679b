"""Data models for users and products."""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, Dict, Any
from werkzeug.security import generate_password_hash, check_password_hash


@dataclass
class User:
    """User model for authentication."""
    id: str
    email: str
    password_hash: str
    first_name: str
    last_name: str
    created_at: datetime

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash a password for storing."""
        if not password:
            raise ValueError("Password must not be empty")
        return generate_password_hash(password, method='pbkdf2:sha256')

    def verify_password(self, password: str) -> bool:
        """Check if provided password matches hash."""
        return check_password_hash(self.password_hash, password)

    def to_record(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'email': self.email,
            'password_hash': self.password_hash,
            'first_name': self.first_name,
            'last_name': self.last_name,
            'name': self.name,
            'created_at': self.created_at.isoformat(),
        }

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "User":
        return cls(
            id=data['id'],
            email=data['email'],
            password_hash=data['password_hash'],
            first_name=data['first_name'],
            last_name=data['last_name'],
            created_at=datetime.fromisoformat(data['created_at']),
        )

    def public_profile(self) -> Dict[str, str]:
        """Profile fields safe to return to clients (never the hash)."""
        return {
            'email': self.email,
            'firstName': self.first_name,
            'lastName': self.last_name,
        }


@dataclass
class Product:
    """Catalog product."""
    id: str
    product_id: str
    name: str
    price: float
    image: str
    description: Optional[str] = None

    def to_record(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_record(cls, data: Dict[str, Any]) -> "Product":
        return cls(**data)

    def to_json(self) -> Dict[str, Any]:
        """JSON representation returned by the API."""
        return {
            'id': self.id,
            'productId': self.product_id,
            'name': self.name,
            'price': self.price,
            'image': self.image,
            'description': self.description,
        }
