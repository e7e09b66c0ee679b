"""Input validation using Pydantic."""

from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional


class SignupRequest(BaseModel):
    """Signup request validation."""
    email: EmailStr
    password: str = Field(..., min_length=6, max_length=100)
    firstName: str = Field(..., min_length=1)
    lastName: str = Field(..., min_length=1)


class LoginRequest(BaseModel):
    """Login request validation."""
    email: EmailStr
    password: str = Field(..., min_length=1)


class ProductCreateRequest(BaseModel):
    """Direct-insert product creation."""
    name: str = Field(..., min_length=1)
    price: float = Field(..., allow_inf_nan=False)
    image: Optional[str] = None
    description: Optional[str] = None
    productId: Optional[str] = Field(default=None, min_length=1)


class ProductUploadRequest(BaseModel):
    """Form fields sent alongside an uploaded product image."""
    name: str = Field(..., min_length=1)
    price: float = Field(..., allow_inf_nan=False)
    description: Optional[str] = None


class ProductUpdateRequest(BaseModel):
    """Partial product update; omitted fields keep their values."""
    name: Optional[str] = Field(default=None, min_length=1)
    price: Optional[float] = Field(default=None, allow_inf_nan=False)
    image: Optional[str] = None
    description: Optional[str] = None
    productId: Optional[str] = Field(default=None, min_length=1)


class ChatTurn(BaseModel):
    """One prior message in a conversation."""
    role: Literal["system", "user", "assistant"]
    content: str


class AskRequest(BaseModel):
    """Chat proxy request validation."""
    question: str = Field(..., min_length=1, max_length=4000)
    history: Optional[List[ChatTurn]] = None
