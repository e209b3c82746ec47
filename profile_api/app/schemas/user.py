"""
Pydantic models for user accounts and authentication.

Passwords are accepted on registration and login only; they are never
part of a response model.
"""

from typing import Optional

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """Schema for registering a user."""

    name: Optional[str] = Field(None, examples=["Ada Lovelace"])
    email: Optional[str] = Field(None, examples=["ada@example.com"])
    password: Optional[str] = Field(None, examples=["strongpassword"])


class UserLogin(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class UserRead(BaseModel):
    """Schema for reading a user from the API."""

    id: int
    name: str
    email: str
    avatar: Optional[str] = None
    created_at: Optional[str] = None


class Token(BaseModel):
    token: str
