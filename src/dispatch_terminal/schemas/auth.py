# src/dispatch_terminal/schemas/auth.py
"""Authentication-related Pydantic schemas."""

from pydantic import BaseModel, Field


class PinLoginRequest(BaseModel):
    """Schema for opening a guest session with a PIN."""

    pin: str = Field(..., min_length=1, max_length=64, description="Access PIN")


class AdminLoginRequest(BaseModel):
    """Schema for opening an administrator session."""

    access_key: str = Field(..., min_length=1, description="Administrator access key")


class GuestSession(BaseModel):
    """Guest session record kept by the terminal."""

    authenticated: bool = True
    label: str
    tenant_id: str
    login_time: int = Field(..., description="Login instant in epoch milliseconds")


class LoginResponse(BaseModel):
    """Schema returned after a successful login."""

    access_token: str
    token_type: str = "bearer"
    role: str
    session: GuestSession | None = None


class SessionResponse(BaseModel):
    """Describes the principal behind the presented token."""

    subject: str
    role: str
    label: str | None = None
    tenant_id: str | None = None
