"""Authentication schemas"""

from datetime import datetime
from pydantic import BaseModel


class Token(BaseModel):
    """JWT token response"""
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
    expires_in: int


class TokenPayload(BaseModel):
    """JWT token payload"""
    sub: str  # User ID
    exp: datetime
    type: str


class RefreshRequest(BaseModel):
    """Token refresh request"""
    refresh_token: str
