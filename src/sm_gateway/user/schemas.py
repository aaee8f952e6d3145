"""Pydantic request/response schemas for sm_gateway.

All responses are wrapped in ApiResponse at the router layer.
"""

from pydantic import BaseModel, Field


class IdentityAssertion(BaseModel):
    """Identity resolved by the external provider (Steam OpenID) and forwarded by the bridge."""

    steam_id: str = Field(..., min_length=1, max_length=20, pattern=r"^\d+$")
    display_name: str = Field(..., min_length=1, max_length=100)
    avatar: str = ""
    profile_url: str = ""


class RefreshRequest(BaseModel):
    refresh_token: str


class UserInfo(BaseModel):
    user_id: str
    steam_id: str
    username: str
    avatar: str


class IdentityResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "Bearer"
    expires_in: int = 1800  # 30 minutes in seconds
    created: bool
    user: UserInfo


class RefreshResponse(BaseModel):
    access_token: str
    expires_in: int = 1800


class MeResponse(BaseModel):
    user_id: str
    steam_id: str
    username: str
    avatar: str
    balance_cents: int
    balance_display: str
    total_sales_cents: int
    total_purchases_cents: int
    joined_at: str
