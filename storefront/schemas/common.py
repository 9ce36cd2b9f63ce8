"""
Common/Shared Pydantic schemas
"""
from pydantic import BaseModel, Field, ConfigDict


class PaginationMeta(BaseModel):
    """Pagination metadata"""
    current_page: int
    per_page: int
    total: int
    total_pages: int
    has_next: bool
    has_prev: bool


class RefreshTokenRequest(BaseModel):
    """Refresh token request schema"""
    refresh_token: str = Field(..., description="Refresh token to generate new access token")


# Config for all schemas
ORMConfig = ConfigDict(from_attributes=True)
