"""User (principal) data model for taskdesk."""

from datetime import datetime
from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class UserRole(str, Enum):
    """Principal role enumeration."""
    USER = "user"
    ADMIN = "admin"


class User(BaseModel):
    """User model for taskdesk."""
    
    id: str = Field(..., description="Unique user identifier")
    email: str = Field(..., description="User email address")
    name: Optional[str] = Field(None, description="User display name")
    role: UserRole = Field(UserRole.USER, description="User role")
    is_active: bool = Field(True, description="Whether the account may sign in")
    created_at: datetime = Field(..., description="User creation timestamp")
    updated_at: datetime = Field(..., description="User last update timestamp")
    
    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class UserUpdate(BaseModel):
    """Admin-editable user fields (partial)."""

    name: Optional[str] = None
    email: Optional[str] = Field(None, min_length=3)
    role: Optional[UserRole] = None
    is_active: Optional[bool] = None

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
