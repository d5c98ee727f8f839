"""
Profile model - a platform participant (submitter, verifier, stakeholder).
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from certflow.utils.time import utc_now


class ProfileRole(str, Enum):
    """Roles a profile can hold on the platform."""
    SUBMITTER = "submitter"
    VERIFIER = "verifier"
    ADMIN = "admin"
    NGO = "ngo"
    PANCHAYAT = "panchayat"


class ProfileBase(SQLModel):
    """Base profile schema."""
    full_name: str = Field(..., min_length=1, description="Display name")
    organization: Optional[str] = Field(default=None, description="Affiliated organization")
    role: ProfileRole = Field(default=ProfileRole.SUBMITTER)


class Profile(ProfileBase, table=True):
    """Profile database table."""
    __tablename__ = "profiles"

    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class ProfileCreate(ProfileBase):
    """Schema for registering a profile."""
    pass


class ProfileRead(ProfileBase):
    """Schema for reading a profile."""
    id: int
    created_at: datetime
