"""
Carbon credit model - credits issued to a project's submitter on verification.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime
from enum import Enum

from certflow.utils.time import utc_now


class CreditStatus(str, Enum):
    """Carbon credit status lifecycle."""
    ACTIVE = "active"


class CarbonCreditBase(SQLModel):
    """Base carbon credit schema."""
    project_id: int = Field(..., foreign_key="projects.id", index=True)
    owner_id: int = Field(..., foreign_key="profiles.id", description="Submitter of the verified project")
    credits_amount: float = Field(..., ge=0, description="Estimated credits at verification time")
    status: CreditStatus = Field(default=CreditStatus.ACTIVE)


class CarbonCredit(CarbonCreditBase, table=True):
    """Carbon credit database table - append-only."""
    __tablename__ = "carbon_credits"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    issued_at: datetime = Field(default_factory=utc_now)


class CarbonCreditRead(CarbonCreditBase):
    """Schema for reading a carbon credit."""
    id: int
    issued_at: datetime
