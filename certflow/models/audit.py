"""
Audit log model - append-only tamper-evident audit trail of workflow decisions.
"""

from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from certflow.utils.time import utc_now


class AuditLogBase(SQLModel):
    """Base audit log schema."""
    payload_hash: str = Field(..., description="SHA-256 hash of the audited payload")
    action: str = Field(..., description="Action type (e.g., 'project_verified', 'credit_issued')")
    entity_type: str = Field(..., description="Entity type (e.g., 'project', 'certificate_request')")
    entity_id: Optional[int] = Field(default=None, description="ID of the entity")
    actor_id: Optional[int] = Field(default=None, description="Profile that performed the action")
    extra_data: Optional[str] = Field(
        default=None,
        description="JSON string of additional metadata"
    )


class AuditLog(AuditLogBase, table=True):
    """Audit log database table - append-only."""
    __tablename__ = "audit_logs"
    
    id: Optional[int] = Field(default=None, primary_key=True)
    created_at: datetime = Field(default_factory=utc_now)


class AuditLogRead(AuditLogBase):
    """Schema for reading an audit log entry."""
    id: int
    created_at: datetime
