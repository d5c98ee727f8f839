"""
Audit trail entries for workflow steps.
"""

from typing import Any, Dict, Optional

from certflow.models.audit import AuditLog
from certflow.utils.hashing import canonical_json, hash_payload


def audit_entry(
    action: str,
    entity_type: str,
    entity_id: Optional[int],
    payload: Dict[str, Any],
    actor_id: Optional[int] = None
) -> AuditLog:
    """
    Build an audit row for a workflow step.

    The caller adds it to the session so it commits together with the
    write it describes.
    """
    return AuditLog(
        payload_hash=hash_payload(payload),
        action=action,
        entity_type=entity_type,
        entity_id=entity_id,
        actor_id=actor_id,
        extra_data=canonical_json(payload)
    )
