"""
Hashing utilities for audit trail tamper-evident hashing.
"""

import hashlib
import json
from typing import Any, Dict


def canonical_json(payload: Dict[str, Any]) -> str:
    """Serialize a payload with sorted keys so equal payloads hash equally."""
    return json.dumps(payload, sort_keys=True, default=str)


def hash_payload(payload: Dict[str, Any]) -> str:
    """
    Generate SHA-256 hash of a payload for audit trail.
    
    Args:
        payload: Dictionary to hash
        
    Returns:
        Hexadecimal SHA-256 hash string
    """
    return hashlib.sha256(canonical_json(payload).encode()).hexdigest()
