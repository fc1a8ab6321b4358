"""
Handshake Validator
===================
Request verification, outcome classification and response encoding.
"""

from .models import (
    HandshakeOutcome,
    ErrorCode,
    HandshakeResponse,
    JSON_CONTENT_TYPE,
    JAVASCRIPT_CONTENT_TYPE,
)
from .validator import JSConnect, encode_payload

__all__ = [
    # Models
    "HandshakeOutcome",
    "ErrorCode",
    "HandshakeResponse",
    "JSON_CONTENT_TYPE",
    "JAVASCRIPT_CONTENT_TYPE",
    # Validator
    "JSConnect",
    "encode_payload",
]
