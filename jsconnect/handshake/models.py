"""
Handshake Models
================
Outcomes, error codes and payload builders for the jsConnect handshake.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping

JSON_CONTENT_TYPE = "application/json"
JAVASCRIPT_CONTENT_TYPE = "application/javascript"


class HandshakeOutcome(str, Enum):
    """Decision reached for a single handshake request."""
    PUBLIC_INFO = "public_info"
    SIGNED_PROFILE = "signed_profile"
    UNSIGNED_PROFILE = "unsigned_profile"
    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    ACCESS_DENIED = "access_denied"
    
    @property
    def is_error(self) -> bool:
        return self in (
            HandshakeOutcome.INVALID_REQUEST,
            HandshakeOutcome.INVALID_CLIENT,
            HandshakeOutcome.ACCESS_DENIED,
        )


class ErrorCode(str, Enum):
    """Error codes written to the ``error`` field of an error payload."""
    INVALID_REQUEST = "invalid_request"
    INVALID_CLIENT = "invalid_client"
    ACCESS_DENIED = "access_denied"
    
    @property
    def outcome(self) -> HandshakeOutcome:
        return HandshakeOutcome(self.value)


@dataclass(frozen=True)
class HandshakeResponse:
    """Transport-ready result of a handshake."""
    outcome: HandshakeOutcome
    payload: Dict[str, Any]
    body: str
    content_type: str = JSON_CONTENT_TYPE


def error_payload(code: ErrorCode, message: str) -> Dict[str, str]:
    return {"error": code.value, "message": message}


def public_info(user: Mapping[str, Any]) -> Dict[str, Any]:
    """Public subset of a user; missing fields default to ""."""
    return {
        "name": user.get("name", ""),
        "photourl": user.get("photourl", ""),
    }


def anonymous_info() -> Dict[str, str]:
    return {"name": "", "photourl": ""}
