"""
Handshake Validator
===================
Validates inbound jsConnect requests and writes the signed response.
"""

import hmac
import json
import re
import time
from typing import Any, Callable, Dict, Mapping, Optional, Tuple, Union

import structlog

from ..config import ClientConfig
from ..signing import LegacySelector, SecurityMode, Signer, hash_string
from .models import (
    JAVASCRIPT_CONTENT_TYPE,
    JSON_CONTENT_TYPE,
    ErrorCode,
    HandshakeOutcome,
    HandshakeResponse,
    anonymous_info,
    error_payload,
    public_info,
)

logger = structlog.get_logger(__name__)

# Same grammar as PHP is_numeric(): optional sign, decimals, exponent
_NUMERIC_RE = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?\s*$")
_CALLBACK_RE = re.compile(r"^[A-Za-z_$][\w$]*(\.[A-Za-z_$][\w$]*)*$")

Security = Union[SecurityMode, LegacySelector]


def _param(request: Mapping[str, Any], name: str) -> Optional[str]:
    value = request.get(name)
    return None if value is None else str(value)


def _parse_timestamp(value: Optional[str]) -> Optional[float]:
    if value is None or not _NUMERIC_RE.match(value):
        return None
    return float(value)


def encode_payload(payload: Mapping[str, Any]) -> str:
    """Compact JSON encoding used for every response body."""
    return json.dumps(payload, separators=(",", ":"), default=str)


class JSConnect:
    """
    jsConnect SSO endpoint logic.
    
    Holds only the immutable client configuration, so one instance can serve
    any number of concurrent requests.
    
    Usage:
        connect = JSConnect(ClientConfig(client_id="abc123", secret="s3cret"))
        body = connect.write(current_user, dict(request.query_params))
    """
    
    def __init__(
        self,
        config: ClientConfig,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.clock = clock
        self.signer = Signer(config)
    
    @classmethod
    def factory(cls, config: Optional[ClientConfig] = None, **kwargs) -> "JSConnect":
        """Build from explicit config, or from JSCONNECT_* environment variables."""
        return cls(config or ClientConfig.from_env(), **kwargs)
    
    def timestamp(self) -> int:
        return int(self.clock())
    
    def _check_request(
        self,
        user: Mapping[str, Any],
        request: Mapping[str, Any],
        mode: SecurityMode,
        now: int,
    ) -> Optional[Tuple[HandshakeOutcome, Dict[str, Any]]]:
        """Run the verification steps; return a terminal result or None."""
        client_id = _param(request, "client_id")
        if client_id is None:
            return ErrorCode.INVALID_REQUEST.outcome, error_payload(
                ErrorCode.INVALID_REQUEST, "The client_id parameter is missing."
            )
        
        if client_id != self.config.client_id:
            return ErrorCode.INVALID_CLIENT.outcome, error_payload(
                ErrorCode.INVALID_CLIENT, f"Unknown client {client_id}."
            )
        
        raw_timestamp = _param(request, "timestamp")
        signature = _param(request, "signature")
        
        if raw_timestamp is None and signature is None:
            # Not an error: unsigned requests only get public information
            if user:
                return HandshakeOutcome.PUBLIC_INFO, public_info(user)
            return HandshakeOutcome.PUBLIC_INFO, anonymous_info()
        
        timestamp = _parse_timestamp(raw_timestamp)
        if timestamp is None:
            return ErrorCode.INVALID_REQUEST.outcome, error_payload(
                ErrorCode.INVALID_REQUEST,
                "The timestamp parameter is missing or invalid.",
            )
        
        if signature is None:
            return ErrorCode.INVALID_REQUEST.outcome, error_payload(
                ErrorCode.INVALID_REQUEST, "Missing signature parameter."
            )
        
        if abs(timestamp - now) > self.config.timeout:
            return ErrorCode.INVALID_REQUEST.outcome, error_payload(
                ErrorCode.INVALID_REQUEST, "The timestamp is invalid."
            )
        
        expected = hash_string(raw_timestamp + self.config.secret, mode)
        if not hmac.compare_digest(expected.encode(), signature.encode()):
            return ErrorCode.ACCESS_DENIED.outcome, error_payload(
                ErrorCode.ACCESS_DENIED, "Signature invalid."
            )
        
        return None
    
    def resolve(
        self,
        user: Optional[Mapping[str, Any]],
        request: Mapping[str, Any],
        security: Security = True,
    ) -> Tuple[HandshakeOutcome, Dict[str, Any]]:
        """
        Decide the outcome of a handshake and build its payload.
        
        Args:
            user: Current user's claims, empty when nobody is signed in
            request: Inbound query parameters
            security: SecurityMode or legacy selector (True, False, str, None)
            
        Returns:
            Tuple of (outcome, payload)
        """
        mode = self.signer.mode(security)
        user = {str(key).lower(): value for key, value in (user or {}).items()}
        now = self.timestamp()
        
        if mode.verify:
            result = self._check_request(user, request, mode, now)
            if result is not None:
                return result
        
        if not user:
            return HandshakeOutcome.PUBLIC_INFO, anonymous_info()
        
        if not mode.signs:
            return HandshakeOutcome.UNSIGNED_PROFILE, user
        
        return HandshakeOutcome.SIGNED_PROFILE, self.signer.sign(user, mode, return_data=True)
    
    def respond(
        self,
        user: Optional[Mapping[str, Any]],
        request: Mapping[str, Any],
        security: Security = True,
    ) -> HandshakeResponse:
        """
        Run the handshake and encode the response body.
        
        When ``request`` carries a ``callback`` the body is wrapped as
        ``callback(json)`` and served as JavaScript. Callback names that are
        not dotted identifiers are rejected with ``invalid_request`` and the
        error is served unwrapped as JSON, so the wrapper cannot carry
        injected script.
        """
        outcome, payload = self.resolve(user, request, security)
        callback = _param(request, "callback")
        
        if callback is not None and not _CALLBACK_RE.match(callback):
            outcome, payload = ErrorCode.INVALID_REQUEST.outcome, error_payload(
                ErrorCode.INVALID_REQUEST, f"Invalid callback {callback}."
            )
            callback = None
        
        if outcome.is_error:
            logger.warning(
                "jsConnect request rejected",
                outcome=outcome.value,
                reason=payload.get("message"),
                client_id=_param(request, "client_id"),
            )
        elif outcome == HandshakeOutcome.SIGNED_PROFILE:
            logger.info("jsConnect profile signed", client_id=self.config.client_id)
        
        body = encode_payload(payload)
        if callback is not None:
            return HandshakeResponse(
                outcome=outcome,
                payload=payload,
                body=f"{callback}({body})",
                content_type=JAVASCRIPT_CONTENT_TYPE,
            )
        return HandshakeResponse(
            outcome=outcome,
            payload=payload,
            body=body,
            content_type=JSON_CONTENT_TYPE,
        )
    
    def write(
        self,
        user: Optional[Mapping[str, Any]],
        request: Mapping[str, Any],
        security: Security = True,
    ) -> str:
        """Run the handshake and return only the response body."""
        return self.respond(user, request, security).body
    
    def sign(
        self,
        claims: Mapping[str, Any],
        security: Security = True,
        return_data: bool = False,
    ) -> Union[str, Dict[str, Any]]:
        """Sign ``claims`` with this client's secret. See Signer.sign."""
        return self.signer.sign(claims, security, return_data)
    
    def create_signed_request(
        self,
        timestamp: Optional[int] = None,
        security: Security = True,
        callback: Optional[str] = None,
    ) -> Dict[str, str]:
        """
        Build the query parameters a relying party sends to this endpoint.
        
        Args:
            timestamp: Unix timestamp to sign (defaults to now)
            security: Digest selector
            callback: Optional JSONP callback name
            
        Returns:
            Dictionary with client_id, timestamp, signature (and callback)
        """
        mode = self.signer.mode(security)
        ts = str(self.timestamp() if timestamp is None else timestamp)
        params = {
            "client_id": self.config.client_id,
            "timestamp": ts,
            "signature": hash_string(ts + self.config.secret, mode),
        }
        if callback is not None:
            params["callback"] = callback
        return params
