"""
SSO Token Encoder
=================
HMAC-SHA1 signed SSO strings for embedded single sign-on.

Wire format: ``"<base64-json> <hex-hmac-sha1> <unix-timestamp> hmacsha1"``.
"""

import base64
import binascii
import hashlib
import hmac
import json
import time
from typing import Any, Callable, Dict, Mapping, Optional

import structlog

from .config import ClientConfig

logger = structlog.get_logger(__name__)

SSO_ALGORITHM_TAG = "hmacsha1"


class SSOTokenEncoder:
    """Encodes a user into an SSO string suitable for passing in a URL."""
    
    def __init__(
        self,
        config: ClientConfig,
        clock: Callable[[], float] = time.time,
    ):
        self.config = config
        self.clock = clock
    
    def _hmac(self, payload_b64: str, timestamp: int) -> str:
        return hmac.new(
            self.config.secret.encode(),
            f"{payload_b64} {timestamp}".encode(),
            hashlib.sha1,
        ).hexdigest()
    
    def encode(self, user: Mapping[str, Any]) -> str:
        """
        Generate an SSO string for a user.
        
        Args:
            user: User claims; ``client_id`` is added when missing
            
        Returns:
            Space-delimited SSO string
        """
        data = dict(user)
        if "client_id" not in data:
            data["client_id"] = self.config.client_id
        
        payload_json = json.dumps(data, separators=(",", ":"), default=str)
        payload_b64 = base64.b64encode(payload_json.encode()).decode()
        timestamp = int(self.clock())
        signature = self._hmac(payload_b64, timestamp)
        
        logger.debug("SSO string generated", client_id=data["client_id"], timestamp=timestamp)
        return f"{payload_b64} {signature} {timestamp} {SSO_ALGORITHM_TAG}"
    
    def decode(self, token: str, max_age: Optional[int] = None) -> Optional[Dict[str, Any]]:
        """
        Verify an SSO string and return its claims.
        
        Args:
            token: SSO string produced with the same secret
            max_age: Maximum allowed distance in seconds between the token's
                timestamp and now (no limit when None)
            
        Returns:
            The embedded claims if valid, None otherwise
        """
        parts = token.split(" ")
        if len(parts) != 4 or parts[3] != SSO_ALGORITHM_TAG:
            return None
        
        payload_b64, signature, raw_timestamp, _ = parts
        try:
            timestamp = int(raw_timestamp)
        except ValueError:
            return None
        
        expected = self._hmac(payload_b64, timestamp)
        if not hmac.compare_digest(expected.encode(), signature.encode()):
            logger.warning("SSO string signature invalid")
            return None
        
        if max_age is not None and abs(self.clock() - timestamp) > max_age:
            logger.warning("SSO string expired", timestamp=timestamp)
            return None
        
        try:
            payload = json.loads(base64.b64decode(payload_b64, validate=True).decode())
        except (binascii.Error, ValueError) as e:
            logger.warning("SSO string payload undecodable", error=str(e))
            return None
        
        return payload if isinstance(payload, dict) else None
