"""
Canonical Signer
================
Signs a claims mapping with the client's shared secret.
"""

import hmac
from typing import Any, Dict, Mapping, Optional, Union

import structlog

from ..config import ClientConfig
from .canonical import build_query, sort_claims
from .hashing import hash_string
from .models import LegacySelector, SecurityMode

logger = structlog.get_logger(__name__)


class Signer:
    """Computes jsConnect signatures over canonicalized claims."""
    
    def __init__(self, config: ClientConfig):
        self.config = config
    
    def mode(self, security: Union[SecurityMode, LegacySelector]) -> SecurityMode:
        """Resolve a selector using the configured default digest."""
        return SecurityMode.coerce(security, self.config.hash_algorithm)
    
    def canonical_string(self, claims: Mapping[str, Any]) -> str:
        """Return the query string that gets hashed for ``claims``."""
        return build_query(sort_claims(claims))
    
    def sign(
        self,
        claims: Mapping[str, Any],
        security: Union[SecurityMode, LegacySelector] = True,
        return_data: bool = False,
    ) -> Union[str, Dict[str, Any]]:
        """
        Sign a claims mapping.
        
        Args:
            claims: User claims; keys are case-folded, nulls become ""
            security: Digest selector (SecurityMode or legacy selector)
            return_data: Return the signed claims instead of the signature
            
        Returns:
            The hex signature, or with ``return_data`` the sorted claims
            plus ``client_id`` and ``signature``
        """
        mode = self.mode(security)
        data = sort_claims(claims)
        signature = hash_string(build_query(data) + self.config.secret, mode)
        
        if not return_data:
            return signature
        
        data["client_id"] = self.config.client_id
        data["signature"] = signature
        return data
    
    def verify(
        self,
        claims: Mapping[str, Any],
        signature: Optional[str],
        security: Union[SecurityMode, LegacySelector] = True,
    ) -> bool:
        """
        Check a signature over ``claims`` using constant-time comparison.
        
        ``client_id`` and ``signature`` entries in ``claims`` are ignored, so
        a SignedPayload can be passed back in as-is.
        """
        if not signature:
            return False
        unsigned = {
            key: value for key, value in claims.items()
            if str(key).lower() not in ("client_id", "signature")
        }
        expected = self.sign(unsigned, security)
        matched = hmac.compare_digest(expected.encode(), str(signature).encode())
        if not matched:
            logger.debug("Claims signature mismatch", client_id=self.config.client_id)
        return matched
