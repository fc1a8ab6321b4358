"""
Canonical Signer
================
Claim canonicalization, digest selection and signing.
"""

from .models import SecurityMode, LegacySelector
from .hashing import hash_string, resolve_algorithm
from .canonical import build_query, encode_component, normalize_claims, sort_claims
from .signer import Signer

__all__ = [
    # Models
    "SecurityMode",
    "LegacySelector",
    # Hashing
    "hash_string",
    "resolve_algorithm",
    # Canonicalization
    "build_query",
    "encode_component",
    "normalize_claims",
    "sort_claims",
    # Signer
    "Signer",
]
