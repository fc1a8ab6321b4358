"""
jsConnect
=========
Signed single sign-on handshake between an identity host and a relying party.
"""

__version__ = "1.3.0"

# Configuration
from jsconnect.config import ClientConfig, DEFAULT_HASH_ALGORITHM, DEFAULT_TIMEOUT_SECONDS

# Errors
from jsconnect.errors import JSConnectError, ConfigurationError, UnsupportedAlgorithmError

# Signing
from jsconnect.signing import (
    SecurityMode,
    Signer,
    hash_string,
    build_query,
    normalize_claims,
)

# Handshake
from jsconnect.handshake import (
    JSConnect,
    HandshakeOutcome,
    HandshakeResponse,
    ErrorCode,
)

# SSO Strings
from jsconnect.sso import SSOTokenEncoder, SSO_ALGORITHM_TAG

__all__ = [
    # Configuration
    "ClientConfig",
    "DEFAULT_HASH_ALGORITHM",
    "DEFAULT_TIMEOUT_SECONDS",
    # Errors
    "JSConnectError",
    "ConfigurationError",
    "UnsupportedAlgorithmError",
    # Signing
    "SecurityMode",
    "Signer",
    "hash_string",
    "build_query",
    "normalize_claims",
    # Handshake
    "JSConnect",
    "HandshakeOutcome",
    "HandshakeResponse",
    "ErrorCode",
    # SSO Strings
    "SSOTokenEncoder",
    "SSO_ALGORITHM_TAG",
]
