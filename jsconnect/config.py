"""
jsConnect Configuration
=======================
Client identity and shared secret for the SSO handshake.
"""

import os
from dataclasses import dataclass

from .errors import ConfigurationError

# Protocol constants
DEFAULT_HASH_ALGORITHM = "md5"
DEFAULT_TIMEOUT_SECONDS = 1440  # 24 * 60


@dataclass(frozen=True)
class ClientConfig:
    """Configuration shared by the signer, validator and SSO encoder."""
    client_id: str
    secret: str
    hash_algorithm: str = DEFAULT_HASH_ALGORITHM
    timeout: int = DEFAULT_TIMEOUT_SECONDS
    
    def __post_init__(self):
        if not self.client_id:
            raise ConfigurationError("client_id must not be empty", setting="client_id")
        if not self.secret:
            raise ConfigurationError("secret must not be empty", setting="secret")
        if self.timeout < 0:
            raise ConfigurationError("timeout must not be negative", setting="timeout")
    
    def __repr__(self) -> str:
        return (
            f"ClientConfig(client_id={self.client_id!r}, secret='***', "
            f"hash_algorithm={self.hash_algorithm!r}, timeout={self.timeout})"
        )
    
    @classmethod
    def from_env(cls, prefix: str = "JSCONNECT_") -> "ClientConfig":
        """
        Load configuration from environment variables.
        
        Reads ``{prefix}CLIENT_ID``, ``{prefix}SECRET``,
        ``{prefix}HASH_ALGORITHM`` and ``{prefix}TIMEOUT``.
        
        Raises:
            ConfigurationError: If a variable is missing or malformed
        """
        timeout_raw = os.environ.get(f"{prefix}TIMEOUT", str(DEFAULT_TIMEOUT_SECONDS))
        try:
            timeout = int(timeout_raw)
        except ValueError:
            raise ConfigurationError(
                f"{prefix}TIMEOUT must be an integer, got {timeout_raw!r}",
                setting="timeout",
            ) from None
        
        return cls(
            client_id=os.environ.get(f"{prefix}CLIENT_ID", ""),
            secret=os.environ.get(f"{prefix}SECRET", ""),
            hash_algorithm=os.environ.get(
                f"{prefix}HASH_ALGORITHM", DEFAULT_HASH_ALGORITHM
            ),
            timeout=timeout,
        )
