"""
jsConnect Exceptions
====================
Exceptions raised for programming and configuration mistakes.

Handshake failures (bad client, stale timestamp, wrong signature) are never
raised; they are returned to the caller as error payloads.
"""

from typing import Optional


class JSConnectError(Exception):
    """Base exception for all jsConnect errors."""
    pass


class ConfigurationError(JSConnectError):
    """Raised when the client configuration is missing or unusable."""
    
    def __init__(self, message: str, setting: Optional[str] = None):
        self.message = message
        self.setting = setting
        super().__init__(message if setting is None else f"[{setting}] {message}")


class UnsupportedAlgorithmError(ConfigurationError):
    """Raised when a hash algorithm selector names an unavailable digest."""
    
    def __init__(self, algorithm: str):
        self.algorithm = algorithm
        super().__init__(
            f"Unsupported hash algorithm {algorithm!r}",
            setting="hash_algorithm",
        )
