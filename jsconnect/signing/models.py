"""
Signing Models
==============
Explicit security mode replacing the legacy ``True/False/str/None`` selector.
"""

from dataclasses import dataclass
from typing import Optional, Union

from ..config import DEFAULT_HASH_ALGORITHM
from ..errors import UnsupportedAlgorithmError
from .hashing import resolve_algorithm

LegacySelector = Union[bool, str, None]


@dataclass(frozen=True)
class SecurityMode:
    """
    How a handshake is verified and how its response is signed.
    
    ``verify`` controls the client/timestamp/signature checks on the inbound
    request. ``algorithm`` names the digest used to sign; ``None`` means the
    response is not signed at all.
    """
    verify: bool
    algorithm: Optional[str] = DEFAULT_HASH_ALGORITHM
    
    def __post_init__(self):
        if self.algorithm is not None:
            object.__setattr__(self, "algorithm", resolve_algorithm(self.algorithm))
    
    @property
    def signs(self) -> bool:
        return self.algorithm is not None
    
    @classmethod
    def default(cls, algorithm: str = DEFAULT_HASH_ALGORITHM) -> "SecurityMode":
        """Verify the request and sign with the default digest."""
        return cls(verify=True, algorithm=algorithm)
    
    @classmethod
    def unverified(cls, algorithm: str = DEFAULT_HASH_ALGORITHM) -> "SecurityMode":
        """Skip request verification but still sign the response."""
        return cls(verify=False, algorithm=algorithm)
    
    @classmethod
    def named(cls, algorithm: str) -> "SecurityMode":
        """Verify the request and sign with an explicit digest."""
        return cls(verify=True, algorithm=algorithm)
    
    @classmethod
    def skip(cls) -> "SecurityMode":
        """Neither verify the request nor sign the response."""
        return cls(verify=False, algorithm=None)
    
    @classmethod
    def coerce(
        cls,
        value: Union["SecurityMode", LegacySelector],
        default_algorithm: str = DEFAULT_HASH_ALGORITHM,
    ) -> "SecurityMode":
        """
        Build a mode from a legacy selector.
        
        Args:
            value: ``True`` (verify, default digest), ``False`` (sign only),
                a digest name (verify, named digest), ``None`` (skip both) or
                an existing SecurityMode
            default_algorithm: Digest used for ``True`` and ``False``
            
        Returns:
            SecurityMode
            
        Raises:
            UnsupportedAlgorithmError: If the selector names an unknown digest
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.skip()
        if value is True:
            return cls.default(default_algorithm)
        if value is False:
            return cls.unverified(default_algorithm)
        if isinstance(value, str):
            return cls.named(value)
        raise UnsupportedAlgorithmError(str(value))
