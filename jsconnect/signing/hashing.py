"""
Hashing Functions
=================
Digest selection and hex hashing for jsConnect signatures.
"""

import hashlib
from typing import TYPE_CHECKING, Union

from ..config import DEFAULT_HASH_ALGORITHM
from ..errors import UnsupportedAlgorithmError

if TYPE_CHECKING:
    from .models import SecurityMode

# Variable-length digests need an explicit size and cannot be used here
_UNSUPPORTED_PREFIXES = ("shake_",)


def resolve_algorithm(name: str) -> str:
    """
    Validate a digest name against what hashlib provides.
    
    Args:
        name: Digest name, e.g. "md5", "sha1", "sha256"
        
    Returns:
        The normalized (lower-case) digest name
        
    Raises:
        UnsupportedAlgorithmError: If the digest is not available
    """
    normalized = name.strip().lower() if isinstance(name, str) else ""
    if not normalized or normalized.startswith(_UNSUPPORTED_PREFIXES):
        raise UnsupportedAlgorithmError(name)
    try:
        hashlib.new(normalized)
    except ValueError:
        raise UnsupportedAlgorithmError(name) from None
    return normalized


def hash_string(
    value: str,
    mode: Union["SecurityMode", bool, str, None] = True,
) -> str:
    """
    Hash a string with the digest selected by ``mode``.
    
    ``True``, ``False`` and ``None`` all select MD5; a string selects that
    digest; a SecurityMode selects its algorithm (MD5 when it does not sign).
    
    Args:
        value: String to hash (UTF-8 encoded before hashing)
        mode: Digest selector
        
    Returns:
        Lower-case hex digest
    """
    if isinstance(mode, str):
        algorithm = resolve_algorithm(mode)
    elif isinstance(mode, bool) or mode is None:
        algorithm = DEFAULT_HASH_ALGORITHM
    else:
        algorithm = mode.algorithm or DEFAULT_HASH_ALGORITHM
    
    return hashlib.new(algorithm, value.encode("utf-8")).hexdigest()
