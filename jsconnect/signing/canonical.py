"""
Claim Canonicalization
======================
Deterministic string form of a claims mapping.

The query string produced here must match PHP's ``http_build_query`` byte for
byte, since existing jsConnect integrations compute the same signature.
"""

import math
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional
from urllib.parse import quote_plus


def normalize_claims(claims: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Fold claim names to lower case and replace null values with "".
    
    When two names differ only in case the later one wins.
    """
    normalized: Dict[str, Any] = {}
    for key, value in claims.items():
        normalized[str(key).lower()] = "" if value is None else value
    return normalized


def sort_claims(claims: Mapping[str, Any]) -> Dict[str, Any]:
    """Normalize claims and order them by name."""
    normalized = normalize_claims(claims)
    return {key: normalized[key] for key in sorted(normalized)}


def encode_component(value: str) -> str:
    """Percent-encode like PHP ``urlencode`` (``~`` is encoded too)."""
    return quote_plus(value, safe="").replace("~", "%7E")


def _float_to_str(value: float) -> str:
    """
    Render a float the way PHP does in a query string.
    
    Shortest round-trip digits; exponent form (``1.0E+20``, ``1.5E-7``) when
    the decimal exponent is below -4 or at least 15, plain decimals otherwise
    with whole numbers printed without a fraction.
    """
    if math.isnan(value):
        return "NAN"
    if math.isinf(value):
        return "INF" if value > 0 else "-INF"
    
    sign, digits, exponent = Decimal(repr(value)).as_tuple()
    prefix = "-" if sign else ""
    text = "".join(str(d) for d in digits).rstrip("0") or "0"
    if text == "0":
        return prefix + "0"
    
    decimal_exponent = len(digits) + exponent - 1
    if decimal_exponent < -4 or decimal_exponent >= 15:
        mantissa = text[0] + "." + (text[1:] or "0")
        exp_sign = "+" if decimal_exponent >= 0 else "-"
        return f"{prefix}{mantissa}E{exp_sign}{abs(decimal_exponent)}"
    
    plain = format(Decimal(repr(abs(value))), "f")
    if "." in plain:
        plain = plain.rstrip("0").rstrip(".")
    return prefix + plain


def _scalar_to_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    if value is True:
        return "1"
    if value is False:
        return "0"
    if isinstance(value, float):
        return _float_to_str(value)
    if isinstance(value, bytes):
        return value.decode("utf-8")
    return str(value)


def _flatten(prefix: str, value: Any, pairs: List[str]) -> None:
    if isinstance(value, Mapping):
        items = value.items()
    elif isinstance(value, (list, tuple)):
        items = enumerate(value)
    else:
        text = _scalar_to_str(value)
        if text is not None:
            pairs.append(f"{encode_component(prefix)}={encode_component(text)}")
        return
    
    for sub_key, sub_value in items:
        _flatten(f"{prefix}[{sub_key}]", sub_value, pairs)


def build_query(claims: Mapping[str, Any]) -> str:
    """
    Form-encode claims in their given order.
    
    Nested mappings and lists are flattened as ``key[sub]=value``; nested
    nulls are dropped.
    
    Args:
        claims: Claims mapping (already normalized and sorted)
        
    Returns:
        ``key=value`` pairs joined by ``&``
    """
    pairs: List[str] = []
    for key, value in claims.items():
        _flatten(str(key), value, pairs)
    return "&".join(pairs)
