"""Identifier canonicalization at the transport boundary.

Products arrive from the catalog and the remote API in several shapes: bare
id strings, ObjectId-style `{"$oid": ...}` wrappers, documents carrying `_id`
or `variantTypeId`, UUIDs. Everything past this module works with a single
canonical string form.
"""

from __future__ import annotations

import re
import uuid
from collections.abc import Mapping
from typing import Any

from .errors import ValidationError, errmsg

# Namespace UUID for deterministic cart roots, one cart per owner.
CART_NAMESPACE = uuid.UUID("3f6c1c2e-8a4b-5d7e-9f10-2b3c4d5e6f70")

_HEX_RE = re.compile(r"^(0x)?[0-9a-fA-F]+$")

# Keys checked, in order, when a mapping carries the id.
_ID_KEYS = ("$oid", "_id", "id", "productId", "product_id", "variantTypeId", "variant_type_id")

_MAX_DEPTH = 4


def normalize_product_ref(value: Any) -> str:
    """Return the canonical string form of a product identifier.

    Hex strings (ObjectIds, UUID hex) are lower-cased with any 0x prefix
    stripped; other strings are trimmed. Raises ValidationError for empty
    or unsupported values.
    """
    ref = _extract(value, 0)
    if ref is None:
        raise ValidationError(errmsg.UNSUPPORTED_PRODUCT_ID, field="product_ref")
    ref = ref.strip()
    if not ref:
        raise ValidationError(errmsg.PRODUCT_ID_REQUIRED, field="product_ref")
    if _HEX_RE.match(ref):
        ref = ref.lower()
        if ref.startswith("0x"):
            ref = ref[2:]
    return ref


def _extract(value: Any, depth: int) -> str | None:
    if depth > _MAX_DEPTH or value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, uuid.UUID):
        return value.hex
    if isinstance(value, (bytes, bytearray)):
        return bytes(value).hex()
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Mapping):
        for key in _ID_KEYS:
            if key in value:
                found = _extract(value[key], depth + 1)
                if found is not None:
                    return found
        return None
    nested = getattr(value, "id", None)
    if nested is not None and nested is not value:
        return _extract(nested, depth + 1)
    return None


def cart_root(owner_id: str) -> uuid.UUID:
    """Compute a deterministic cart id for an owner."""
    return uuid.uuid5(CART_NAMESPACE, f"cart{owner_id}")
