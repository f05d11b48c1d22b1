"""Tests for identifier canonicalization."""

import uuid
from dataclasses import dataclass

import pytest

from stonecart.errors import ValidationError
from stonecart.identity import cart_root, normalize_product_ref

OID = "64b7f0c2a1e4d5f6a7b8c9d0"


@dataclass
class Product:
    id: object


class TestNormalizeProductRef:
    def test_plain_string(self):
        assert normalize_product_ref(OID) == OID

    def test_hex_is_lower_cased(self):
        assert normalize_product_ref(OID.upper()) == OID

    def test_0x_prefix_stripped(self):
        assert normalize_product_ref("0xABCDEF") == "abcdef"

    def test_non_hex_string_trimmed_only(self):
        assert normalize_product_ref("  SKU-Granite-01 ") == "SKU-Granite-01"

    def test_oid_wrapper(self):
        assert normalize_product_ref({"$oid": OID}) == OID

    def test_nested_id(self):
        assert normalize_product_ref({"_id": {"$oid": OID.upper()}}) == OID

    def test_variant_type_id(self):
        assert normalize_product_ref({"name": "Step", "variantTypeId": OID}) == OID

    def test_uuid(self):
        value = uuid.UUID("12345678-1234-5678-1234-567812345678")
        assert normalize_product_ref(value) == "12345678123456781234567812345678"

    def test_bytes(self):
        assert normalize_product_ref(b"\x01\xab") == "01ab"

    def test_int(self):
        assert normalize_product_ref(42) == "42"

    def test_object_with_id(self):
        assert normalize_product_ref(Product(id={"$oid": OID})) == OID

    @pytest.mark.parametrize("value", ["", "   "])
    def test_empty(self, value):
        with pytest.raises(ValidationError, match="Product ID is required") as exc:
            normalize_product_ref(value)
        assert exc.value.field == "product_ref"

    @pytest.mark.parametrize("value", [None, True, 1.5, {"sku": "x"}, []])
    def test_unsupported(self, value):
        with pytest.raises(ValidationError, match="Unsupported product identifier"):
            normalize_product_ref(value)


class TestCartRoot:
    def test_deterministic(self):
        assert cart_root("user-1") == cart_root("user-1")

    def test_distinct_per_owner(self):
        assert cart_root("user-1") != cart_root("user-2")

    def test_is_uuid5(self):
        assert cart_root("user-1").version == 5
