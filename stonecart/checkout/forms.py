"""Checkout shipping form validation."""

import re
from dataclasses import dataclass, replace

from ..errors import ValidationError, errmsg
from ..validation import require_present

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\d{10}$")
PINCODE_RE = re.compile(r"^\d{6}$")

REQUIRED_FIELDS = ("full_name", "email", "phone", "address", "city", "state", "pincode")


@dataclass(frozen=True)
class ShippingInfo:
    full_name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    instructions: str = ""

    @classmethod
    def from_identity(cls, identity, **overrides) -> "ShippingInfo":
        """Prefill the form from the logged-in identity."""
        info = cls(
            full_name=identity.name or "",
            email=identity.email or "",
            phone=identity.phone or "",
            address=identity.address or "",
        )
        return replace(info, **overrides)

    def validate(self) -> "ShippingInfo":
        """Return a normalized copy, or raise ValidationError naming the field."""
        for name in REQUIRED_FIELDS:
            require_present(getattr(self, name), errmsg.FIELD_REQUIRED.format(field=name.replace("_", " ")), field=name)

        email = self.email.strip()
        if not EMAIL_RE.match(email):
            raise ValidationError(errmsg.INVALID_EMAIL, field="email")

        phone = re.sub(r"\D", "", self.phone)
        if not PHONE_RE.match(phone):
            raise ValidationError(errmsg.INVALID_PHONE, field="phone")

        pincode = self.pincode.strip()
        if not PINCODE_RE.match(pincode):
            raise ValidationError(errmsg.INVALID_PINCODE, field="pincode")

        return replace(
            self,
            full_name=self.full_name.strip(),
            email=email,
            phone=phone,
            address=self.address.strip(),
            city=self.city.strip(),
            state=self.state.strip(),
            pincode=pincode,
            instructions=self.instructions.strip(),
        )
