"""Party blocks printed on invoices."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Party:
    name: str
    email: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    tax_id: str = ""

    def address_lines(self) -> list:
        return [line for line in (self.address, self.city) if line]


@dataclass(frozen=True)
class Buyer(Party):
    """The customer block, denormalized at checkout time."""

    state: str = ""
    pincode: str = ""
    instructions: str = ""

    def address_lines(self) -> list:
        region = " ".join(part for part in (self.state, self.pincode) if part)
        city = ", ".join(part for part in (self.city, region) if part)
        return [line for line in (self.address, city) if line]

    @classmethod
    def from_identity(cls, identity, shipping_info=None) -> "Buyer":
        """Build a buyer from the logged-in identity, preferring checkout form values."""
        if shipping_info is None:
            return cls(
                name=identity.name or identity.user_id,
                email=identity.email or "",
                phone=identity.phone or "",
                address=identity.address or "",
            )
        return cls(
            name=shipping_info.full_name or identity.name or identity.user_id,
            email=shipping_info.email or identity.email or "",
            phone=shipping_info.phone or identity.phone or "",
            address=shipping_info.address or identity.address or "",
            city=shipping_info.city,
            state=shipping_info.state,
            pincode=shipping_info.pincode,
            instructions=shipping_info.instructions,
        )
