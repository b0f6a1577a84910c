"""Identity provider user, as delivered by Clerk webhooks."""

from dataclasses import dataclass, field
from typing import Any


@dataclass
class IdentityProviderUser:
    """The subset of a Clerk user object needed to maintain local rows."""

    external_id: str
    email_addresses: list[str] = field(default_factory=list)
    first_name: str | None = None
    last_name: str | None = None

    def __post_init__(self) -> None:
        if not self.external_id:
            raise ValueError("Identity provider user id is required")

    @classmethod
    def from_payload(cls, data: dict[str, Any]) -> "IdentityProviderUser":
        """Build from the ``data`` object of a Clerk ``user.*`` event."""
        addresses = [
            entry["email_address"]
            for entry in data.get("email_addresses") or []
            if isinstance(entry, dict) and entry.get("email_address")
        ]
        return cls(
            external_id=data.get("id") or "",
            email_addresses=addresses,
            first_name=data.get("first_name"),
            last_name=data.get("last_name"),
        )

    @property
    def primary_email(self) -> str | None:
        return self.email_addresses[0] if self.email_addresses else None

    @property
    def display_name(self) -> str | None:
        """First and last name, or the local part of the primary email."""
        name = " ".join(part for part in (self.first_name, self.last_name) if part)
        if name:
            return name
        if self.primary_email:
            return self.primary_email.split("@")[0]
        return None
