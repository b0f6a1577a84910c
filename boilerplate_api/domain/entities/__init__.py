"""Domain entities - pure Python dataclasses representing business objects."""

from boilerplate_api.domain.entities.identity import IdentityProviderUser
from boilerplate_api.domain.entities.user import User, UserPage

__all__ = [
    "User",
    "UserPage",
    "IdentityProviderUser",
]
