"""Domain protocols - abstract interfaces for infrastructure implementations."""

from boilerplate_api.domain.protocols.repositories import UserRepository

__all__ = ["UserRepository"]
