"""Account management."""

from findr.identity.service import IdentityService, hash_password

__all__ = ["IdentityService", "hash_password"]
