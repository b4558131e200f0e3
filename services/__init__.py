"""Services package - Credential handling"""

from services.password import PasswordHasher

__all__ = ["PasswordHasher"]
