"""Password hashing (stdlib scrypt) with a per-password salt and a process-wide pepper."""

import hashlib
import hmac
import secrets

SALT_BYTES = 8
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1

_SEPARATOR = "."


class PasswordHasher:
    """Derives and checks ``"<derived-hex>.<salt>"`` digests.

    The pepper is fixed for the lifetime of the hasher; digests created with
    one pepper never verify under another.
    """

    def __init__(self, pepper: str):
        if not pepper:
            raise ValueError("pepper must not be empty")
        self._pepper = pepper

    def _derive(self, password: str, salt: str) -> bytes:
        return hashlib.scrypt(
            (password + self._pepper).encode("utf-8"),
            salt=salt.encode("ascii"),
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
            dklen=KEY_LENGTH,
        )

    def hash(self, password: str) -> str:
        salt = secrets.token_hex(SALT_BYTES)
        return f"{self._derive(password, salt).hex()}{_SEPARATOR}{salt}"

    def verify(self, digest: str, password: str) -> bool:
        derived_hex, sep, salt = digest.rpartition(_SEPARATOR)
        if not sep or not derived_hex or not salt:
            return False
        try:
            expected = bytes.fromhex(derived_hex)
            salt.encode("ascii")
        except (ValueError, UnicodeEncodeError):
            return False
        return hmac.compare_digest(self._derive(password, salt), expected)
