import hashlib
import hmac
import secrets
from typing import NamedTuple

from backend.auth.errors import CredentialDerivationError

SALT_BYTES = 16
KEY_LENGTH = 64
SCRYPT_N = 16384
SCRYPT_R = 8
SCRYPT_P = 1


class Credential(NamedTuple):
    hash: str
    salt: str


def _scrypt(plaintext: str, salt: str) -> bytes:
    try:
        return hashlib.scrypt(
            plaintext.encode("utf-8", errors="surrogatepass"),
            salt=salt.encode("utf-8", errors="surrogatepass"),
            n=SCRYPT_N,
            r=SCRYPT_R,
            p=SCRYPT_P,
            dklen=KEY_LENGTH,
        )
    except (ValueError, MemoryError) as exc:
        raise CredentialDerivationError("scrypt derivation failed") from exc


def derive_credential(plaintext: str, salt: str | None = None) -> Credential:
    """Derive a scrypt hash for ``plaintext``, generating a random salt when none is given."""
    if salt is None:
        try:
            salt = secrets.token_hex(SALT_BYTES)
        except OSError as exc:
            raise CredentialDerivationError("salt generation failed") from exc
    return Credential(hash=_scrypt(plaintext, salt).hex(), salt=salt)


def verify_credential(plaintext: str, password_hash: str, salt: str) -> bool:
    try:
        expected = bytes.fromhex(password_hash)
    except (TypeError, ValueError):
        return False
    if len(expected) != KEY_LENGTH:
        return False
    return hmac.compare_digest(_scrypt(plaintext, salt), expected)
