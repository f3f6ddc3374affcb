"""Password hashing utilities.

Learn: Uses bcrypt for secure password hashing. bcrypt automatically
handles salting and compares in constant time. The work factor comes
from settings (rounds=12 takes ~100ms per hash on modern hardware).
"""

import bcrypt

from sketchroom.config import settings


def hash_password(password: str) -> str:
    """Hash a password with bcrypt.

    Passwords are truncated to 72 bytes (bcrypt's limit).
    """
    pw_bytes = password.encode("utf-8")[:72]
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(pw_bytes, salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a password against its bcrypt hash."""
    try:
        pw_bytes = password.encode("utf-8")[:72]
        hash_bytes = password_hash.encode("utf-8")
        return bcrypt.checkpw(pw_bytes, hash_bytes)
    except (ValueError, TypeError):
        return False


# Compared against when the email is unknown, so a miss costs the same
# bcrypt round as a wrong password.
DUMMY_PASSWORD_HASH = hash_password("sketchroom-dummy-password")
