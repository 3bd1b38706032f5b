"""Password hashing.

Passwords are stored as salted PBKDF2-SHA256 hashes and verified through
passlib, never compared as plaintext.
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def get_password_hash(password: str) -> str:
    """Hash a password with a fresh salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its stored hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # unrecognised hash format
        return False
