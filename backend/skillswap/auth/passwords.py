"""
Password hashing with a salted, memory-hard KDF (scrypt)
"""

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["scrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, hashed: str) -> bool:
    """Constant-time comparison of the derived key; malformed hashes never match."""
    try:
        return pwd_context.verify(password, hashed)
    except (ValueError, TypeError):
        return False
