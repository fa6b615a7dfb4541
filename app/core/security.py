"""
Password and token hashing helpers.
"""
import hashlib
import hmac
import secrets

PBKDF2_ALGORITHM = "pbkdf2_sha256"
PBKDF2_ITERATIONS = 120_000


def hash_password(password: str, iterations: int = PBKDF2_ITERATIONS) -> str:
    """Hash a password as "pbkdf2_sha256$<iterations>$<salt>$<hex digest>"."""
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return f"{PBKDF2_ALGORITHM}${iterations}${salt}${digest.hex()}"


def verify_password(password: str, stored_hash: str) -> bool:
    """Verify a password against a stored hash in constant time."""
    try:
        algorithm, iterations, salt, expected = stored_hash.split("$", 3)
        iterations = int(iterations)
    except (ValueError, AttributeError):
        return False
    if algorithm != PBKDF2_ALGORITHM:
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt.encode("utf-8"), iterations)
    return hmac.compare_digest(digest.hex(), expected)


def generate_session_token() -> str:
    """Generate a bearer token for a login session."""
    return f"sess_{secrets.token_urlsafe(32)}"


def generate_reset_token() -> str:
    """Generate a URL-safe password reset token."""
    return secrets.token_urlsafe(32)


def hash_token(token: str) -> str:
    """SHA-256 of a token; only this value is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()
