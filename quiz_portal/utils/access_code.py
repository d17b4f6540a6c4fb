"""
Access code generation
Random URL-safe tokens identifying a participant session
"""
import secrets
import string

ACCESS_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"


def generate_access_code(length: int = 10) -> str:
    """Return a random token drawn from the URL-safe alphabet"""
    if length < 1:
        raise ValueError("Access code length must be positive")
    return "".join(secrets.choice(ACCESS_CODE_ALPHABET) for _ in range(length))
