from __future__ import annotations

import hashlib
import hmac
import os

DEFAULT_ITERATIONS = 390000


def hash_password(password: str, salt: bytes | None = None, iterations: int = DEFAULT_ITERATIONS) -> str:
    if salt is None:
        salt = os.urandom(16)
    derived = hashlib.pbkdf2_hmac("sha256", password.encode("utf-8"), salt, iterations)
    return f"pbkdf2_sha256${iterations}${salt.hex()}${derived.hex()}"


def verify_password(stored: str, password: str) -> bool:
    try:
        _, iter_str, salt_hex, _ = stored.split("$", 3)
        iterations = int(iter_str)
        salt = bytes.fromhex(salt_hex)
    except ValueError:
        return False
    candidate = hash_password(password, salt=salt, iterations=iterations)
    return hmac.compare_digest(candidate, stored)
