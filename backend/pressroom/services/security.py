"""
Pressroom Backend — Password Hashing
======================================

What:  bcrypt hashing for administrator credentials.
How:   A fresh salt per hash, fixed cost factor (BCRYPT_ROUNDS). The cost is
       encoded in the hash itself, so verification needs no configuration.

Only hashing is used by the API (registration). verify_password exists for
tooling and tests; no login flow is exposed.
"""

import bcrypt

BCRYPT_ROUNDS = 10


def hash_password(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password_hash: str, password: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed or empty hash
        return False
