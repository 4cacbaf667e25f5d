import hashlib
import secrets

import bcrypt

# bcrypt only looks at the first 72 bytes and refuses longer input
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = 10) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def check_password(password: str, password_hash: str) -> bool:
    encoded = password.encode()
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    try:
        return bcrypt.checkpw(encoded, password_hash.encode())
    except ValueError:
        # corrupt stored hash
        return False


def new_session_token() -> str:
    return secrets.token_urlsafe(32)


def hash_session_token(token: str) -> str:
    # only the digest is stored server side
    return hashlib.sha256(token.encode()).hexdigest()
