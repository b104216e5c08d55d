from bcrypt import hashpw, gensalt

DEFAULT_ROUNDS = 10

def hash_password(password: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password using bcrypt"""
    return hashpw(password.encode('utf-8'), gensalt(rounds=rounds)).decode('utf-8')
