from werkzeug.security import check_password_hash, generate_password_hash


def generate_hash(password: str) -> str:
    return generate_password_hash(password)


def check_hash(password: str, hashed: str) -> bool:
    """False on mismatch and on a malformed stored hash."""
    try:
        return check_password_hash(hashed, password)
    except (TypeError, ValueError):
        return False
