from functools import wraps

from flask import session

from agrirent.exceptions import UnauthorizedError


def current_user_id():
    """The logged-in user's id, or None for anonymous requests."""
    return session.get("uid")


def login_required(fn):
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if "uid" not in session:
            raise UnauthorizedError()
        return fn(*args, **kwargs)

    return wrapper
