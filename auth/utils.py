import re
from typing import List, Optional

EMAIL_REGEX = re.compile(r"^[\w\.-]+@[\w\.-]+\.\w+$")
USERNAME_REGEX = re.compile(r"^[A-Za-z0-9_.-]{3,80}$")

MIN_PASSWORD_LENGTH = 8

# (pattern, message) pairs every password has to satisfy
PASSWORD_RULES = (
    (re.compile(r"[A-Z]"), "Password must contain an uppercase letter"),
    (re.compile(r"[a-z]"), "Password must contain a lowercase letter"),
    (re.compile(r"\d"), "Password must contain a digit"),
    (re.compile(r"[!@#$%^&*(),.?\":{}|<>_\-]"), "Password must contain a special character"),
)


def email_error(email: str) -> Optional[str]:
    if not email:
        return "Email is required"
    if not EMAIL_REGEX.match(email):
        return "Invalid email format"
    return None


def username_error(username: str) -> Optional[str]:
    """Usernames are 3-80 characters of letters, digits, ``_``, ``.`` or ``-``."""
    if not username:
        return "Username is required"
    if not USERNAME_REGEX.match(username):
        return "Username must be 3-80 letters, digits, '_', '.' or '-'"
    return None


def password_error(password: str) -> Optional[str]:
    """First rule *password* breaks, or None when it is acceptable."""
    if not password:
        return "Password is required"
    if len(password) < MIN_PASSWORD_LENGTH:
        return f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"
    for pattern, message in PASSWORD_RULES:
        if not pattern.search(password):
            return message
    return None


def registration_errors(username: str, email: str, password: str) -> List[dict]:
    """Field-level problems with a sign-up form, in the API's ``details`` shape."""
    checks = (
        ('username', username_error(username)),
        ('email', email_error(email)),
        ('password', password_error(password)),
    )
    return [{'field': field, 'message': message} for field, message in checks if message]


def text_value(value) -> str:
    """Non-string form values count as missing."""
    return value if isinstance(value, str) else ''
