"""
Credential format rules shared by admin registration and superadmin edits.

Each check returns an error message, or None when the value is acceptable.
"""

import re
from typing import Optional

PASSWORD_SYMBOLS = "@$!%*?&"
USERNAME_MIN_LENGTH = 4
PASSWORD_MIN_LENGTH = 8

_ALNUM = re.compile(r"^[a-zA-Z0-9]+$")
_WHITESPACE = re.compile(r"\s")


def check_username(username: Optional[str]) -> Optional[str]:
    if not username:
        return "Username is required."
    if len(username) < USERNAME_MIN_LENGTH:
        return f"Username must be at least {USERNAME_MIN_LENGTH} characters long."
    if _WHITESPACE.search(username):
        return "Username should not contain spaces."
    if not _ALNUM.match(username):
        return "Username should only contain alphanumeric characters."
    return None


def check_password(password: Optional[str]) -> Optional[str]:
    if not password:
        return "Password is required."
    rules = (
        len(password) >= PASSWORD_MIN_LENGTH,
        re.search(r"[A-Z]", password),
        re.search(r"[a-z]", password),
        re.search(r"\d", password),
        any(c in PASSWORD_SYMBOLS for c in password),
    )
    if not all(rules):
        return (
            f"Password must include at least {PASSWORD_MIN_LENGTH} characters, an uppercase "
            f"letter, a lowercase letter, a number, and a special character ({PASSWORD_SYMBOLS})."
        )
    return None


def collect_credential_errors(
    username: Optional[str] = None,
    password: Optional[str] = None,
    *,
    check_user: bool = True,
    check_pass: bool = True,
) -> dict[str, str]:
    """Run the selected checks and return field -> message for the failures."""
    errors: dict[str, str] = {}
    if check_user:
        message = check_username(username)
        if message:
            errors["username"] = message
    if check_pass:
        message = check_password(password)
        if message:
            errors["password"] = message
    return errors
