"""
Password policy.

``validate_password`` checks a plaintext password against the length and
complexity rules and returns the message of the first rule it breaks, or
``None`` when the password is acceptable.
"""

from __future__ import annotations

import re
from typing import Optional

MIN_LENGTH = 8
# Counted in UTF-8 bytes, not characters: bcrypt rejects anything past 72 bytes.
# ASCII passwords are one byte per character.
MAX_LENGTH = 72
SPECIAL_CHARACTERS = "!@#$%^&"

_REQUIRED_CLASSES = (
    re.compile(r"[a-z]"),
    re.compile(r"[A-Z]"),
    re.compile(r"[0-9]"),
    re.compile("[" + re.escape(SPECIAL_CHARACTERS) + "]"),
)

TOO_SHORT = f"Password must be longer than {MIN_LENGTH} characters"
TOO_LONG = f"Password must be less than {MAX_LENGTH} characters"
EDGE_SPACES = "Password must not start or end with empty spaces"
NOT_COMPLEX = (
    "Password must contain an uppercase letter, a lowercase letter, "
    "a number, and a special character"
)


def validate_password(password: str) -> Optional[str]:
    if len(password) < MIN_LENGTH:
        return TOO_SHORT
    if len(password.encode()) > MAX_LENGTH:
        return TOO_LONG
    if password.startswith(" ") or password.endswith(" "):
        return EDGE_SPACES
    if not all(pattern.search(password) for pattern in _REQUIRED_CLASSES):
        return NOT_COMPLEX
    return None
