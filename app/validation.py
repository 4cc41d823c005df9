"""Field rules shared by request schemas and services.

Each function returns the normalized value or raises ``ValueError`` with a
message suitable for the client.
"""

import re

TITLE_MAX_LENGTH = 200
DESCRIPTION_MAX_LENGTH = 1000
NAME_MAX_LENGTH = 100
PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_BYTES = 72  # bcrypt ignores anything past this


def clean_title(title: str | None) -> str:
    if title is None:
        raise ValueError("Title is required")
    title = title.strip()
    if not title:
        raise ValueError("Title cannot be empty")
    if len(title) > TITLE_MAX_LENGTH:
        raise ValueError(f"Title must be at most {TITLE_MAX_LENGTH} characters")
    return title


def clean_description(description: str | None) -> str | None:
    """Trim a description; blank becomes None."""
    if description is None:
        return None
    description = description.strip()
    if len(description) > DESCRIPTION_MAX_LENGTH:
        raise ValueError(f"Description must be at most {DESCRIPTION_MAX_LENGTH} characters")
    return description or None


def clean_name(name: str) -> str:
    name = name.strip()
    if not name:
        raise ValueError("Name cannot be empty")
    if len(name) > NAME_MAX_LENGTH:
        raise ValueError(f"Name must be at most {NAME_MAX_LENGTH} characters")
    return name


def normalize_email(email: str) -> str:
    return email.strip().lower()


def check_password_strength(password: str) -> None:
    """Raise ValueError if the password does not meet the policy."""
    if len(password) < PASSWORD_MIN_LENGTH:
        raise ValueError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters")
    if len(password.encode("utf-8")) > PASSWORD_MAX_BYTES:
        raise ValueError(f"Password must be at most {PASSWORD_MAX_BYTES} bytes")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain an upper-case letter")
    if not re.search(r"[a-z]", password):
        raise ValueError("Password must contain a lower-case letter")
    if not re.search(r"[0-9]", password):
        raise ValueError("Password must contain a digit")
