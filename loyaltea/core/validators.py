# loyaltea/core/validators.py
import re

EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

MIN_PASSWORD_LENGTH = 8


def is_valid_email(email: str) -> bool:
    """local@domain.tld check. No normalization: case is preserved."""
    return bool(EMAIL_RE.fullmatch(email or ""))
