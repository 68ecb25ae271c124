"""Small helpers shared across the service."""


def normalize_email(email: str) -> str:
    """Lowercase an email address and strip surrounding whitespace."""
    return email.strip().lower()
