"""
Form checks run before any request is sent.

Each validator returns a list of error messages; an empty list means valid.
"""
import re
from typing import Dict, List

from app.schemas.common import EMAIL_PATTERN

MIN_PASSWORD_LENGTH = 8


def required_fields(values: Dict[str, str], labels: Dict[str, str]) -> List[str]:
    """One message per label whose value is missing or blank."""
    return [
        f"{label} is required"
        for key, label in labels.items()
        if not str(values.get(key) or "").strip()
    ]


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match((email or "").strip()))


def validate_email(email: str) -> List[str]:
    if not (email or "").strip():
        return ["Email is required"]
    if not is_valid_email(email):
        return ["Please enter a valid email address"]
    return []


def validate_new_password(password: str, password_confirm: str) -> List[str]:
    errors = []
    if len(password or "") < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    if password != password_confirm:
        errors.append("Passwords do not match")
    return errors


def password_strength(password: str) -> int:
    """Score 0-5: length >= 8, length >= 12, mixed case, digit, symbol."""
    password = password or ""
    strength = 0
    if len(password) >= 8:
        strength += 1
    if len(password) >= 12:
        strength += 1
    if re.search(r"[a-z]", password) and re.search(r"[A-Z]", password):
        strength += 1
    if re.search(r"\d", password):
        strength += 1
    if re.search(r"[^a-zA-Z0-9]", password):
        strength += 1
    return strength


def strength_label(strength: int) -> str:
    if strength <= 1:
        return "Weak"
    if strength <= 3:
        return "Medium"
    return "Strong"


def validate_registration(name: str, email: str, password: str, password_confirm: str) -> List[str]:
    errors = required_fields({"name": name}, {"name": "Name"})
    errors += validate_email(email)
    errors += validate_new_password(password, password_confirm)
    return errors


def validate_contact(name: str, email: str, message: str) -> List[str]:
    errors = required_fields({"name": name, "message": message}, {"name": "Name", "message": "Message"})
    errors += validate_email(email)
    return errors


def validate_probability(value: float) -> List[str]:
    if value is None or not 0.0 <= float(value) <= 1.0:
        return ["Success rate must be between 0 and 1"]
    return []
