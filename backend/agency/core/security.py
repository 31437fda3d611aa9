"""
Security helpers: client credential hashing, password policy, brief tokens,
and the admin bearer-token check.
"""

import re
import secrets
from dataclasses import dataclass, field
from typing import List, Optional

import bcrypt

from agency.core.config import settings


COMMON_PASSWORDS = {
    "password", "123456", "12345678", "qwerty", "abc123",
    "password123", "admin", "letmein", "welcome", "monkey",
    "1234567890", "password1", "iloveyou", "sunshine", "princess",
    "trustno1", "dragon", "master", "hello", "login",
    "passw0rd", "shadow", "123456789", "qwerty123",
}

SEQUENTIAL_PATTERNS = (
    "abcdef", "qwerty", "asdfgh", "zxcvbn", "123456", "654321",
)

MIN_PASSWORD_LENGTH = 8
MAX_PASSWORD_LENGTH = 128


@dataclass
class PasswordValidationResult:
    """Outcome of a password strength check."""
    valid: bool
    errors: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


def validate_password(password: str, email: Optional[str] = None) -> PasswordValidationResult:
    """
    Validate a client portal password against the password policy.

    Args:
        password: Candidate password
        email: Account email; its local part may not appear in the password

    Returns:
        PasswordValidationResult with errors (blocking) and suggestions
    """
    errors: List[str] = []
    suggestions: List[str] = []

    if len(password) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password) > MAX_PASSWORD_LENGTH:
        errors.append(f"Password must be at most {MAX_PASSWORD_LENGTH} characters")
    if not re.search(r"[a-z]", password):
        errors.append("Password must contain a lowercase letter")
    if not re.search(r"\d", password):
        errors.append("Password must contain a digit")
    if not re.search(r"[A-Z]", password):
        suggestions.append("Add an uppercase letter")
    if not re.search(r"[^A-Za-z0-9]", password):
        suggestions.append("Add a special character")

    lowered = password.lower()
    if lowered in COMMON_PASSWORDS:
        errors.append("Password is too common")
    if any(pattern in lowered for pattern in SEQUENTIAL_PATTERNS):
        suggestions.append("Avoid sequential characters")
    if email:
        local_part = email.split("@")[0].lower()
        if len(local_part) >= 3 and local_part in lowered:
            errors.append("Password must not contain your email address")

    return PasswordValidationResult(valid=not errors, errors=errors, suggestions=suggestions)


def hash_password(password: str) -> str:
    """Hash a plain-text password with bcrypt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """Verify a plain-text password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        return False


def generate_brief_token() -> str:
    """Generate the opaque token that addresses an account's brief form."""
    return secrets.token_hex(16)


def is_valid_admin_token(token: Optional[str]) -> bool:
    """Constant-time comparison of a bearer token with the admin token."""
    if not token:
        return False
    return secrets.compare_digest(token, settings.ADMIN_API_TOKEN)
