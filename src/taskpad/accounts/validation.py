# src/taskpad/accounts/validation.py

"""Field validation for the signup/login forms and task text. Pure functions."""

from __future__ import annotations

import re

from ..core.errors import FieldErrors

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
MIN_PASSWORD_LENGTH = 6


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_RE.match(email or ""))


def validate_signup(name: str, email: str, password: str, confirm_password: str) -> FieldErrors:
    errors: FieldErrors = {}

    if not (name or "").strip():
        errors["name"] = "Name is required"

    email = (email or "").strip()
    if not email:
        errors["email"] = "Email is required"
    elif not is_valid_email(email):
        errors["email"] = "Please enter a valid email address"

    if not password:
        errors["password"] = "Password is required"
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors["password"] = f"Password must be at least {MIN_PASSWORD_LENGTH} characters long"

    if not confirm_password:
        errors["confirm_password"] = "Please confirm your password"
    elif password != confirm_password:
        errors["confirm_password"] = "Passwords do not match"

    return errors


def validate_login(email: str, password: str) -> FieldErrors:
    errors: FieldErrors = {}
    if not (email or "").strip():
        errors["email"] = "Email is required"
    if not password:
        errors["password"] = "Password is required"
    return errors


def validate_task_text(text: str | None) -> FieldErrors:
    if not (text or "").strip():
        return {"text": "Please enter a task!"}
    return {}
