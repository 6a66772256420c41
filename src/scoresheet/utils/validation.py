"""Validation utilities for Scoresheet.

This module provides reusable validation functions with consistent error handling.
"""

# Scoresheet
# Copyright (C) 2025  Scoresheet developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

import re
from typing import Optional

from scoresheet.exceptions import YearLevelValidationException


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Optional[str] = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Email Validation ==========


def validate_email(email: Optional[str], required: bool = False) -> ValidationResult:
    """Validate an email address.

    The sanitized value is lower-cased, as submission emails are compared
    case-insensitively.

    Args:
        email: Email address to validate
        required: Whether email is required (empty = invalid)

    Returns:
        ValidationResult with validation status

    Example:
        >>> result = validate_email("Jane.Doe@Example.com")
        >>> result.sanitized_value
        'jane.doe@example.com'
    """
    if not email or not email.strip():
        if required:
            return ValidationResult(
                is_valid=False,
                error_message="Email address is required",
            )
        return ValidationResult(is_valid=True, sanitized_value=None)

    email = email.strip().lower()

    pattern = r"^[a-z0-9._%+-]+@[a-z0-9.-]+\.[a-z]{2,}$"

    if re.match(pattern, email):
        return ValidationResult(is_valid=True, sanitized_value=email)

    return ValidationResult(
        is_valid=False,
        error_message=f"Invalid email format: {email}",
    )


# ========== Phone Validation ==========


def validate_phone(phone: Optional[str], required: bool = False) -> ValidationResult:
    """Validate a phone number.

    Accepts spaces, dashes, dots, brackets and a leading ``+``; the sanitized
    value is the digits only.

    Args:
        phone: Phone number to validate
        required: Whether phone is required

    Returns:
        ValidationResult with validation status and sanitized number
    """
    if not phone or not phone.strip():
        if required:
            return ValidationResult(
                is_valid=False,
                error_message="Phone number is required",
            )
        return ValidationResult(is_valid=True, sanitized_value=None)

    phone = phone.strip()

    digits_only = re.sub(r"[\s\-\.\(\)\+]", "", phone)

    if not digits_only.isdigit():
        return ValidationResult(
            is_valid=False,
            error_message=f"Phone number contains invalid characters: {phone}",
        )

    # Local mobile numbers are 8-10 digits, international up to 15
    if len(digits_only) < 8 or len(digits_only) > 15:
        return ValidationResult(
            is_valid=False,
            error_message=f"Phone number must be 8-15 digits: {phone}",
        )

    return ValidationResult(is_valid=True, sanitized_value=digits_only)


# ========== Year Level Validation ==========

_YEAR_PATTERN = re.compile(r"^(?:year|yr|grade)?\s*\.?\s*(\d{1,2})$", re.IGNORECASE)


def validate_year_level(value: Optional[str]) -> ValidationResult:
    """Validate a year level cell such as ``9`` or ``Year 9``.

    Args:
        value: Raw cell text

    Returns:
        ValidationResult whose sanitized value is the year as a string
    """
    if value is None or not str(value).strip():
        return ValidationResult(
            is_valid=False,
            error_message="Year level is required",
        )

    match = _YEAR_PATTERN.match(str(value).strip())
    if not match:
        return ValidationResult(
            is_valid=False,
            error_message=f"Year level must be a number: {value}",
        )

    return ValidationResult(is_valid=True, sanitized_value=str(int(match.group(1))))


def validate_year_level_strict(value: str) -> int:
    """Validate a year level and return it as an integer.

    Raises:
        YearLevelValidationException: If the value is not a year level
    """
    result = validate_year_level(value)
    if not result.is_valid:
        raise YearLevelValidationException(result.error_message)
    return int(result.sanitized_value or "0")


# ========== Generic Validation ==========


def validate_non_empty(
    value: Optional[str], field_name: str = "Field"
) -> ValidationResult:
    """Validate that a field is not empty.

    Args:
        value: Value to validate
        field_name: Name of the field for error messages

    Returns:
        ValidationResult with validation status
    """
    if not value or not str(value).strip():
        return ValidationResult(
            is_valid=False,
            error_message=f"{field_name} cannot be empty",
        )
    return ValidationResult(is_valid=True, sanitized_value=str(value).strip())
