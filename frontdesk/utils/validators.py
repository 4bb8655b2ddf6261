"""
Input validators for guest data.
"""

import re
from dataclasses import dataclass, field
from typing import List, Optional

from frontdesk.core.exceptions import ErrorCode, ValidationError


@dataclass
class ValidationResult:
    """Validation result container"""
    is_valid: bool = True
    errors: List[str] = field(default_factory=list)

    def add_error(self, error: str):
        self.is_valid = False
        self.errors.append(error)


class PhoneValidator:
    """Phone number validation utilities"""

    # Optional leading +, no leading zero, at most 16 digits
    PATTERN = re.compile(r'^[+]?[1-9]\d{0,15}$')
    SEPARATORS = re.compile(r'[\s\-\(\)]')

    @classmethod
    def normalize(cls, phone: str) -> str:
        """Strip spaces, dashes and parentheses"""
        return cls.SEPARATORS.sub('', phone)

    @classmethod
    def validate(cls, phone: str) -> ValidationResult:
        result = ValidationResult()
        if not phone:
            result.add_error("Phone number is required")
            return result
        if not cls.PATTERN.match(cls.normalize(phone)):
            result.add_error("Invalid phone number format")
        return result

    @classmethod
    def is_valid(cls, phone: str) -> bool:
        return cls.validate(phone).is_valid


def clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim a free-text value, mapping blank input to None."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def validate_guest_input(name: Optional[str], phone: Optional[str], slot_number: int) -> tuple:
    """
    Check a guest's name and optional phone.

    Args:
        name: Guest full name
        phone: Optional phone number
        slot_number: 1-based slot, used in error messages

    Returns:
        (name, phone) trimmed, phone None when blank

    Raises:
        ValidationError: MissingGuestName or InvalidPhoneFormat
    """
    name = clean_optional(name)
    if not name:
        raise ValidationError(
            f"Guest {slot_number} name is required",
            error_code=ErrorCode.MISSING_GUEST_NAME,
            field=f"guest{slot_number}_name",
        )

    phone = clean_optional(phone)
    if phone is not None and not PhoneValidator.is_valid(phone):
        raise ValidationError(
            f"Invalid phone format for guest {slot_number}",
            error_code=ErrorCode.INVALID_PHONE_FORMAT,
            field=f"guest{slot_number}_phone",
        )

    return name, phone
