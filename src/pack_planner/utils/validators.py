"""
Input validation functions for the Pack Planner application.

This module provides validation functions for user inputs including:
- Numeric validation (non-negative weights, whole-number quantities)
- String validation (length, required fields)
- Category validation against an injected category list
"""

from typing import Iterable, Optional, Tuple

from .constants import (
    ERROR_INVALID_CATEGORY,
    ERROR_INVALID_NON_NEGATIVE,
    ERROR_INVALID_NUMBER,
    ERROR_INVALID_QUANTITY,
    ERROR_REQUIRED_FIELD,
    MAX_CATEGORY_LENGTH,
    MAX_DESCRIPTION_LENGTH,
    MAX_LINK_LENGTH,
    MAX_NAME_LENGTH,
    MAX_NOTES_LENGTH,
    MIN_QUANTITY,
)


def validate_required_string(value: Optional[str], field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a string field is not empty.

    Args:
        value: The string value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value is None or (isinstance(value, str) and value.strip() == ""):
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"
    return True, ""


def validate_string_length(
    value: Optional[str], max_length: int, field_name: str = "Field"
) -> Tuple[bool, str]:
    """
    Validate that a string doesn't exceed maximum length.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if value and len(value) > max_length:
        return False, f"{field_name}: Must be {max_length} characters or less"
    return True, ""


def validate_non_negative_number(value, field_name: str = "Field") -> Tuple[bool, str]:
    """
    Validate that a value is a non-negative number (>= 0).

    Args:
        value: The value to validate
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    try:
        num_value = float(value)
    except (ValueError, TypeError):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value != num_value or num_value in (float("inf"), float("-inf")):
        return False, f"{field_name}: {ERROR_INVALID_NUMBER}"
    if num_value < 0:
        return False, f"{field_name}: {ERROR_INVALID_NON_NEGATIVE}"
    return True, ""


def validate_quantity(value, field_name: str = "Quantity") -> Tuple[bool, str]:
    """
    Validate an assignment quantity.

    Quantities are whole numbers of at least MIN_QUANTITY. Booleans are
    rejected even though they are ints in Python.

    Returns:
        Tuple of (is_valid, error_message)
    """
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{field_name}: {ERROR_INVALID_QUANTITY}"
    if value < MIN_QUANTITY:
        return False, f"{field_name}: {ERROR_INVALID_QUANTITY}"
    return True, ""


def validate_category(
    category: str, categories: Iterable[str], field_name: str = "Category"
) -> Tuple[bool, str]:
    """
    Validate that a category is one of the allowed categories.

    Args:
        category: The category string to validate
        categories: Allowed category names
        field_name: Name of the field for error messages

    Returns:
        Tuple of (is_valid, error_message)
    """
    if not category:
        return False, f"{field_name}: {ERROR_REQUIRED_FIELD}"

    is_valid, error = validate_string_length(category, MAX_CATEGORY_LENGTH, field_name)
    if not is_valid:
        return False, error

    allowed = list(categories)
    if category not in allowed:
        return False, f"{field_name}: {ERROR_INVALID_CATEGORY}. Valid: {', '.join(sorted(allowed))}"

    return True, ""


def validate_gear_data(data: dict, categories: Iterable[str]) -> Tuple[bool, list]:
    """
    Validate all fields for a gear item.

    The weight is checked as entered, before any unit conversion.

    Args:
        data: Dictionary with name, description, weight and category
        categories: Allowed category names

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    name = data.get("name")
    is_valid, error = validate_required_string(name, "Name")
    if not is_valid:
        errors.append(error)
    else:
        is_valid, error = validate_string_length(name, MAX_NAME_LENGTH, "Name")
        if not is_valid:
            errors.append(error)

    is_valid, error = validate_string_length(
        data.get("description"), MAX_DESCRIPTION_LENGTH, "Description"
    )
    if not is_valid:
        errors.append(error)

    if "weight" in data:
        is_valid, error = validate_non_negative_number(data.get("weight"), "Weight")
        if not is_valid:
            errors.append(error)

    if "category" in data:
        is_valid, error = validate_category(data.get("category"), categories)
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors


def validate_hike_data(data: dict) -> Tuple[bool, list]:
    """
    Validate all fields for a hike.

    Args:
        data: Dictionary with hike fields

    Returns:
        Tuple of (is_valid, list_of_errors)
    """
    errors = []

    if "name" in data:
        is_valid, error = validate_required_string(data.get("name"), "Hike Name")
        if not is_valid:
            errors.append(error)
        else:
            is_valid, error = validate_string_length(data.get("name"), MAX_NAME_LENGTH, "Hike Name")
            if not is_valid:
                errors.append(error)

    is_valid, error = validate_string_length(
        data.get("description"), MAX_DESCRIPTION_LENGTH, "Description"
    )
    if not is_valid:
        errors.append(error)

    for key in ("external_link_1", "external_link_2", "external_link_3"):
        is_valid, error = validate_string_length(data.get(key), MAX_LINK_LENGTH, "External link")
        if not is_valid:
            errors.append(error)

    return len(errors) == 0, errors


def validate_notes(notes: Optional[str]) -> Tuple[bool, str]:
    """Validate assignment notes length."""
    return validate_string_length(notes, MAX_NOTES_LENGTH, "Notes")
