"""
Input validation utilities for identifiers and query limits.

File and job identifiers arrive from HTTP paths and the CLI; they are
checked here before they reach the file system or the database.
"""

import re

_IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z0-9_\-\.]+$")


class InputValidationError(ValueError):
    """Raised when input validation fails."""


def validate_identifier(identifier: str, field_name: str = "id") -> str:
    """
    Validate a file or job identifier.

    Identifiers must be non-empty strings of alphanumerics, hyphens,
    underscores and dots, and may not contain "..".

    Args:
        identifier: The identifier to validate
        field_name: Name of the field (for error messages)

    Returns:
        The validated identifier (stripped of whitespace)

    Raises:
        InputValidationError: If validation fails

    Examples:
        >>> validate_identifier("assets-2024_q1")
        'assets-2024_q1'
        >>> validate_identifier("../etc/passwd")  # doctest: +SKIP
        InputValidationError: id contains invalid characters
    """
    if not isinstance(identifier, str) or not identifier.strip():
        raise InputValidationError(f"{field_name} must be a non-empty string")

    identifier = identifier.strip()

    if not _IDENTIFIER_PATTERN.match(identifier) or ".." in identifier:
        raise InputValidationError(
            f"{field_name} contains invalid characters. "
            "Only alphanumeric, hyphens, underscores, and dots are allowed."
        )

    if len(identifier) > 255:
        raise InputValidationError(f"{field_name} exceeds maximum length of 255 characters")

    return identifier


def validate_limit(limit: int, field_name: str = "limit", max_limit: int = 1000) -> int:
    """
    Validate a limit parameter for listings.

    Examples:
        >>> validate_limit(100)
        100
        >>> validate_limit(0)  # doctest: +SKIP
        InputValidationError: limit must be a positive integer
    """
    if not isinstance(limit, int) or isinstance(limit, bool):
        raise InputValidationError(f"{field_name} must be an integer, got {type(limit).__name__}")

    if limit <= 0:
        raise InputValidationError(f"{field_name} must be a positive integer, got {limit}")

    if limit > max_limit:
        raise InputValidationError(f"{field_name} exceeds maximum of {max_limit}")

    return limit
