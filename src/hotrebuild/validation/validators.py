"""
Simplified validation functions.

This module provides the value validators used when loading configuration
layers. Every validator returns the normalized value or raises
``ValidationError``.
"""

from typing import Any, List, Optional

from .exceptions import ValidationError


def validate_positive_integer(
    value: Any,
    min_value: int = 1,
    max_value: Optional[int] = None,
    field_name: str = "value",
    strict: bool = False
) -> int:
    """
    Validate that a value is a positive integer.

    Args:
        value: Value to validate
        min_value: Minimum allowed value (inclusive)
        max_value: Maximum allowed value (inclusive), None for no limit
        field_name: Name of the field being validated
        strict: Only accept real integers; no conversion from float or str

    Returns:
        Validated integer value

    Raises:
        ValidationError: If validation fails
    """
    # bool is an int subclass; `debounce_ms = true` is a mistake, not 1.
    if isinstance(value, bool) or (strict and not isinstance(value, int)):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    try:
        int_value = int(value)
    except (ValueError, TypeError):
        raise ValidationError(
            f"{field_name} must be a valid integer, got {value}",
            field_name=field_name,
            value=value
        )
    if int_value < min_value:
        raise ValidationError(
            f"{field_name} must be >= {min_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    if max_value is not None and int_value > max_value:
        raise ValidationError(
            f"{field_name} must be <= {max_value}, got {int_value}",
            field_name=field_name,
            value=value
        )
    return int_value


def validate_bool(value: Any, field_name: str = "value") -> bool:
    """Validate that a value is a real boolean."""
    if not isinstance(value, bool):
        raise ValidationError(
            f"{field_name} must be true or false, got {value!r}",
            field_name=field_name,
            value=value
        )
    return value


def validate_non_empty_string(value: Any, field_name: str = "value") -> str:
    """Validate that a value is a non-empty string."""
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=value
        )
    return value


def validate_string_list(value: Any, field_name: str = "value") -> List[str]:
    """
    Validate a list of strings.

    Args:
        value: Value to validate
        field_name: Name of the field being validated

    Returns:
        The list, copied

    Raises:
        ValidationError: If value is not a list or holds non-string items
    """
    if not isinstance(value, (list, tuple)):
        raise ValidationError(
            f"{field_name} must be a list of strings, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    for i, item in enumerate(value):
        if not isinstance(item, str):
            raise ValidationError(
                f"{field_name} item {i} must be a string, got {item!r}",
                field_name=field_name,
                value=value
            )
    return list(value)


def validate_argv(value: Any, field_name: str = "argv") -> List[str]:
    """
    Validate a command argv: a non-empty list of strings.

    Raises:
        ValidationError: If argv is not a list of strings or is empty
    """
    argv = validate_string_list(value, field_name=field_name)
    if not argv:
        raise ValidationError(
            f"{field_name} must contain at least the program to run",
            field_name=field_name,
            value=value
        )
    return argv


def validate_argv_list(value: Any, field_name: str = "hooks") -> List[List[str]]:
    """
    Validate a hook list: a list of argv lists.

    Empty argv entries are accepted here; the hook runner rejects them when
    the stage actually runs.
    """
    if not isinstance(value, (list, tuple)):
        raise ValidationError(
            f"{field_name} must be a list of commands, got {type(value).__name__}",
            field_name=field_name,
            value=value
        )
    return [
        validate_string_list(argv, field_name=f"{field_name}[{i}]")
        for i, argv in enumerate(value)
    ]


def validate_glob_pattern(pattern: Any, field_name: str = "glob_pattern") -> str:
    """
    Validate glob pattern syntax.

    Rejects empty patterns, unclosed ``[...]`` classes, unbalanced ``{...}``
    alternations, and a trailing escape character.

    Args:
        pattern: Glob pattern to validate
        field_name: Name of the field being validated

    Returns:
        Validated pattern

    Raises:
        ValidationError: If pattern is invalid
    """
    if not pattern or not isinstance(pattern, str):
        raise ValidationError(
            f"{field_name} must be a non-empty string",
            field_name=field_name,
            value=pattern
        )

    depth = 0
    i = 0
    length = len(pattern)
    while i < length:
        char = pattern[i]
        if char == "\\":
            if i + 1 >= length:
                raise ValidationError(
                    f"{field_name} has a dangling escape: {pattern}",
                    field_name=field_name,
                    value=pattern
                )
            i += 2
            continue
        if char == "[":
            # A leading '!' or '^' negates; a ']' right after the opening is literal.
            j = i + 1
            if j < length and pattern[j] in "!^":
                j += 1
            if j < length and pattern[j] == "]":
                j += 1
            while j < length and pattern[j] != "]":
                j += 2 if pattern[j] == "\\" else 1
            if j >= length:
                raise ValidationError(
                    f"{field_name} has an unclosed character class: {pattern}",
                    field_name=field_name,
                    value=pattern
                )
            i = j + 1
            continue
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth < 0:
                raise ValidationError(
                    f"{field_name} has an unopened alternation: {pattern}",
                    field_name=field_name,
                    value=pattern
                )
        i += 1

    if depth:
        raise ValidationError(
            f"{field_name} has an unclosed alternation: {pattern}",
            field_name=field_name,
            value=pattern
        )
    return pattern
