"""
Unit tests for value validators.

Tests the validators used for config file keys and ignore glob syntax.
"""

import pytest

from hotrebuild.validation import (
    ValidationError,
    validate_argv,
    validate_argv_list,
    validate_bool,
    validate_glob_pattern,
    validate_non_empty_string,
    validate_positive_integer,
    validate_string_list,
)


@pytest.mark.unit
class TestScalarValidators:
    """Test cases for integer, bool and string validators."""

    def test_positive_integer(self):
        assert validate_positive_integer(5) == 5
        assert validate_positive_integer("7") == 7
        assert validate_positive_integer(0, min_value=0) == 0

    def test_positive_integer_bounds(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_positive_integer(0, field_name="debounce_ms")
        assert "debounce_ms" in str(exc_info.value)

        with pytest.raises(ValidationError):
            validate_positive_integer(11, max_value=10)

    @pytest.mark.parametrize("value", [True, "abc", None, [1]])
    def test_positive_integer_rejects_non_integers(self, value):
        with pytest.raises(ValidationError):
            validate_positive_integer(value)

    @pytest.mark.parametrize("value", [0.9, 250.7, "250"])
    def test_strict_integer_rejects_conversions(self, value):
        assert validate_positive_integer(250, min_value=0, strict=True) == 250
        with pytest.raises(ValidationError):
            validate_positive_integer(value, min_value=0, strict=True)

    def test_bool(self):
        assert validate_bool(False) is False
        with pytest.raises(ValidationError):
            validate_bool(1)

    def test_non_empty_string(self):
        assert validate_non_empty_string("demo") == "demo"
        for value in ("", "   ", 3):
            with pytest.raises(ValidationError):
                validate_non_empty_string(value)


@pytest.mark.unit
class TestListValidators:
    """Test cases for string list, argv and hook list validators."""

    def test_string_list_copies(self):
        original = ["a", "b"]
        result = validate_string_list(original)

        assert result == original
        assert result is not original

    def test_string_list_rejects_mixed_items(self):
        with pytest.raises(ValidationError) as exc_info:
            validate_string_list(["a", 1], field_name="watch")
        assert "item 1" in str(exc_info.value)

    def test_argv_must_not_be_empty(self):
        assert validate_argv(["cargo", "build"]) == ["cargo", "build"]
        with pytest.raises(ValidationError):
            validate_argv([])

    def test_argv_list(self):
        assert validate_argv_list([["a"], [], ["b", "c"]]) == [["a"], [], ["b", "c"]]
        assert validate_argv_list([]) == []

    def test_argv_list_rejects_flat_list(self):
        with pytest.raises(ValidationError):
            validate_argv_list(["cargo", "fmt"])


@pytest.mark.unit
class TestGlobPatternValidation:
    """Test cases for ignore glob syntax checks."""

    @pytest.mark.parametrize("pattern", [
        "**/target/**",
        "*.rs",
        "src/[abc]*.rs",
        "src/[!a]*.rs",
        "src/[]]x",
        "**/*.{tmp,bak}",
        "a/{b,{c,d}}/e",
        "literal\\[x",
    ])
    def test_valid_patterns(self, pattern):
        assert validate_glob_pattern(pattern) == pattern

    @pytest.mark.parametrize("pattern", [
        "[invalid",
        "src/[!abc",
        "**/*.{tmp,bak",
        "a}b",
        "trailing\\",
        "",
    ])
    def test_invalid_patterns(self, pattern):
        with pytest.raises(ValidationError):
            validate_glob_pattern(pattern)

    def test_non_string_pattern(self):
        with pytest.raises(ValidationError):
            validate_glob_pattern(None)
