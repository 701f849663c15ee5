"""User-facing hints for configuration validation errors."""

from typing import Final


ERROR_HINTS: Final[dict[str, str]] = {
    "missing": "This field is required. Please add it to your configuration.",
    "extra_forbidden": "Unknown field. Check the spelling against the documented keys.",
    "enum": "Check the allowed values in the documentation.",
    "int_type": "This field must be an integer (whole number).",
    "int_parsing": "This field must be an integer (whole number).",
    "float_type": "This field must be a number.",
    "float_parsing": "This field must be a number.",
    "string_type": "This field must be a text string.",
    "bool_type": "This field must be true or false.",
    "list_type": "This field must be a list.",
    "dict_type": "This field must be a mapping.",
    "greater_than_equal": "The value is too small. Check the minimum allowed.",
    "less_than_equal": "The value is too large. Check the maximum allowed.",
    "string_too_short": "The text is too short. Check minimum length requirement.",
    "string_pattern_mismatch": "The format is invalid for this field.",
    "value_error": "Check the value format and constraints for this field.",
    "file_not_found": "The file does not exist. Check the file path.",
    "yaml_parse_error": "Invalid YAML syntax. Check indentation and quoting.",
}

FIELD_HINTS: Final[dict[str, str]] = {
    "id": "Use lowercase letters, numbers, hyphens, or underscores (e.g., 'openai-blog').",
    "url": "Must be a valid HTTP/HTTPS URL (e.g., 'https://example.com/feed.xml').",
    "tier": "Must be 1 (parallel, always fetched) or 2 (proxy fallback).",
    "method": "Must be one of: rss_atom, reddit_hot, hackernews_top.",
    "strategies": "Must be a non-empty list of: allorigins, direct.",
    "content_type": "Must be one of: blog, audio, video.",
    "weights": "Signal weights must each lie in [0, 1] and sum to 1.0.",
    "timezone": "Use an IANA zone name such as 'UTC' or 'America/New_York'.",
    "proxy_url_template": "Must contain a '{url}' placeholder.",
    "detail_url_template": "Must contain an '{id}' placeholder.",
}


def get_error_hint(error_type: str, field_name: str | None = None) -> str:
    """Get a user-friendly hint for a validation error.

    Args:
        error_type: The Pydantic error type (e.g., 'missing', 'enum').
        field_name: Optional dotted field path for field-specific hints.

    Returns:
        A user-friendly hint string.
    """
    if field_name:
        # 'sources.sources.0.id' -> 'id'
        simple_field = field_name.split(".")[-1]
        if simple_field in FIELD_HINTS:
            return FIELD_HINTS[simple_field]

    return ERROR_HINTS.get(
        error_type, "Check the configuration documentation for valid values."
    )


def format_validation_error(
    location: str,
    message: str,
    error_type: str,
    *,
    include_hint: bool = True,
) -> str:
    """Format a validation error with optional hint."""
    base = f"{location}: {message}"
    if include_hint:
        hint = get_error_hint(error_type, location)
        return f"{base}\n    Hint: {hint}"
    return base
