"""
Shared validation functions for Pydantic schemas.

This module contains validators used across the folder and resource schemas.
Limits come from settings so deployments can tune them without code changes.
"""
from core.config import get_settings


def validate_and_normalize_tag(tag: str) -> str:
    """
    Normalize and validate a single tag.

    Args:
        tag: The tag string to validate.

    Returns:
        The normalized tag (lowercase, trimmed).

    Raises:
        ValueError: If tag is empty or too long.
    """
    settings = get_settings()
    normalized = tag.lower().strip()
    if not normalized:
        raise ValueError("Tag name cannot be empty")
    if len(normalized) > settings.max_tag_length:
        raise ValueError(
            f"Tag '{normalized[:20]}...' exceeds maximum length of "
            f"{settings.max_tag_length} characters.",
        )
    return normalized


def validate_and_normalize_tags(tags: list[str]) -> list[str]:
    """
    Normalize and validate a list of tags.

    Args:
        tags: List of tag strings to validate.

    Returns:
        List of normalized tags (lowercase, trimmed), with empty strings filtered out
        and duplicates removed (preserving first occurrence order).

    Raises:
        ValueError: If any tag is too long.
    """
    normalized = []
    seen: set[str] = set()
    for tag in tags:
        trimmed = tag.lower().strip()
        if not trimmed:
            continue  # Skip empty tags silently
        validated = validate_and_normalize_tag(trimmed)
        if validated not in seen:
            seen.add(validated)
            normalized.append(validated)
    return normalized


def split_tag_params(values: list[str]) -> list[str]:
    """
    Flatten tag query parameters that may be repeated and/or comma-separated.

    `?tags=react,vue&tags=python` -> ['react', 'vue', 'python'] (not yet normalized).
    """
    return [part for value in values for part in value.split(",")]


def coerce_tag_input(value: object) -> list[str]:
    """
    Accept tags as a list of strings or a single (possibly comma-separated) string.

    `"react, vue"` -> ['react', ' vue'] (not yet normalized).

    Raises:
        ValueError: If value is neither a string nor a list of strings.
    """
    if isinstance(value, str):
        return split_tag_params([value])
    if not isinstance(value, list | tuple) or not all(isinstance(tag, str) for tag in value):
        raise ValueError("Tags must be a list of strings")
    return list(value)


def normalize_folder_ref(value: object) -> object:
    """An empty folder id means unfiled."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def _check_max_length(label: str, value: str | None, max_length: int) -> str | None:
    if value is not None and len(value) > max_length:
        raise ValueError(
            f"{label} exceeds maximum length of {max_length:,} characters "
            f"(got {len(value):,} characters).",
        )
    return value


def validate_title(title: str) -> str:
    """Validate that a title is present and within the length limit. Returns it trimmed."""
    trimmed = title.strip()
    if not trimmed:
        raise ValueError("Title is required")
    return _check_max_length("Title", trimmed, get_settings().max_title_length)


def validate_annotations_length(annotations: str | None) -> str | None:
    """Validate that annotations don't exceed maximum length."""
    return _check_max_length(
        "Annotations", annotations, get_settings().max_annotations_length,
    )


def validate_description_length(description: str | None) -> str | None:
    """Validate that description doesn't exceed maximum length."""
    return _check_max_length(
        "Description", description, get_settings().max_description_length,
    )


def validate_content_length(content: str | None) -> str | None:
    """Validate that content doesn't exceed maximum length."""
    return _check_max_length("Content", content, get_settings().max_content_length)


def validate_folder_name(name: str) -> str:
    """
    Validate a folder name.

    Returns:
        The trimmed name.

    Raises:
        ValueError: If the name is empty or too long.
    """
    trimmed = name.strip()
    if not trimmed:
        raise ValueError("Folder name is required")
    max_length = get_settings().max_folder_name_length
    if len(trimmed) > max_length:
        raise ValueError(f"Folder name cannot exceed {max_length} characters")
    return trimmed
