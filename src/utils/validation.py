"""
Input validation utilities for Image Sync.

Provides validation functions for image references, digests and numeric
options before they reach the container engine.
"""

import re
from typing import Optional

from core.exceptions import ValidationException

INVALID_REFERENCE_CHARS = ['"', "'", ";", "&", "|", "$", "`", "\n", "\r", " "]

DIGEST_PATTERN = re.compile(r"^[a-z0-9]+([+._-][a-z0-9]+)*:[a-fA-F0-9]{32,}$")


def validate_image_reference(image: str, field_name: str = "image") -> str:
    """
    Validate and normalize container image reference.

    Accepts tag references (`repo:tag`) and digest references (`repo@sha256:...`).

    Args:
        image: Image reference to validate
        field_name: Field name for error messages

    Returns:
        Normalized image reference

    Raises:
        ValidationException: If image reference is invalid

    Examples:
        >>> validate_image_reference("nginx:1.25")
        'nginx:1.25'
        >>> validate_image_reference("ghcr.io/acme/nginx:1.25")
        'ghcr.io/acme/nginx:1.25'
    """
    if not image or not image.strip():
        raise ValidationException("Image reference cannot be empty", field_name)

    image = image.strip()

    if any(char in image for char in INVALID_REFERENCE_CHARS):
        raise ValidationException(
            f"Image reference contains invalid characters: {image}",
            field_name
        )

    name, _, digest = image.partition("@")
    if digest and not DIGEST_PATTERN.match(digest):
        raise ValidationException(f"Invalid digest in image reference: {image}", field_name)

    # registry[:port]/repo[/...][:tag]
    pattern = (
        r'^[a-z0-9]+([\._\-][a-z0-9]+)*(:[0-9]+)?'
        r'(\/[a-z0-9]+([\._\-][a-z0-9]+)*)*(:[a-zA-Z0-9_][a-zA-Z0-9\._\-]{0,127})?$'
    )
    if not re.match(pattern, name, re.IGNORECASE):
        raise ValidationException(
            f"Invalid image reference format: {image}",
            field_name
        )

    return image


def validate_digest(digest: str, field_name: str = "digest") -> str:
    """
    Validate a content digest such as `sha256:<hex>`.

    Raises:
        ValidationException: If the digest is malformed
    """
    digest = (digest or "").strip()
    if not DIGEST_PATTERN.match(digest):
        raise ValidationException(f"Invalid digest: {digest or '<empty>'}", field_name)
    return digest


def validate_destination_reference(reference: str, registry: str) -> str:
    """
    Check a destination reference has the shape `registry/owner/name:tag`.

    Args:
        reference: Full destination reference
        registry: Expected registry hostname

    Returns:
        The reference unchanged

    Raises:
        ValidationException: If the reference is malformed
    """
    pattern = rf"^{re.escape(registry)}/[^/]+/[^:]+:.+$"
    if not re.match(pattern, reference or ""):
        raise ValidationException(
            f"Invalid {registry} image format for tagging: {reference}",
            "destination"
        )
    return reference


def validate_positive_number(
    value: float,
    field_name: str,
    min_value: float = 0.0,
    max_value: Optional[float] = None,
) -> float:
    """
    Validate numeric value is within acceptable range.

    Raises:
        ValidationException: If value is out of range
    """
    if value < min_value:
        raise ValidationException(
            f"Value must be >= {min_value}, got {value}",
            field_name
        )

    if max_value is not None and value > max_value:
        raise ValidationException(
            f"Value must be <= {max_value}, got {value}",
            field_name
        )

    return value


__all__ = [
    "validate_image_reference",
    "validate_digest",
    "validate_destination_reference",
    "validate_positive_number",
]
