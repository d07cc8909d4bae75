"""
Platform matrix exchange.

Jobs hand image records to each other as a JSON `{"include": [...]}`
document, the shape a workflow matrix expects.
"""

import json
import logging

from constants import EMPTY_MATRIX
from core.definitions import records_from_entries
from core.exceptions import ValidationException
from core.models import ImageSyncRecord

logger = logging.getLogger(__name__)


def build_matrix(records: list[ImageSyncRecord]) -> dict:
    """Build a `{"include": [...]}` matrix from records."""
    return {"include": [record.to_dict() for record in records]}


def matrix_to_json(records: list[ImageSyncRecord]) -> str:
    """Serialize records as a compact matrix JSON string."""
    if not records:
        return EMPTY_MATRIX
    return json.dumps(build_matrix(records), separators=(",", ":"))


def parse_matrix(matrix_json: str) -> list[ImageSyncRecord]:
    """
    Parse a matrix JSON string back into records.

    Args:
        matrix_json: Matrix JSON (`{"include": [...]}`)

    Returns:
        Actionable records; incomplete entries are dropped with a warning

    Raises:
        ValidationException: If the JSON is invalid or `include` is not a list
    """
    if not matrix_json or not matrix_json.strip():
        raise ValidationException("Matrix JSON cannot be empty", "matrix")

    try:
        matrix_data = json.loads(matrix_json)
    except json.JSONDecodeError as e:
        raise ValidationException(f"Failed to parse matrix JSON: {e}", "matrix") from e

    if not isinstance(matrix_data, dict):
        raise ValidationException("Invalid matrix format - expected a JSON object", "matrix")

    entries = matrix_data.get("include", [])
    if not isinstance(entries, list):
        raise ValidationException("Invalid matrix format - 'include' key is not a list", "matrix")

    return records_from_entries(entries, source="matrix")
