"""
Image sync definition discovery.

Definition files are YAML documents holding either one image mapping or a
list of them. All files under the definitions directory are flattened into
one list of records; entries missing a required field are dropped.
"""

import logging
from pathlib import Path
from typing import Any, Iterable, Union

import yaml

from constants import DEFINITION_FILE_SUFFIXES, REQUIRED_RECORD_FIELDS
from core.exceptions import DefinitionException
from core.models import ImageSyncRecord

logger = logging.getLogger(__name__)


def find_definition_files(directory: Union[str, Path]) -> list[Path]:
    """
    Find every definition file under a directory, recursively.

    Args:
        directory: Definitions directory

    Returns:
        Sorted list of YAML file paths (empty if the directory is missing)
    """
    root = Path(directory)
    if not root.is_dir():
        logger.warning(f"Definitions directory not found: {root}")
        return []

    return sorted(
        path
        for path in root.rglob("*")
        if path.is_file() and path.suffix in DEFINITION_FILE_SUFFIXES
    )


def load_definition_file(path: Path) -> list[Any]:
    """
    Parse one definition file into a flat list of entries.

    Scalars are loaded as strings exactly as written, so unquoted tags such
    as `3.10` or `010` are kept verbatim.

    Raises:
        DefinitionException: If the file cannot be read or parsed
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            # Scalars stay strings: "3.10" is a tag, not a float
            data = yaml.load(f, Loader=yaml.BaseLoader)
    except yaml.YAMLError as e:
        raise DefinitionException(str(path), f"invalid YAML: {e}") from e
    except OSError as e:
        raise DefinitionException(str(path), str(e)) from e

    if data is None:
        return []
    if isinstance(data, list):
        return data
    return [data]


def records_from_entries(entries: Iterable[Any], source: str = "definitions") -> list[ImageSyncRecord]:
    """
    Convert raw entries into records, dropping incomplete and duplicate ones.

    Args:
        entries: Raw mappings from definition files or a matrix
        source: Where the entries came from (for log messages)

    Returns:
        Actionable records in input order
    """
    records: list[ImageSyncRecord] = []
    seen_destinations: set[tuple[str, str]] = set()

    for entry in entries:
        record = ImageSyncRecord.from_dict(entry)
        if record is None:
            missing = _missing_fields(entry)
            logger.warning(
                f"⚠️ Skipping invalid entry in {source}: {entry} - "
                f"missing required keys: {', '.join(missing)}"
            )
            continue

        destination = (record.destination_package, record.destination_tag)
        if destination in seen_destinations:
            logger.warning(
                f"⚠️ Duplicate destination {record.destination_package}:{record.destination_tag} "
                f"in {source}, keeping the first definition"
            )
            continue

        seen_destinations.add(destination)
        records.append(record)

    return records


def _missing_fields(entry: Any) -> list[str]:
    if not isinstance(entry, dict):
        return list(REQUIRED_RECORD_FIELDS)
    return [
        key for key in REQUIRED_RECORD_FIELDS
        if entry.get(key) is None or not str(entry.get(key)).strip()
    ]


def discover_records(directory: Union[str, Path]) -> list[ImageSyncRecord]:
    """
    Discover all actionable image sync records under a directory.

    Args:
        directory: Definitions directory

    Returns:
        List of ImageSyncRecord

    Raises:
        DefinitionException: If any definition file is unreadable
    """
    logger.info(f"ℹ️ Finding YAML files in {directory}/ ...")
    entries: list[Any] = []
    for path in find_definition_files(directory):
        file_entries = load_definition_file(path)
        logger.debug(f"Loaded {len(file_entries)} entries from {path}")
        entries.extend(file_entries)

    records = records_from_entries(entries, source=str(directory))
    logger.info(f"Found {len(records)} valid image definitions ({len(entries)} entries total)")
    return records
