"""
Logging helper utilities for the imagesync CLI.

Provides consistent formatting for error sections, warnings, and banners
so workflow logs stay readable.
"""

import logging
from typing import Iterable, List, Optional


def _log_section(
    log_func,
    title: str,
    messages: Iterable[str],
    width: int,
) -> None:
    log_func("=" * width)
    log_func(title)
    for message in messages:
        # Empty strings are kept as blank lines
        log_func(message or "")
    log_func("=" * width)


def log_error_section(
    title: str,
    messages: List[str],
    logger: Optional[logging.Logger] = None,
    width: int = 60
) -> None:
    """
    Log an error section with separator lines and multiple messages.

    Args:
        title: Title message for the error section
        messages: List of error messages to display
        logger: Logger instance (defaults to root logger if not provided)
        width: Width of separator line in characters

    Examples:
        >>> log_error_section(
        ...     "Push failed",
        ...     ["ghcr.io/acme/nginx:1.25", "Run: docker login ghcr.io"]
        ... )
        ============================================================
        Push failed
        ghcr.io/acme/nginx:1.25
        Run: docker login ghcr.io
        ============================================================
    """
    logger = logger or logging.getLogger()
    _log_section(logger.error, title, messages, width)


def log_info_header(
    message: str,
    logger: Optional[logging.Logger] = None,
    width: int = 50,
    char: str = "-"
) -> None:
    """
    Log an informational header with separator lines.

    Examples:
        >>> log_info_header("Syncing Image")
        --------------------------------------------------
        Syncing Image
        --------------------------------------------------
    """
    logger = logger or logging.getLogger()
    logger.info(char * width)
    logger.info(message)
    logger.info(char * width)


def log_item_list(
    title: str,
    items: Iterable[str],
    logger: Optional[logging.Logger] = None,
    empty_message: Optional[str] = None,
) -> None:
    """
    Log a titled bullet list, or `empty_message` when there are no items.

    Examples:
        >>> log_item_list("📋 Skipped Images (already in GHCR):", ["ghcr.io/acme/nginx:1.25"])
        📋 Skipped Images (already in GHCR):
         - ghcr.io/acme/nginx:1.25
    """
    logger = logger or logging.getLogger()
    items = list(items)
    if not items:
        if empty_message:
            logger.info(empty_message)
        return
    logger.info(title)
    for item in items:
        logger.info(f" - {item}")
