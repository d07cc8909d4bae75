"""
Error classification for registry and container engine failures.

Categorizes Docker/registry error output so failure logs and summaries
can point at the likely cause.
"""

from enum import Enum
from dataclasses import dataclass
import re


class ErrorCategory(str, Enum):
    """
    Error categories reported in sync failure summaries.
    """
    AUTH = "auth"
    """Missing or rejected registry credentials"""

    RATE_LIMIT = "rate_limit"
    """Registry rate limiting"""

    NOT_FOUND = "not_found"
    """Repository, tag or digest does not exist"""

    NETWORK = "network"
    """DNS, connection and transport errors"""

    TIMEOUT = "timeout"
    """Command exceeded its time budget"""

    UNKNOWN = "unknown"
    """Anything else"""


@dataclass(frozen=True)
class ClassifiedError:
    """
    An error with its classification.
    """
    category: ErrorCategory
    original_message: str

    @property
    def hint(self) -> str:
        """Short remediation hint for logs."""
        return _HINTS[self.category]


_HINTS = {
    ErrorCategory.AUTH: "check registry credentials (docker login <registry>) and package write permission",
    ErrorCategory.RATE_LIMIT: "registry is rate limiting; wait and retry",
    ErrorCategory.NOT_FOUND: "verify repository, tag and digest in the definition file",
    ErrorCategory.NETWORK: "check network connectivity to the registry",
    ErrorCategory.TIMEOUT: "registry operation timed out",
    ErrorCategory.UNKNOWN: "see error output above",
}


class ErrorClassifier:
    """
    Classifies Docker/registry errors into categories.
    """

    AUTH_PATTERNS = [
        r"\b401\b",
        r"\b403\b",
        r"unauthorized",
        r"forbidden",
        r"denied",
        r"authentication required",
        r"no basic auth credentials",
        r"not authorized",
        r"token expired",
        r"invalid token",
    ]

    RATE_LIMIT_PATTERNS = [
        r"toomanyrequests",
        r"rate limit",
        r"too many requests",
        r"\b429\b",
    ]

    NOT_FOUND_PATTERNS = [
        r"not found",
        r"manifest unknown",
        r"does not exist",
        r"no such image",
        r"\b404\b",
    ]

    NETWORK_PATTERNS = [
        r"no such host",
        r"could not resolve host",
        r"temporary failure in name resolution",
        r"connection refused",
        r"connection reset",
        r"network is unreachable",
        r"broken pipe",
        r"i/o timeout",
        r"tls handshake",
        r"unexpected eof",
        r"\b50[0234]\b",
    ]

    TIMEOUT_PATTERNS = [
        r"^timeout$",
        r"timed out",
        r"deadline exceeded",
    ]

    @classmethod
    def classify(cls, error_message: str) -> ClassifiedError:
        """
        Classify an error from its message.

        Args:
            error_message: Error output from the container engine

        Returns:
            ClassifiedError with the matching category
        """
        error_lower = (error_message or "").strip().lower()

        # Order matters: auth and rate limit messages often also contain
        # generic network words.
        checks = [
            (cls.AUTH_PATTERNS, ErrorCategory.AUTH),
            (cls.RATE_LIMIT_PATTERNS, ErrorCategory.RATE_LIMIT),
            (cls.TIMEOUT_PATTERNS, ErrorCategory.TIMEOUT),
            (cls.NETWORK_PATTERNS, ErrorCategory.NETWORK),
            (cls.NOT_FOUND_PATTERNS, ErrorCategory.NOT_FOUND),
        ]
        for patterns, category in checks:
            if any(re.search(pattern, error_lower) for pattern in patterns):
                return ClassifiedError(category=category, original_message=error_message)

        return ClassifiedError(category=ErrorCategory.UNKNOWN, original_message=error_message)
