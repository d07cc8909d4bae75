"""Tests for registry error classification."""

import pytest

from core.error_classification import ClassifiedError, ErrorCategory, ErrorClassifier


class TestErrorClassifier:
    """Tests for ErrorClassifier.classify."""

    @pytest.mark.parametrize("message,category", [
        ("unauthorized: authentication required", ErrorCategory.AUTH),
        ("denied: permission_denied: write_package", ErrorCategory.AUTH),
        ("Error response from daemon: Head ...: 401 Unauthorized", ErrorCategory.AUTH),
        ("toomanyrequests: You have reached your pull rate limit.", ErrorCategory.RATE_LIMIT),
        ("received unexpected HTTP status: 429 Too Many Requests", ErrorCategory.RATE_LIMIT),
        ("manifest for library/nginx@sha256:abc not found: manifest unknown", ErrorCategory.NOT_FOUND),
        ("dial tcp: lookup registry-1.docker.io: no such host", ErrorCategory.NETWORK),
        ("read: connection reset by peer", ErrorCategory.NETWORK),
        ("received unexpected HTTP status: 503 Service Unavailable", ErrorCategory.NETWORK),
        ("timeout", ErrorCategory.TIMEOUT),
        ("context deadline exceeded", ErrorCategory.TIMEOUT),
        ("something odd happened", ErrorCategory.UNKNOWN),
        ("", ErrorCategory.UNKNOWN),
    ])
    def test_classify(self, message, category):
        assert ErrorClassifier.classify(message).category == category

    def test_auth_wins_over_not_found(self):
        """Registries answer 'denied' for private repositories that also look missing."""
        result = ErrorClassifier.classify("pull access denied, repository does not exist")
        assert result.category == ErrorCategory.AUTH

    def test_keeps_original_message(self):
        result = ErrorClassifier.classify("Unauthorized")
        assert result.original_message == "Unauthorized"

    def test_none_message(self):
        assert ErrorClassifier.classify(None).category == ErrorCategory.UNKNOWN


class TestClassifiedError:
    """Tests for remediation hints."""

    def test_every_category_has_hint(self):
        for category in ErrorCategory:
            assert ClassifiedError(category, "").hint

    def test_category_values_are_strings(self):
        assert ErrorCategory.RATE_LIMIT == "rate_limit"
