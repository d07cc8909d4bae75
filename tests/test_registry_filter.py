"""Tests for the destination registry existence filter."""

from core.registry_filter import filter_existing_images


class TestFilterExistingImages:
    """Tests for filter_existing_images."""

    def test_existing_images_skipped(self, mock_docker_client, nginx_record, redis_record):
        mock_docker_client.manifest_exists.side_effect = (
            lambda ref: ref == "ghcr.io/acme/nginx:1.25"
        )

        result = filter_existing_images(
            [nginx_record, redis_record], mock_docker_client, "ghcr.io", "acme"
        )

        assert result.to_sync == [redis_record]
        assert result.skipped == ["ghcr.io/acme/nginx:1.25"]

    def test_missing_images_kept_in_order(self, mock_docker_client, nginx_record, redis_record):
        result = filter_existing_images(
            [nginx_record, redis_record], mock_docker_client, "ghcr.io", "acme"
        )
        assert result.to_sync == [nginx_record, redis_record]
        assert result.skipped == []

    def test_owner_lowercased_in_check(self, mock_docker_client, nginx_record):
        filter_existing_images([nginx_record], mock_docker_client, "ghcr.io", "AcMe")
        mock_docker_client.manifest_exists.assert_called_once_with("ghcr.io/acme/nginx:1.25")

    def test_all_present(self, mock_docker_client, nginx_record):
        mock_docker_client.manifest_exists.return_value = True
        result = filter_existing_images([nginx_record], mock_docker_client, "ghcr.io", "acme")
        assert result.to_sync == []
        assert len(result.skipped) == 1

    def test_empty_input(self, mock_docker_client):
        result = filter_existing_images([], mock_docker_client, "ghcr.io", "acme")
        assert result.to_sync == []
        mock_docker_client.manifest_exists.assert_not_called()
