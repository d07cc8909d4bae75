"""Tests for image definition discovery."""

import pytest

from core.definitions import (
    discover_records,
    find_definition_files,
    load_definition_file,
    records_from_entries,
)
from core.exceptions import DefinitionException


class TestFindDefinitionFiles:
    """Tests for definition file discovery."""

    def test_finds_yml_and_yaml_recursively(self, definitions_dir):
        files = find_definition_files(definitions_dir)
        names = [f.name for f in files]
        assert sorted(names) == ["nginx.yml", "redis.yaml"]
        assert "README.md" not in names

    def test_missing_directory_returns_empty(self, tmp_path):
        assert find_definition_files(tmp_path / "does-not-exist") == []


class TestLoadDefinitionFile:
    """Tests for parsing definition files."""

    def test_single_mapping_becomes_list(self, definitions_dir):
        entries = load_definition_file(definitions_dir / "redis.yaml")
        assert len(entries) == 1
        assert entries[0]["ghcr_package_name"] == "redis"

    def test_list_file(self, definitions_dir):
        entries = load_definition_file(definitions_dir / "web" / "nginx.yml")
        assert len(entries) == 2

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yml"
        path.write_text("")
        assert load_definition_file(path) == []

    def test_unquoted_scalars_kept_verbatim(self, tmp_path):
        """Unquoted tags keep their literal text."""
        path = tmp_path / "python.yml"
        path.write_text(
            "- ghcr_tag: 3.10\n"
            "  dockerhub_tag: 010\n"
            "  ghcr_package_name: yes\n"
        )
        entry = load_definition_file(path)[0]
        assert entry == {"ghcr_tag": "3.10", "dockerhub_tag": "010", "ghcr_package_name": "yes"}

    def test_invalid_yaml_raises(self, tmp_path):
        path = tmp_path / "broken.yml"
        path.write_text("- dockerhub_repository: [unclosed\n")
        with pytest.raises(DefinitionException) as exc:
            load_definition_file(path)
        assert "broken.yml" in str(exc.value)


class TestRecordsFromEntries:
    """Tests for record filtering."""

    def test_discards_incomplete_entries(self, nginx_definition):
        incomplete = dict(nginx_definition)
        del incomplete["dockerhub_digest"]
        records = records_from_entries([nginx_definition, incomplete, "garbage", None])
        assert len(records) == 1
        assert records[0].destination_tag == "1.25"

    def test_keeps_first_duplicate_destination(self, nginx_definition):
        duplicate = dict(nginx_definition, dockerhub_tag="mainline")
        records = records_from_entries([nginx_definition, duplicate])
        assert len(records) == 1
        assert records[0].source_tag == "1.25"


class TestDiscoverRecords:
    """End-to-end discovery over a directory."""

    def test_discovers_only_actionable_records(self, definitions_dir):
        records = discover_records(definitions_dir)
        packages = sorted((r.destination_package, r.destination_tag) for r in records)
        # nginx 1.24 has no digest and is dropped
        assert packages == [("nginx", "1.25"), ("redis", "7.2-alpine")]

    def test_empty_directory(self, tmp_path):
        assert discover_records(tmp_path) == []

    def test_similar_numeric_tags_are_distinct(self, tmp_path):
        """Tags 3.10 and 3.1 are separate destinations."""
        digest = "sha256:" + "c" * 64
        (tmp_path / "python.yml").write_text(
            "- dockerhub_repository: library/python\n"
            "  dockerhub_tag: 3.10\n"
            f"  dockerhub_digest: {digest}\n"
            "  ghcr_package_name: python\n"
            "  ghcr_tag: 3.10\n"
            "- dockerhub_repository: library/python\n"
            "  dockerhub_tag: 3.1\n"
            f"  dockerhub_digest: {digest}\n"
            "  ghcr_package_name: python\n"
            "  ghcr_tag: 3.1\n"
        )

        records = discover_records(tmp_path)

        assert [r.destination_tag for r in records] == ["3.10", "3.1"]
        assert records[0].source_tag == "3.10"
