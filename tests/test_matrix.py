"""Tests for matrix serialization and parsing."""

import json

import pytest

from core.exceptions import ValidationException
from core.matrix import build_matrix, matrix_to_json, parse_matrix


class TestMatrixToJson:
    """Tests for matrix serialization."""

    def test_empty_records_give_empty_include(self):
        assert matrix_to_json([]) == '{"include":[]}'

    def test_records_serialized_in_order(self, nginx_record, redis_record):
        data = json.loads(matrix_to_json([nginx_record, redis_record]))
        assert [e["ghcr_package_name"] for e in data["include"]] == ["nginx", "redis"]
        assert data["include"][0] == nginx_record.to_dict()

    def test_compact_single_line(self, nginx_record):
        """Output must fit on one step output line."""
        output = matrix_to_json([nginx_record])
        assert "\n" not in output
        assert ", " not in output

    def test_build_matrix_shape(self, nginx_record):
        assert build_matrix([nginx_record]) == {"include": [nginx_record.to_dict()]}


class TestParseMatrix:
    """Tests for matrix parsing."""

    def test_round_trip(self, nginx_record, redis_record):
        records = parse_matrix(matrix_to_json([nginx_record, redis_record]))
        assert records == [nginx_record, redis_record]

    def test_empty_include(self):
        assert parse_matrix('{"include":[]}') == []

    def test_missing_include_key(self):
        assert parse_matrix("{}") == []

    def test_incomplete_entries_dropped(self, nginx_definition):
        incomplete = dict(nginx_definition)
        del incomplete["ghcr_tag"]
        matrix = json.dumps({"include": [incomplete]})
        assert parse_matrix(matrix) == []

    @pytest.mark.parametrize("bad_input", ["", "   ", "not json", "[1, 2]", '{"include": "nope"}'])
    def test_invalid_input_raises(self, bad_input):
        with pytest.raises(ValidationException) as exc:
            parse_matrix(bad_input)
        assert exc.value.field == "matrix"
