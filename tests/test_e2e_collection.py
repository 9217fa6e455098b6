"""Tests for collection variable upsert."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING

import pytest

from monorun.core.errors import CollectionParseError
from monorun.domain.e2e.collection import (
    inject_auth_token,
    inject_variable,
    load_collection,
)

if TYPE_CHECKING:
    from pathlib import Path


class TestInjectVariable:
    def test_updates_existing_record_in_place(self) -> None:
        document = {
            "variable": [
                {"key": "baseUrl", "value": "https://api", "type": "string"},
                {"key": "authToken", "value": "old", "type": "string"},
            ]
        }

        inject_variable(document, "authToken", "new")

        assert document["variable"] == [
            {"key": "baseUrl", "value": "https://api", "type": "string"},
            {"key": "authToken", "value": "new", "type": "string"},
        ]

    def test_appends_missing_record(self) -> None:
        document = {"variable": [{"key": "baseUrl", "value": "x"}]}

        inject_variable(document, "authToken", "t")

        assert document["variable"][-1] == {
            "key": "authToken",
            "value": "t",
            "type": "string",
        }
        assert len(document["variable"]) == 2

    @pytest.mark.parametrize("variable", [None, "oops", {"key": "authToken"}])
    def test_missing_or_non_list_variable_becomes_single_record(
        self, variable: object
    ) -> None:
        document: dict[str, object] = {"info": {"name": "api"}}
        if variable is not None:
            document["variable"] = variable

        inject_variable(document, "authToken", "t")

        assert document["variable"] == [
            {"key": "authToken", "value": "t", "type": "string"}
        ]
        assert document["info"] == {"name": "api"}

    def test_is_idempotent(self) -> None:
        document = {"variable": []}

        inject_variable(document, "authToken", "t")
        once = json.dumps(document)
        inject_variable(document, "authToken", "t")

        assert json.dumps(document) == once

    def test_only_first_matching_record_is_updated(self) -> None:
        document = {
            "variable": [
                {"key": "authToken", "value": "a"},
                {"key": "authToken", "value": "b"},
            ]
        }

        inject_variable(document, "authToken", "z")

        assert [r["value"] for r in document["variable"]] == ["z", "b"]

    def test_non_object_document_raises(self) -> None:
        with pytest.raises(CollectionParseError):
            inject_variable([], "authToken", "t")  # type: ignore[arg-type]


class TestCollectionFile:
    def test_inject_auth_token_rewrites_file(self, tmp_path: Path) -> None:
        path = tmp_path / "collection.json"
        path.write_text(
            json.dumps({"info": {"name": "Café API"}, "variable": [], "item": []})
        )

        inject_auth_token(path, "secret")

        text = path.read_text(encoding="utf-8")
        assert "Café" in text
        assert text.startswith('{\n  "info"')
        document = json.loads(text)
        assert list(document) == ["info", "variable", "item"]
        assert document["variable"] == [
            {"key": "authToken", "value": "secret", "type": "string"}
        ]

    def test_malformed_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "collection.json"
        path.write_text("{not json")

        with pytest.raises(CollectionParseError) as exc_info:
            inject_auth_token(path, "secret")

        assert exc_info.value.path == path
        assert path.read_text() == "{not json"

    def test_non_utf8_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "collection.json"
        path.write_bytes(b'{"info": "\xff"}')

        with pytest.raises(CollectionParseError) as exc_info:
            load_collection(path)

        assert exc_info.value.path == path
        assert "not valid UTF-8" in str(exc_info.value)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(CollectionParseError):
            load_collection(tmp_path / "missing.json")

    def test_top_level_array_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "collection.json"
        path.write_text("[]")
        with pytest.raises(CollectionParseError):
            load_collection(path)
