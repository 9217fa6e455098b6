"""Collection document variable upsert.

An API test collection is a JSON object whose optional top-level
`variable` field holds a list of `{"key", "value", "type"}` records.
The runner reads variables from there, so the auth token is injected into
the file on disk before the runner starts.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from monorun.core.errors import CollectionParseError
from monorun.infra.io.console import Colors, log

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

AUTH_TOKEN_KEY = "authToken"


def inject_variable(
    document: dict[str, Any], key: str, value: str, *, path: Path | None = None
) -> dict[str, Any]:
    """Set variable `key` to `value`, appending a record if none exists.

    Mutates and returns `document`. The first record matching `key` is
    updated; other records and their order are untouched. A missing or
    non-list `variable` field is replaced by a one-record list. Applying the
    same call twice leaves the document unchanged.

    Raises:
        CollectionParseError: If document is not a JSON object.
    """
    if not isinstance(document, dict):
        raise CollectionParseError(
            path, f"expected a JSON object, got {type(document).__name__}"
        )

    variables = document.get("variable")
    if not isinstance(variables, list):
        document["variable"] = [{"key": key, "value": value, "type": "string"}]
        return document

    for record in variables:
        if isinstance(record, dict) and record.get("key") == key:
            record["value"] = value
            return document

    variables.append({"key": key, "value": value, "type": "string"})
    return document


def load_collection(path: Path) -> dict[str, Any]:
    """Read a collection document.

    Raises:
        CollectionParseError: If the file is unreadable, is not valid JSON,
            or does not hold a JSON object.
    """
    try:
        document = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise CollectionParseError(path, e.strerror or str(e)) from e
    except UnicodeDecodeError as e:
        raise CollectionParseError(path, f"not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise CollectionParseError(path, f"invalid JSON: {e}") from e
    if not isinstance(document, dict):
        raise CollectionParseError(
            path, f"expected a JSON object, got {type(document).__name__}"
        )
    return document


def write_collection(path: Path, document: dict[str, Any]) -> None:
    """Write a collection document back with 2-space indentation."""
    try:
        path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
        )
    except OSError as e:
        raise CollectionParseError(path, f"cannot write: {e.strerror or e}") from e


def inject_auth_token(path: Path, token: str) -> None:
    """Upsert the auth token variable in the collection file at `path`.

    Raises:
        CollectionParseError: If the collection cannot be read, parsed or
            written. The runner must not start against such a collection.
    """
    log("🔑", "Injecting auth token into collection...", Colors.CYAN)
    log("📄", f"Path: {path}", Colors.MUTED)
    document = load_collection(path)
    inject_variable(document, AUTH_TOKEN_KEY, token, path=path)
    write_collection(path, document)
    log("✓", "Auth token injected", Colors.GREEN)
