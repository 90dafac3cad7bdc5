from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, Union

logger = logging.getLogger(__name__)

# Payload keys as sent by the editor extension, matched case-insensitively.
_KEY_ALIASES: Dict[str, str] = {
    "fragment": "fragment",
    "position": "position",
    "index": "position",
    "content": "content",
    "contents": "content",
    "executing": "executing",
    "documentid": "owner_file",
    "filename": "owner_file",
}


@dataclass
class Cell:
    """One submitted notebook cell.

    fragment: identity assigned by the editor at first execution; stays fixed
        when the cell is moved.
    position: the cell's current index in the editor.
    content: Go source of the cell.
    executing: set only on the cell that triggered the current run.
    owner_file: the document the cell belongs to.
    """

    fragment: int = 0
    position: int = 0
    content: str = ""
    executing: bool = False
    owner_file: str = ""

    @classmethod
    def from_payload(cls, data: Union[bytes, str]) -> "Cell":
        """Decode a JSON submission record.

        Malformed input never raises: an undecodable record becomes an empty
        Cell and a field of the wrong type keeps its default.
        """
        try:
            if isinstance(data, bytes):
                data = data.decode("utf-8")
            raw = json.loads(data)
        except (UnicodeDecodeError, ValueError) as e:
            logger.warning("Undecodable cell payload, using empty cell: %s", e)
            return cls()
        if not isinstance(raw, dict):
            logger.warning("Cell payload is not an object, using empty cell")
            return cls()

        fields: Dict[str, object] = {}
        for key, value in raw.items():
            name = _KEY_ALIASES.get(str(key).lower())
            if name is None:
                continue
            fields[name] = value

        cell = cls()
        for name, value in fields.items():
            if not _field_type_ok(name, value):
                logger.warning("Ignoring cell field %s of type %s", name, type(value).__name__)
                continue
            if isinstance(value, str):
                value = _repair_text(name, value)
            setattr(cell, name, value)
        return cell


def _repair_text(name: str, value: str) -> str:
    # JSON allows lone surrogates, which cannot be written back out as UTF-8.
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        logger.warning("Replacing unencodable characters in cell field %s", name)
        return value.encode("utf-8", "replace").decode("utf-8")
    return value


def _field_type_ok(name: str, value: object) -> bool:
    if name in {"fragment", "position"}:
        return isinstance(value, int) and not isinstance(value, bool)
    if name == "executing":
        return isinstance(value, bool)
    return isinstance(value, str)
