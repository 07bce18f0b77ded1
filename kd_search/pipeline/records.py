"""
Record source: in-memory records and the JSON library loader.

A library file looks like::

    {"books": [{"title": "...", "author": "...", "summary": "..."}, ...]}

The text field ("summary" by default) is what gets embedded; the whole
entry travels with the point as its payload.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping, Sequence, Union

from kd_search.core.errors import Err, Ok, RecordError, Result


@dataclass(frozen=True, slots=True)
class Record:
    """
    One searchable item.

    Attributes:
        text: the text to embed
        payload: identifying metadata returned with query hits
    """
    text: str
    payload: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls,
        mapping: Mapping[str, Any],
        text_field: str = "summary",
        position: int = 0,
    ) -> Result["Record", RecordError]:
        text = mapping.get(text_field)
        if not isinstance(text, str) or not text.strip():
            return Err(RecordError.missing_text(text_field, position))
        return Ok(cls(text=text, payload=dict(mapping)))

    def label(self, fields: Sequence[str] = ("title",)) -> str:
        """First non-empty payload field among ``fields``, else the text."""
        for name in fields:
            value = self.payload.get(name)
            if value:
                return str(value)
        return self.text

    def to_dict(self) -> dict[str, Any]:
        return dict(self.payload)


def parse_records(
    entries: Sequence[Any],
    text_field: str = "summary",
) -> Result[list[Record], RecordError]:
    """Turn decoded JSON entries into Records, failing on the first bad one."""
    records: list[Record] = []
    for position, entry in enumerate(entries):
        if not isinstance(entry, Mapping):
            return Err(RecordError.malformed(position, f"expected an object, got {type(entry).__name__}"))
        result = Record.from_mapping(entry, text_field, position)
        if result.is_err():
            return result  # type: ignore[return-value]
        records.append(result.unwrap())
    return Ok(records)


def load_records(
    path: Union[str, Path],
    collection_key: str = "books",
    text_field: str = "summary",
) -> Result[list[Record], RecordError]:
    """
    Load records from a JSON file.

    Accepts either an object holding the list under ``collection_key`` or a
    bare top-level list.
    """
    path = Path(path)
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        return Err(RecordError.load_failed(str(path), e.strerror or str(e)))
    except json.JSONDecodeError as e:
        return Err(RecordError.load_failed(str(path), f"invalid JSON: {e}"))

    if isinstance(data, Mapping):
        if collection_key not in data:
            return Err(RecordError.load_failed(str(path), f"missing key '{collection_key}'"))
        entries = data[collection_key]
    else:
        entries = data

    if not isinstance(entries, list):
        return Err(RecordError.load_failed(str(path), "records must be a JSON array"))

    return parse_records(entries, text_field)
