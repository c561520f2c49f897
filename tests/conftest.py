"""Shared fixtures for transcript tests."""
import json
from pathlib import Path
from typing import Any, Callable, Dict, List, Union

import pytest

Line = Union[Dict[str, Any], str]


def user_line(content: Any, **extra: Any) -> Dict[str, Any]:
    entry = {"type": "user", "message": {"role": "user", "content": content}}
    entry.update(extra)
    return entry


def assistant_line(message_id: str, content: Any, **extra: Any) -> Dict[str, Any]:
    entry = {"type": "assistant", "message": {"id": message_id, "role": "assistant", "content": content}}
    entry.update(extra)
    return entry


def to_jsonl(lines: List[Line]) -> str:
    return "".join((line if isinstance(line, str) else json.dumps(line)) + "\n" for line in lines)


@pytest.fixture
def write_jsonl(tmp_path: Path) -> Callable[..., Path]:
    """Write records (dicts) or raw strings as a JSONL file and return its path."""

    def _write(lines: List[Line], name: str = "session.jsonl") -> Path:
        path = tmp_path / name
        path.write_text(to_jsonl(lines), encoding="utf-8")
        return path

    return _write
