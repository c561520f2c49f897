"""Typed model of a Claude Code JSONL transcript and the per-line decoder."""
from __future__ import annotations

import json
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple, Union


class RecordKind(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"
    FILE_SNAPSHOT = "file-history-snapshot"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value: str) -> "RecordKind":
        for kind in cls:
            if kind.value == value:
                return kind
        return cls.OTHER


class DecodeError(ValueError):
    pass


# ----------------------------- Content items -----------------------------
# Every variant carries the optional plain ``content`` string the log may
# attach to it; display text extraction reads it for items that are neither
# text nor tool results.


@dataclass(frozen=True)
class TextItem:
    text: str
    content: str = ""


@dataclass(frozen=True)
class ThinkingItem:
    thinking: str
    content: str = ""


@dataclass(frozen=True)
class ToolUseItem:
    id: str
    name: str
    input: Any = None
    content: str = ""


@dataclass(frozen=True)
class ToolResultItem:
    tool_use_id: str
    content: str = ""
    is_error: bool = False


@dataclass(frozen=True)
class OtherItem:
    type: str
    content: str = ""


ContentItem = Union[TextItem, ThinkingItem, ToolUseItem, ToolResultItem, OtherItem]
# Either the plain text form or the ordered item sequence form.
Content = Union[str, Tuple[ContentItem, ...]]


@dataclass(frozen=True)
class Message:
    role: str = ""
    id: str = ""
    content: Content = ""


@dataclass(frozen=True)
class TranscriptRecord:
    kind: RecordKind
    uuid: str = ""
    session_id: str = ""
    timestamp: Optional[datetime] = None
    message: Message = field(default_factory=Message)
    is_visible_in_transcript_only: bool = False
    is_compact_summary: bool = False


@dataclass(frozen=True)
class NormalizedEntry:
    """A human turn, or an assistant turn with all its fragments merged."""

    kind: RecordKind
    uuid: str
    timestamp: Optional[datetime]
    message: Message
    is_visible_in_transcript_only: bool = False
    is_compact_summary: bool = False
    fragments: int = 1

    @property
    def is_user(self) -> bool:
        return self.kind is RecordKind.USER

    @property
    def is_assistant(self) -> bool:
        return self.kind is RecordKind.ASSISTANT

    @property
    def is_session_continuation(self) -> bool:
        return self.is_user and self.is_visible_in_transcript_only and self.is_compact_summary


@dataclass(frozen=True)
class Conversation:
    session_id: str = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    entries: Tuple[NormalizedEntry, ...] = ()


@dataclass
class ToolUseRecord:
    tool: ToolUseItem
    result: str = ""
    is_error: bool = False


# ----------------------------- Decoding -----------------------------


def parse_timestamp(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise DecodeError(f"timestamp must be a string, got {type(value).__name__}")
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise DecodeError(f"invalid timestamp {value!r}") from exc


def _str_field(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return value if isinstance(value, str) else ""


def _tool_result_text(raw: Any) -> str:
    if isinstance(raw, str):
        return raw
    if isinstance(raw, list):
        parts: List[str] = []
        for block in raw:
            if isinstance(block, dict) and block.get("type") == "text":
                text = block.get("text")
                if isinstance(text, str):
                    parts.append(text)
        return "\n".join(parts)
    return ""


def decode_content_item(data: Dict[str, Any]) -> ContentItem:
    ctype = _str_field(data, "type")
    content = _str_field(data, "content")
    if ctype == "text":
        return TextItem(text=_str_field(data, "text"), content=content)
    if ctype == "thinking":
        return ThinkingItem(thinking=_str_field(data, "thinking"), content=content)
    if ctype == "tool_use":
        return ToolUseItem(
            id=_str_field(data, "id"),
            name=_str_field(data, "name"),
            input=data.get("input"),
            content=content,
        )
    if ctype == "tool_result":
        return ToolResultItem(
            tool_use_id=_str_field(data, "tool_use_id"),
            content=_tool_result_text(data.get("content")),
            is_error=bool(data.get("is_error")),
        )
    return OtherItem(type=ctype, content=content)


def decode_content(raw: Any) -> Content:
    if isinstance(raw, list):
        return tuple(decode_content_item(item) for item in raw if isinstance(item, dict))
    if isinstance(raw, str):
        return raw
    return ""


def decode_message(raw: Any) -> Message:
    if raw is None:
        return Message()
    if not isinstance(raw, dict):
        raise DecodeError("message must be an object")
    return Message(
        role=_str_field(raw, "role"),
        id=_str_field(raw, "id"),
        content=decode_content(raw.get("content")),
    )


def decode_record(data: Any) -> TranscriptRecord:
    if not isinstance(data, dict):
        raise DecodeError("transcript line must be a JSON object")
    raw_type = data.get("type", "")
    if not isinstance(raw_type, str):
        raise DecodeError("type must be a string")
    return TranscriptRecord(
        kind=RecordKind.from_raw(raw_type),
        uuid=_str_field(data, "uuid"),
        session_id=_str_field(data, "sessionId"),
        timestamp=parse_timestamp(data.get("timestamp")),
        message=decode_message(data.get("message")),
        is_visible_in_transcript_only=data.get("isVisibleInTranscriptOnly") is True,
        is_compact_summary=data.get("isCompactSummary") is True,
    )


def decode_line(line: Union[str, bytes]) -> TranscriptRecord:
    """Decode one JSONL line, raising DecodeError for anything unusable."""
    if isinstance(line, bytes):
        try:
            line = line.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"invalid UTF-8: {exc}") from exc
    if not line.strip():
        raise DecodeError("empty line")
    try:
        data = json.loads(line)
    except json.JSONDecodeError as exc:
        raise DecodeError(f"invalid JSON: {exc}") from exc
    return decode_record(data)
