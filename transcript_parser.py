"""Assemble decoded transcript records into a Conversation and pull display data out of it."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Union

from transcript_model import (
    Conversation,
    DecodeError,
    Message,
    NormalizedEntry,
    RecordKind,
    TextItem,
    ThinkingItem,
    ToolResultItem,
    ToolUseItem,
    ToolUseRecord,
    TranscriptRecord,
    decode_line,
)


@dataclass
class ParseResult:
    conversation: Conversation
    skipped_lines: int = 0


@dataclass
class _PendingEntry:
    record: TranscriptRecord
    items: Optional[List] = None
    fragments: int = 1

    def freeze(self) -> NormalizedEntry:
        message = self.record.message
        if self.items is not None:
            message = Message(role=message.role, id=message.id, content=tuple(self.items))
        return NormalizedEntry(
            kind=self.record.kind,
            uuid=self.record.uuid,
            timestamp=self.record.timestamp,
            message=message,
            is_visible_in_transcript_only=self.record.is_visible_in_transcript_only,
            is_compact_summary=self.record.is_compact_summary,
            fragments=self.fragments,
        )


@dataclass
class _LineStats:
    skipped: int = 0
    snapshots: int = 0


def iter_records(lines: Iterable[Union[str, bytes]], stats: Optional[_LineStats] = None) -> Iterator[TranscriptRecord]:
    """Yield decoded records, dropping malformed lines and file snapshots."""
    for line in lines:
        if not line.strip():
            continue
        try:
            record = decode_line(line)
        except DecodeError:
            if stats is not None:
                stats.skipped += 1
            continue
        if record.kind is RecordKind.FILE_SNAPSHOT:
            if stats is not None:
                stats.snapshots += 1
            continue
        yield record


def assemble_conversation(records: Iterable[TranscriptRecord]) -> Conversation:
    session_id = ""
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    pending: List[_PendingEntry] = []
    # message id -> position in ``pending``; first occurrence keeps its slot
    assistant_positions: Dict[str, int] = {}

    for record in records:
        if not session_id and record.session_id:
            session_id = record.session_id
        if record.timestamp is not None:
            if start_time is None:
                start_time = record.timestamp
            end_time = record.timestamp

        if record.kind is RecordKind.USER:
            pending.append(_PendingEntry(record=record))
        elif record.kind is RecordKind.ASSISTANT:
            message_id = record.message.id
            # an empty id never merges; each such record stands alone
            position = assistant_positions.get(message_id) if message_id else None
            if position is None:
                content = record.message.content
                items = list(content) if isinstance(content, tuple) else None
                if message_id:
                    assistant_positions[message_id] = len(pending)
                pending.append(_PendingEntry(record=record, items=items))
                continue
            existing = pending[position]
            incoming = record.message.content
            if existing.items is None or not isinstance(incoming, tuple):
                continue
            existing.items.extend(incoming)
            existing.fragments += 1

    return Conversation(
        session_id=session_id,
        start_time=start_time,
        end_time=end_time,
        entries=tuple(entry.freeze() for entry in pending),
    )


def parse_lines(lines: Iterable[Union[str, bytes]]) -> ParseResult:
    stats = _LineStats()
    conversation = assemble_conversation(iter_records(lines, stats))
    return ParseResult(conversation=conversation, skipped_lines=stats.skipped)


def parse_jsonl(path: Union[str, Path]) -> ParseResult:
    with open(path, "rb") as handle:
        return parse_lines(handle)


# ----------------------------- Content extraction -----------------------------


def extract_display_text(message: Message) -> str:
    """Flatten message content into display text; whitespace-only becomes ''."""
    content = message.content
    if isinstance(content, str):
        text = content
    else:
        parts: List[str] = []
        for item in content:
            if isinstance(item, TextItem):
                if item.text:
                    parts.append(item.text)
            elif isinstance(item, ToolResultItem):
                continue
            elif item.content:
                parts.append(item.content)
        text = "\n".join(parts)
    return text if text.strip() else ""


def extract_reasoning(message: Message) -> List[str]:
    if isinstance(message.content, str):
        return []
    return [
        item.thinking
        for item in message.content
        if isinstance(item, ThinkingItem) and item.thinking.strip()
    ]


# ----------------------------- Tool correlation -----------------------------


def collect_tool_uses(message: Message) -> List[ToolUseRecord]:
    if isinstance(message.content, str):
        return []
    return [ToolUseRecord(tool=item) for item in message.content if isinstance(item, ToolUseItem)]


def correlate_tools(entry: NormalizedEntry, next_entry: Optional[NormalizedEntry]) -> List[ToolUseRecord]:
    """Pair each tool invocation in ``entry`` with its result from the next human turn."""
    tool_uses = collect_tool_uses(entry.message)
    if not tool_uses or next_entry is None or not next_entry.is_user:
        return tool_uses
    content = next_entry.message.content
    if isinstance(content, str):
        return tool_uses
    matched = [False] * len(tool_uses)
    for item in content:
        if not isinstance(item, ToolResultItem):
            continue
        for index, tool_use in enumerate(tool_uses):
            if not matched[index] and tool_use.tool.id == item.tool_use_id:
                tool_use.result = item.content
                tool_use.is_error = item.is_error
                matched[index] = True
                break
    return tool_uses
