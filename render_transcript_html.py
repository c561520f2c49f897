"""Render a parsed Claude Code conversation to a standalone HTML page."""
from __future__ import annotations

import html
import json
from dataclasses import dataclass, fields
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml
from markdown_it import MarkdownIt

from transcript_assets import SCRIPT, STYLES
from transcript_model import Conversation, NormalizedEntry, ToolUseRecord
from transcript_parser import correlate_tools, extract_display_text, extract_reasoning

DEFAULT_TITLE = "Claude Code Conversation"
DEFAULT_PREVIEW_LENGTH = 60
TIMESTAMP_FORMAT = "%Y/%m/%d %H:%M:%S"
MISSING_TIMESTAMP = "—"
MARKDOWN = (
    MarkdownIt("commonmark", {"html": False})
    .enable("table")
    .enable("strikethrough")
)

HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="{lang}">
<head>
  <meta charset="UTF-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>{title}</title>
  <style>{styles}</style>
</head>
<body>
  {toc_html}
  <div class="container">
    <div class="header">
      <h1>{title}</h1>
      <div class="session-info">
        <div>Session ID: {session_id}</div>
        <div>Start: {start_time}</div>
        <div>End: {end_time}</div>
      </div>
    </div>
    <div class="messages">
      {messages_html}
    </div>
  </div>
  <script>{script}</script>
</body>
</html>"""

SESSION_CONTINUATION_TEMPLATE = """
<div id="{anchor}" class="message session-continuation-message">
  <div class="session-continuation-header">
    <span class="session-continuation-icon">⚠️</span>
    <span class="session-continuation-title">Session Continued</span>
    <span class="timestamp">{timestamp}</span>
  </div>
  <div class="session-continuation-notice">
    This session was continued from a previous conversation that ran out of context.
  </div>
  <div class="session-continuation-toggle">
    <button class="toggle-btn" onclick="toggleSessionSummary(this)">\U0001F4CB View conversation summary</button>
  </div>
  <div class="session-continuation-content" style="display: none;">
    <pre>{summary}</pre>
  </div>
</div>"""


@dataclass
class RenderOptions:
    title: str = DEFAULT_TITLE
    lang: str = "en"
    markdown: bool = False
    preview_length: int = DEFAULT_PREVIEW_LENGTH


def load_render_options(path: Optional[Path] = None, **overrides: Any) -> RenderOptions:
    """Build options from an optional YAML file; non-None overrides win."""
    values: Dict[str, Any] = {}
    if path is not None:
        data = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
        if not isinstance(data, dict):
            raise ValueError("YAML config must be a mapping at top level")
        values.update(data)
    values.update({key: value for key, value in overrides.items() if value is not None})
    known = {f.name for f in fields(RenderOptions)}
    options = RenderOptions(**{key: value for key, value in values.items() if key in known})
    options.title = str(options.title)
    options.lang = str(options.lang)
    options.markdown = bool(options.markdown)
    options.preview_length = int(options.preview_length)
    if options.preview_length < 1:
        raise ValueError("preview_length must be a positive integer")
    return options


# ----------------------------- Turn numbering -----------------------------


@dataclass(frozen=True)
class UserTurn:
    position: int  # index into Conversation.entries
    index: int  # zero-based among numbered human turns
    text: str
    entry: NormalizedEntry

    @property
    def anchor(self) -> str:
        return f"user-msg-{self.index}"

    @property
    def number(self) -> int:
        return self.index + 1


def collect_user_turns(entries: Sequence[NormalizedEntry]) -> List[UserTurn]:
    """Numbered human turns: not a session continuation and with non-empty text.

    Both the message list and the table of contents derive their anchors from
    this list, so the two always agree.
    """
    turns: List[UserTurn] = []
    for position, entry in enumerate(entries):
        if not entry.is_user or entry.is_session_continuation:
            continue
        text = extract_display_text(entry.message)
        if not text:
            continue
        turns.append(UserTurn(position=position, index=len(turns), text=text, entry=entry))
    return turns


# ----------------------------- Fragments -----------------------------


def format_timestamp(value: Optional[datetime]) -> str:
    if value is None:
        return MISSING_TIMESTAMP
    return value.astimezone().strftime(TIMESTAMP_FORMAT)


def markdown_to_html(text: str) -> str:
    return MARKDOWN.render(text or "")


def render_json_block(data: Any, css_class: str = "tool-input") -> str:
    pretty = json.dumps(data, indent=2, ensure_ascii=False)
    return f'<pre class="{css_class}">{html.escape(pretty)}</pre>'


def render_timestamp_label(value: Optional[datetime]) -> str:
    return f'<div class="timestamp-label">{html.escape(format_timestamp(value))}</div>'


def render_session_continuation(entry: NormalizedEntry, ordinal: int) -> str:
    return SESSION_CONTINUATION_TEMPLATE.format(
        anchor=f"session-continuation-{ordinal}",
        timestamp=html.escape(format_timestamp(entry.timestamp)),
        summary=html.escape(extract_display_text(entry.message)),
    )


def render_user_message(turn: UserTurn, total_turns: int) -> str:
    nav_parts: List[str] = []
    if turn.index > 0:
        nav_parts.append("<button class=\"nav-btn\" onclick=\"jumpToMessage(this, 'prev')\">⬆️</button>")
    if turn.index < total_turns - 1:
        nav_parts.append("<button class=\"nav-btn\" onclick=\"jumpToMessage(this, 'next')\">⬇️</button>")
    return (
        f'<div class="message-divider">#{turn.number}</div>'
        '<div class="message-group user">'
        f"{render_timestamp_label(turn.entry.timestamp)}"
        f'<div id="{turn.anchor}" class="message user-message">'
        f'<div class="message-content">{html.escape(turn.text)}</div>'
        f'<div class="message-navigation">{"".join(nav_parts)}</div>'
        "</div>"
        "</div>"
    )


def render_tool_use(tool_use: ToolUseRecord) -> str:
    sections = [
        '<div class="tool-section"><div class="tool-section-title">Input Parameters:</div>'
        f"{render_json_block(tool_use.tool.input)}</div>"
    ]
    if tool_use.result:
        result_class = "tool-result error" if tool_use.is_error else "tool-result"
        sections.append(
            '<div class="tool-section"><div class="tool-section-title">Result:</div>'
            f'<pre class="{result_class}">{html.escape(tool_use.result)}</pre></div>'
        )
    return (
        '<span class="tool-item" onclick="toggleToolDetails(event)">'
        f"{html.escape(tool_use.tool.name)} ▼"
        f'<div class="tool-details" style="display: none;">{"".join(sections)}</div>'
        "</span>"
    )


def render_assistant_message(
    entry: NormalizedEntry,
    next_entry: Optional[NormalizedEntry],
    options: Optional[RenderOptions] = None,
) -> str:
    options = options or RenderOptions()
    reasoning = extract_reasoning(entry.message)
    text = extract_display_text(entry.message)
    tool_uses = correlate_tools(entry, next_entry)
    timestamp_html = render_timestamp_label(entry.timestamp)
    group_open = f'<div class="message-group assistant" data-fragments="{entry.fragments}">'
    blocks: List[str] = []

    if reasoning:
        separator = '<hr class="thinking-separator">'
        body = separator.join(f"<pre>{html.escape(part)}</pre>" for part in reasoning)
        blocks.append(
            f"{group_open}{timestamp_html}"
            '<div class="thinking-section">'
            '<button class="meta-btn" onclick="toggleThinking(this)">\U0001F9E0 ...</button>'
            f'<div class="thinking-content" style="display: none;">{body}</div>'
            "</div></div>"
        )

    if text:
        if options.markdown:
            content_html = f'<div class="message-content markdown">{markdown_to_html(text)}</div>'
        else:
            content_html = f'<div class="message-content">{html.escape(text)}</div>'
        blocks.append(
            f"{group_open}{timestamp_html}"
            f'<div class="message assistant-message">{content_html}</div>'
            "</div>"
        )

    if tool_uses:
        blocks.append(
            f"{group_open}{timestamp_html}"
            '<div class="tools-section">⚒️ '
            f"{', '.join(render_tool_use(tool_use) for tool_use in tool_uses)}"
            "</div></div>"
        )

    return "".join(blocks)


# ----------------------------- Message list & TOC -----------------------------


def render_messages(conversation: Conversation, options: Optional[RenderOptions] = None) -> str:
    entries = conversation.entries
    turns = collect_user_turns(entries)
    turn_at = {turn.position: turn for turn in turns}
    continuations = 0
    items: List[str] = []

    for position, entry in enumerate(entries):
        if entry.is_user:
            if entry.is_session_continuation:
                items.append(render_session_continuation(entry, continuations))
                continuations += 1
            elif position in turn_at:
                items.append(render_user_message(turn_at[position], len(turns)))
        elif entry.is_assistant:
            next_entry = entries[position + 1] if position + 1 < len(entries) else None
            items.append(render_assistant_message(entry, next_entry, options))

    return "".join(items)


def make_preview(text: str, limit: int = DEFAULT_PREVIEW_LENGTH) -> str:
    preview = text.split("\n", 1)[0]
    if len(preview) > limit:
        preview = preview[:limit] + "..."
    return preview


def render_toc(conversation: Conversation, options: Optional[RenderOptions] = None) -> str:
    options = options or RenderOptions()
    toc_items: List[str] = []
    for turn in collect_user_turns(conversation.entries):
        preview = make_preview(turn.text, options.preview_length)
        toc_items.append(
            f"<div class=\"toc-item\" onclick=\"scrollToMessage('{turn.anchor}')\">"
            f'<div class="toc-number">#{turn.number}</div>'
            '<div class="toc-content">'
            f'<div class="toc-preview">{html.escape(preview)}</div>'
            f'<div class="toc-timestamp">{html.escape(format_timestamp(turn.entry.timestamp))}</div>'
            "</div></div>"
        )
    return (
        '<div class="sidebar" id="sidebar">'
        f'<div class="toc">{"".join(toc_items)}</div>'
        "</div>"
        '<button class="scroll-top-btn" id="scrollTopBtn" onclick="scrollToTop()">↑ Top</button>'
    )


def generate_html(conversation: Conversation, options: Optional[RenderOptions] = None) -> str:
    options = options or RenderOptions()
    return HTML_TEMPLATE.format(
        lang=html.escape(options.lang),
        title=html.escape(options.title),
        styles=STYLES,
        toc_html=render_toc(conversation, options),
        session_id=html.escape(conversation.session_id),
        start_time=html.escape(format_timestamp(conversation.start_time)),
        end_time=html.escape(format_timestamp(conversation.end_time)),
        messages_html=render_messages(conversation, options),
        script=SCRIPT,
    )
