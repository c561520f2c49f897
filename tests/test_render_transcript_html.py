"""Tests for message, TOC and document rendering."""
import re
from datetime import datetime, timezone

import pytest

from conftest import assistant_line, to_jsonl, user_line
from render_transcript_html import (
    MISSING_TIMESTAMP,
    RenderOptions,
    collect_user_turns,
    format_timestamp,
    generate_html,
    load_render_options,
    make_preview,
    render_messages,
    render_toc,
)
from transcript_parser import parse_lines


def _conversation(lines):
    return parse_lines(to_jsonl(lines).splitlines(keepends=True)).conversation


def _continuation(summary):
    return user_line(summary, isVisibleInTranscriptOnly=True, isCompactSummary=True)


MIXED = [
    _continuation("Earlier we did things"),
    user_line("First question"),
    assistant_line("m1", [{"type": "text", "text": "Answer one"}]),
    user_line("   "),
    user_line([{"type": "tool_result", "tool_use_id": "t0", "content": "ignored"}]),
    user_line("Second question\nwith detail"),
    user_line([{"type": "text", "text": "Third"}]),
]


def test_example_merges_assistant_fragments_into_one_group():
    conversation = _conversation(
        [
            user_line("Hi"),
            assistant_line("m1", [{"type": "text", "text": "Hello"}]),
            assistant_line("m1", [{"type": "tool_use", "id": "t1", "name": "Bash", "input": {"command": "ls"}}]),
        ]
    )
    output = render_messages(conversation)
    assert output.count('class="message-divider"') == 1
    assert '<div class="message-divider">#1</div>' in output
    assert output.count('class="message assistant-message"') == 1
    assert '<div class="message-content">Hello</div>' in output
    assert output.count('class="tools-section"') == 1
    assert "Bash ▼" in output
    assert output.count('data-fragments="2"') == 2


def test_toc_entries_match_numbered_dividers():
    conversation = _conversation(MIXED)
    messages = render_messages(conversation)
    toc = render_toc(conversation)
    message_ids = re.findall(r'id="(user-msg-\d+)"', messages)
    toc_ids = re.findall(r"scrollToMessage\('(user-msg-\d+)'\)", toc)
    assert message_ids == toc_ids == ["user-msg-0", "user-msg-1", "user-msg-2"]
    assert re.findall(r'class="message-divider">#(\d+)<', messages) == ["1", "2", "3"]


def test_empty_and_continuation_turns_are_not_numbered():
    turns = collect_user_turns(_conversation(MIXED).entries)
    assert [turn.text for turn in turns] == ["First question", "Second question\nwith detail", "Third"]
    assert [turn.anchor for turn in turns] == ["user-msg-0", "user-msg-1", "user-msg-2"]
    assert [turn.number for turn in turns] == [1, 2, 3]


def test_session_continuation_notice():
    conversation = _conversation(MIXED + [_continuation("Second <summary>")])
    output = render_messages(conversation)
    assert output.count("Session Continued") == 2
    assert 'id="session-continuation-0"' in output
    assert 'id="session-continuation-1"' in output
    assert "Second &lt;summary&gt;" in output
    assert "Earlier we did things" not in render_toc(conversation)


def test_navigation_buttons_gated_on_neighbours():
    output = render_messages(_conversation(MIXED))
    blocks = output.split('class="message-divider"')[1:]
    assert "'prev'" not in blocks[0] and "'next'" in blocks[0]
    assert "'prev'" in blocks[1] and "'next'" in blocks[1]
    assert "'prev'" in blocks[2] and "'next'" not in blocks[2]


def test_single_turn_has_no_navigation():
    output = render_messages(_conversation([user_line("only")]))
    assert "nav-btn" not in output


def test_assistant_blocks_render_in_fixed_order():
    conversation = _conversation(
        [
            assistant_line(
                "m1",
                [
                    {"type": "tool_use", "id": "t1", "name": "Read", "input": {"path": "a.txt"}},
                    {"type": "text", "text": "Done"},
                    {"type": "thinking", "thinking": "step one"},
                    {"type": "thinking", "thinking": "step two"},
                ],
            ),
            user_line([{"type": "tool_result", "tool_use_id": "t1", "content": "file body"}]),
        ]
    )
    output = render_messages(conversation)
    thinking_at = output.index("thinking-section")
    text_at = output.index("assistant-message")
    tools_at = output.index("tools-section")
    assert thinking_at < text_at < tools_at
    assert '<pre>step one</pre><hr class="thinking-separator"><pre>step two</pre>' in output
    assert 'class="thinking-content" style="display: none;"' in output
    assert "&quot;path&quot;: &quot;a.txt&quot;" in output
    assert '<pre class="tool-result">file body</pre>' in output


def test_assistant_without_content_renders_nothing():
    conversation = _conversation([assistant_line("m1", [{"type": "text", "text": "  "}])])
    assert render_messages(conversation) == ""


def test_tool_without_result_has_no_result_section():
    conversation = _conversation([assistant_line("m1", [{"type": "tool_use", "id": "t1", "name": "Bash"}])])
    output = render_messages(conversation)
    assert "Input Parameters:" in output
    assert "Result:" not in output
    assert '<pre class="tool-input">null</pre>' in output


def test_error_results_are_marked():
    conversation = _conversation(
        [
            assistant_line("m1", [{"type": "tool_use", "id": "t1", "name": "Bash", "input": {}}]),
            user_line([{"type": "tool_result", "tool_use_id": "t1", "content": "boom", "is_error": True}]),
        ]
    )
    assert '<pre class="tool-result error">boom</pre>' in render_messages(conversation)


def test_html_special_characters_are_escaped_everywhere():
    payload = "<script>alert('x') & \"y\"</script>"
    conversation = _conversation(
        [
            user_line(payload),
            assistant_line(
                "m1",
                [
                    {"type": "thinking", "thinking": payload},
                    {"type": "text", "text": payload},
                    {"type": "tool_use", "id": "t1", "name": payload, "input": {"k": payload}},
                ],
            ),
            user_line([{"type": "tool_result", "tool_use_id": "t1", "content": payload}]),
        ]
    )
    document = generate_html(conversation, RenderOptions(title=payload))
    assert "<script>alert" not in document
    assert "&lt;script&gt;alert(&#x27;x&#x27;) &amp; &quot;y&quot;&lt;/script&gt;" in document


def test_markdown_mode_renders_without_raw_html():
    conversation = _conversation([assistant_line("m1", [{"type": "text", "text": "**bold** <b>raw</b>"}])])
    output = render_messages(conversation, RenderOptions(markdown=True))
    assert "<strong>bold</strong>" in output
    assert "<b>raw</b>" not in output
    assert "&lt;b&gt;raw&lt;/b&gt;" in output


def test_make_preview_uses_first_line_and_caps_length():
    assert make_preview("short\nsecond line") == "short"
    assert make_preview("x" * 60) == "x" * 60
    assert make_preview("y" * 61) == "y" * 60 + "..."
    assert make_preview("abcdef", limit=3) == "abc..."


def test_toc_preview_is_truncated_and_escaped():
    conversation = _conversation([user_line("<" * 70 + "\nrest")])
    toc = render_toc(conversation)
    assert "&lt;" * 60 + "..." in toc
    assert "rest" not in toc


def test_format_timestamp():
    assert format_timestamp(None) == MISSING_TIMESTAMP
    value = datetime(2025, 10, 30, 6, 14, 49, tzinfo=timezone.utc)
    assert format_timestamp(value) == value.astimezone().strftime("%Y/%m/%d %H:%M:%S")


def test_generate_html_document_shell():
    conversation = _conversation(
        [
            user_line("Hi", sessionId="abc-123", timestamp="2025-10-30T06:14:49Z"),
            assistant_line("m1", [{"type": "text", "text": "Hello"}], timestamp="2025-10-30T06:15:00Z"),
        ]
    )
    document = generate_html(conversation)
    assert document.startswith("<!DOCTYPE html>")
    assert '<html lang="en">' in document
    assert "<title>Claude Code Conversation</title>" in document
    assert "Session ID: abc-123" in document
    assert f"Start: {format_timestamp(conversation.start_time)}" in document
    assert f"End: {format_timestamp(conversation.end_time)}" in document
    assert "function toggleThinking" in document
    assert ".toc-item" in document
    assert 'id="sidebar"' in document
    assert "<link" not in document
    assert "src=" not in document


def test_load_render_options_from_yaml(tmp_path):
    config = tmp_path / "viewer.yaml"
    config.write_text("title: My Session\nmarkdown: true\npreview_length: 20\nunknown: 1\n", encoding="utf-8")
    options = load_render_options(config)
    assert options == RenderOptions(title="My Session", markdown=True, preview_length=20)
    overridden = load_render_options(config, markdown=False, title=None)
    assert overridden.markdown is False
    assert overridden.title == "My Session"


def test_load_render_options_defaults_and_errors(tmp_path):
    assert load_render_options() == RenderOptions()
    bad = tmp_path / "bad.yaml"
    bad.write_text("- a\n- b\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_render_options(bad)
    zero = tmp_path / "zero.yaml"
    zero.write_text("preview_length: 0\n", encoding="utf-8")
    with pytest.raises(ValueError):
        load_render_options(zero)


def test_empty_thinking_renders_no_reasoning_block():
    conversation = _conversation(
        [assistant_line("m1", [{"type": "thinking", "thinking": "", "signature": "x"}, {"type": "text", "text": "A"}])]
    )
    output = render_messages(conversation)
    assert "thinking-section" not in output
    assert '<div class="message-content">A</div>' in output


def test_toc_preview_skips_text_items_without_text():
    conversation = _conversation([user_line([{"type": "text"}, {"type": "text", "text": "Hello there"}])])
    toc = render_toc(conversation)
    assert '<div class="toc-preview">Hello there</div>' in toc


def test_tool_items_are_comma_separated():
    conversation = _conversation(
        [
            assistant_line(
                "m1",
                [
                    {"type": "tool_use", "id": "t1", "name": "Read", "input": {}},
                    {"type": "tool_use", "id": "t2", "name": "Grep", "input": {}},
                ],
            )
        ]
    )
    output = render_messages(conversation)
    assert output.count('class="tool-item"') == 2
    assert '</span>, <span class="tool-item"' in output
