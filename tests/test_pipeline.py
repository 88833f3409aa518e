"""Tests for JSON sanitizing and drill block extraction."""

import json

import pytest

from src.pipeline import extract_drill_from_content, sanitize_json_text
from src.pipeline.extract import DrillExtraction
from src.schemas.drill import TeamColor
from tests.fixtures.drill_messages import (
    PASSING_SQUARE,
    RONDO_MESSAGE,
    SHORT_CORNER,
    fenced,
)


# --- Sanitizer ---


def test_sanitize_trailing_comma_object():
    assert json.loads(sanitize_json_text('{"a":1,}')) == {"a": 1}


def test_sanitize_line_comment():
    assert json.loads(sanitize_json_text('{"a":1 // note\n}')) == {"a": 1}


def test_sanitize_trailing_comma_array_with_whitespace():
    text = '{"players": [1, 2,\n  ],\n}'
    assert json.loads(sanitize_json_text(text)) == {"players": [1, 2]}


def test_sanitize_comment_before_trailing_comma():
    text = '{\n  "a": 1, // first\n  "b": 2, // last\n}'
    assert json.loads(sanitize_json_text(text)) == {"a": 1, "b": 2}


def test_sanitize_leaves_valid_json_alone():
    text = '{"a": [1, 2], "b": {"c": "d"}}'
    assert sanitize_json_text(text) == text


def test_sanitize_strips_slashes_inside_strings():
    # Textual approximation: URLs inside values lose everything after "//".
    assert sanitize_json_text('{"url": "https://example.com"}') == '{"url": "https:'


def test_sanitize_never_raises_on_non_strings():
    assert sanitize_json_text(None) == ""


# --- Extraction ---


def test_rondo_scenario():
    result = extract_drill_from_content(RONDO_MESSAGE)
    assert isinstance(result, DrillExtraction)
    assert len(result.drills) == 1
    drill = result.drills[0]
    assert drill.pitch.width == 20
    assert drill.players[0].id == "p1"
    assert drill.players[0].team == TeamColor.RED
    assert drill.sequence[0].id == "step1"
    assert drill.sequence[0].duration == 1500
    assert result.clean_content == "Here's your session:"


@pytest.mark.parametrize(
    "text",
    ["", "Just some advice, no diagrams.", "  padded with spaces \n", "inline `code` only"],
)
def test_no_fenced_blocks_returns_input_unchanged(text):
    result = extract_drill_from_content(text)
    assert result.clean_content == text
    assert result.drill is None
    assert result.drills == []


def test_non_string_content_is_empty():
    result = extract_drill_from_content(None)
    assert result.clean_content == ""
    assert result.drills == []


def test_extraction_is_idempotent_on_clean_output():
    first = extract_drill_from_content(RONDO_MESSAGE)
    second = extract_drill_from_content(first.clean_content)
    assert second.drills == []
    assert second.clean_content == first.clean_content


def test_two_drill_blocks():
    message = "\n\n".join(
        ["Warm up:", fenced(PASSING_SQUARE), "Then the set piece:", fenced(SHORT_CORNER)]
    )
    result = extract_drill_from_content(message)
    assert len(result.drills) == 2
    assert result.drill is result.drills[0]
    assert [d.name for d in result.drills] == ["Passing Square", "Short Corner Routine"]
    assert "```" not in result.clean_content
    assert "Warm up:" in result.clean_content
    assert "Then the set piece:" in result.clean_content


def test_drill_tag_is_case_insensitive():
    result = extract_drill_from_content(fenced(PASSING_SQUARE, tag="Drill"))
    assert result.drill is not None
    assert result.clean_content == ""


def test_broken_drill_block_is_always_stripped():
    block = fenced('{"name": "Broken", "pitch": {', tag="drill-diagram")
    message = f"Try this:\n{block}\nGood luck!"
    result = extract_drill_from_content(message)
    assert result.drills == []
    assert block not in result.clean_content
    assert "Try this:" in result.clean_content
    assert "Good luck!" in result.clean_content


def test_non_drill_drill_block_is_stripped():
    block = fenced({"name": "No players", "pitch": {}, "players": [], "sequence": [{}]}, tag="drill")
    result = extract_drill_from_content(f"Intro\n{block}")
    assert result.drills == []
    assert result.clean_content == "Intro"


def test_sanitized_drill_block_parses():
    body = json.dumps(PASSING_SQUARE, indent=2)
    body = body.replace('"cycles": 3', '"cycles": 3, // loop three times')
    body = body.replace('"label": "A"', '"label": "A",')
    result = extract_drill_from_content(fenced(body))
    assert result.drill is not None
    assert result.drill.cycles == 3


def test_json_block_stripped_only_on_success():
    drill_block = fenced(PASSING_SQUARE, tag="json")
    config_block = fenced({"formation": "4-3-3"}, tag="json")
    message = f"Config:\n{config_block}\nDrill:\n{drill_block}"
    result = extract_drill_from_content(message)
    assert len(result.drills) == 1
    assert drill_block not in result.clean_content
    assert config_block in result.clean_content


def test_json_block_kept_when_not_a_drill():
    block = fenced({"formation": "4-3-3"}, tag="json")
    message = f"Here is the config:\n{block}"
    result = extract_drill_from_content(message)
    assert result.drills == []
    assert result.clean_content == message


def test_json_pass_skipped_when_drill_pass_succeeds():
    explicit = fenced(PASSING_SQUARE)
    generic = fenced(SHORT_CORNER, tag="json")
    result = extract_drill_from_content(f"{explicit}\n{generic}")
    assert [d.name for d in result.drills] == ["Passing Square"]
    assert generic in result.clean_content


def test_json_pass_runs_after_failed_drill_pass():
    broken = fenced("not json at all")
    generic = fenced(SHORT_CORNER, tag="json")
    result = extract_drill_from_content(f"A\n{broken}\nB\n{generic}")
    assert [d.name for d in result.drills] == ["Short Corner Routine"]
    assert broken not in result.clean_content
    assert generic not in result.clean_content


def test_any_fenced_block_fallback():
    untagged = fenced(PASSING_SQUARE, tag="")
    other = fenced("print('hello')", tag="python")
    message = f"Code:\n{other}\nDiagram:\n{untagged}"
    result = extract_drill_from_content(message)
    assert len(result.drills) == 1
    assert untagged not in result.clean_content
    assert other in result.clean_content


def test_inline_backticks_in_prose_do_not_open_a_fence():
    untagged = fenced(PASSING_SQUARE, tag="")
    message = "Wrap code in ``` fences like this:\n" + untagged
    result = extract_drill_from_content(message)
    assert len(result.drills) == 1
    assert result.drill.name == "Passing Square"
    assert result.clean_content == "Wrap code in ``` fences like this:"


def test_unclosed_fence_is_ignored():
    message = "Start\n```drill-diagram\n{\"name\": \"Half\""
    result = extract_drill_from_content(message)
    assert result.drills == []
    assert result.clean_content == message


def test_deeply_nested_json_does_not_raise():
    body = "[" * 5_000 + "]" * 5_000
    result = extract_drill_from_content(fenced(body, tag="json"))
    assert result.drills == []
