"""Find drill diagrams in assistant chat replies and strip them from display.

Fenced blocks are scanned in three passes, stopping at the first pass that
yields a drill:

Pass 1: ```drill-diagram / ```drill blocks. Always removed from the
        display text, even when the JSON inside is broken.
Pass 2: ```json blocks. Removed only when they normalize to a drill.
Pass 3: any fenced block whose fences start a line. Removed only when it
        normalizes to a drill.
"""

import json
import logging
import re
from dataclasses import dataclass, field

from src.schemas.drill import DrillSchema
from .normalize import normalize_drill_schema
from .sanitize import sanitize_json_text

logger = logging.getLogger(__name__)

_DRILL_BLOCK_RE = re.compile(
    r"```(?:drill-diagram|drill)\s*\n(.*?)```", re.IGNORECASE | re.DOTALL
)
_JSON_BLOCK_RE = re.compile(r"```json\s*\n(.*?)```", re.IGNORECASE | re.DOTALL)
_ANY_BLOCK_RE = re.compile(r"^```[^\n`]*\n(.*?)^```", re.DOTALL | re.MULTILINE)


@dataclass(frozen=True)
class _BlockPass:
    name: str
    pattern: re.Pattern
    always_strip: bool


_PASSES = (
    _BlockPass("drill", _DRILL_BLOCK_RE, always_strip=True),
    _BlockPass("json", _JSON_BLOCK_RE, always_strip=False),
    _BlockPass("fenced", _ANY_BLOCK_RE, always_strip=False),
)


@dataclass
class DrillExtraction:
    """Result of scanning one chat message."""

    clean_content: str
    drill: DrillSchema | None = None
    drills: list[DrillSchema] = field(default_factory=list)


def _parse_candidate(body: str) -> DrillSchema | None:
    """Sanitize, parse and normalize one block body. Never raises."""
    try:
        parsed = json.loads(sanitize_json_text(body))
        return normalize_drill_schema(parsed)
    except (ValueError, TypeError, RecursionError) as e:
        # json.JSONDecodeError and pydantic ValidationError are ValueErrors
        logger.debug(f"Skipping unparseable block: {e}")
        return None


def _remove_block(text: str, block: str) -> str:
    return text.replace(block, "", 1).strip()


def extract_drill_from_content(content: str) -> DrillExtraction:
    """Extract every drill diagram from an assistant message.

    Args:
        content: Raw assistant message text, possibly with fenced blocks.

    Returns:
        DrillExtraction with the display-safe text, the first drill (or
        None) and all drills in document order.
    """
    if not isinstance(content, str):
        content = ""

    drills: list[DrillSchema] = []
    clean_content = content

    for block_pass in _PASSES:
        for match in block_pass.pattern.finditer(content):
            drill = _parse_candidate(match.group(1))
            if drill is not None:
                drills.append(drill)
            if drill is not None or block_pass.always_strip:
                clean_content = _remove_block(clean_content, match.group(0))

        if drills:
            logger.info(
                f"Extracted {len(drills)} drill(s) from {block_pass.name} blocks: "
                + ", ".join(d.name for d in drills)
            )
            break
    else:
        logger.debug("No drill diagrams found in message")

    return DrillExtraction(
        clean_content=clean_content,
        drill=drills[0] if drills else None,
        drills=drills,
    )
