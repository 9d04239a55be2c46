# interprets raw llm output as a curriculum tree
import json
import re
import logging
from typing import Any, Dict, List

from .errors import GenerationFailure
from .hierarchy import RawNode, build_curriculum
from .models import Curriculum

logger = logging.getLogger(__name__)

FENCED_BLOCK = re.compile(r'```(?:json)?\s*([\s\S]*?)```', re.IGNORECASE)

LEVEL_DEFAULTS = [
    ("modules", "Untitled Module"),
    ("topics", "Untitled Topic"),
    ("lessons", "Untitled Lesson"),
]


# pull the json object out of a response that may be wrapped in prose or fences
def extract_json_block(text: str) -> str:
    fenced = FENCED_BLOCK.search(text)
    candidate = fenced.group(1) if fenced else text

    start = candidate.find('{')
    end = candidate.rfind('}')
    if start != -1 and end > start:
        candidate = candidate[start:end + 1]
    return candidate.strip()


def _as_text(value: Any, fallback: str) -> str:
    if value is None:
        return fallback
    if isinstance(value, (bool, dict, list)):
        return fallback
    text = str(value).strip()
    return text or fallback


def _as_list(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


def _coerce_children(items: List[Dict[str, Any]], depth: int) -> List[RawNode]:
    key, untitled = LEVEL_DEFAULTS[depth]
    nodes = []
    for item in items:
        children: List[RawNode] = []
        if depth + 1 < len(LEVEL_DEFAULTS):
            child_key = LEVEL_DEFAULTS[depth + 1][0]
            children = _coerce_children(_as_list(item.get(child_key)), depth + 1)
        nodes.append(RawNode(
            title=_as_text(item.get("title"), untitled),
            description=_as_text(item.get("description"), ""),
            children=children,
        ))
    return nodes


# second pass: turn loosely typed json into raw nodes with defaults
def coerce_raw_tree(parsed: Dict[str, Any]) -> RawNode:
    """Coerce a parsed JSON object into a RawNode tree, never trusting backend types or ids"""
    return RawNode(
        title=_as_text(parsed.get("title"), "Untitled Curriculum"),
        description=_as_text(parsed.get("description"), ""),
        children=_coerce_children(_as_list(parsed.get("modules")), 0),
    )


# first pass: strict json parse of the extracted block
def parse_curriculum_response(text: str) -> Curriculum:
    """Parse an LLM response into a normalized Curriculum or raise GenerationFailure"""
    json_str = extract_json_block(text)
    logger.debug(f"Parsing response: {len(text)} chars, extracted {len(json_str)} chars")

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        logger.error(f"Failed to parse AI response as JSON: {str(e)}; preview: {text[:500]!r}")
        raise GenerationFailure(details={"reason": "invalid_json"}) from e

    if not isinstance(parsed, dict):
        logger.error(f"AI response root is {type(parsed).__name__}, expected an object")
        raise GenerationFailure(details={"reason": "invalid_shape"})

    if not isinstance(parsed.get("modules"), list):
        logger.error("AI response has no modules list")
        raise GenerationFailure(details={"reason": "missing_modules"})

    return build_curriculum(coerce_raw_tree(parsed))
