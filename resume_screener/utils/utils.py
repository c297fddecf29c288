import json
import re
from typing import Any

from resume_screener.utils.exceptions import MalformedCompletionOutput
from resume_screener.utils.logging_config import get_logger

logger = get_logger(__name__)

FENCED_BLOCK = re.compile(r"```(?:json)?\s*([\s\S]*?)```")
OUTER_BRACES = re.compile(r"\{[\s\S]*\}")


def find_fenced_block(text: str):
    m = FENCED_BLOCK.search(text)
    return m.group(1) if m else None


def extract_json_payload(raw: str) -> Any:
    """
    Recover the JSON value a model response carries.

    Tries, in order: the first ``` fenced block (or the whole text when there is
    no fence), then the greedy first-``{``-to-last-``}`` span of the whole text.
    Raises MalformedCompletionOutput with the raw text attached when both fail.
    """
    raw = raw or ""
    fenced = find_fenced_block(raw)
    candidate = fenced if fenced is not None else raw

    try:
        return json.loads(candidate)
    except (ValueError, RecursionError):
        logger.debug("Direct JSON parse failed (fenced=%s), scanning for outer braces", fenced is not None)

    m = OUTER_BRACES.search(raw)
    if m:
        try:
            return json.loads(m.group(0))
        except (ValueError, RecursionError) as e:
            raise MalformedCompletionOutput(raw_text=raw, cause=e) from e

    raise MalformedCompletionOutput(raw_text=raw)
