"""JSON parsing for model output."""

import json
import logging
import re
from typing import Any

from cairn.errors import StructuredOutputError

logger = logging.getLogger(__name__)

_FENCE_OPEN = re.compile(r"```(?:json)?\s*")
_JSON_SPAN = re.compile(r"(\{[\s\S]*\}|\[[\s\S]*\])")


def parse_json(text: str) -> Any:
    """Parse JSON from model output, tolerating markdown fences.

    Fences are stripped and the text parsed. On failure the first
    ``{...}`` or ``[...]`` span is parsed once more.

    Raises:
        StructuredOutputError: If neither attempt yields valid JSON.
    """
    cleaned = _FENCE_OPEN.sub("", text).replace("```", "").strip()

    try:
        return json.loads(cleaned)
    except json.JSONDecodeError:
        pass

    match = _JSON_SPAN.search(cleaned)
    if match:
        try:
            data = json.loads(match.group(1))
        except json.JSONDecodeError as e:
            raise StructuredOutputError(
                f"Could not parse JSON from response: {e}", raw=text
            ) from e
        logger.warning("structured_output_reparsed", extra={"raw_length": len(text)})
        return data

    raise StructuredOutputError("Could not parse JSON from response", raw=text)
