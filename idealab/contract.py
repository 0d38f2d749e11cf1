import json
import re
from typing import Any, Dict, Sequence

from idealab.errors import MalformedJson, MissingField, NoJsonFound

_JSON_FENCE_OPEN = re.compile(r"^```json\n?")
_FENCE_OPEN = re.compile(r"^```\n?")
_FENCE_CLOSE = re.compile(r"\n?```$")


def strip_fence(text: str) -> str:
    """
    Remove one markdown code fence around the text, if any.
    A ```json fence wins over a bare ``` fence; the content is left as is.
    """
    if text.startswith("```json"):
        text = _JSON_FENCE_OPEN.sub("", text, count=1)
    elif text.startswith("```"):
        text = _FENCE_OPEN.sub("", text, count=1)
    else:
        return text
    return _FENCE_CLOSE.sub("", text, count=1)


def extract_json_span(text: str) -> str:
    """
    Greedy first '{' to last '}' span, so prose before and after the object
    is tolerated and nested objects stay intact.
    """
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end < start:
        raise NoJsonFound(text)
    return text[start:end + 1]


def parse_contract(raw_text: str, required_fields: Sequence[str]) -> Dict[str, Any]:
    """
    Turn a raw model reply into a dict holding exactly ``required_fields``.

    Raises NoJsonFound, MalformedJson or MissingField; never guesses a value.
    Only presence is checked here, types are left to the record decoder.
    """
    cleaned = strip_fence((raw_text or "").strip())
    fragment = extract_json_span(cleaned)

    try:
        data = json.loads(fragment)
    except json.JSONDecodeError as exc:
        raise MalformedJson(str(exc), fragment) from exc

    for field in required_fields:
        if data.get(field) is None:
            raise MissingField(field)

    return {field: data[field] for field in required_fields}
