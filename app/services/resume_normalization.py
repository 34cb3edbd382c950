"""
Helpers that coerce resume sections between their stored JSON text and the
shapes the API returns.

Reads are tolerant: text that is not valid JSON is handed back unchanged
instead of raising, and single objects or bare strings are wrapped so list
sections always come back as lists.
"""

import json
import logging
from typing import Any, Dict, List, Optional, Union

logger = logging.getLogger(__name__)

_UNPARSED = object()


def coerce_entry_list(value: Any, primary_key: str) -> Union[List[Dict[str, Any]], str]:
    """Coerce a stored section into a list of dicts.

    Primitive items are wrapped as ``{primary_key: item}``; a lone object
    becomes a one-item list; unparseable text is returned as-is.
    """
    parsed = _try_parse(value)
    if parsed is _UNPARSED:
        return value
    if parsed is None:
        return []
    if isinstance(parsed, dict):
        return [parsed]
    if isinstance(parsed, list):
        out = []
        for item in parsed:
            if isinstance(item, dict):
                out.append(item)
            elif item is not None:
                out.append({primary_key: str(item)})
        return out
    return [{primary_key: str(parsed)}]


def coerce_skill_list(value: Any) -> Union[List[str], str]:
    """Normalize skills to a flat list of names.

    Accepts a list of strings, a list of ``{"name": ...}`` dicts, a dict of
    categories (values flattened) or a comma separated string.
    """
    parsed = _try_parse(value)
    if parsed is _UNPARSED:
        return value
    if parsed is None:
        return []
    if isinstance(parsed, str):
        return [s.strip() for s in parsed.split(",") if s.strip()]
    if isinstance(parsed, dict):
        out: List[str] = []
        for vals in parsed.values():
            if isinstance(vals, list):
                out.extend(_skill_name(v) for v in vals if v is not None)
            elif vals is not None:
                out.append(_skill_name(vals))
        return out
    if isinstance(parsed, list):
        return [_skill_name(s) for s in parsed if s is not None]
    return [str(parsed)]


def coerce_summary(value: Any) -> Union[Dict[str, Any], str, None]:
    """The summary column holds one JSON object of contact fields + narrative."""
    parsed = _try_parse(value)
    if parsed is _UNPARSED:
        return value
    if parsed is None or isinstance(parsed, dict):
        return parsed
    # Older rows stored the narrative alone
    return {"summary": str(parsed)}


def dump_section(items: Optional[List[Any]]) -> str:
    """Serialize a list section; absent lists are stored as ``[]``, never null."""
    return json.dumps([_plain(item) for item in (items or [])], ensure_ascii=False)


def dump_object(obj: Any) -> str:
    return json.dumps(_plain(obj), ensure_ascii=False)


def _try_parse(value: Any) -> Any:
    if isinstance(value, bytes):
        value = value.decode("utf-8", "replace")
    if not isinstance(value, str):
        return value
    try:
        return json.loads(value)
    except ValueError:
        logger.warning("Could not parse stored value as JSON, keeping raw string")
        return _UNPARSED


def _plain(item: Any) -> Any:
    if hasattr(item, "model_dump"):
        return item.model_dump()
    return item


def _skill_name(item: Any) -> str:
    if isinstance(item, dict):
        return str(item.get("name") or item.get("skill") or "")
    return str(item)
