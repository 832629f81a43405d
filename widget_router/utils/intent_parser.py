# Role: Turn the classifier's raw text output into a ClassifiedIntent. The classifier is an LLM tool call, so the
# JSON may arrive wrapped in markdown fences or surrounded by prose; parsing never raises.

from __future__ import annotations

import json
import re
from typing import Any, Dict, Optional, Tuple

import widget_router.config as config
from widget_router.models.intent import ClassifiedIntent


def strip_code_fences(text: str) -> str:
    # Role: remove markdown fences if the model wrapped its JSON.
    if not text:
        return ""
    t = text.strip()

    if t.startswith("```"):
        t = re.sub(r"^\s*```(?:json)?\s*", "", t, flags=re.IGNORECASE)
        t = re.sub(r"\s*```\s*$", "", t)
    return t.strip()


def try_parse_json(text: Optional[str]) -> Tuple[Optional[Dict[str, Any]], str]:
    # 1) strict json.loads
    # 2) strip code fences
    # 3) extract {...} substring as last attempt
    raw = (text or "").strip()
    if not raw:
        return None, "empty"

    try:
        return _as_dict(json.loads(raw)), "strict"
    except json.JSONDecodeError:
        pass

    cleaned = strip_code_fences(raw)
    if cleaned != raw:
        try:
            return _as_dict(json.loads(cleaned)), "stripped_fences"
        except json.JSONDecodeError:
            pass

    start = cleaned.find("{")
    end = cleaned.rfind("}")
    if start != -1 and end > start:
        try:
            return _as_dict(json.loads(cleaned[start : end + 1])), "extracted_braces"
        except json.JSONDecodeError:
            return None, "failed"

    return None, "failed"


def _as_dict(value: Any) -> Optional[Dict[str, Any]]:
    return value if isinstance(value, dict) else None


def parse_intent_payload(text: Optional[str]) -> Optional[ClassifiedIntent]:
    """Parse classifier output text; malformed JSON or a payload without primaryIntent yields None."""
    parsed, method = try_parse_json(text)

    if config.DEBUG and method not in {"strict", "empty"}:
        print("[ROUTER] classifier output parse:", method)

    if parsed is None:
        return None
    return ClassifiedIntent.from_payload(parsed)
