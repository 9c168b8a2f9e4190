"""Share codes: subjects + preferences packed into a URL-safe string.

A share code is the compact JSON of the current state, UTF-8 encoded and
base64 (URL-safe alphabet, no padding). It can be pasted into the app or
appended to the app URL as `?data=<code>`.
"""

from __future__ import annotations

import base64
import binascii
import json
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence
from urllib.parse import parse_qs, urlencode, urlsplit

from planner.subjects import (
    Preferences,
    Subject,
    preferences_from_dict,
    preferences_to_dict,
    subject_from_dict,
    subject_to_dict,
)
from planner.validation import validate_preferences, validate_subjects


SHARE_PARAM = "data"
SHARE_VERSION = 1


@dataclass
class SharedState:
    subjects: List[Subject] = field(default_factory=list)
    preferences: Preferences = Preferences()


def _stable_json(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def encode_share_code(subjects: Sequence[Subject], preferences: Preferences) -> str:
    payload: Dict[str, Any] = {
        "v": SHARE_VERSION,
        "subjects": [subject_to_dict(s) for s in subjects],
        "preferences": preferences_to_dict(preferences),
    }
    raw = base64.urlsafe_b64encode(_stable_json(payload).encode("utf-8")).decode("ascii")
    return raw.rstrip("=")


def decode_share_code(code: str) -> Optional[SharedState]:
    """Decode a share code; None if it is not a valid code."""

    text = str(code or "").strip()
    if not text:
        return None
    padded = text + "=" * (-len(text) % 4)

    try:
        payload = json.loads(base64.urlsafe_b64decode(padded.encode("ascii")).decode("utf-8"))
        subjects = [subject_from_dict(s) for s in payload["subjects"]]
        preferences = preferences_from_dict(payload.get("preferences") or {})
    except (binascii.Error, UnicodeError, ValueError, KeyError, TypeError, AttributeError):
        return None

    # hidden subjects are stored too, so validate the full list
    for ok, _msg in (validate_subjects(subjects), validate_preferences(preferences)):
        if not ok:
            return None

    return SharedState(subjects=subjects, preferences=preferences)


def build_share_url(base_url: str, code: str) -> str:
    parts = urlsplit(str(base_url or ""))
    base = f"{parts.scheme}://{parts.netloc}{parts.path}" if parts.scheme else parts.path
    return f"{base}?{urlencode({SHARE_PARAM: code})}"


def share_code_from_url(url: str) -> Optional[str]:
    values = parse_qs(urlsplit(str(url or "")).query).get(SHARE_PARAM)
    return values[0] if values else None
