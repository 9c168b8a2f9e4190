import base64
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from planner import Preferences, build_subject
from utils.share_codes import build_share_url, decode_share_code, encode_share_code, share_code_from_url


SUBJECTS = [
    build_subject("Álgebra", {"Mon": [("morning", "M")], "Wed": [("evening", "V")]}, priority=True),
    build_subject("Calculus", {"Tue": ["afternoon"]}, hidden=True),
]
PREFS = Preferences(
    max_subjects_per_day=1,
    blocked_slots=frozenset({("Friday", "morning")}),
    single_campus_per_day=True,
)


def test_share_code_restores_subjects_and_preferences():
    code = encode_share_code(SUBJECTS, PREFS)

    assert "=" not in code and "+" not in code and "/" not in code

    shared = decode_share_code(code)
    assert shared is not None
    assert shared.subjects == SUBJECTS
    assert shared.preferences == PREFS


def test_share_code_is_stable():
    assert encode_share_code(SUBJECTS, PREFS) == encode_share_code(list(SUBJECTS), PREFS)


def test_invalid_codes_decode_to_none():
    assert decode_share_code("") is None
    assert decode_share_code("not a code!") is None

    not_json = base64.urlsafe_b64encode(b"hello").decode("ascii")
    assert decode_share_code(not_json) is None

    bad_turn = base64.urlsafe_b64encode(
        b'{"subjects":[{"name":"A","availability":{"Monday":["noon"]}}]}'
    ).decode("ascii")
    assert decode_share_code(bad_turn) is None

    no_availability = base64.urlsafe_b64encode(b'{"subjects":[{"name":"A","availability":{}}]}').decode("ascii")
    assert decode_share_code(no_availability) is None


def test_share_url_round_trip():
    code = encode_share_code(SUBJECTS, PREFS)

    url = build_share_url("http://localhost:8501/app?old=1#top", code)

    assert url == f"http://localhost:8501/app?data={code}"
    assert share_code_from_url(url) == code
    assert share_code_from_url("http://localhost:8501/") is None


def test_hand_edited_flags_are_not_truthy_strings():
    edited = base64.urlsafe_b64encode(
        b'{"subjects":[{"name":"A","availability":{"Monday":["morning"]},"priority":"false"}]}'
    ).decode("ascii")
    shared = decode_share_code(edited)
    assert shared is not None
    assert shared.subjects[0].priority is False

    garbled = base64.urlsafe_b64encode(
        b'{"subjects":[{"name":"A","availability":{"Monday":["morning"]},"priority":"perhaps"}]}'
    ).decode("ascii")
    assert decode_share_code(garbled) is None
