"""
Turns raw Gemini output into validated College records.

Model output is unreliable: it may be wrapped in markdown code fences,
surrounded by prose, or cut off at the token limit. Parsing goes:

    strip fences -> extract [...] span -> repair truncation -> json.loads -> validate

Structural repair is best-effort. It only appends the missing closing
braces/brackets, so it recovers simple truncation, not arbitrary
corruption (brackets inside string values are counted too).

Two variants:
    parse_colleges(text)                    strict, used for the primary prompt
    parse_colleges_lenient(text, location)  permissive, used for the fallback prompt
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

from errors import EmptyResultError, ResponseParseError
from models import CollegeTypeEnum
from schemas import College, ContactDetails, FeeEntry

logger = logging.getLogger(__name__)

_FENCE_JSON = re.compile(r"```json\n?")
_FENCE = re.compile(r"```\n?")

# Placeholders for the lenient path
DEFAULT_PHONE = "Contact college directly"
DEFAULT_EMAIL = "Not available"
DEFAULT_WEBSITE = "Not available"
DEFAULT_COURSES = ["B.Tech Computer Science", "MBA", "BBA"]
DEFAULT_FEES = [
    {"course": "B.Tech", "amount": "₹1,50,000 - ₹3,00,000 per year"},
    {"course": "MBA", "amount": "₹2,00,000 - ₹5,00,000 per year"},
]


def strip_code_fences(text: str) -> str:
    """Remove ```json / ``` markers anywhere in the text."""
    text = _FENCE_JSON.sub("", text)
    return _FENCE.sub("", text).strip()


def extract_json_array(text: str) -> str:
    """Return the span from the first '[' to the last ']', or the trimmed text if there is none."""
    start = text.find("[")
    end = text.rfind("]")
    if start != -1 and end > start:
        return text[start:end + 1]
    return text.strip()


def repair_truncated_json(text: str) -> str:
    """
    Append the closers a truncated JSON array is missing.

    Counts opening vs closing braces and brackets; any deficit is closed
    with braces first, then brackets.
    """
    brace_deficit = text.count("{") - text.count("}")
    bracket_deficit = text.count("[") - text.count("]")
    if brace_deficit <= 0 and bracket_deficit <= 0:
        return text

    logger.info("[PARSE] Repairing truncated response: +%d '}' +%d ']'",
                max(brace_deficit, 0), max(bracket_deficit, 0))
    return text + "}" * max(brace_deficit, 0) + "]" * max(bracket_deficit, 0)


def load_json_array(text: str) -> List[Any]:
    """Run the full cleanup on raw model text and parse it as a JSON array."""
    candidate = repair_truncated_json(extract_json_array(strip_code_fences(text)))
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning("[PARSE] Invalid JSON (%d chars): %s", len(candidate), e)
        logger.debug("[PARSE] Response preview: %s...", candidate[:500])
        raise ResponseParseError(f"Response is not valid JSON: {e}") from e

    if not isinstance(data, list):
        raise ResponseParseError(f"Expected a JSON array, got {type(data).__name__}")
    return data


def _as_text(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        return ""
    if isinstance(value, (str, int, float)):
        return str(value).strip()
    return ""


def _courses(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [text for text in (_as_text(item) for item in value) if text]


def _fees(value: Any) -> List[FeeEntry]:
    if not isinstance(value, list):
        return []
    fees = []
    for item in value:
        if isinstance(item, dict) and _as_text(item.get("course")):
            fees.append(FeeEntry(course=_as_text(item.get("course")),
                                 amount=_as_text(item.get("amount"))))
    return fees


def _contact(value: Any) -> ContactDetails:
    if not isinstance(value, dict):
        return ContactDetails()
    return ContactDetails(
        phone=_as_text(value.get("phone")) or None,
        email=_as_text(value.get("email")) or None,
        website=_as_text(value.get("website")) or None,
    )


def _is_complete(entry: Any) -> bool:
    """Required fields: name, address, a non-empty course list, and a fee list."""
    return (
        isinstance(entry, dict)
        and bool(_as_text(entry.get("name")))
        and bool(_as_text(entry.get("address")))
        and bool(_courses(entry.get("coursesAvailable")))
        and isinstance(entry.get("fees"), list)
    )


def parse_colleges(text: str) -> List[College]:
    """
    Strict parse of a primary-prompt response.

    Entries missing a required field are dropped; contact details default
    to empty and an unknown type defaults to Both.

    Raises:
        ResponseParseError: text is not a JSON array even after repair
        EmptyResultError: no entry has all required fields
    """
    entries = load_json_array(text)

    colleges = [
        College(
            name=_as_text(entry["name"]),
            address=_as_text(entry["address"]),
            contact_details=_contact(entry.get("contactDetails")),
            courses_available=_courses(entry["coursesAvailable"]),
            fees=_fees(entry["fees"]),
            type=CollegeTypeEnum.coerce(entry.get("type")),
        )
        for entry in entries
        if _is_complete(entry)
    ]

    if not colleges:
        raise EmptyResultError(f"No valid colleges in response ({len(entries)} entries)")

    logger.info("[PARSE] %d of %d entries valid", len(colleges), len(entries))
    return colleges


def _lenient_college(entry: Dict[str, Any], location: str) -> Optional[College]:
    name = _as_text(entry.get("name"))
    if not name:
        return None

    nested = entry.get("contactDetails")
    nested = nested if isinstance(nested, dict) else {}

    def contact_field(key: str, default: str) -> str:
        return _as_text(entry.get(key)) or _as_text(nested.get(key)) or default

    courses = _courses(entry.get("courses")) or _courses(entry.get("coursesAvailable"))
    fees = _fees(entry.get("fees"))

    return College(
        name=name,
        address=_as_text(entry.get("address")) or f"{location}, India",
        contact_details=ContactDetails(
            phone=contact_field("phone", DEFAULT_PHONE),
            email=contact_field("email", DEFAULT_EMAIL),
            website=contact_field("website", DEFAULT_WEBSITE),
        ),
        courses_available=courses or list(DEFAULT_COURSES),
        fees=fees or [FeeEntry(**fee) for fee in DEFAULT_FEES],
        type=CollegeTypeEnum.coerce(entry.get("type")),
    )


def parse_colleges_lenient(text: str, location: str) -> List[College]:
    """
    Permissive parse of a fallback-prompt response.

    Accepts flat phone/email/website keys and "courses" as an alias for
    "coursesAvailable", and fills placeholders for anything optional.
    Only entries without a name are dropped.
    """
    entries = load_json_array(text)

    colleges = []
    for entry in entries:
        if not isinstance(entry, dict):
            continue
        college = _lenient_college(entry, location)
        if college is not None:
            colleges.append(college)

    if not colleges:
        raise EmptyResultError(f"No colleges found in fallback response for {location}")

    logger.info("[PARSE] Fallback parse kept %d of %d entries", len(colleges), len(entries))
    return colleges
