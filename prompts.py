# College Search Prompts
# ======================

PRIMARY_COLLEGE_COUNT = 12
FALLBACK_COLLEGE_COUNT = 8
MAX_RESPONSE_CHARS = 4000

PRIMARY_PROMPT = """List exactly {count} top colleges/universities in {location}, India offering IT or Management courses.

Return ONLY valid JSON array:
[
  {{
    "name": "College Name",
    "address": "Full Address",
    "contactDetails": {{"phone": "+91-xxx", "email": "college@edu.in", "website": "https://college.edu"}},
    "coursesAvailable": ["B.Tech CSE", "MBA"],
    "fees": [{{"course": "B.Tech CSE", "amount": "200000"}}],
    "type": "Both"
  }}
]

"type" must be one of "IT", "Management" or "Both".
Include: IITs, NITs, government colleges, private universities, management institutes.
Keep response under {max_chars} characters to avoid truncation."""

FALLBACK_PROMPT = """List {count} major IT/Management colleges in {location}, India.

Return JSON array:
[{{"name":"College","address":"Address","contactDetails":{{"phone":"+91-xxx","email":"email","website":"url"}},"coursesAvailable":["B.Tech","MBA"],"fees":[{{"course":"B.Tech","amount":"150000"}}],"type":"Both"}}]

Keep response brief."""


def get_primary_prompt(location: str) -> str:
    """Returns the full prompt asking for 12 colleges in strict JSON."""
    return PRIMARY_PROMPT.format(
        count=PRIMARY_COLLEGE_COUNT,
        location=location,
        max_chars=MAX_RESPONSE_CHARS,
    )


def get_fallback_prompt(location: str) -> str:
    """Returns the shorter prompt used when the primary response is unusable."""
    return FALLBACK_PROMPT.format(count=FALLBACK_COLLEGE_COUNT, location=location)
