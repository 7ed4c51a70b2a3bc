import json

import pytest
from pydantic import ValidationError

from errors import EmptyResultError, ResponseParseError
from models import CollegeTypeEnum
from response_parser import (
    DEFAULT_COURSES,
    DEFAULT_EMAIL,
    DEFAULT_PHONE,
    DEFAULT_WEBSITE,
    extract_json_array,
    parse_colleges,
    parse_colleges_lenient,
    repair_truncated_json,
    strip_code_fences,
)
from schemas import College
from tests.conftest import college_entry, colleges_json


class TestCleanup:
    """Test fence stripping and array extraction."""

    def test_strip_json_fence(self):
        """Test removal of ```json fences."""
        assert strip_code_fences('```json\n[1, 2]\n```') == "[1, 2]"

    def test_strip_fences_anywhere(self):
        """Test fences in the middle of text are removed too."""
        text = "Here you go:\n```json\n[]\n```\nEnjoy"
        assert "```" not in strip_code_fences(text)

    def test_extract_array_from_prose(self):
        """Test extraction of the first '[' to last ']' span."""
        text = 'Sure! Here is the list: [{"a": [1]}, {"b": 2}] Hope it helps.'
        assert extract_json_array(text) == '[{"a": [1]}, {"b": 2}]'

    def test_extract_without_brackets_returns_trimmed_text(self):
        """Test text with no bracket pair is returned trimmed."""
        assert extract_json_array('  {"name": "x"}  ') == '{"name": "x"}'


class TestRepair:
    """Test structural repair of truncated JSON."""

    def test_balanced_text_unchanged(self):
        """Test balanced text is not modified."""
        text = '[{"a": 1}]'
        assert repair_truncated_json(text) == text

    def test_appends_braces_then_brackets(self):
        """Test braces are closed before brackets."""
        assert repair_truncated_json('[{"a": [{"b": 1') == '[{"a": [{"b": 1}}]]'

    def test_repaired_truncation_parses(self):
        """Test truncation between values is recoverable."""
        truncated = colleges_json(2)[:-2]  # drop the final '}]'
        assert json.loads(repair_truncated_json(truncated))[1]["name"] == "College 2"


class TestStrictParse:
    """Test the strict parser used for the primary prompt."""

    def test_well_formed_array(self):
        """Test all complete entries are returned in order."""
        colleges = parse_colleges(colleges_json(12))
        assert len(colleges) == 12
        assert [c.name for c in colleges[:2]] == ["College 1", "College 2"]
        assert colleges[0].fees[1].amount == "350000"
        assert colleges[0].contact_details.website == "https://college1.edu.in"

    def test_fenced_response(self):
        """Test a response wrapped in a markdown fence."""
        colleges = parse_colleges("```json\n" + colleges_json(3) + "\n```")
        assert len(colleges) == 3

    def test_filters_incomplete_entries(self):
        """Test entries missing a required field are dropped."""
        entries = [
            college_entry(1),
            college_entry(2, address=""),
            college_entry(3, coursesAvailable="MBA"),
            college_entry(4, fees=None),
            {"name": "Only a name"},
            "not an object",
            college_entry(5),
        ]
        colleges = parse_colleges(json.dumps(entries))
        assert [c.name for c in colleges] == ["College 1", "College 5"]

    def test_empty_course_list_rejected(self):
        """Test an entry with coursesAvailable: [] is dropped."""
        entries = [college_entry(1, coursesAvailable=[]), college_entry(2)]
        colleges = parse_colleges(json.dumps(entries))
        assert [c.name for c in colleges] == ["College 2"]

    def test_empty_fee_list_accepted(self):
        """Test fees: [] is still a valid list."""
        college = parse_colleges(json.dumps([college_entry(1, fees=[])]))[0]
        assert college.fees == []

    def test_defaults_optional_fields(self):
        """Test missing contactDetails and type get defaults."""
        entry = college_entry(1)
        del entry["contactDetails"]
        del entry["type"]
        college = parse_colleges(json.dumps([entry]))[0]
        assert college.contact_details.phone is None
        assert college.contact_details.email is None
        assert college.type == CollegeTypeEnum.BOTH

    def test_unknown_type_defaults_to_both(self):
        """Test an unrecognised type is replaced with Both."""
        college = parse_colleges(json.dumps([college_entry(1, type="Engineering")]))[0]
        assert college.type == CollegeTypeEnum.BOTH

    def test_type_match_is_case_insensitive(self):
        """Test 'management' maps to Management."""
        college = parse_colleges(json.dumps([college_entry(1, type="management")]))[0]
        assert college.type == CollegeTypeEnum.MANAGEMENT

    def test_numeric_fee_amount_becomes_text(self):
        """Test numeric amounts are kept as strings."""
        entry = college_entry(1, fees=[{"course": "MBA", "amount": 250000}])
        assert parse_colleges(json.dumps([entry]))[0].fees[0].amount == "250000"

    def test_truncated_mid_object_keeps_complete_entries(self):
        """Test a response cut off inside the last object."""
        complete = json.dumps([college_entry(1), college_entry(2)])[:-1]
        text = complete + ', {"name":"Cut","address":"Pune","coursesAvailable":["MBA"],"fees":[{"course":"MBA","amount":"2000'
        colleges = parse_colleges(text)
        assert [c.name for c in colleges] == ["College 1", "College 2"]

    def test_truncated_single_entry_is_empty_result(self):
        """Test truncation that leaves no complete entry."""
        text = '[{"name":"Cut","address":"Pune","coursesAvailable":["MBA"],"fees":[{"course":"MBA","amount":"2000'
        with pytest.raises(EmptyResultError):
            parse_colleges(text)

    def test_not_json(self):
        """Test prose without JSON raises a parse error."""
        with pytest.raises(ResponseParseError):
            parse_colleges("I'm sorry, I can't help with that.")

    def test_object_instead_of_array(self):
        """Test a JSON object is rejected."""
        with pytest.raises(ResponseParseError):
            parse_colleges('{"name": "College"}')

    def test_empty_array(self):
        """Test an empty array raises EmptyResultError, not a parse error."""
        with pytest.raises(EmptyResultError):
            parse_colleges("[]")

    def test_reparsing_serialized_output_is_identical(self):
        """Test parse(serialize(parse(x))) == parse(x)."""
        entries = [college_entry(1), college_entry(2, type="IT")]
        del entries[1]["contactDetails"]
        first = parse_colleges(json.dumps(entries))
        serialized = json.dumps([c.model_dump(mode="json", by_alias=True) for c in first])
        assert parse_colleges(serialized) == first


class TestLenientParse:
    """Test the permissive parser used for the fallback prompt."""

    def test_flat_contact_fields(self):
        """Test phone/email/website at the top level."""
        text = json.dumps([{"name": "Flat College", "address": "Delhi",
                            "phone": "+91-11", "email": "a@b.in", "website": "https://b.in",
                            "courses": ["BCA"], "fees": [{"course": "BCA", "amount": "90000"}]}])
        college = parse_colleges_lenient(text, "Delhi")[0]
        assert college.contact_details.phone == "+91-11"
        assert college.contact_details.email == "a@b.in"
        assert college.courses_available == ["BCA"]

    def test_nested_contact_still_accepted(self):
        """Test nested contactDetails is read when flat fields are absent."""
        college = parse_colleges_lenient(json.dumps([college_entry(1)]), "Mumbai")[0]
        assert college.contact_details.phone == "+91-22-0000-0001"

    def test_placeholders_for_missing_fields(self):
        """Test placeholders are synthesized instead of rejecting."""
        college = parse_colleges_lenient('[{"name": "Sparse College"}]', "Goa")[0]
        assert college.address == "Goa, India"
        assert college.contact_details.phone == DEFAULT_PHONE
        assert college.contact_details.email == DEFAULT_EMAIL
        assert college.contact_details.website == DEFAULT_WEBSITE
        assert college.courses_available == DEFAULT_COURSES
        assert len(college.fees) == 2
        assert college.type == CollegeTypeEnum.BOTH

    def test_entries_without_name_dropped(self):
        """Test only nameless entries are unusable."""
        text = '[{"address": "Somewhere"}, {"name": "Named"}]'
        assert [c.name for c in parse_colleges_lenient(text, "Kerala")] == ["Named"]

    def test_no_usable_entries(self):
        """Test an array of nameless entries raises EmptyResultError."""
        with pytest.raises(EmptyResultError):
            parse_colleges_lenient('[{"address": "x"}]', "Kerala")


class TestCollegeSchema:
    """Test the College model's required fields."""

    def test_fees_required(self):
        """Test a College cannot be built without fees."""
        with pytest.raises(ValidationError):
            College(name="A", address="B", coursesAvailable=["MBA"])

    def test_camel_case_aliases(self):
        """Test the camelCase names are accepted and produced."""
        college = College(name="A", address="B", coursesAvailable=["MBA"], fees=[])
        data = college.model_dump(by_alias=True)
        assert data["coursesAvailable"] == ["MBA"]
        assert "contactDetails" in data
