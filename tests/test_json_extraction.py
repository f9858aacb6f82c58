import json

import pytest

from cvenhancer.exceptions import ResponseFormatError
from cvenhancer.utils.json_extraction import (
    dedupe_experience,
    extract_json_text,
    experience_key,
    parse_json_object,
    sanitize_response,
)


def test_fenced_block_with_language_tag():
    raw = 'Here is your resume:\n```json\n{"a": 1}\n```\nLet me know!'
    assert extract_json_text(raw) == '{"a": 1}'


def test_fenced_block_without_language_tag():
    raw = '```\n{"a": 1}\n```'
    assert parse_json_object(raw) == {"a": 1}


def test_fence_wins_over_earlier_braces():
    raw = 'Example: {"x": 0}\n```json\n{"y": 1}\n```'
    assert parse_json_object(raw) == {"y": 1}


def test_brace_span_strips_surrounding_prose():
    raw = 'Sure! {"a": {"b": 2}} Hope this helps.'
    assert parse_json_object(raw) == {"a": {"b": 2}}


def test_plain_json_parses():
    assert parse_json_object('  {"a": [1, 2]}\n') == {"a": [1, 2]}


def test_empty_reply_is_rejected():
    with pytest.raises(ResponseFormatError):
        parse_json_object("   ")


def test_prose_without_json_is_rejected():
    with pytest.raises(ResponseFormatError):
        parse_json_object("I could not read the resume, sorry.")


def test_truncated_json_is_rejected():
    with pytest.raises(ResponseFormatError):
        parse_json_object('{"experience": [{"company": "Acme"')


def test_non_object_json_is_rejected():
    with pytest.raises(ResponseFormatError):
        parse_json_object("[1, 2, 3]")


def test_experience_key_concatenates_fields():
    entry = {"company": "Acme", "title": "Engineer", "dateRange": "2020"}
    assert experience_key(entry) == "AcmeEngineer2020"
    assert experience_key({"company": "Acme"}) == "Acme"


def test_dedupe_keeps_first_occurrence():
    data = {
        "experience": [
            {"company": "Acme", "title": "Engineer", "dateRange": "2020", "duties": ["first"]},
            {"company": "Beta", "title": "Engineer", "dateRange": "2020", "duties": ["other"]},
            {"company": "Acme", "title": "Engineer", "dateRange": "2020", "duties": ["second"]},
        ]
    }
    cleaned = dedupe_experience(data)

    assert [job["company"] for job in cleaned["experience"]] == ["Acme", "Beta"]
    assert cleaned["experience"][0]["duties"] == ["first"]
    # input untouched
    assert len(data["experience"]) == 3


def test_dedupe_distinguishes_date_ranges():
    data = {
        "experience": [
            {"company": "Acme", "title": "Engineer", "dateRange": "2018 - 2019"},
            {"company": "Acme", "title": "Engineer", "dateRange": "2021 - 2022"},
        ]
    }
    assert len(dedupe_experience(data)["experience"]) == 2


def test_dedupe_ignores_missing_experience():
    data = {"personalInfo": {"name": "Jane"}}
    assert dedupe_experience(data) == data
    assert dedupe_experience({"experience": "n/a"}) == {"experience": "n/a"}


def test_sanitize_is_idempotent(sample_resume):
    sample_resume["experience"].append(dict(sample_resume["experience"][0]))
    once = sanitize_response("```json\n" + json.dumps(sample_resume) + "\n```")
    twice = sanitize_response(json.dumps(once))

    assert once == twice
    assert len(once["experience"]) == 3


def test_dedupe_reads_alternate_date_spellings():
    data = {
        "experience": [
            {"company": "Acme", "title": "Engineer", "dates": "2018 - 2019", "duties": ["a"]},
            {"company": "Acme", "title": "Engineer", "dates": "2021 - 2023", "duties": ["b"]},
        ]
    }
    kept = dedupe_experience(data)["experience"]
    assert [job["dates"] for job in kept] == ["2018 - 2019", "2021 - 2023"]


def test_dedupe_matches_across_date_spellings():
    data = {
        "experience": [
            {"company": "Acme", "title": "Engineer", "dateRange": "2018 - 2019", "duties": ["a"]},
            {"company": "Acme", "title": "Engineer", "date_range": "2018 - 2019", "duties": ["b"]},
            {"company": "Acme", "title": "Engineer", "date": "2018 - 2019", "duties": ["c"]},
        ]
    }
    kept = dedupe_experience(data)["experience"]
    assert len(kept) == 1
    assert kept[0]["duties"] == ["a"]


def test_dedupe_key_matches_validated_resume():
    raw = json.dumps({
        "experience": [
            {"company": "Acme", "title": "Engineer", "date_range": "2020", "dateRange": None},
            {"company": "Acme", "title": "Engineer", "dates": "2020"},
        ]
    })
    data = sanitize_response(raw)
    assert len(data["experience"]) == 1
    assert experience_key(data["experience"][0]) == "AcmeEngineer2020"
