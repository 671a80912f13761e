from curator.utils.json_repair import extract_json_object, strip_json_wrappers, try_repair_truncated_json


def test_strip_json_wrappers_removes_code_fences():
    assert strip_json_wrappers('```json\n{"a": 1}\n```') == '{"a": 1}'
    assert strip_json_wrappers('```\n{"a": 1}```') == '{"a": 1}'


def test_extract_json_object_from_surrounding_prose():
    text = 'Here is the analysis:\n{"title": "Dune", "topics": ["fiction"]}\nHope this helps!'

    assert extract_json_object(text) == {"title": "Dune", "topics": ["fiction"]}


def test_extract_json_object_repairs_truncated_payload():
    text = '{"title": "Dune", "key_takeaways": ["Spice", "Sand'

    parsed = extract_json_object(text)

    assert parsed is not None
    assert parsed["title"] == "Dune"
    assert parsed["key_takeaways"][0] == "Spice"


def test_extract_json_object_returns_none_without_object():
    assert extract_json_object("I could not analyze this link, sorry.") is None
    assert extract_json_object("") is None
    assert extract_json_object("[1, 2, 3]") is None


def test_try_repair_truncated_json_keeps_valid_json():
    assert try_repair_truncated_json('{"a": 1}') == '{"a": 1}'


def test_try_repair_handles_braces_inside_strings():
    repaired = try_repair_truncated_json('{"summary": "uses {curly} braces", "tags": ["a"')

    assert repaired is not None
    assert repaired.endswith("]}")
