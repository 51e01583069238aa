import pytest

from ocrstamp.errors import ResponseFormatError
from ocrstamp.models import OcrResult, ProgressState, RenamedImage, progress_percent


def test_from_dict_ignores_unknown_fields():
    result = OcrResult.from_dict({
        "ParsedResults": [{"ParsedText": "12:00:00", "SomethingNew": 1}],
        "SearchablePDFURL": "n/a",
    })
    assert result.text == "12:00:00"


def test_from_dict_defaults():
    result = OcrResult.from_dict({})
    assert result.is_errored_on_processing is False
    assert result.error_message == ""
    assert result.parsed_results == []
    assert result.text is None


def test_from_dict_null_fields_take_defaults():
    result = OcrResult.from_dict({"ErrorMessage": None, "ParsedResults": None})
    assert result.error_message == ""
    assert result.parsed_results == []


def test_only_first_parsed_result_is_text():
    result = OcrResult.from_dict({"ParsedResults": [{"ParsedText": "first"}, {"ParsedText": "second"}]})
    assert result.text == "first"


def test_empty_parsed_text_is_not_none():
    result = OcrResult.from_dict({"ParsedResults": [{"ParsedText": ""}]})
    assert result.text == ""


def test_null_body_is_empty_result():
    result = OcrResult.from_dict(None)
    assert result == OcrResult()
    assert result.text is None


@pytest.mark.parametrize("payload", [
    "text",
    ["list"],
    {"IsErroredOnProcessing": 1},
    {"OCRExitCode": True},
    {"ErrorMessage": 5},
    {"ErrorMessage": ["File failed validation."]},
    {"ProcessingTimeInMilliseconds": 250},
    {"ParsedResults": [{"ErrorDetails": ["detail"]}]},
    {"ParsedResults": [["nested"]]},
    {"ParsedResults": [{"TextOverlay": {"Words": [{"Left": "10"}]}}]},
    {"ParsedResults": [{"TextOverlay": {"Words": [{"Top": 10.5}]}}]},
])
def test_from_dict_rejects_bad_shapes(payload):
    with pytest.raises(ResponseFormatError):
        OcrResult.from_dict(payload)


def test_progress_percent_truncates():
    assert progress_percent(1, 3) == 33
    assert progress_percent(2, 3) == 66
    assert progress_percent(3, 3) == 100
    assert progress_percent(0, 0) == 0


def test_progress_state():
    state = ProgressState(total=2)
    assert not state.finished
    state.processed += 1
    assert state.percent == 50
    state.processed += 1
    assert state.finished


def test_renamed_image_skipped(tmp_path):
    assert RenamedImage(source=tmp_path / "a.jpg").skipped
    assert not RenamedImage(source=tmp_path / "a.jpg", destination=tmp_path / "b.jpg", token="b").skipped
