import json
import os

import pytest
import requests

from ocrstamp.config import OcrConfig
from ocrstamp.errors import FileAccessError, NetworkError, ResponseFormatError
from ocrstamp.models import OcrResult, ParsedResult
from ocrstamp.ocr_space_client import OCRSpaceClient
from ocrstamp.processor import count_image_files, iter_image_files, process_images
from ocrstamp.rename_executor import OUTPUT_FOLDER_NAME


def _result(text):
    return OcrResult(parsed_results=[ParsedResult(parsed_text=text)])


class _FakeClient:
    """Returns canned OCR results by file name; records the order of requests."""

    def __init__(self, results=None, fail_on=None):
        self.results = results or {}
        self.fail_on = fail_on
        self.calls = []

    def recognize(self, path):
        self.calls.append(path.name)
        if path.name == self.fail_on:
            raise NetworkError(f"OCR request for {path.name} failed")
        return self.results.get(path.name, OcrResult())


def _write(path, content=b"jpeg"):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)
    return path


def test_count_only_matching_extension(tmp_path):
    for name in ["a.jpg", "b.jpg", "c.jpg"]:
        _write(tmp_path / name)
    for name in ["d.JPG", "e.jpeg", "f.png", "notes.txt", "jpg"]:
        _write(tmp_path / name)

    assert count_image_files(tmp_path) == 3


def test_walk_is_recursive_and_lexical(tmp_path):
    _write(tmp_path / "b.jpg")
    _write(tmp_path / "a" / "z.jpg")
    _write(tmp_path / "a" / "sub" / "y.jpg")
    _write(tmp_path / "c" / "x.jpg")
    _write(tmp_path / "a.jpg")

    names = [p.relative_to(tmp_path).as_posix() for p in iter_image_files(tmp_path)]
    assert names == ["a/sub/y.jpg", "a/z.jpg", "a.jpg", "b.jpg", "c/x.jpg"]


def test_walk_order_matches_count(tmp_path):
    for i in range(5):
        _write(tmp_path / f"d{i}" / f"{i}.jpg")
    assert count_image_files(tmp_path) == len(list(iter_image_files(tmp_path)))
    assert list(iter_image_files(tmp_path)) == list(iter_image_files(tmp_path))


def test_walk_missing_folder(tmp_path):
    with pytest.raises(FileAccessError):
        list(iter_image_files(tmp_path / "missing"))


def test_process_renames_by_time(tmp_path):
    _write(tmp_path / "IMG_1.jpg", b"first")
    _write(tmp_path / "IMG_2.jpg", b"second")
    client = _FakeClient({
        "IMG_1.jpg": _result("Site 4\r\n14:23:05\r\n"),
        "IMG_2.jpg": _result("09:00:00 ... 23:59:59"),
    })

    results = process_images(tmp_path, client)

    output = tmp_path / OUTPUT_FOLDER_NAME
    assert (output / "14.23.05.jpg").read_bytes() == b"first"
    assert (output / "09.00.00.jpg").read_bytes() == b"second"
    assert [r.token for r in results] == ["14.23.05", "09.00.00"]
    # Originals stay where they are
    assert (tmp_path / "IMG_1.jpg").read_bytes() == b"first"
    assert (tmp_path / "IMG_2.jpg").read_bytes() == b"second"


def test_process_copies_bytes_exactly(tmp_path):
    content = bytes(range(256)) * 64
    _write(tmp_path / "IMG_1.jpg", content)

    process_images(tmp_path, _FakeClient({"IMG_1.jpg": _result("12:00:00")}))

    assert (tmp_path / OUTPUT_FOLDER_NAME / "12.00.00.jpg").read_bytes() == content


def test_process_skips_images_without_parsed_results(tmp_path):
    _write(tmp_path / "a.jpg")
    _write(tmp_path / "b.jpg")
    progress = []

    results = process_images(
        tmp_path,
        _FakeClient({"b.jpg": _result("10:11:12")}),
        on_progress=lambda done, total: progress.append((done, total)),
    )

    assert results[0].skipped
    assert results[0].destination is None
    assert not results[1].skipped
    assert progress == [(1, 2), (2, 2)]
    assert sorted(os.listdir(tmp_path / OUTPUT_FOLDER_NAME)) == ["10.11.12.jpg"]


def test_process_does_not_create_output_folder_when_nothing_parsed(tmp_path):
    _write(tmp_path / "a.jpg")

    process_images(tmp_path, _FakeClient())

    assert not (tmp_path / OUTPUT_FOLDER_NAME).exists()


def test_process_empty_token_writes_bare_extension(tmp_path):
    # Suspicious but intended: no time found still produces ".jpg", and the
    # last such image wins
    _write(tmp_path / "a.jpg", b"a")
    _write(tmp_path / "b.jpg", b"b")
    client = _FakeClient({"a.jpg": _result("no time"), "b.jpg": _result("still none")})

    results = process_images(tmp_path, client)

    output = tmp_path / OUTPUT_FOLDER_NAME
    assert os.listdir(output) == [".jpg"]
    assert (output / ".jpg").read_bytes() == b"b"
    assert [r.token for r in results] == ["", ""]


def test_process_aborts_on_first_error(tmp_path):
    for name in ["1.jpg", "2.jpg", "3.jpg", "4.jpg"]:
        _write(tmp_path / name)
    client = _FakeClient({name: _result(f"0{i}:00:00") for i, name in enumerate(["1.jpg", "2.jpg", "3.jpg", "4.jpg"])}, fail_on="3.jpg")
    progress = []
    completed = []

    with pytest.raises(NetworkError):
        process_images(
            tmp_path,
            client,
            on_progress=lambda done, total: progress.append(done),
            on_complete=lambda: completed.append(True),
        )

    assert client.calls == ["1.jpg", "2.jpg", "3.jpg"]
    assert progress == [1, 2]
    assert completed == []
    assert sorted(os.listdir(tmp_path / OUTPUT_FOLDER_NAME)) == ["00.00.00.jpg", "01.00.00.jpg"]


def test_process_completion_fires_once_after_last(tmp_path):
    for name in ["a.jpg", "b.jpg", "c.jpg"]:
        _write(tmp_path / name)
    events = []

    process_images(
        tmp_path,
        _FakeClient({"a.jpg": _result("01:02:03")}),
        on_progress=lambda done, total: events.append(("progress", done, total)),
        on_complete=lambda: events.append(("complete",)),
    )

    assert events == [
        ("progress", 1, 3),
        ("progress", 2, 3),
        ("progress", 3, 3),
        ("complete",),
    ]


def test_process_result_callback_before_progress(tmp_path):
    _write(tmp_path / "a.jpg")
    events = []

    process_images(
        tmp_path,
        _FakeClient({"a.jpg": _result("01:02:03")}),
        on_progress=lambda done, total: events.append("progress"),
        on_result=lambda result: events.append(result.token),
    )

    assert events == ["01.02.03", "progress"]


def test_process_empty_folder(tmp_path):
    completed = []
    results = process_images(tmp_path, _FakeClient(), on_complete=lambda: completed.append(True))
    assert results == []
    # Completion is only signalled after processing an image
    assert completed == []


def test_process_ignores_previous_output(tmp_path):
    _write(tmp_path / "a.jpg")
    _write(tmp_path / OUTPUT_FOLDER_NAME / "01.02.03.jpg")
    client = _FakeClient({"a.jpg": _result("04:05:06")})

    results = process_images(tmp_path, client)

    assert client.calls == ["a.jpg"]
    assert len(results) == 1
    assert sorted(os.listdir(tmp_path / OUTPUT_FOLDER_NAME)) == ["01.02.03.jpg", "04.05.06.jpg"]


def test_process_nested_images_share_output_folder(tmp_path):
    _write(tmp_path / "day1" / "a.jpg", b"a")
    _write(tmp_path / "day2" / "b.jpg", b"b")
    client = _FakeClient({"a.jpg": _result("07:00:00"), "b.jpg": _result("08:00:00")})

    process_images(tmp_path, client)

    output = tmp_path / OUTPUT_FOLDER_NAME
    assert (output / "07.00.00.jpg").read_bytes() == b"a"
    assert (output / "08.00.00.jpg").read_bytes() == b"b"


def test_process_custom_extension(tmp_path):
    _write(tmp_path / "a.png", b"png")
    _write(tmp_path / "b.jpg", b"jpg")
    client = _FakeClient({"a.png": _result("07:00:00")})

    results = process_images(tmp_path, client, extension=".png")

    assert client.calls == ["a.png"]
    assert results[0].destination == tmp_path / OUTPUT_FOLDER_NAME / "07.00.00.png"


class _SequenceSession:
    """Stands in for requests.Session; answers each post with the next JSON body."""

    def __init__(self, bodies):
        self.headers = {}
        self.bodies = list(bodies)
        self.calls = []

    def post(self, url, **kwargs):
        self.calls.append(kwargs["files"]["file"][0])
        response = requests.Response()
        response.status_code = 200
        response._content = json.dumps(self.bodies.pop(0)).encode("utf-8")
        return response


def test_process_aborts_when_service_rejects_image(tmp_path):
    _write(tmp_path / "a.jpg")
    _write(tmp_path / "b.jpg")
    session = _SequenceSession([
        {
            "OCRExitCode": 3,
            "IsErroredOnProcessing": True,
            "ErrorMessage": ["File size exceeds the maximum permissible file size limit of 1024 KB"],
        },
        {"ParsedResults": [{"ParsedText": "10:11:12"}], "IsErroredOnProcessing": False},
    ])
    client = OCRSpaceClient(OcrConfig(api_key="test-key"), session=session)
    progress = []

    with pytest.raises(ResponseFormatError):
        process_images(tmp_path, client, on_progress=lambda done, total: progress.append(done))

    assert session.calls == ["a.jpg"]
    assert progress == []
    assert not (tmp_path / OUTPUT_FOLDER_NAME).exists()
