"""Schedule Document: tests for the versioned, field-preserving codec.

Tests cover:
    - empty bytes, null and {} decode to the empty document
    - the V1 wire shape (keys, RFC 3339 timestamps)
    - unknown members at every object level survive a rewrite
    - corrupt bytes raise DocumentDecodeError
    - apply_json merge rules
"""

import json

import pytest

from tempsched.core.errors import DocumentDecodeError
from tempsched.core.schedule_document import (
    ScheduleDocument,
    apply_json,
    decode_document,
    encode_document,
)
from tests.factories import USER_A, shift, window


@pytest.mark.parametrize("raw", [b"", None, b"null", b"{}"])
def test_empty_inputs_decode_to_empty_document(raw):
    assert decode_document(raw).temporary_schedules == ()


def test_encode_uses_v1_wire_shape():
    doc = ScheduleDocument(
        temporary_schedules=(window("10:00", "12:00", shift("10:00", "11:00")),),
    )
    assert json.loads(encode_document(doc)) == {
        "V1": {
            "temporarySchedules": [{
                "start": "2030-01-07T10:00:00Z",
                "end": "2030-01-07T12:00:00Z",
                "shifts": [{
                    "start": "2030-01-07T10:00:00Z",
                    "end": "2030-01-07T11:00:00Z",
                    "userID": USER_A,
                }],
            }],
        },
    }


def test_decode_reads_v1_wire_shape():
    raw = json.dumps({
        "V1": {"temporarySchedules": [{
            "start": "2030-01-07T10:00:00Z",
            "end": "2030-01-07T12:00:00+00:00",
            "shifts": [{
                "start": "2030-01-07T11:00:00+01:00",
                "end": "2030-01-07T11:00:00Z",
                "userID": USER_A,
            }],
        }]},
    }).encode()
    assert decode_document(raw).temporary_schedules == (
        window("10:00", "12:00", shift("10:00", "11:00")),
    )


def test_unknown_fields_survive_rewrite():
    raw = json.dumps({
        "V1": {"temporarySchedules": [], "rotationHints": {"tz": "UTC"}},
        "V2": {"somethingNew": [1, 2, 3]},
    }).encode()
    doc = decode_document(raw).with_schedules([window("10:00", "11:00")])

    stored = json.loads(encode_document(doc))

    assert stored["V2"] == {"somethingNew": [1, 2, 3]}
    assert stored["V1"]["rotationHints"] == {"tz": "UTC"}
    assert len(stored["V1"]["temporarySchedules"]) == 1
    assert list(stored) == ["V1", "V2"]


def test_null_shifts_decode_as_no_shifts():
    raw = b'{"V1":{"temporarySchedules":[{"start":"2030-01-07T10:00:00Z","end":"2030-01-07T11:00:00Z","shifts":null}]}}'
    assert decode_document(raw).temporary_schedules == (window("10:00", "11:00"),)


@pytest.mark.parametrize("raw", [
    b"not json",
    b"[1, 2]",
    b'{"V1": {"temporarySchedules": [{"start": "yesterday"}]}}',
    b'\xff\xfe',
])
def test_corrupt_bytes_raise_decode_error(raw):
    with pytest.raises(DocumentDecodeError):
        decode_document(raw)


def test_apply_json_merges_objects_and_replaces_arrays():
    original = {"a": {"keep": 1, "replace": 2}, "list": [1, 2], "other": True}
    overlay = {"a": {"replace": 3, "new": 4}, "list": [9]}
    assert apply_json(original, overlay) == {
        "a": {"keep": 1, "replace": 3, "new": 4},
        "list": [9],
        "other": True,
    }


def test_decoded_document_equality_ignores_raw():
    tmp = window("10:00", "11:00")
    assert ScheduleDocument((tmp,), raw={"x": 1}) == ScheduleDocument((tmp,))
