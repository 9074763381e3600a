"""Schedule Document: versioned, field-preserving codec for the per-schedule row.

Invariants:
    - decode_document(b"") / null / {} all yield the empty document
    - Members this version does not recognize (top-level or inside "V1") survive
      every decode -> encode cycle, in their original position
    - Encoded timestamps are RFC 3339 UTC with a trailing "Z"
    - Corrupt bytes raise DocumentDecodeError; nothing is silently dropped

Design Decisions:
    - Wire models ignore unknown members instead of forbidding them; the raw
      decoded object is kept alongside as the unknown-field side channel
    - apply_json overlays recognized fields onto the raw object recursively:
      objects merge key-by-key, arrays and scalars are replaced wholesale
"""

import json
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterable

from pydantic import AwareDatetime, BaseModel, ConfigDict, Field, ValidationError

from tempsched.core.domain_types import DocumentVersion, UserId
from tempsched.core.errors import DocumentDecodeError
from tempsched.core.temporary_schedule import Shift, TemporarySchedule


# ─── Wire Models ─────────────────────────────────────────────────

class _WireModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class _ShiftWire(_WireModel):
    start: AwareDatetime
    end: AwareDatetime
    user_id: str = Field(alias="userID")


class _TemporaryScheduleWire(_WireModel):
    start: AwareDatetime
    end: AwareDatetime
    shifts: list[_ShiftWire] | None = None


class _DataV1Wire(_WireModel):
    temporary_schedules: list[_TemporaryScheduleWire] | None = Field(
        default=None, alias="temporarySchedules",
    )


class _DataWire(_WireModel):
    v1: _DataV1Wire | None = Field(default=None, alias=DocumentVersion.V1.value)


# ─── Document ────────────────────────────────────────────────────

@dataclass(frozen=True)
class ScheduleDocument:
    """Decoded schedule row: recognized schedules plus the raw object they came from."""
    temporary_schedules: tuple[TemporarySchedule, ...] = ()
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    def with_schedules(
        self, schedules: Iterable[TemporarySchedule],
    ) -> "ScheduleDocument":
        return replace(self, temporary_schedules=tuple(schedules))


def format_timestamp(t: datetime) -> str:
    return t.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def _utc(t: datetime) -> datetime:
    return t.astimezone(timezone.utc)


def _from_wire(data: _DataWire) -> tuple[TemporarySchedule, ...]:
    if data.v1 is None or not data.v1.temporary_schedules:
        return ()
    return tuple(
        TemporarySchedule(
            start=_utc(tmp.start),
            end=_utc(tmp.end),
            shifts=tuple(
                Shift(
                    start=_utc(s.start), end=_utc(s.end), user_id=UserId(s.user_id),
                )
                for s in tmp.shifts or ()
            ),
        )
        for tmp in data.v1.temporary_schedules
    )


def _to_wire(schedules: Iterable[TemporarySchedule]) -> dict[str, Any]:
    return {
        DocumentVersion.V1.value: {
            "temporarySchedules": [
                {
                    "start": format_timestamp(tmp.start),
                    "end": format_timestamp(tmp.end),
                    "shifts": [
                        {
                            "start": format_timestamp(s.start),
                            "end": format_timestamp(s.end),
                            "userID": s.user_id,
                        }
                        for s in tmp.shifts
                    ],
                }
                for tmp in schedules
            ],
        },
    }


def apply_json(original: Any, overlay: Any) -> Any:
    """Overlay `overlay` onto `original`, keeping members only `original` has."""
    if not isinstance(original, dict) or not isinstance(overlay, dict):
        return overlay
    result = dict(original)
    for key, value in overlay.items():
        result[key] = apply_json(original.get(key), value)
    return result


def decode_document(raw: bytes | str | None) -> ScheduleDocument:
    """Decode stored bytes. Pure, no IO."""
    if raw is None or len(raw) == 0:
        return ScheduleDocument()
    try:
        obj = json.loads(raw)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DocumentDecodeError(f"invalid JSON: {e}") from e
    if obj is None:
        return ScheduleDocument()
    if not isinstance(obj, dict):
        raise DocumentDecodeError(
            f"expected a JSON object, got {type(obj).__name__}",
        )
    try:
        data = _DataWire.model_validate(obj)
    except ValidationError as e:
        raise DocumentDecodeError(
            f"{e.error_count()} invalid field(s)",
        ) from e
    return ScheduleDocument(temporary_schedules=_from_wire(data), raw=obj)


def encode_document(doc: ScheduleDocument) -> bytes:
    """Encode `doc`, preserving any member of `doc.raw` it does not recognize."""
    merged = apply_json(doc.raw, _to_wire(doc.temporary_schedules))
    return json.dumps(merged, ensure_ascii=False, separators=(",", ":")).encode()
