from datetime import datetime, timedelta, timezone

import pytest

from core.utils import ensure_utc, is_object_id, new_object_id, parse_iso, to_iso


class TestObjectIds:
    def test_new_object_id_has_store_format(self):
        value = new_object_id()

        assert len(value) == 24
        assert is_object_id(value)

    def test_new_object_ids_are_unique(self):
        assert len({new_object_id() for _ in range(200)}) == 200

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "Z" * 24, "65F1C0DE0000000000000000", "65f1c0de00000000000000001", None, 42],
    )
    def test_is_object_id_rejects_malformed(self, value):
        assert not is_object_id(value)


class TestIsoDates:
    def test_to_iso_uses_millisecond_utc_form(self):
        value = datetime(2024, 6, 1, 12, 30, 5, 123456, tzinfo=timezone.utc)

        assert to_iso(value) == "2024-06-01T12:30:05.123Z"

    def test_to_iso_treats_naive_as_utc(self):
        assert to_iso(datetime(2024, 6, 1)) == "2024-06-01T00:00:00.000Z"

    def test_to_iso_converts_offsets_to_utc(self):
        value = datetime(2024, 6, 1, 2, 0, tzinfo=timezone(timedelta(hours=2)))

        assert to_iso(value) == "2024-06-01T00:00:00.000Z"

    def test_to_iso_none(self):
        assert to_iso(None) is None

    def test_parse_iso_round_trip(self):
        text = "2024-06-01T00:00:00.000Z"

        parsed = parse_iso(text)

        assert parsed == datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert to_iso(parsed) == text

    def test_parse_iso_accepts_date_only(self):
        assert parse_iso("2024-06-01") == datetime(2024, 6, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", ["", "   ", "yesterday", "2024-13-01"])
    def test_parse_iso_rejects_garbage(self, value):
        with pytest.raises(ValueError):
            parse_iso(value)

    def test_ensure_utc_keeps_instant(self):
        value = datetime(2024, 1, 1, 5, 0, tzinfo=timezone(timedelta(hours=5)))

        assert ensure_utc(value) == datetime(2024, 1, 1, 0, 0, tzinfo=timezone.utc)
        assert ensure_utc(value).tzinfo == timezone.utc

    def test_to_iso_rejects_non_dates(self):
        with pytest.raises(ValueError):
            to_iso(1717200000)
