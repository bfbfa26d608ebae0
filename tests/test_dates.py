import unittest
from datetime import datetime, timedelta, timezone

from utils.dates import (
    DateSignals,
    from_semantic_markup,
    from_structured_metadata,
    parse_spanish_date,
    resolve_published_at,
)

UTC = timezone.utc
NOW = datetime(2025, 2, 1, 12, 0, tzinfo=UTC)


class TestDateCascade(unittest.TestCase):
    def test_structured_metadata_wins_over_visual_text(self) -> None:
        signals = DateSignals(
            meta_published_time="2025-01-20T14:30:00Z",
            time_datetime_attr="2025-01-10",
            visual_text="15 Dic",
        )
        self.assertEqual(resolve_published_at(signals, now=NOW), datetime(2025, 1, 20, 14, 30, tzinfo=UTC))

    def test_metadata_offset_is_converted_to_utc(self) -> None:
        signals = DateSignals(meta_published_time="2025-01-20T10:00:00-03:00")
        self.assertEqual(resolve_published_at(signals, now=NOW), datetime(2025, 1, 20, 13, 0, tzinfo=UTC))

    def test_metadata_offset_without_colon(self) -> None:
        out = from_structured_metadata(DateSignals(meta_published_time="2025-01-20T10:00:00-0300"), NOW)
        self.assertEqual(out, datetime(2025, 1, 20, 13, 0, tzinfo=UTC))
        out = from_structured_metadata(DateSignals(meta_published_time="2025-01-20T10:00:00+0000"), NOW)
        self.assertEqual(out, datetime(2025, 1, 20, 10, 0, tzinfo=UTC))

    def test_naive_metadata_is_read_as_utc(self) -> None:
        out = from_structured_metadata(DateSignals(meta_published_time="2025-01-20T08:00:00"), NOW)
        self.assertEqual(out, datetime(2025, 1, 20, 8, 0, tzinfo=UTC))

    def test_semantic_markup_is_utc_midnight(self) -> None:
        out = resolve_published_at(DateSignals(time_datetime_attr="2025-12-17"), now=datetime(2026, 1, 1, tzinfo=UTC))
        self.assertEqual(out, datetime(2025, 12, 17, 0, 0, tzinfo=UTC))
        self.assertEqual(out.utcoffset(), timedelta(0))

    def test_semantic_markup_accepts_full_iso_value(self) -> None:
        out = from_semantic_markup(DateSignals(time_datetime_attr="2025-12-17T09:15:00-03:00"), NOW)
        self.assertEqual(out, datetime(2025, 12, 17, tzinfo=UTC))

    def test_unparseable_metadata_falls_through_to_markup(self) -> None:
        signals = DateSignals(meta_published_time="hace dos días", time_datetime_attr="2025-01-05", visual_text="3 Ene")
        self.assertEqual(resolve_published_at(signals, now=NOW), datetime(2025, 1, 5, tzinfo=UTC))

    def test_markup_wins_over_visual_text(self) -> None:
        signals = DateSignals(time_datetime_attr="2025-01-05", visual_text="3 Ene")
        self.assertEqual(resolve_published_at(signals, now=NOW), datetime(2025, 1, 5, tzinfo=UTC))

    def test_visual_text_rolls_back_to_previous_year(self) -> None:
        out = resolve_published_at(DateSignals(visual_text="15 Dic"), now=NOW)
        self.assertEqual(out, datetime(2024, 12, 15, tzinfo=UTC))

    def test_falls_back_to_now_when_nothing_parses(self) -> None:
        signals = DateSignals(meta_published_time="", time_datetime_attr="17/12/2025", visual_text="Publicado ayer")
        self.assertEqual(resolve_published_at(signals, now=NOW), NOW)

    def test_fallback_without_explicit_now_is_current_time(self) -> None:
        before = datetime.now(UTC)
        out = resolve_published_at(DateSignals())
        after = datetime.now(UTC)
        self.assertTrue(before <= out <= after)


class TestSpanishDateParsing(unittest.TestCase):
    def test_abbreviated_month_in_current_year(self) -> None:
        now = datetime(2025, 11, 20, tzinfo=UTC)
        self.assertEqual(parse_spanish_date("12 Nov", now=now), datetime(2025, 11, 12, tzinfo=UTC))

    def test_full_month_name_with_filler_words_and_year(self) -> None:
        self.assertEqual(parse_spanish_date("3 de marzo, 2024", now=NOW), datetime(2024, 3, 3, tzinfo=UTC))

    def test_setiembre_spelling(self) -> None:
        self.assertEqual(parse_spanish_date("20 setiembre 2024", now=NOW), datetime(2024, 9, 20, tzinfo=UTC))

    def test_explicit_year_is_kept_even_if_in_the_future(self) -> None:
        self.assertEqual(parse_spanish_date("15 Dic 2025", now=NOW), datetime(2025, 12, 15, tzinfo=UTC))

    def test_two_digit_year_is_in_this_century(self) -> None:
        now = datetime(2026, 1, 1, tzinfo=UTC)
        self.assertEqual(parse_spanish_date("12 Nov 25", now=now), datetime(2025, 11, 12, tzinfo=UTC))

    def test_same_day_is_not_rolled_back(self) -> None:
        self.assertEqual(parse_spanish_date("1 Feb", now=NOW), datetime(2025, 2, 1, tzinfo=UTC))

    def test_unknown_month_or_day_gives_none(self) -> None:
        self.assertIsNone(parse_spanish_date("12 Foo", now=NOW))
        self.assertIsNone(parse_spanish_date("Nov 12", now=NOW))
        self.assertIsNone(parse_spanish_date("", now=NOW))
        self.assertIsNone(parse_spanish_date("12", now=NOW))

    def test_impossible_calendar_date_gives_none(self) -> None:
        self.assertIsNone(parse_spanish_date("30 Feb 2024", now=NOW))
