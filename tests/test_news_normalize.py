import datetime
import unittest
from pathlib import Path
import sys
from zoneinfo import ZoneInfo

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "coldnews" / "src"
sys.path.insert(0, str(SRC))

from coldnews.models.news import RawEntry
from coldnews.news import (
    clean_summary,
    format_display_time,
    normalize_entry,
    parse_pub_date,
    split_title_source,
)

TAIPEI = ZoneInfo("Asia/Taipei")


class TestTitleSplit(unittest.TestCase):
    def test_publisher_suffix_is_split_off(self):
        self.assertEqual(split_title_source("Fed Raises Rates - Reuters"), ("Fed Raises Rates", "Reuters"))

    def test_last_separator_wins(self):
        title, source = split_title_source("US-China talks - round two - Bloomberg")
        self.assertEqual(title, "US-China talks - round two")
        self.assertEqual(source, "Bloomberg")

    def test_title_without_suffix_is_untouched(self):
        self.assertEqual(split_title_source("台股收盤大漲"), ("台股收盤大漲", None))

    def test_empty_publisher_is_not_a_source(self):
        self.assertEqual(split_title_source("Headline - "), ("Headline", None))


class TestSummaryClean(unittest.TestCase):
    def test_tags_and_entities(self):
        self.assertEqual(
            clean_summary("<p>Market fell &nbsp;&quot;sharply&quot;</p>"),
            'Market fell  "sharply"',
        )

    def test_other_entities_are_left_alone(self):
        self.assertEqual(clean_summary("<b>AT&amp;T</b> &lt;up&gt;"), "AT&amp;T &lt;up&gt;")

    def test_empty(self):
        self.assertEqual(clean_summary(""), "")


class TestPubDate(unittest.TestCase):
    def test_rfc822(self):
        dt = parse_pub_date("Mon, 19 Oct 2026 04:30:00 GMT")
        self.assertEqual(dt, datetime.datetime(2026, 10, 19, 4, 30, tzinfo=datetime.timezone.utc))

    def test_iso(self):
        dt = parse_pub_date("2026-10-19T04:30:00Z")
        self.assertEqual(dt, datetime.datetime(2026, 10, 19, 4, 30, tzinfo=datetime.timezone.utc))

    def test_garbage(self):
        self.assertIsNone(parse_pub_date("yesterday-ish"))
        self.assertIsNone(parse_pub_date(None))
        self.assertIsNone(parse_pub_date("   "))

    def test_display_time_uses_timezone(self):
        dt = datetime.datetime(2026, 10, 19, 4, 5, tzinfo=datetime.timezone.utc)
        self.assertEqual(format_display_time(dt, TAIPEI), "12:05")


class TestNormalizeEntry(unittest.TestCase):
    def _entry(self, **kwargs):
        base = {
            "title": "Fed Raises Rates - Reuters",
            "link": "https://example.com/fed",
            "summary": "<p>Rates up</p>",
            "guid": "guid-1",
            "published": "Mon, 19 Oct 2026 04:30:00 GMT",
        }
        base.update(kwargs)
        return RawEntry(**base)

    def test_full_entry(self):
        item = normalize_entry(self._entry(), "美國財經焦點", TAIPEI)
        self.assertEqual(item.id, "guid-1")
        self.assertEqual(item.title, "Fed Raises Rates")
        self.assertEqual(item.source, "Reuters")
        self.assertEqual(item.summary, "Rates up")
        self.assertEqual(item.time, "12:30")
        self.assertEqual(item.category, "美國財經焦點")
        self.assertEqual(item.pub_date, 1792384200000)

    def test_explicit_source_preferred(self):
        item = normalize_entry(self._entry(source="Reuters Taiwan"), "x", TAIPEI)
        self.assertEqual(item.source, "Reuters Taiwan")
        self.assertEqual(item.title, "Fed Raises Rates")

    def test_unknown_source(self):
        item = normalize_entry(self._entry(title="No suffix here", source="  "), "x", TAIPEI)
        self.assertEqual(item.source, "Unknown")

    def test_link_used_when_guid_missing(self):
        item = normalize_entry(self._entry(guid=None), "x", TAIPEI)
        self.assertEqual(item.id, "https://example.com/fed")

    def test_unparseable_date_dropped(self):
        self.assertIsNone(normalize_entry(self._entry(published="not a date"), "x", TAIPEI))

    def test_serialized_shape(self):
        item = normalize_entry(self._entry(), "x", TAIPEI)
        dumped = item.model_dump(mode="json", by_alias=True)
        self.assertEqual(
            set(dumped),
            {"id", "title", "summary", "source", "link", "time", "category", "pubDate"},
        )


if __name__ == "__main__":
    unittest.main()
