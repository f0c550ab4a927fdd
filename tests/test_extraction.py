import os
import unittest
from datetime import datetime, timezone

from policypulse.extraction.article import build_record, extract_article
from policypulse.extraction.categories import DEFAULT_CATEGORY, category_from_url
from policypulse.extraction.listing import extract_listing
from policypulse.extraction.profiles import MONEYCONTROL, get_profile
from policypulse.ingestion.article_types import ArticleFragment, CandidateLink
from policypulse.ingestion.results import FailureKind


FIXTURES = os.path.join(os.path.dirname(__file__), "fixtures")


def _fixture(name):
    with open(os.path.join(FIXTURES, name), "r", encoding="utf-8") as f:
        return f.read()


class TestListingExtraction(unittest.TestCase):
    def test_premium_entries_are_skipped(self):
        links = extract_listing(_fixture("moneycontrol_listing.html"), MONEYCONTROL)
        self.assertEqual(len(links), 2)
        self.assertEqual(links[0].title, "GST Council cuts rates on 12 items")
        self.assertEqual(
            links[0].url,
            "https://www.moneycontrol.com/news/business/economy/gst-council-cuts-rates-13000001.html",
        )
        self.assertEqual(links[1].title, "RBI keeps repo rate unchanged")
        self.assertTrue(all("premium" not in link.url for link in links))

    def test_fallback_container_is_used(self):
        html = """
        <div id="category"><ul>
          <li class="clearfix"><h2><a href="/news/a-1.html">First</a></h2></li>
          <li class="clearfix"><h3><a href="/news/b-2.html">Second</a></h3></li>
        </ul></div>
        """
        links = extract_listing(html, MONEYCONTROL)
        self.assertEqual([l.title for l in links], ["First", "Second"])

    def test_empty_container_falls_through_to_next_layout(self):
        html = """
        <div id="cagetory"></div>
        <ul class="listing"><li><h2><a href="/news/c-3.html">Third</a></h2></li></ul>
        """
        links = extract_listing(html, MONEYCONTROL)
        self.assertEqual([l.url for l in links], ["https://www.moneycontrol.com/news/c-3.html"])

    def test_unknown_layout_yields_empty_list(self):
        self.assertEqual(extract_listing("<html><body><p>maintenance</p></body></html>", MONEYCONTROL), [])
        self.assertEqual(extract_listing("", MONEYCONTROL), [])

    def test_protocol_relative_links_are_not_doubled(self):
        html = '<ul id="cagetory"><li class="clearfix"><h2><a href="//www.moneycontrol.com/news/economy/story-1.html">T</a></h2></li></ul>'
        links = extract_listing(html, MONEYCONTROL)
        self.assertEqual([l.url for l in links], ["https://www.moneycontrol.com/news/economy/story-1.html"])


class TestArticleExtraction(unittest.TestCase):
    url = "https://www.moneycontrol.com/news/business/economy/gst-council-cuts-rates-13000001.html"

    def test_extracts_body_author_and_date_text(self):
        r = extract_article(_fixture("moneycontrol_article.html"), MONEYCONTROL, url=self.url)
        self.assertTrue(r.ok)
        frag = r.value
        self.assertEqual(
            frag.body.split("\n"),
            [
                "The GST Council on Saturday cut rates on 12 items, the finance ministry said in a notification.",
                "The new rates take effect from February 1, 2026.",
                "Traders welcomed the move.",
            ],
        )
        self.assertEqual(frag.author, "Jane Doe")
        self.assertEqual(frag.published_text, "January 19, 2026 10:30 AM IST")

    def test_body_falls_back_to_secondary_container(self):
        html = '<div class="arti-flow"><p>Only paragraph.</p></div>'
        r = extract_article(html, MONEYCONTROL, url=self.url)
        self.assertEqual(r.value.body, "Only paragraph.")

    def test_author_falls_back_to_bio_pattern(self):
        html = """
        <div id="contentdata"><p>Body.</p></div>
        <div class="content_block">Ravi Kumar Sharma is an editor at the desk.</div>
        """
        r = extract_article(html, MONEYCONTROL)
        self.assertEqual(r.value.author, "Ravi Kumar Sharma")

    def test_author_bio_without_pattern_uses_first_two_words(self):
        html = """
        <div id="contentdata"><p>Body.</p></div>
        <div class="content_block">Moneycontrol News Bureau</div>
        """
        r = extract_article(html, MONEYCONTROL)
        self.assertEqual(r.value.author, "Moneycontrol News")

    def test_published_text_falls_back_to_meta_tag(self):
        html = """
        <head><meta property="article:published_time" content="2026-01-19T10:30:00+05:30"></head>
        <div id="contentdata"><p>Body.</p></div>
        """
        r = extract_article(html, MONEYCONTROL)
        self.assertEqual(r.value.published_text, "2026-01-19T10:30:00+05:30")
        self.assertIsNone(r.value.author)

    def test_missing_markup_is_extraction_failure(self):
        r = extract_article("<html><body><div></div></body></html>", MONEYCONTROL, url=self.url)
        self.assertFalse(r.ok)
        self.assertEqual(r.failure.kind, FailureKind.EXTRACTION)

    def test_empty_html_is_extraction_failure(self):
        r = extract_article("   ", MONEYCONTROL)
        self.assertEqual(r.failure.reason, "empty_html")


class TestBuildRecord(unittest.TestCase):
    def test_provenance_metadata_and_dates(self):
        now = datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc)
        link = CandidateLink(title="GST Council cuts rates", url="https://www.moneycontrol.com/news/business/economy/gst-13000001.html")
        fragment = ArticleFragment(body="Body text", author="Jane Doe", published_text="January 19, 2026 10:30 AM IST")
        listing_url = "https://www.moneycontrol.com/news/business/economy/"

        record = build_record(link, fragment, MONEYCONTROL, listing_url=listing_url, now=now)

        self.assertEqual(record.source, "moneycontrol")
        self.assertEqual(record.source_id, "moneycontrol_gst-13000001.html")
        self.assertEqual(record.content, "Body text")
        self.assertEqual(record.published_at, datetime(2026, 1, 19, 5, 0, tzinfo=timezone.utc))
        self.assertIsNone(record.is_interesting)
        self.assertIsNone(record.embedding)
        self.assertEqual(record.metadata["category"], "economy")
        self.assertEqual(record.metadata["scraped_from"], listing_url)
        self.assertEqual(record.metadata["scraped_at"], now.isoformat())
        self.assertEqual(record.metadata["raw_published_text"], "January 19, 2026 10:30 AM IST")

    def test_unparseable_date_falls_back_to_ingestion_time(self):
        now = datetime(2026, 1, 20, 12, 0, tzinfo=timezone.utc)
        link = CandidateLink(title="T", url="https://www.moneycontrol.com/news/politics/t-1.html")
        record = build_record(
            link,
            ArticleFragment(body="B", published_text="???"),
            MONEYCONTROL,
            listing_url="https://www.moneycontrol.com/news/politics/",
            now=now,
        )
        self.assertEqual(record.published_at, now)


class TestCategories(unittest.TestCase):
    def test_known_fragments(self):
        self.assertEqual(category_from_url("https://www.moneycontrol.com/news/business/personal-finance/"), "personal-finance")
        self.assertEqual(category_from_url("https://www.moneycontrol.com/news/politics/"), "politics")

    def test_unknown_defaults(self):
        self.assertEqual(category_from_url("https://www.moneycontrol.com/news/technology/"), DEFAULT_CATEGORY)


class TestProfiles(unittest.TestCase):
    def test_unknown_profile_raises(self):
        with self.assertRaises(ValueError):
            get_profile("nope")


if __name__ == "__main__":
    unittest.main()
