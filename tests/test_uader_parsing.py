import unittest
from datetime import datetime, timezone

from agents.uader import parse_detail, parse_listing
from fakes import LISTING_URL, quiet_logger
from fakes import fixture as _fixture


class TestUaderListingParsing(unittest.TestCase):
    def test_parses_title_links_and_caps_to_limit(self) -> None:
        items = parse_listing(_fixture("uader_listing.html"), base_url=LISTING_URL, limit=5)
        self.assertEqual(len(items), 5)
        self.assertEqual(items[0].title, "Se abrió una pasantía rentada en Sistemas")
        self.assertEqual(items[0].url, "https://fcyt.uader.edu.ar/se-abrio-una-pasantia-rentada-en-sistemas/")
        self.assertEqual(items[2].title, "Convocatoria PASANTÍA en laboratorio")
        self.assertNotIn("https://fcyt.uader.edu.ar/pasantia-antigua/", [i.url for i in items])

    def test_fewer_articles_than_limit(self) -> None:
        items = parse_listing(_fixture("uader_listing.html"), base_url=LISTING_URL, limit=50)
        self.assertEqual(len(items), 6)

    def test_articles_without_title_link_are_skipped(self) -> None:
        html = """
        <article><h2 class="entry-title">No link here</h2></article>
        <article><h2 class="entry-title"><a>Pasantía sin enlace</a></h2></article>
        <article><h2 class="entry-title"><a href="/ok/">Pasantía ok</a></h2></article>
        """
        items = parse_listing(html, base_url=LISTING_URL, limit=5)
        self.assertEqual([i.url for i in items], ["https://fcyt.uader.edu.ar/ok/"])

    def test_skipped_articles_are_logged(self) -> None:
        html = """
        <article><h2 class="entry-title">No link here</h2></article>
        <article><h2 class="entry-title"><a>Pasantía sin enlace</a></h2></article>
        <article><h2 class="entry-title"><a href="/ok/">Pasantía ok</a></h2></article>
        """
        logger = quiet_logger("listing")
        with self.assertLogs(logger, level="DEBUG") as logs:
            items = parse_listing(html, base_url=LISTING_URL, limit=5, logger=logger)
        self.assertEqual(len(items), 1)
        self.assertEqual(len(logs.records), 2)
        self.assertIn("without a title link", logs.output[0])
        self.assertIn("Pasantía sin enlace", logs.output[1])

    def test_no_articles(self) -> None:
        self.assertEqual(parse_listing("<html><body><p>Nada</p></body></html>", base_url=LISTING_URL, limit=5), [])


class TestUaderDetailParsing(unittest.TestCase):
    def test_open_graph_metadata_preferred(self) -> None:
        url = "https://fcyt.uader.edu.ar/se-abrio-una-pasantia-rentada-en-sistemas/"
        posting = parse_detail(
            _fixture("uader_detail_og.html"),
            url=url,
            fallback_title="Se abrió una pasantía rentada en Sistemas",
            origin="UADER",
            now=datetime(2026, 2, 1, tzinfo=timezone.utc),
        )
        self.assertEqual(posting.url, url)
        self.assertEqual(posting.origin, "UADER")
        self.assertEqual(posting.title, "Pasantía rentada: Desarrollador/a Junior en Sistemas")
        self.assertEqual(posting.image_url, "https://fcyt.uader.edu.ar/wp-content/uploads/2025/11/pasantia.jpg")
        # Metadata beats the conflicting "15 Dic" visual date.
        self.assertEqual(posting.published_at, datetime(2025, 11, 18, 13, 45, tzinfo=timezone.utc))

    def test_thumbnail_and_visual_date_fallbacks(self) -> None:
        url = "https://fcyt.uader.edu.ar/convocatoria-pasantia-laboratorio/"
        posting = parse_detail(
            _fixture("uader_detail_visual.html"),
            url=url,
            fallback_title="Convocatoria PASANTÍA en laboratorio",
            origin="UADER",
            now=datetime(2025, 11, 20, tzinfo=timezone.utc),
        )
        self.assertEqual(posting.title, "Convocatoria PASANTÍA en laboratorio")
        self.assertEqual(posting.image_url, "https://fcyt.uader.edu.ar/wp-content/uploads/2025/11/laboratorio.png")
        self.assertEqual(posting.published_at, datetime(2025, 11, 12, tzinfo=timezone.utc))

    def test_time_element_datetime_attribute(self) -> None:
        posting = parse_detail(
            _fixture("uader_detail_time.html"),
            url="https://fcyt.uader.edu.ar/x/",
            fallback_title="Pasantía",
            origin="UADER",
            now=datetime(2026, 1, 5, tzinfo=timezone.utc),
        )
        self.assertIsNone(posting.image_url)
        self.assertEqual(posting.published_at, datetime(2025, 12, 17, tzinfo=timezone.utc))

    def test_no_date_signals_uses_now(self) -> None:
        now = datetime(2025, 6, 1, 8, 0, tzinfo=timezone.utc)
        posting = parse_detail("<html></html>", url="https://fcyt.uader.edu.ar/y/", fallback_title="T", origin="UADER", now=now)
        self.assertEqual(posting.published_at, now)
