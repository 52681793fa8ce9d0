from bs4 import BeautifulSoup

from kattlog.core.models import PLACEHOLDER_TITLE
from kattlog.extractors.card_extractor import CardExtractor

BASE_URL = "https://shop.test/sofas"


def card(html, selector='.card'):
    return BeautifulSoup(html, 'html.parser').select_one(selector)


class TestCardExtractor:
    def setup_method(self):
        self.extractor = CardExtractor()

    def test_full_card(self):
        element = card("""
        <div class="card">
          <a href="/p/sofa-oslo"><img src="https://cdn.shop.test/img/sofa-oslo.jpg" alt="Sofá Oslo 3 plazas"></a>
          <h3>Sofá Oslo</h3>
          <p class="product-description">Tapizado en lino lavado.</p>
          <span class="price">499,99 €</span>
        </div>
        """)

        candidate = self.extractor.extract(element, BASE_URL)

        assert candidate.title == "Sofá Oslo 3 plazas"
        assert candidate.price == "499,99 €"
        assert candidate.image_url == "https://cdn.shop.test/img/sofa-oslo.jpg"
        assert candidate.product_url == "https://shop.test/p/sofa-oslo"
        assert candidate.description == "Tapizado en lino lavado."
        assert 'sofa-oslo.jpg' in candidate.html_block

    def test_short_alt_falls_through_to_link_title(self):
        element = card("""
        <div class="card">
          <a href="/p/mesa" title="Mesa Nord roble"><img src="https://cdn.shop.test/img/mesa-nord.jpg" alt="Foto"></a>
        </div>
        """)

        assert self.extractor.extract(element, BASE_URL).title == "Mesa Nord roble"

    def test_relative_image_resolved_against_page(self):
        element = card("""
        <div class="card"><a href="/p/silla"><img data-src="/media/silla-alba.jpg" alt="Silla Alba"></a></div>
        """)

        assert self.extractor.extract(element, BASE_URL).image_url == "https://shop.test/media/silla-alba.jpg"

    def test_denylisted_image_is_dropped(self):
        element = card("""
        <div class="card"><a href="/p/silla"><img src="https://cdn.shop.test/img/brand-logo.png" alt="Silla Alba"></a></div>
        """)

        assert self.extractor.extract(element, BASE_URL).image_url is None

    def test_only_primary_image_is_used(self):
        element = card("""
        <div class="card">
          <a href="/p/silla"><img src="https://cdn.shop.test/img/silla-front.jpg" alt="Silla Alba">
          <img src="https://cdn.shop.test/img/silla-back.jpg" alt="Silla Alba trasera"></a>
        </div>
        """)

        assert self.extractor.extract(element, BASE_URL).image_url == "https://cdn.shop.test/img/silla-front.jpg"

    def test_card_that_is_a_link(self):
        element = card("""
        <a class="card" href="/p/lampara"><img src="https://cdn.shop.test/img/lampara.jpg" alt="Lámpara Arco"><span>89,00 €</span></a>
        """)

        candidate = self.extractor.extract(element, BASE_URL)

        assert candidate.product_url == "https://shop.test/p/lampara"
        assert candidate.price == "89,00 €"

    def test_overlong_title_becomes_description(self):
        long_title = "Sofá modular " + "con chaise longue reversible " * 8
        element = card(f"""
        <div class="card"><a href="/p/modular"><img src="https://cdn.shop.test/img/modular.jpg"></a><h3>{long_title}</h3></div>
        """)

        candidate = self.extractor.extract(element, BASE_URL)

        assert candidate.title.endswith('...')
        assert len(candidate.title) == 83
        assert candidate.description == ' '.join(long_title.split())

    def test_placeholder_when_no_title(self):
        element = card("""<div class="card"><img src="https://cdn.shop.test/img/x-photo.jpg"></div>""")

        assert self.extractor.extract(element, BASE_URL).title == PLACEHOLDER_TITLE

    def test_dimensions_from_title(self):
        element = card("""
        <div class="card"><a href="/p/mesa"><img src="https://cdn.shop.test/img/mesa.jpg" alt="Mesa Nord 120x80 cm"></a></div>
        """)

        assert self.extractor.extract(element, BASE_URL).dimensions == "120x80 cm"
