from kattlog.extractors.detail_extractor import ProductDetailExtractor

PRODUCT_URL = "https://shop.test/p/sofa-oslo"


class TestParse:
    def setup_method(self):
        self.extractor = ProductDetailExtractor()

    def test_candidate_from_detail_page(self, detail_html):
        candidate = self.extractor.parse(detail_html, PRODUCT_URL)

        assert candidate.title == "Sofá Oslo"
        assert candidate.price == "899,00 €"
        assert candidate.image_url == "https://shop.test/img/sofa-oslo-main.jpg"
        assert candidate.product_url == PRODUCT_URL
        assert candidate.dimensions.startswith("Alto: 85 cm")

    def test_og_title_when_no_heading(self):
        html = '<html><head><meta property="og:title" content="Mesa Nord"></head><body></body></html>'

        candidate = self.extractor.parse(html, PRODUCT_URL)

        assert candidate.title == "Mesa Nord"
        assert candidate.price is None
        assert candidate.image_url is None

    def test_generic_dimensions_preferred(self):
        html = "<html><body><h1>Mesa</h1><p>Medidas: 120 x 80 x 75 cm</p></body></html>"

        assert self.extractor.parse(html, PRODUCT_URL).dimensions == "120 x 80 x 75 cm"

    def test_hwd_dimensions(self):
        html = "<html><body><h1>Estantería</h1><p>H180 x W90 x D35</p></body></html>"

        assert self.extractor.parse(html, PRODUCT_URL).dimensions == "H180 x W90"


class TestExtractDetails:
    def setup_method(self):
        self.extractor = ProductDetailExtractor()

    def test_images_are_unique_and_filtered(self, detail_html):
        details = self.extractor.extract_details(detail_html, PRODUCT_URL)

        assert details.images == [
            "https://cdn.shop.test/p/oslo-1.jpg",
            "https://cdn.shop.test/p/oslo-2.jpg",
            "https://cdn.shop.test/p/oslo-3.jpg",
        ]

    def test_text_fields(self, detail_html):
        details = self.extractor.extract_details(detail_html, PRODUCT_URL)

        assert details.dimensions == "Alto: 85 cm | Ancho: 210 cm | Fondo: 95 cm"
        assert details.description.startswith("Sofá Oslo de tres plazas")
        assert details.materials == "Roble macizo"
        assert details.colors == "Gris claro"

    def test_image_cap(self):
        images = ''.join(f'<img src="https://cdn.shop.test/p/mesa-{i}.jpg">' for i in range(20))
        html = f"<html><body><main>{images}</main></body></html>"

        assert len(self.extractor.extract_details(html, PRODUCT_URL).images) == 15

    def test_invalid_json_ld_is_skipped(self):
        html = """<html><head><script type="application/ld+json">{not json</script></head>
        <body><main><img src="/img/mesa.jpg"></main></body></html>"""

        details = self.extractor.extract_details(html, PRODUCT_URL)

        assert details.images == ["https://shop.test/img/mesa.jpg"]

    def test_description_block_fallback(self):
        text = "Mesa de comedor extensible fabricada en madera de roble con acabado natural."
        html = f'<html><body><div class="product-description">{text}</div></body></html>'

        assert self.extractor.extract_details(html, PRODUCT_URL).description == text

    def test_empty_page(self):
        details = self.extractor.extract_details("", PRODUCT_URL)

        assert details.images == []
        assert details.dimensions is None
        assert details.materials is None
        assert details.colors is None
