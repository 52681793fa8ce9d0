from kattlog.core.models import InteractiveCapture
from kattlog.interactive.capture import CaptureResolver
from kattlog.interactive.processor import CaptureProcessor, currency_of

PROXY_PAGE = "http://localhost:3000/api/proxy?url=https%3A%2F%2Fwww.lumen.test%2Flamps"


def make_capture(html, url=PROXY_PAGE, product_url="", preview_image=None):
    return InteractiveCapture(
        html=html,
        url=url,
        product_url=product_url,
        tag_name='DIV',
        preview_image=preview_image,
        text_snippet='',
        timestamp=1700000000000,
    )


class TestCaptureProcessor:
    def setup_method(self):
        self.processor = CaptureProcessor()

    def test_resolved_card(self, interactive_view):
        capture = CaptureResolver(interactive_view, clock=lambda: 1700000000000).resolve(
            interactive_view.select_one('#card')
        )

        product = self.processor.to_product(capture)

        assert product.title == "Sofá Oslo"
        assert product.brand == "Shop"
        assert product.price == "499,99 €"
        assert product.price_value == 499.99
        assert product.currency == 'EUR'
        assert product.product_url == "https://shop.test/p/sofa-oslo"
        assert product.images == ["https://cdn.shop.test/p/oslo.jpg"]
        assert product.captured_at == 1700000000000

    def test_snippet_fills_missing_image_and_link(self):
        capture = make_capture(
            '<div class="card"><script>var price = "9,99 €";</script>'
            '<img src="/img/lamp.jpg" alt="Lámpara Arco"><span class="price">$1,299.00</span></div>'
        )

        product = self.processor.to_product(capture)

        assert product.title == "Lámpara Arco"
        assert product.brand == "Lumen"
        assert product.product_url == "https://www.lumen.test/lamps"
        assert product.image_url == "https://www.lumen.test/img/lamp.jpg"
        assert product.price == "$1,299.00"
        assert product.price_value == 1299.0
        assert product.currency == 'USD'

    def test_untitled_snippet(self):
        product = self.processor.to_product(make_capture('<div><span>12</span></div>'))

        assert product.title == "Producto capturado"
        assert product.price is None
        assert product.price_value == 0.0
        assert product.images == []

    def test_empty_capture_is_skipped(self):
        captures = [make_capture(''), make_capture('<div><h3>Mesa Nord</h3></div>')]

        products = self.processor.process(captures)

        assert [p.title for p in products] == ["Mesa Nord"]


class TestCurrency:
    def test_symbols(self):
        assert currency_of("£45") == 'GBP'
        assert currency_of("1.299,00 €") == 'EUR'
        assert currency_of(None) == 'EUR'
