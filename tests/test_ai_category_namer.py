from unittest.mock import MagicMock, PropertyMock, patch

from google.api_core import exceptions as google_exceptions

from kattlog.classifiers.ai_category_namer import GeminiCategoryNamer

NAV_HTML = '<nav><a href="/sofas">Sofás</a><a href="/mesas">Mesas</a></nav>'


def model_returning(text):
    model = MagicMock()
    model.generate_content.return_value = MagicMock(text=text)
    return model


class TestInferCategories:
    def test_fenced_json_response(self):
        model = model_returning(
            '```json\n[{"name": "Sofás", "url": "/sofas"}, {"name": "Ver Mesas", "url": "https://shop.test/mesas"}]\n```'
        )
        namer = GeminiCategoryNamer(model=model)

        categories = namer.infer_categories(NAV_HTML, "https://shop.test/")

        assert [(c.name, c.url) for c in categories] == [
            ("Sofás", "https://shop.test/sofas"),
            ("Mesas", "https://shop.test/mesas"),
        ]
        prompt = model.generate_content.call_args[0][0]
        assert NAV_HTML in prompt
        assert "https://shop.test/" in prompt

    def test_items_without_names_skipped(self):
        namer = GeminiCategoryNamer(model=model_returning('[{"url": "/x"}, "Sofás", {"name": "Camas"}]'))

        categories = namer.infer_categories(NAV_HTML, "https://shop.test/")

        assert [(c.name, c.url) for c in categories] == [("Camas", None)]

    def test_api_error_returns_empty(self):
        model = MagicMock()
        model.generate_content.side_effect = google_exceptions.ServiceUnavailable("overloaded")
        namer = GeminiCategoryNamer(model=model)

        assert namer.infer_categories(NAV_HTML, "https://shop.test/") == []

    def test_blocked_response_returns_empty(self):
        response = MagicMock()
        type(response).text = PropertyMock(side_effect=ValueError("blocked"))
        model = MagicMock()
        model.generate_content.return_value = response
        namer = GeminiCategoryNamer(model=model)

        assert namer.infer_categories(NAV_HTML, "https://shop.test/") == []

    def test_invalid_json_returns_empty(self):
        namer = GeminiCategoryNamer(model=model_returning("Here are the categories: Sofás, Mesas"))

        assert namer.infer_categories(NAV_HTML, "https://shop.test/") == []

    def test_empty_nav_html_skips_request(self):
        model = MagicMock()
        namer = GeminiCategoryNamer(model=model)

        assert namer.infer_categories("", "https://shop.test/") == []
        model.generate_content.assert_not_called()


class TestInferKeywords:
    def test_list_response(self):
        namer = GeminiCategoryNamer(model=model_returning('["sofá", "chaise longue", " "]'))

        assert namer.infer_category_keywords("Sofás") == ["sofá", "chaise longue"]

    def test_wrapped_response(self):
        namer = GeminiCategoryNamer(model=model_returning('{"keywords": ["mesa", "comedor"]}'))

        assert namer.infer_category_keywords("Mesas") == ["mesa", "comedor"]

    def test_failure(self):
        namer = GeminiCategoryNamer(model=model_returning("no"))

        assert namer.infer_category_keywords("Mesas") == []


class TestConfiguration:
    def test_builds_model_from_api_key(self):
        with patch("kattlog.classifiers.ai_category_namer.genai") as mock_genai:
            namer = GeminiCategoryNamer(api_key="test-key", model_name="gemini-test")

            mock_genai.configure.assert_called_once_with(api_key="test-key")
            mock_genai.GenerativeModel.assert_called_once_with("gemini-test")
            assert namer.model is mock_genai.GenerativeModel.return_value
