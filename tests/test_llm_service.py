"""Unit tests for LLMService — Gemini model chain and user content."""
import pytest
from unittest.mock import patch, MagicMock, AsyncMock

from app.services.llm_service import LLMService, _is_retryable_api_error, is_image_url


@pytest.fixture
def mock_genai():
    with patch("app.services.llm_service.get_settings") as mock_settings:
        settings = MagicMock()
        settings.GEMINI_API_KEY = "test-key"
        settings.GEMINI_MODEL_PRIMARY = "gemini-2.5-pro"
        settings.GEMINI_MODEL_FALLBACK = "gemini-2.5-flash"
        settings.GEMINI_MODEL_STABLE = "gemini-2.0-flash"
        settings.GEMINI_MAX_OUTPUT_TOKENS = 4096
        mock_settings.return_value = settings
        with patch("app.services.llm_service.genai") as genai:
            yield genai


def _response(text):
    response = MagicMock()
    response.candidates = [MagicMock()]
    response.text = text
    return response


class TestUserContent:

    def test_attachments_are_labelled(self):
        content = LLMService.build_user_content(
            "Generate a career prediction for: promotion?",
            ["https://cdn.example.com/a/photo.JPG", "https://cdn.example.com/a/resume.pdf"],
        )
        lines = content.split("\n")
        assert lines[0] == "Generate a career prediction for: promotion?"
        assert lines[1] == "[Attached image: https://cdn.example.com/a/photo.JPG]"
        assert lines[2].startswith("[Attached document")

    @pytest.mark.parametrize("url, expected", [("x.webp", True), ("x.gif", True), ("x.png?sig=1", False), ("x.docx", False)])
    def test_is_image_url(self, url, expected):
        assert is_image_url(url) is expected


class TestRetryClassification:

    @pytest.mark.parametrize(
        "exc, expected",
        [
            (Exception("429 Too Many Requests"), True),
            (Exception("RESOURCE_EXHAUSTED"), True),
            (Exception("503 Service Unavailable"), True),
            (ValueError("Gemini returned empty text"), False),
        ],
    )
    def test_retryable(self, exc, expected):
        assert _is_retryable_api_error(exc) is expected


class TestComplete:

    @pytest.mark.asyncio
    async def test_primary_model_answers(self, mock_genai):
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=_response("Your future is bright.\nConfidence: 80%"))
        mock_genai.GenerativeModel.return_value = model

        service = LLMService()
        text = await service.complete("system", "Generate a prediction for: x")

        assert text.startswith("Your future is bright.")
        mock_genai.GenerativeModel.assert_called_once_with("gemini-2.5-pro", system_instruction="system")

    @pytest.mark.asyncio
    async def test_falls_through_chain(self, mock_genai):
        failing = MagicMock()
        failing.generate_content_async = AsyncMock(side_effect=ValueError("blocked"))
        working = MagicMock()
        working.generate_content_async = AsyncMock(return_value=_response("ok"))
        mock_genai.GenerativeModel.side_effect = [failing, working]

        assert await LLMService().complete("system", "question") == "ok"
        assert mock_genai.GenerativeModel.call_args_list[1][0][0] == "gemini-2.5-flash"

    @pytest.mark.asyncio
    async def test_empty_text_counts_as_failure(self, mock_genai):
        model = MagicMock()
        model.generate_content_async = AsyncMock(return_value=_response("   "))
        mock_genai.GenerativeModel.return_value = model

        with pytest.raises(RuntimeError, match="All models in chain exhausted"):
            await LLMService().complete("system", "question")
        assert mock_genai.GenerativeModel.call_count == 3
