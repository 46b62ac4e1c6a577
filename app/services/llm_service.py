"""
Predicsure AI — LLMService: Gemini completion client

Thin wrapper around the Gemini SDK used by every prediction flow.  It owns:

- Multi-model fallback chain with exponential-backoff retry
- Safety settings permissive enough for candid life/finance advice
- System-instruction handling (persona prompt separate from the user turn)
- Attachment references rendered into the user turn

Model fallback chain:
    GEMINI_MODEL_PRIMARY -> GEMINI_MODEL_FALLBACK -> GEMINI_MODEL_STABLE
"""

from __future__ import annotations

import re
from typing import Optional

import google.generativeai as genai
import structlog
from google.generativeai.types import HarmBlockThreshold, HarmCategory
from tenacity import (
    AsyncRetrying,
    RetryError,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from app.config import get_settings

logger = structlog.get_logger(__name__)

_IMAGE_URL = re.compile(r"\.(jpg|jpeg|png|gif|webp)$", re.IGNORECASE)


def _is_retryable_api_error(exc: BaseException) -> bool:
    """Return True if the exception signals a retryable Gemini API error.

    We retry on HTTP 429 (rate limit) and 500/503 (server-side transient)
    errors.  The google-generativeai SDK wraps these as various exception
    types, so we inspect both the type name and string representation.
    """
    exc_str = str(exc).lower()
    exc_type = type(exc).__name__.lower()

    if "429" in exc_str or "resource_exhausted" in exc_str:
        return True
    if "500" in exc_str or "503" in exc_str or "internal" in exc_str:
        return True
    if "resourceexhausted" in exc_type or "serviceunavailable" in exc_type:
        return True

    return False


def is_image_url(url: str) -> bool:
    return bool(_IMAGE_URL.search(url))


class LLMService:
    """Generates free-text completions through the Gemini model chain."""

    MAX_ATTEMPTS: int = 5

    def __init__(self) -> None:
        settings = get_settings()

        genai.configure(api_key=settings.GEMINI_API_KEY)

        self._model_chain: list[str] = [
            settings.GEMINI_MODEL_PRIMARY,
            settings.GEMINI_MODEL_FALLBACK,
            settings.GEMINI_MODEL_STABLE,
        ]

        self._safety_settings = {
            HarmCategory.HARM_CATEGORY_HARASSMENT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_HATE_SPEECH: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_SEXUALLY_EXPLICIT: HarmBlockThreshold.BLOCK_NONE,
            HarmCategory.HARM_CATEGORY_DANGEROUS_CONTENT: HarmBlockThreshold.BLOCK_NONE,
        }

        self._generation_config = genai.GenerationConfig(
            max_output_tokens=settings.GEMINI_MAX_OUTPUT_TOKENS,
        )

        logger.info("llm_service_initialised", model_chain=self._model_chain)

    # ══════════════════════════════════════════════════════════════════
    # Public API
    # ══════════════════════════════════════════════════════════════════

    async def complete(
        self,
        system_prompt: str,
        user_message: str,
        attachment_urls: Optional[list[str]] = None,
    ) -> str:
        """Run one completion, falling through the model chain on failure.

        Parameters
        ----------
        system_prompt:
            Persona and formatting instructions, sent as the model's
            system instruction.
        user_message:
            The user turn.
        attachment_urls:
            Uploaded files referenced by the user.  Each becomes one line
            in the user turn labelled as an image or a document.

        Returns
        -------
        str
            The model's text response.

        Raises
        ------
        RuntimeError
            When every model in the chain has failed.
        """
        contents = self.build_user_content(user_message, attachment_urls or [])
        last_exception: Exception | None = None

        for model_name in self._model_chain:
            try:
                text = await self._call_gemini_with_retry(model_name, system_prompt, contents)
                logger.debug("llm_completion", model=model_name, chars=len(text))
                return text
            except Exception as exc:
                last_exception = exc
                logger.warning("model_fallback", failed_model=model_name, error=str(exc))
                continue

        raise RuntimeError(
            f"All models in chain exhausted. Last error: {last_exception}"
        )

    @staticmethod
    def build_user_content(user_message: str, attachment_urls: list[str]) -> str:
        parts = [user_message]
        for url in attachment_urls:
            if is_image_url(url):
                parts.append(f"[Attached image: {url}]")
            else:
                parts.append(f"[Attached document (application/pdf): {url}]")
        return "\n".join(parts)

    # ══════════════════════════════════════════════════════════════════
    # Gemini transport
    # ══════════════════════════════════════════════════════════════════

    async def _call_gemini_with_retry(
        self,
        model_name: str,
        system_prompt: str,
        contents: str,
    ) -> str:
        """Call a specific Gemini model with tenacity retry on transient
        errors.

        Uses exponential backoff: 1s initial wait, 2x multiplier, 60s
        max wait, up to 5 attempts.
        """
        model = genai.GenerativeModel(model_name, system_instruction=system_prompt)

        try:
            async for attempt in AsyncRetrying(
                retry=retry_if_exception(_is_retryable_api_error),
                stop=stop_after_attempt(self.MAX_ATTEMPTS),
                wait=wait_exponential(multiplier=1, min=1, max=60, exp_base=2),
                reraise=True,
            ):
                with attempt:
                    logger.debug(
                        "gemini_call_attempt",
                        model=model_name,
                        attempt_number=attempt.retry_state.attempt_number,
                    )
                    response = await model.generate_content_async(
                        contents,
                        safety_settings=self._safety_settings,
                        generation_config=self._generation_config,
                    )

                    if not response.candidates:
                        raise ValueError(
                            f"Gemini returned no candidates for model "
                            f"{model_name}. Prompt feedback: "
                            f"{response.prompt_feedback}"
                        )

                    text = response.text
                    if not text or not text.strip():
                        raise ValueError(f"Gemini returned empty text for model {model_name}")

                    return text

        except RetryError as retry_err:
            logger.error(
                "gemini_retry_exhausted",
                model=model_name,
                attempts=self.MAX_ATTEMPTS,
                last_error=str(retry_err.last_attempt.exception()),
            )
            raise retry_err.last_attempt.exception() from retry_err
