"""Gemini API client with exponential backoff, used by the assessment oracle."""

import time
import random
import functools
from typing import Callable, Any, Optional

import google.generativeai as genai
from google.generativeai.types.generation_types import BlockedPromptException
from loguru import logger

from research_verifier.config.settings import Settings, settings as default_settings
from research_verifier.exceptions import OracleUnavailableError


def _exponential_backoff(func: Callable) -> Callable:
    """
    Decorator implementing exponential backoff with jitter for API calls.

    Retries failed requests up to the client's max_retries with exponentially
    increasing delays. Base delay: 1.0s, exponential factor: 2, jitter: 0-10%
    of delay. Blocked prompts are not retried.

    Args:
        func: Client method to wrap with retry logic

    Returns:
        Wrapped method with exponential backoff
    """
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> Any:
        max_retries = self.max_retries
        base_delay = 1.0

        for retry in range(max_retries):
            try:
                return func(self, *args, **kwargs)
            except BlockedPromptException:
                raise
            except Exception as e:
                if retry == max_retries - 1:
                    logger.error(f"Max retries exceeded for {func.__name__}: {e}")
                    raise

                delay = base_delay * (2 ** retry)
                jitter = random.uniform(0, delay * 0.1)
                total_delay = delay + jitter

                logger.warning(
                    f"Retry {retry + 1}/{max_retries} for {func.__name__} "
                    f"after {total_delay:.2f}s: {e}"
                )
                time.sleep(total_delay)

        raise RuntimeError(f"Unexpected retry loop exit in {func.__name__}")

    return wrapper


class GeminiClient:
    """
    Google Gemini API client with retry handling.

    Blocking: call it from a worker thread when used inside an event loop.

    Attributes:
        model: Configured Gemini generative model instance
        model_name: Gemini model identifier
        max_retries: Attempts per request before the last error is raised
    """

    def __init__(self, config: Optional[Settings] = None):
        """
        Initialize Gemini client from settings.

        Args:
            config: Settings to use (module settings if None)

        Raises:
            OracleUnavailableError: If no API key is configured
        """
        config = config or default_settings
        if not config.gemini_api_key:
            raise OracleUnavailableError("GEMINI_API_KEY not configured in environment")

        genai.configure(api_key=config.gemini_api_key)

        self.model_name = config.gemini_model
        self.model = genai.GenerativeModel(config.gemini_model)
        self.max_retries = config.oracle_max_retries

        logger.bind(component="GeminiClient").info(
            f"Gemini client initialized with model {config.gemini_model}"
        )

    @_exponential_backoff
    def generate_content(self, prompt: str, temperature: float = 0.7) -> str:
        """
        Generate content from Gemini API with exponential backoff.

        Args:
            prompt: Input prompt for content generation
            temperature: Sampling temperature (0.0-1.0). Lower = more deterministic

        Returns:
            Generated text content

        Raises:
            BlockedPromptException: If prompt violates safety policies
            Exception: For other API errors after retries exhausted
        """
        try:
            response = self.model.generate_content(
                prompt,
                generation_config=genai.types.GenerationConfig(
                    temperature=temperature,
                )
            )
            return response.text
        except BlockedPromptException as e:
            logger.bind(component="GeminiClient").error(f"Prompt blocked by safety filters: {e}")
            raise
