import logging
from typing import Any, Dict, List, Optional, Union

import google.generativeai as genai

from ..config.settings import get_settings

logger = logging.getLogger(__name__)

Contents = Union[str, List[Dict[str, Any]]]


class GenerationError(RuntimeError):
    """Raised when a Gemini call fails. The upstream exception is kept as __cause__."""


class GenerationConfigError(GenerationError):
    """Raised when the Gemini API key is not configured."""


def user_message(text: str) -> List[Dict[str, Any]]:
    """Wraps a single user turn in the structured contents format."""
    return [{"role": "user", "parts": [{"text": text}]}]


class GeminiClient:
    """
    Thin wrapper around one Gemini model.

    Instances are cheap and are created per request. `generate` performs a
    single blocking call: no retries, no streaming.
    """

    def __init__(self, api_key: Optional[str], model_name: str):
        if not api_key:
            raise GenerationConfigError("GEMINI_API_KEY is not configured")
        self.api_key = api_key
        self.model_name = model_name

    def generate(self, contents: Contents, system_instruction: Optional[str] = None) -> str:
        """
        Sends `contents` (a prompt string or a list of role/parts messages) to the model.

        Returns:
            The raw text of the model's reply.

        Raises:
            GenerationError: On any upstream failure, including replies without text.
        """
        genai.configure(api_key=self.api_key)
        model = genai.GenerativeModel(model_name=self.model_name, system_instruction=system_instruction)

        try:
            response = model.generate_content(contents)
        except Exception as e:
            logger.error("Gemini call to %s failed: %s", self.model_name, e)
            raise GenerationError(str(e)) from e

        try:
            text = response.text
        except ValueError as e:
            # Raised by the SDK when the reply has no text part (blocked or empty candidates)
            logger.error("Gemini returned no text from %s: %s", self.model_name, e)
            raise GenerationError(f"Malformed response from model: {e}") from e

        if text is None:
            raise GenerationError("Malformed response from model: empty reply")
        return text


def get_gemini_client(model_name: str, api_key: Optional[str] = None) -> GeminiClient:
    """Builds a client from settings unless an explicit key is given."""
    if api_key is None:
        api_key = get_settings().gemini_api_key
    return GeminiClient(api_key=api_key, model_name=model_name)
