import logging

import google.generativeai as genai

from ..config import get_gemini_key
from ..errors import ProviderError

logger = logging.getLogger(__name__)

DEFAULT_MODEL = "gemini-2.0-flash"


def generate_summary(prompt: str, *, model: str = DEFAULT_MODEL) -> str:
    """
    Generate text from a prompt with the Gemini API.
    Reference: https://ai.google.dev/api/generate-content
    """
    api_key = get_gemini_key()
    if not api_key:
        raise ProviderError(
            "GEMINI_API_KEY is missing or invalid. "
            "Please add it to your .env file."
        )

    try:
        genai.configure(api_key=api_key)
        model_instance = genai.GenerativeModel(model_name=model)
        logger.info(f"Requesting summary from {model} (prompt {len(prompt)} chars)")
        response = model_instance.generate_content(prompt)
    except Exception as e:
        logger.error(f"Gemini request failed: {e}")
        raise ProviderError(f"Gemini request failed: {e}", {"model": model})

    try:
        text = response.text
    except ValueError as e:
        # Raised when the safety filter blocks every candidate
        raise ProviderError(f"Gemini returned no text: {e}", {"model": model})

    if not text or not text.strip():
        raise ProviderError("Gemini returned an empty summary", {"model": model})
    return text
