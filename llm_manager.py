import logging
import os

from langchain_core.messages import HumanMessage
from langchain_google_genai import ChatGoogleGenerativeAI

import config

logger = logging.getLogger(__name__)


class LLMConfigurationError(ValueError):
    """Raised when the Gemini client cannot be built (usually a missing API key)."""


class LLMResponseError(ValueError):
    """Raised when the model reply has no usable text in it."""


# --- LLM Manager ---
class LLMManager:
    """
    Holds the Gemini chat models used by the name generator and the chat view.
    Models are built on first use so the app can start without GOOGLE_API_KEY
    and still serve fallback results.
    """

    def __init__(self):
        self._creative_llm = None
        self._llm = None

    def _build(self, temperature: float) -> ChatGoogleGenerativeAI:
        google_api_key = os.getenv("GOOGLE_API_KEY")
        if not google_api_key:
            logger.error("GOOGLE_API_KEY environment variable not set.")
            raise LLMConfigurationError("GOOGLE_API_KEY is not set. Please set it to use the Generative AI models.")

        llm = ChatGoogleGenerativeAI(model=config.GEMINI_MODEL, google_api_key=google_api_key, temperature=temperature)
        logger.info(f"Initialized {config.GEMINI_MODEL} with temperature {temperature}.")
        return llm

    @property
    def creative_llm(self) -> ChatGoogleGenerativeAI:
        """Model used for name generation."""
        if self._creative_llm is None:
            self._creative_llm = self._build(config.GENERATION_TEMPERATURE)
        return self._creative_llm

    @property
    def llm(self) -> ChatGoogleGenerativeAI:
        """Model used for conversational answers."""
        if self._llm is None:
            self._llm = self._build(config.CHAT_TEMPERATURE)
        return self._llm


def extract_text(content) -> str:
    """Flattens a chat model reply into plain text; Gemini can return a list of parts."""
    if isinstance(content, str):
        return content
    if isinstance(content, list):
        parts = []
        for part in content:
            if isinstance(part, str):
                parts.append(part)
            elif isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
        return "".join(parts)
    return ""


async def ask_llm(llm, prompt: str) -> str:
    """Sends one prompt and returns the reply text, raising LLMResponseError when it is empty."""
    response = await llm.ainvoke([HumanMessage(content=prompt)])
    text = extract_text(getattr(response, "content", None))
    if not text.strip():
        raise LLMResponseError("Invalid API response format: no text content in reply.")
    return text


llm_manager = LLMManager()
