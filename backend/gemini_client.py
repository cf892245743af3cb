from typing import Dict, List, Optional

import google.generativeai as genai

from config import Config
from errors import ConfigurationError, GatewayError
from logger import logger
from models import Message, Role
from system_prompt import build_system_instruction

# Gemini names the assistant side of a conversation "model"
_ROLE_MAP = {Role.USER: "user", Role.ASSISTANT: "model"}


def to_gemini_turns(history: List[Message]) -> List[Dict]:
    """Map chat history to Gemini contents, skipping error-flagged UI artifacts."""
    return [
        {"role": _ROLE_MAP[m.role], "parts": [m.content]}
        for m in history
        if not m.is_error
    ]


class GeminiGateway:
    """Single "generate reply" call with the fixed grounding instruction."""

    def __init__(self, api_key: Optional[str] = None, model_name: Optional[str] = None):
        api_key = api_key or Config.GEMINI_API_KEY
        if not api_key:
            logger.error("[gemini] API key is missing from environment variables")
            raise ConfigurationError(
                "API Key mancante. Imposta GEMINI_API_KEY (o API_KEY) nell'ambiente o nel file .env."
            )
        genai.configure(api_key=api_key)
        self.model_name = model_name or Config.GEMINI_MODEL

    def _build_model(self, grounding_context: str):
        return genai.GenerativeModel(
            self.model_name,
            system_instruction=build_system_instruction(grounding_context),
        )

    async def generate_reply(self, user_text: str, grounding_context: str, history: List[Message]) -> str:
        contents = to_gemini_turns(history)
        contents.append({"role": "user", "parts": [user_text]})
        try:
            response = await self._build_model(grounding_context).generate_content_async(
                contents,
                generation_config=genai.types.GenerationConfig(temperature=Config.TEMPERATURE),
            )
            text = response.text
        except Exception as e:
            logger.error(f"[gemini] Error: {e}")
            raise GatewayError(str(e)) from e

        if not text or not text.strip():
            logger.error("[gemini] Empty response text")
            raise GatewayError("Backend returned no usable text")
        return text
