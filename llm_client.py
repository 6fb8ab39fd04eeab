import json
from functools import lru_cache
from typing import Any, Dict, List, Optional

from langchain_core.messages import BaseMessage, SystemMessage
from langchain_google_genai import ChatGoogleGenerativeAI

from config import (
    GEMINI_FLASH_MODEL,
    GEMINI_PRO_MODEL,
    GEMINI_THINKING_BUDGET,
    GEMINI_REQUEST_TIMEOUT,
    get_api_key,
)
from log_utils import logger


class ConfigurationError(RuntimeError):
    """Raised when the Gemini credential is not configured."""


class GeminiServiceError(RuntimeError):
    """Raised when a Gemini call fails."""


def response_text(response) -> str:
    """Extract plain text from a chat model response.

    Gemini responses may carry content as a string or as a list of blocks
    (thought summaries are dropped).
    """
    content = getattr(response, "content", response)
    if isinstance(content, str):
        return content
    chunks = []
    for block in content or []:
        if isinstance(block, str):
            chunks.append(block)
        elif isinstance(block, dict) and block.get("type", "text") == "text" and not block.get("thought"):
            chunks.append(block.get("text", ""))
    return "".join(chunks)


class GeminiClient:
    """Handle on the Gemini API bound to one credential.

    Every public call performs exactly one request; retries are disabled on
    the underlying LangChain model.
    """

    def __init__(
        self,
        api_key: str,
        flash_model: str = GEMINI_FLASH_MODEL,
        pro_model: str = GEMINI_PRO_MODEL,
        thinking_budget: int = GEMINI_THINKING_BUDGET,
        timeout: float = GEMINI_REQUEST_TIMEOUT,
    ):
        self.api_key = api_key
        self.flash_model = flash_model
        self.pro_model = pro_model
        self.thinking_budget = thinking_budget
        self.timeout = timeout
        self._models: Dict[str, Any] = {}

    def select_model(self, thinking_mode: bool = False) -> str:
        return self.pro_model if thinking_mode else self.flash_model

    def _chat_model(
        self,
        model: str,
        thinking_budget: Optional[int] = None,
        response_mime_type: Optional[str] = None,
        response_schema: Optional[Dict[str, Any]] = None,
    ):
        key = json.dumps([model, thinking_budget, response_mime_type, response_schema], sort_keys=True)
        if key not in self._models:
            options: Dict[str, Any] = {}
            if thinking_budget is not None:
                options["thinking_budget"] = thinking_budget
            if response_mime_type:
                options["response_mime_type"] = response_mime_type
            if response_schema:
                options["response_schema"] = response_schema
            self._models[key] = ChatGoogleGenerativeAI(
                model=model,
                google_api_key=self.api_key,
                timeout=self.timeout,
                max_retries=0,
                **options,
            )
        return self._models[key]

    async def _invoke(self, llm, messages: List[BaseMessage], system_instruction: Optional[str]) -> str:
        payload = list(messages)
        if system_instruction:
            payload.insert(0, SystemMessage(content=system_instruction))
        try:
            response = await llm.ainvoke(payload)
        except Exception as e:
            logger.warning(f"Gemini request failed: {str(e)}")
            raise GeminiServiceError(f"Gemini request failed: {str(e)}") from e
        return response_text(response).strip()

    async def generate_text(
        self,
        messages: List[BaseMessage],
        system_instruction: Optional[str] = None,
        thinking_mode: bool = False,
    ) -> str:
        """Free-form generation; thinking mode switches to the pro model with a larger budget."""
        model = self.select_model(thinking_mode)
        budget = self.thinking_budget if thinking_mode else None
        llm = self._chat_model(model, thinking_budget=budget)
        return await self._invoke(llm, messages, system_instruction)

    async def generate_json(
        self,
        messages: List[BaseMessage],
        response_schema: Dict[str, Any],
        system_instruction: Optional[str] = None,
        thinking_budget: Optional[int] = None,
    ) -> str:
        """Structured generation constrained to ``response_schema``; returns the raw JSON text."""
        llm = self._chat_model(
            self.flash_model,
            thinking_budget=thinking_budget,
            response_mime_type="application/json",
            response_schema=response_schema,
        )
        return await self._invoke(llm, messages, system_instruction)


@lru_cache(maxsize=1)
def get_client() -> GeminiClient:
    """Return the process-wide client, creating it on first use."""
    api_key = get_api_key()
    if not api_key:
        raise ConfigurationError("GEMINI_API_KEY environment variable not set")
    logger.info(f"Initializing Gemini client (flash={GEMINI_FLASH_MODEL}, pro={GEMINI_PRO_MODEL})")
    return GeminiClient(api_key=api_key)
