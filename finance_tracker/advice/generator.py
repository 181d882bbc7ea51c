"""Text generation backends for the advice composer."""

from typing import Protocol

import structlog
from langchain_core.messages import HumanMessage

from finance_tracker.config import Settings

logger = structlog.get_logger()


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class LLMTextGenerator:
    """Sends a single prompt to the configured LangChain chat model."""

    def __init__(self, settings: Settings) -> None:
        self._settings = settings

    async def generate(self, prompt: str) -> str:
        # Imported lazily so provider SDKs load only when advice is requested.
        from finance_tracker.llm.factory import LLMFactory

        llm = LLMFactory.create(self._settings)
        response = await llm.ainvoke([HumanMessage(content=prompt)])
        logger.info(
            "advice_llm_called",
            provider=self._settings.llm_provider,
            model=self._settings.llm_model,
        )

        content = response.content
        if isinstance(content, list):
            # Structured content blocks
            text_parts = [
                block.get("text", "") if isinstance(block, dict) else str(block)
                for block in content
            ]
            content = "\n".join(text_parts)
        return content
