"""
AI Insight Agent for Production Ledger

DESIGN DECISION: The LLM is a COMMENTATOR, not a CALCULATOR.
It receives entries the ledger has already computed and writes prose
about them. Nothing it returns is parsed, stored or fed back into the
ledger.

CRITICAL BOUNDARIES:
- CAN: Describe production trends, consumption efficiency, anomalies
- CANNOT: Change ledger state
- CANNOT: Break the caller (every failure becomes a fixed fallback text)

No retries and no timeout: a failed request is reported once and the
user can simply ask again.
"""

import json
from typing import Any, Optional, Sequence

import google.generativeai as genai
import structlog

from production_ledger.config import get_settings
from production_ledger.models.ledger import ProductionEntry


NO_DATA_MESSAGE = "Add some data to get AI insights."
EMPTY_RESPONSE_MESSAGE = "No insights generated."
FAILURE_MESSAGE = "Failed to analyze data with AI."

ANALYSIS_PROMPT = """
As an industrial production analyst, analyze this inventory and production data for "Running Drums":
{data}

Provide a concise summary of:
1. Production trends.
2. Stock consumption efficiency.
3. Any anomalies in rate or amounts.
Keep the tone professional and actionable.
"""


class InsightAgent:
    """
    Gemini-backed production analyst.

    RESPONSIBILITIES:
    - Turn a slice of production entries into a short written analysis

    BOUNDARIES:
    - NEVER persists data
    - NEVER raises to the caller
    """

    def __init__(self, model: Optional[Any] = None):
        """
        Args:
            model: Anything with an async generate_content_async(prompt).
                   If None, a Gemini model is built from settings.
        """
        self._logger = structlog.get_logger(__name__)
        self._model = model if model is not None else self._configure_genai()

    def _configure_genai(self):
        """Configure Google Generative AI."""
        settings = get_settings().gemini
        genai.configure(api_key=settings.api_key)
        return genai.GenerativeModel(
            model_name=settings.model_name,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_tokens,
            }
        )

    @staticmethod
    def build_prompt(entries: Sequence[ProductionEntry]) -> str:
        """Analysis instruction with the entries embedded as JSON."""
        data = json.dumps([e.to_json_dict() for e in entries])
        return ANALYSIS_PROMPT.format(data=data)

    async def analyze(self, entries: Sequence[ProductionEntry]) -> str:
        """
        Write an analysis of the given entries.

        Returns the model's text, or one of the fallback messages.
        """
        if not entries:
            return NO_DATA_MESSAGE

        try:
            response = await self._model.generate_content_async(
                self.build_prompt(entries)
            )
            text = (response.text or "").strip()
        except Exception as e:
            self._logger.error(
                "insight_request_failed",
                error=str(e),
                entry_count=len(entries),
            )
            return FAILURE_MESSAGE

        return text or EMPTY_RESPONSE_MESSAGE

    async def __call__(self, entries: Sequence[ProductionEntry]) -> str:
        return await self.analyze(entries)
