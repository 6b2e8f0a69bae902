"""AI Agents package."""

from production_ledger.agents.insight_agent import (
    EMPTY_RESPONSE_MESSAGE,
    FAILURE_MESSAGE,
    NO_DATA_MESSAGE,
    InsightAgent,
)

__all__ = [
    "EMPTY_RESPONSE_MESSAGE",
    "FAILURE_MESSAGE",
    "NO_DATA_MESSAGE",
    "InsightAgent",
]
