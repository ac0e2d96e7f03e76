"""
Mock data source: fabricated payloads behind simulated network latency.

Used for local development and demos, and in tests with the latency scaled
to zero. Chat history is the only state it keeps, in local storage.
"""
import asyncio
import logging
import random
from datetime import date
from typing import Callable, Dict, List, Any, Optional

from .base import DataSource
from . import mock_data
from .chat_responses import answer_for
from ..schemas import ChatRequest, Language
from ..storage import LocalStorage

logger = logging.getLogger("sources.mock")


# Simulated latency per operation (milliseconds)
MOCK_LATENCY_MS: Dict[str, int] = {
    "nutrition_log_entries": 300,
    "create_nutrition_log_entry": 300,
    "delete_nutrition_log_entry": 300,
    "nutrition_trends": 700,
    "active_nutrition_plan": 400,
    "nutrition_plan": 400,
    "nutrition_training_recommendations": 500,
    "upcoming_training_sessions": 500,
    "strava_connection_status": 300,
    "strava_auth_url": 200,
    "strava_activities": 600,
    "ai_suggestions": 400,
    "ai_chat": 800,
    "chat_history": 100,
    "save_chat_history": 100,
    "clear_chat_history": 100,
}

MOCK_AI_SUGGESTIONS: Dict[str, List[str]] = {
    "fr": [
        "Quel repas avant une sortie de 4 heures ?",
        "Combien de glucides par heure pendant un col ?",
        "Comment optimiser ma récupération après des intervalles ?",
        "Quelle hydratation par forte chaleur ?",
    ],
    "en": [
        "What should I eat before a 4-hour ride?",
        "How many carbs per hour on a long climb?",
        "How can I recover better after interval sessions?",
        "How should I hydrate in hot weather?",
    ],
}


class MockDataSource(DataSource):
    """
    Serves canned data after a fixed, per-operation delay.

    Args:
        storage: Where chat history is kept
        latency_scale: Multiplier on MOCK_LATENCY_MS (0 disables the delays)
        seed: Seed for the pseudo-random parts of payloads
        today: Reference day provider for date-relative payloads
    """

    def __init__(
        self,
        storage: LocalStorage,
        latency_scale: float = 1.0,
        seed: Optional[int] = None,
        today: Callable[[], date] = date.today,
    ):
        self._storage = storage
        self._latency_scale = latency_scale
        self._rng = random.Random(seed)
        self._today = today

    @property
    def source_name(self) -> str:
        return "mock"

    async def _simulate_latency(self, operation: str) -> None:
        delay = MOCK_LATENCY_MS[operation] * self._latency_scale / 1000
        logger.debug(f"Simulating {delay:.3f}s latency for {operation}")
        await asyncio.sleep(delay)

    # Nutrition

    async def nutrition_log_entries(self, day: str) -> List[Dict[str, Any]]:
        await self._simulate_latency("nutrition_log_entries")
        return mock_data.build_nutrition_log_entries(day)

    async def create_nutrition_log_entry(self, entry: Dict[str, Any]) -> None:
        await self._simulate_latency("create_nutrition_log_entry")

    async def delete_nutrition_log_entry(self, entry_id: str) -> None:
        await self._simulate_latency("delete_nutrition_log_entry")

    async def nutrition_trends(self, start_date: str, end_date: str) -> Dict[str, Any]:
        await self._simulate_latency("nutrition_trends")
        return mock_data.build_nutrition_trends(start_date, end_date, self._rng)

    async def active_nutrition_plan(self) -> Optional[Dict[str, Any]]:
        await self._simulate_latency("active_nutrition_plan")
        return mock_data.build_nutrition_plan()

    async def nutrition_plan(self, plan_id: str) -> Dict[str, Any]:
        await self._simulate_latency("nutrition_plan")
        return mock_data.build_nutrition_plan(plan_id)

    async def nutrition_training_recommendations(
        self, plan_id: Optional[str] = None
    ) -> Dict[str, Any]:
        await self._simulate_latency("nutrition_training_recommendations")
        return mock_data.build_training_recommendations(self._today(), plan_id)

    # Training & Strava

    async def upcoming_training_sessions(self) -> List[Dict[str, Any]]:
        await self._simulate_latency("upcoming_training_sessions")
        return mock_data.build_upcoming_training_sessions(self._today())

    async def strava_connection_status(self) -> Dict[str, bool]:
        await self._simulate_latency("strava_connection_status")
        return {"connected": self._rng.random() > 0.5}

    async def strava_auth_url(self) -> str:
        await self._simulate_latency("strava_auth_url")
        return mock_data.STRAVA_AUTH_URL

    async def strava_activities(self) -> Dict[str, Any]:
        await self._simulate_latency("strava_activities")
        return mock_data.build_strava_activities(self._today(), self._rng)

    # AI assistant

    async def ai_suggestions(self, language: Language) -> List[str]:
        await self._simulate_latency("ai_suggestions")
        return list(MOCK_AI_SUGGESTIONS.get(language, MOCK_AI_SUGGESTIONS["fr"]))

    async def ai_chat(self, request: ChatRequest) -> Dict[str, Any]:
        await self._simulate_latency("ai_chat")
        answer = answer_for(request.message, request.language)
        return {
            "message": answer.message,
            "suggestedQueries": list(answer.suggested_queries),
        }

    async def chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        await self._simulate_latency("chat_history")
        return self._storage.get_chat_history(user_id)

    async def save_chat_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        await self._simulate_latency("save_chat_history")
        self._storage.save_chat_history(user_id, history)

    async def clear_chat_history(self, user_id: str) -> None:
        await self._simulate_latency("clear_chat_history")
        self._storage.clear_chat_history(user_id)
