"""Data source abstraction for the orchestrator.

A data source answers every resource request the orchestrator knows about,
either by fabricating payloads (MockDataSource) or by calling the backend
(RemoteDataSource). The orchestrator never branches on which one it holds;
caching, invalidation and error policy live on its side of this seam.
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional

from ..schemas import ChatRequest, Language


class DataSource(ABC):
    """
    Abstract base class for orchestrator data sources.

    Payloads are JSON-shaped dicts/lists with camelCase keys, the wire
    format of the backend API.
    """

    # ------------------------------------------------------------------
    # Nutrition
    # ------------------------------------------------------------------

    @abstractmethod
    async def nutrition_log_entries(self, day: str) -> List[Dict[str, Any]]:
        """Log entries recorded for one ISO date."""
        pass

    @abstractmethod
    async def create_nutrition_log_entry(self, entry: Dict[str, Any]) -> None:
        pass

    @abstractmethod
    async def delete_nutrition_log_entry(self, entry_id: str) -> None:
        pass

    @abstractmethod
    async def nutrition_trends(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """
        Per-day nutrition aggregates between two ISO dates, inclusive.

        Returns:
            {"startDate", "endDate", "dailyData": {date: {...}}, "recommendations"}
        """
        pass

    @abstractmethod
    async def active_nutrition_plan(self) -> Optional[Dict[str, Any]]:
        """
        The user's active plan.

        Returns:
            The plan, or None when the user has no active plan
        """
        pass

    @abstractmethod
    async def nutrition_plan(self, plan_id: str) -> Dict[str, Any]:
        pass

    @abstractmethod
    async def nutrition_training_recommendations(
        self, plan_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Daily targets, per-timing food suggestions and advice strings."""
        pass

    # ------------------------------------------------------------------
    # Training & Strava
    # ------------------------------------------------------------------

    @abstractmethod
    async def upcoming_training_sessions(self) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def strava_connection_status(self) -> Dict[str, bool]:
        pass

    @abstractmethod
    async def strava_auth_url(self) -> str:
        pass

    @abstractmethod
    async def strava_activities(self) -> Dict[str, Any]:
        """Recent activities plus a weekly summary."""
        pass

    # ------------------------------------------------------------------
    # AI assistant
    # ------------------------------------------------------------------

    @abstractmethod
    async def ai_suggestions(self, language: Language) -> List[str]:
        pass

    @abstractmethod
    async def ai_chat(self, request: ChatRequest) -> Dict[str, Any]:
        """
        Answer one conversational turn.

        Returns:
            {"message": str, "suggestedQueries": [str, ...]}
        """
        pass

    @abstractmethod
    async def chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        pass

    @abstractmethod
    async def save_chat_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        pass

    @abstractmethod
    async def clear_chat_history(self, user_id: str) -> None:
        pass

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Return the name of this data source ("mock" or "remote")."""
        pass
