"""
API orchestrator: single entry point for every data access in Velo Altitude.

Each accessor builds a deterministic cache key, serves fresh cached data when
it can, and otherwise asks the configured data source (mock or remote),
storing the result under the accessor's cache category. Mutations write
through the data source and then drop the whole nutrition category.
"""
import logging
from typing import Optional, List, Dict, Any, Callable, Awaitable, Union

from config.settings import settings

from .cache import ALL, CacheCategory, CacheStore, make_cache_key
from .errors import DataSourceError
from .schemas import ChatRequest, Language, NutritionLogEntry
from .sources import DataSource, create_data_source

# Configure logging once for the whole service
logging.basicConfig(level=getattr(logging, settings.log_level.upper(), logging.INFO))
logger = logging.getLogger("orchestrator")

# Served when AI suggestions cannot be fetched; never cached
DEFAULT_AI_SUGGESTIONS: Dict[str, List[str]] = {
    "fr": [
        "Que manger avant une sortie longue ?",
        "Comment m'hydrater pendant l'effort ?",
        "Quels aliments pour bien récupérer ?",
    ],
    "en": [
        "What should I eat before a long ride?",
        "How should I hydrate while riding?",
        "Which foods help recovery?",
    ],
}


class APIOrchestrator:
    """
    Cached facade over a DataSource.

    Cache categories per accessor:
    - nutrition: log entries, plans, trends, training recommendations
    - training: upcoming sessions
    - strava: connection status, auth URL, activities
    - ai: suggestions (chat turns and chat history are never cached)

    Usage:
        orchestrator = APIOrchestrator()
        plan = await orchestrator.get_active_nutrition_plan()
    """

    def __init__(
        self,
        source: Optional[DataSource] = None,
        cache: Optional[CacheStore] = None,
    ):
        """
        Args:
            source: Data source to use (defaults to the one selected by settings)
            cache: Cache store to use (defaults to a fresh store sized by settings)
        """
        self.source = source if source is not None else create_data_source()
        # An empty CacheStore is falsy (it defines __len__)
        self.cache = cache if cache is not None else CacheStore(
            max_entries=settings.cache_max_entries,
            coalesce_timeout=settings.coalesce_timeout,
        )

    @property
    def mock_mode(self) -> bool:
        return self.source.source_name == "mock"

    async def _cached(
        self,
        operation: str,
        cache_key: str,
        category: CacheCategory,
        fetch_fn: Callable[[], Awaitable[Any]],
    ) -> Any:
        """Cache-aside read; failures are logged with context and re-raised."""
        try:
            return await self.cache.get_or_fetch(cache_key, category, fetch_fn)
        except DataSourceError as e:
            logger.error(
                f"{operation} failed [key={cache_key}, source={self.source.source_name}, "
                f"status={e.status_code}]: {e}"
            )
            raise

    async def _write(
        self,
        operation: str,
        write_fn: Callable[[], Awaitable[Any]],
    ) -> None:
        """Run a mutation, then invalidate every nutrition entry."""
        try:
            await write_fn()
        except DataSourceError as e:
            logger.error(
                f"{operation} failed [source={self.source.source_name}, "
                f"status={e.status_code}]: {e}"
            )
            raise
        self.cache.clear(CacheCategory.NUTRITION)

    # =========================================================================
    # Nutrition
    # =========================================================================

    async def get_nutrition_log_entries(self, date: str) -> List[Dict[str, Any]]:
        """Log entries for one ISO date (YYYY-MM-DD)."""
        return await self._cached(
            "get_nutrition_log_entries",
            make_cache_key(CacheCategory.NUTRITION, "log", date),
            CacheCategory.NUTRITION,
            lambda: self.source.nutrition_log_entries(date),
        )

    async def get_active_nutrition_plan(self) -> Optional[Dict[str, Any]]:
        """
        The user's active nutrition plan.

        Returns None when the user has none. That None is cached like any
        other value, so an absent plan is not re-fetched until the TTL
        runs out or the nutrition category is invalidated.
        """
        return await self._cached(
            "get_active_nutrition_plan",
            make_cache_key(CacheCategory.NUTRITION, "plan", "active"),
            CacheCategory.NUTRITION,
            self.source.active_nutrition_plan,
        )

    async def get_nutrition_plan_by_id(self, plan_id: str) -> Dict[str, Any]:
        return await self._cached(
            "get_nutrition_plan_by_id",
            make_cache_key(CacheCategory.NUTRITION, "plan", "id", plan_id),
            CacheCategory.NUTRITION,
            lambda: self.source.nutrition_plan(plan_id),
        )

    async def get_nutrition_trends(self, start_date: str, end_date: str) -> Dict[str, Any]:
        """
        Per-day nutrition aggregates between two ISO dates, inclusive.

        Returns:
            {"startDate", "endDate", "dailyData": {date: {calories,
            calorieTarget, protein, carbs, fat}}, "recommendations"}
        """
        return await self._cached(
            "get_nutrition_trends",
            make_cache_key(
                CacheCategory.NUTRITION, "trends",
                startDate=start_date, endDate=end_date,
            ),
            CacheCategory.NUTRITION,
            lambda: self.source.nutrition_trends(start_date, end_date),
        )

    async def get_nutrition_training_recommendations(
        self, plan_id: Optional[str] = None
    ) -> Dict[str, Any]:
        """Daily targets, per-timing food suggestions and advice, optionally for a plan."""
        return await self._cached(
            "get_nutrition_training_recommendations",
            make_cache_key(CacheCategory.NUTRITION, "recommendations", planId=plan_id),
            CacheCategory.NUTRITION,
            lambda: self.source.nutrition_training_recommendations(plan_id),
        )

    async def create_nutrition_log_entry(
        self, entry: Union[NutritionLogEntry, Dict[str, Any]]
    ) -> None:
        if isinstance(entry, NutritionLogEntry):
            entry = entry.model_dump(exclude_none=True)
        await self._write(
            "create_nutrition_log_entry",
            lambda: self.source.create_nutrition_log_entry(entry),
        )

    async def delete_nutrition_log_entry(self, entry_id: str) -> None:
        await self._write(
            "delete_nutrition_log_entry",
            lambda: self.source.delete_nutrition_log_entry(entry_id),
        )

    # =========================================================================
    # Training & Strava
    # =========================================================================

    async def get_upcoming_training_sessions(self) -> List[Dict[str, Any]]:
        return await self._cached(
            "get_upcoming_training_sessions",
            make_cache_key(CacheCategory.TRAINING, "sessions", "upcoming"),
            CacheCategory.TRAINING,
            self.source.upcoming_training_sessions,
        )

    async def check_strava_connection(self) -> Dict[str, bool]:
        """Returns {"connected": bool}."""
        return await self._cached(
            "check_strava_connection",
            make_cache_key(CacheCategory.STRAVA, "status"),
            CacheCategory.STRAVA,
            self.source.strava_connection_status,
        )

    async def get_strava_auth_url(self) -> str:
        return await self._cached(
            "get_strava_auth_url",
            make_cache_key(CacheCategory.STRAVA, "auth-url"),
            CacheCategory.STRAVA,
            self.source.strava_auth_url,
        )

    async def get_strava_activities(self) -> Dict[str, Any]:
        """Recent activities plus a weekly summary."""
        return await self._cached(
            "get_strava_activities",
            make_cache_key(CacheCategory.STRAVA, "activities"),
            CacheCategory.STRAVA,
            self.source.strava_activities,
        )

    # =========================================================================
    # AI assistant
    # =========================================================================

    async def get_ai_suggestions(self, language: Language = "fr") -> List[str]:
        """
        Suggested questions for the AI assistant.

        The only accessor that degrades instead of raising: when the data
        source fails, a built-in list is returned and nothing is cached.
        """
        try:
            return await self.cache.get_or_fetch(
                make_cache_key(CacheCategory.AI, "suggestions", language),
                CacheCategory.AI,
                lambda: self.source.ai_suggestions(language),
            )
        except DataSourceError as e:
            logger.warning(f"get_ai_suggestions falling back to defaults: {e}")
            return list(DEFAULT_AI_SUGGESTIONS.get(language, DEFAULT_AI_SUGGESTIONS["fr"]))

    async def send_ai_chat_message(
        self, request: Union[ChatRequest, Dict[str, Any]]
    ) -> Dict[str, Any]:
        """
        One conversational turn with the AI assistant. Never cached.

        Returns:
            {"message": str, "suggestedQueries": [str, ...]}
        """
        if not isinstance(request, ChatRequest):
            request = ChatRequest.model_validate(request)
        try:
            return await self.source.ai_chat(request)
        except DataSourceError as e:
            logger.error(
                f"send_ai_chat_message failed [source={self.source.source_name}, "
                f"status={e.status_code}]: {e}"
            )
            raise

    async def get_ai_chat_history(self, user_id: str) -> List[Dict[str, Any]]:
        """Saved conversation for a user. Read through, never cached."""
        try:
            return await self.source.chat_history(user_id)
        except DataSourceError as e:
            logger.error(f"get_ai_chat_history failed for user {user_id}: {e}")
            raise

    async def save_ai_chat_history(self, user_id: str, history: List[Dict[str, Any]]) -> None:
        await self._write(
            "save_ai_chat_history",
            lambda: self.source.save_chat_history(user_id, history),
        )

    async def clear_ai_chat_history(self, user_id: str) -> None:
        await self._write(
            "clear_ai_chat_history",
            lambda: self.source.clear_chat_history(user_id),
        )

    # =========================================================================
    # Cache management
    # =========================================================================

    def clear_cache(self, scope: Union[CacheCategory, str] = ALL) -> int:
        """
        Drop cached data.

        Args:
            scope: "all" or a category name (nutrition, training, strava, ai, default)

        Returns:
            Number of entries removed
        """
        return self.cache.clear(scope)

    def get_cache_stats(self) -> Dict[str, Any]:
        stats = self.cache.get_stats()
        stats["source"] = self.source.source_name
        return stats


# Global orchestrator instance
_orchestrator: Optional[APIOrchestrator] = None


def get_orchestrator() -> APIOrchestrator:
    """Get or create the global orchestrator."""
    global _orchestrator
    if _orchestrator is None:
        _orchestrator = APIOrchestrator()
    return _orchestrator
