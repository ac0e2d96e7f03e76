"""
Velo Altitude API - FastAPI application
Thin HTTP surface over the API orchestrator (mock or remote data source)
"""
from typing import Optional, List, Dict, Any

from fastapi import Depends, FastAPI, HTTPException, Query

from velo.errors import DataSourceError, ResourceNotFoundError
from velo.orchestrator import APIOrchestrator, get_orchestrator
from velo.schemas import ChatHistory, ChatRequest, ChatResponse, Language, NutritionLogEntry

# Version tracking
APP_VERSION = "v0.3.0"
APP_NAME = "Velo Altitude API"

app = FastAPI(
    title=APP_NAME,
    description="Nutrition, training, Strava and AI assistant data for Velo Altitude",
    version=APP_VERSION,
)


def _upstream_error(e: DataSourceError) -> HTTPException:
    """Map a data source failure onto the HTTP error returned to the caller."""
    if isinstance(e, ResourceNotFoundError):
        return HTTPException(status_code=404, detail="Resource not found")
    return HTTPException(status_code=502, detail=f"Upstream request failed: {e}")


@app.get("/health")
def health_check(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    """Health check endpoint."""
    return {
        "status": "ok",
        "source": orchestrator.source.source_name,
        "mode": "mock" if orchestrator.mock_mode else "live",
    }


@app.get("/version")
def version_info():
    """Version information endpoint."""
    return {"name": APP_NAME, "version": APP_VERSION}


# ===== CACHE =====

@app.get("/cache/stats")
def cache_stats(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    """Get cache statistics."""
    return orchestrator.get_cache_stats()


@app.delete("/cache/{scope}")
def clear_cache(scope: str, orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    """Clear one cache category, or everything with scope 'all'."""
    try:
        cleared = orchestrator.clear_cache(scope)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"scope": scope, "cleared": cleared}


# ===== NUTRITION =====

@app.get("/api/nutrition/log/{date}")
async def nutrition_log(date: str, orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    """Nutrition log entries for one day (YYYY-MM-DD)."""
    try:
        return await orchestrator.get_nutrition_log_entries(date)
    except DataSourceError as e:
        raise _upstream_error(e)


@app.post("/api/nutrition/log", status_code=201)
async def create_nutrition_log(
    entry: NutritionLogEntry,
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
):
    """Record a food item in the nutrition log."""
    try:
        await orchestrator.create_nutrition_log_entry(entry)
    except DataSourceError as e:
        raise _upstream_error(e)
    return {"status": "created"}


@app.delete("/api/nutrition/log/{entry_id}")
async def delete_nutrition_log(
    entry_id: str,
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
):
    try:
        await orchestrator.delete_nutrition_log_entry(entry_id)
    except DataSourceError as e:
        raise _upstream_error(e)
    return {"status": "deleted", "id": entry_id}


@app.get("/api/nutrition/plans/active")
async def active_nutrition_plan(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    """Active plan, or null when the user has none."""
    try:
        return await orchestrator.get_active_nutrition_plan()
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/nutrition/plans/{plan_id}")
async def nutrition_plan(plan_id: str, orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.get_nutrition_plan_by_id(plan_id)
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/nutrition/trends")
async def nutrition_trends(
    start_date: str = Query(..., alias="startDate", description="First day, YYYY-MM-DD"),
    end_date: str = Query(..., alias="endDate", description="Last day, YYYY-MM-DD"),
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
):
    """Per-day nutrition aggregates over a date range (inclusive)."""
    try:
        return await orchestrator.get_nutrition_trends(start_date, end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Invalid date range: {e}")
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/nutrition/recommendations")
async def nutrition_recommendations(
    plan_id: Optional[str] = Query(None, alias="planId"),
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
):
    """Nutrition recommendations based on upcoming training."""
    try:
        return await orchestrator.get_nutrition_training_recommendations(plan_id)
    except DataSourceError as e:
        raise _upstream_error(e)


# ===== TRAINING & STRAVA =====

@app.get("/api/training/sessions/upcoming")
async def upcoming_sessions(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.get_upcoming_training_sessions()
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/strava/status")
async def strava_status(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.check_strava_connection()
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/strava/auth-url")
async def strava_auth_url(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return {"authUrl": await orchestrator.get_strava_auth_url()}
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/strava/activities")
async def strava_activities(orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.get_strava_activities()
    except DataSourceError as e:
        raise _upstream_error(e)


# ===== AI ASSISTANT =====

@app.get("/api/ai/suggestions")
async def ai_suggestions(
    language: Language = Query("fr"),
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
) -> List[str]:
    """Suggested questions for the assistant (falls back to defaults, never fails)."""
    return await orchestrator.get_ai_suggestions(language)


@app.post("/api/ai/chat", response_model=ChatResponse)
async def ai_chat(request: ChatRequest, orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return await orchestrator.send_ai_chat_message(request)
    except DataSourceError as e:
        raise _upstream_error(e)


@app.get("/api/ai/chat/history/{user_id}", response_model=ChatHistory)
async def ai_chat_history(user_id: str, orchestrator: APIOrchestrator = Depends(get_orchestrator)):
    try:
        return {"history": await orchestrator.get_ai_chat_history(user_id)}
    except DataSourceError as e:
        raise _upstream_error(e)


@app.put("/api/ai/chat/history/{user_id}")
async def save_ai_chat_history(
    user_id: str,
    body: ChatHistory,
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
) -> Dict[str, Any]:
    try:
        await orchestrator.save_ai_chat_history(
            user_id, [turn.model_dump() for turn in body.history]
        )
    except DataSourceError as e:
        raise _upstream_error(e)
    return {"status": "saved", "turns": len(body.history)}


@app.delete("/api/ai/chat/history/{user_id}")
async def clear_ai_chat_history(
    user_id: str,
    orchestrator: APIOrchestrator = Depends(get_orchestrator),
):
    try:
        await orchestrator.clear_ai_chat_history(user_id)
    except DataSourceError as e:
        raise _upstream_error(e)
    return {"status": "cleared"}
