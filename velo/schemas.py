"""
Pydantic schemas for orchestrator requests and API bodies
"""
from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any, Literal


Language = Literal["fr", "en"]


# ===== NUTRITION SCHEMAS =====

class NutritionLogEntry(BaseModel):
    """One food item logged for a given day"""
    id: Optional[str] = None
    date: str
    mealType: str
    foodName: str
    portion: float
    calories: float
    protein: float
    carbs: float
    fat: float
    notes: Optional[str] = None


# ===== AI CHAT SCHEMAS =====

class ChatTurn(BaseModel):
    """A single message in a conversation"""
    role: Literal["user", "assistant"]
    content: str


class ChatRequest(BaseModel):
    """A user message plus the conversation so far"""
    message: str
    history: List[ChatTurn] = Field(default_factory=list)
    context: Optional[Dict[str, Any]] = None
    language: Language = "fr"


class ChatResponse(BaseModel):
    """Assistant answer with follow-up queries to suggest"""
    message: str
    suggestedQueries: List[str] = Field(default_factory=list)


class ChatHistory(BaseModel):
    """Saved conversation for a user"""
    history: List[ChatTurn] = Field(default_factory=list)
