"""
Web Routes - API endpoints
==========================

This module defines the HTTP API for talking to the responder and
replacing its rule set.
"""

from datetime import datetime, timezone

from fastapi import APIRouter, Request, HTTPException
from pydantic import BaseModel

from core.exceptions import RuleLoadError, RuleSetError
from core.logging import get_logger

logger = get_logger("web.routes")

router = APIRouter()


class ChatMessage(BaseModel):
    """Chat message model."""
    message: str


class LoadRulesRequest(BaseModel):
    """Rule set download request model."""
    url: str


@router.get("/api/greeting")
async def get_greeting(request: Request):
    """Get an opening line."""
    responder = request.app.state.responder

    greeting = responder.greeting()
    if greeting is None:
        raise HTTPException(status_code=503, detail="No rules defined")

    return {"greeting": greeting}


@router.post("/api/chat")
def chat(request: Request, chat_data: ChatMessage):
    """Send one message to the responder."""
    responder = request.app.state.responder

    result = responder.handle_message(chat_data.message)

    return {
        "response": result.response,
        "source": result.source,
        "is_farewell": result.is_farewell,
        "keyword": result.keyword,
        "latency_ms": result.latency_ms,
    }


@router.post("/api/rules/load")
def load_rules(request: Request, load_data: LoadRulesRequest):
    """Replace the rule set with one downloaded from a URL."""
    responder = request.app.state.responder

    try:
        engine = responder.load_from_url(load_data.url)
    except (RuleLoadError, RuleSetError) as e:
        logger.warning(f"Rule set load failed: {e}")
        raise HTTPException(status_code=400, detail=e.message)

    return {
        "success": True,
        "message": f"Loaded {len(engine.ruleset.keywords)} keywords",
    }


@router.get("/api/status")
async def get_status(request: Request):
    """Get responder status."""
    config = request.app.state.config
    responder = request.app.state.responder

    engine = responder.engine
    ruleset = engine.ruleset if engine else None

    return {
        "app": config.app_name,
        "version": config.version,
        "has_rules": ruleset is not None,
        "keywords": len(ruleset.keywords) if ruleset else 0,
        "synonym_classes": len(ruleset.synonyms) if ruleset else 0,
        "persisted": responder.storage_path is not None,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
