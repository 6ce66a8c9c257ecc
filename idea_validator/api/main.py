"""FastAPI application for Idea Validator."""

from dataclasses import asdict
from datetime import datetime, timezone
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger

from ..errors import IdeaNotFoundError, IdeaTooShortError
from ..scoring.layout import ChartLayout
from ..scoring.validation import ValidationResult, ingest_validation
from ..storage.models import ChatMessage
from ..storage.repository import IdeaRepository, build_repository
from ..utils.config import get_config

# Initialize FastAPI app
app = FastAPI(
    title="Idea Validator API",
    description="Validated startup ideas and their market opportunity heatmap",
    version="1.0.0",
)

# Load configuration
config = get_config()

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

_repository: Optional[IdeaRepository] = None


def get_repository() -> IdeaRepository:
    """Repository dependency, created on first use."""
    global _repository
    if _repository is None:
        _repository = build_repository(config)
    return _repository


@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("Idea Validator API starting up")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("Idea Validator API shutting down")


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "Idea Validator API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@app.get("/ideas")
async def list_ideas(repo: IdeaRepository = Depends(get_repository)):
    """List validated ideas, most recent first."""
    try:
        ideas = repo.list_ideas()
        return {
            "ideas": [idea.to_storage() for idea in ideas],
            "total": len(ideas),
        }

    except Exception as e:
        logger.error(f"Error listing ideas: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/ideas/{idea_id}")
async def get_idea(idea_id: str, repo: IdeaRepository = Depends(get_repository)):
    """Get a validated idea with its chart metrics.

    Args:
        idea_id: Idea ID

    Returns:
        Idea and derived bubble
    """
    try:
        idea = repo.get_idea(idea_id)
        return {
            "idea": idea.to_storage(),
            "bubble": asdict(repo.scorer.calculate(idea)),
        }

    except IdeaNotFoundError:
        raise HTTPException(status_code=404, detail="Idea not found")
    except Exception as e:
        logger.error(f"Error getting idea {idea_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.post("/ideas", status_code=201)
async def create_idea(
    result: ValidationResult,
    repo: IdeaRepository = Depends(get_repository),
):
    """Store the result of a validation run.

    Args:
        result: Validation payload

    Returns:
        Stored idea and its bubble
    """
    try:
        idea = ingest_validation(result, min_idea_length=config.storage.min_idea_length)
        repo.add_idea(idea)
        return {
            "idea": idea.to_storage(),
            "bubble": asdict(repo.scorer.calculate(idea)),
        }

    except IdeaTooShortError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.error(f"Error storing idea: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/ideas/{idea_id}")
async def delete_idea(idea_id: str, repo: IdeaRepository = Depends(get_repository)):
    """Remove an idea from the history."""
    try:
        if not repo.delete_idea(idea_id):
            raise HTTPException(status_code=404, detail="Idea not found")
        return {"message": "Idea deleted", "idea_id": idea_id}

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error deleting idea {idea_id}: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/bubbles")
async def get_bubbles(repo: IdeaRepository = Depends(get_repository)):
    """Chart metrics for every stored idea, in history order."""
    try:
        bubbles = repo.bubbles()
        return {
            "bubbles": [asdict(b) for b in bubbles],
            "count": len(bubbles),
        }

    except Exception as e:
        logger.error(f"Error deriving bubbles: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/heatmap")
async def get_heatmap(
    selected: Optional[str] = Query(None, description="Id of the bubble to highlight"),
    repo: IdeaRepository = Depends(get_repository),
):
    """Full chart layout for the market opportunity heatmap."""
    try:
        chart = ChartLayout(scorer=repo.scorer).render(repo.bubbles(), selected_id=selected)
        return asdict(chart)

    except Exception as e:
        logger.error(f"Error rendering heatmap: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/stats")
async def get_stats(repo: IdeaRepository = Depends(get_repository)):
    """Dashboard figures: idea count, average score and unicorn count."""
    try:
        return repo.dashboard_stats()

    except Exception as e:
        logger.error(f"Error computing stats: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.get("/chat")
async def get_chat(repo: IdeaRepository = Depends(get_repository)):
    """Market research chat history."""
    messages = repo.chat_history()
    return {"messages": [m.model_dump(mode="json", exclude_none=True) for m in messages]}


@app.post("/chat", status_code=201)
async def append_chat(message: ChatMessage, repo: IdeaRepository = Depends(get_repository)):
    """Append a message to the chat history."""
    try:
        messages = repo.append_chat(message)
        return {"count": len(messages)}

    except Exception as e:
        logger.error(f"Error saving chat message: {e}")
        raise HTTPException(status_code=500, detail=str(e))


@app.delete("/chat")
async def clear_chat(repo: IdeaRepository = Depends(get_repository)):
    """Forget the chat history."""
    repo.clear_chat()
    return {"message": "Chat cleared"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "idea_validator.api.main:app",
        host=config.api.host,
        port=config.api.port,
        reload=False,
    )
