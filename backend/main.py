from contextlib import asynccontextmanager
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from datetime import date
from typing import Optional
import logging
import sqlite3

import config
from agent import AGENT_NAME, Agent
from ai import ConfigurationError, build_completion_service
from models import ChatRequest, TaskUpdate
from database import (
    init_db,
    get_tasks_db,
    create_task_db,
    update_task_db,
    delete_task_db,
    TaskNotFoundError,
)

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

API_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    init_db()
    try:
        app.state.agent = Agent(build_completion_service(), save_task=create_task_db)
    except ConfigurationError as e:
        logger.error("AI provider not configured: %s", e)
        app.state.agent = None
    logger.info("Agent ready to process requests")
    yield
    # Shutdown (nothing to do)

app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info("%s %s", request.method, request.url.path)
    return await call_next(request)


@app.exception_handler(sqlite3.Error)
async def database_error_handler(request: Request, exc: sqlite3.Error):
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": "Database error"})


def get_agent(request: Request) -> Agent:
    agent = getattr(request.app.state, "agent", None)
    if agent is None:
        raise HTTPException(status_code=503, detail="AI provider not configured")
    return agent


router = APIRouter(prefix="/api/agent")


@router.post("/chat")
async def chat(chat_request: ChatRequest, agent: Agent = Depends(get_agent)) -> dict:
    """Process a user message through the agent."""
    message = chat_request.message.strip()
    if not message:
        raise HTTPException(
            status_code=400,
            detail="Message is required and must be a non-empty string"
        )
    return await agent.process(message)


@router.get("/tasks")
def get_tasks(
    completed: Optional[bool] = None,
    date_from: Optional[date] = Query(default=None, alias="dateFrom"),
    date_to: Optional[date] = Query(default=None, alias="dateTo"),
) -> dict:
    tasks = get_tasks_db(completed=completed, date_from=date_from, date_to=date_to)
    return {"tasks": tasks, "count": len(tasks)}


@router.patch("/tasks/{task_id}")
def update_task(task_id: str, task_data: TaskUpdate) -> dict:
    updates = task_data.model_dump(exclude_unset=True)
    # Explicit nulls carry no value for these columns
    updates = {field: value for field, value in updates.items() if value is not None}
    try:
        task = update_task_db(task_id, **updates)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"message": "Task updated successfully", "task": task}


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str) -> dict:
    try:
        delete_task_db(task_id)
    except TaskNotFoundError:
        raise HTTPException(status_code=404, detail="Task not found")
    return {"message": "Task deleted successfully"}


@router.get("/status")
def status(request: Request) -> dict:
    agent = getattr(request.app.state, "agent", None)
    return {
        "status": "online",
        "agent": agent.name if agent else AGENT_NAME,
        "version": API_VERSION,
        "provider": agent.completion.name if agent else None,
    }


app.include_router(router)


@app.get("/")
def root() -> dict:
    return {
        "message": "Task Assistant Agent API",
        "version": API_VERSION,
        "endpoints": {
            "chat": "POST /api/agent/chat",
            "tasks": "GET /api/agent/tasks",
            "update": "PATCH /api/agent/tasks/{id}",
            "delete": "DELETE /api/agent/tasks/{id}",
            "status": "GET /api/agent/status",
        },
    }


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
