"""Task assistant agent.

Runs one chat message through classify -> branch -> act -> respond:

1. Classify the message as task or conversation (JSON reply).
2. Task: extract title/date/notes, generate advice, save, confirm.
3. Conversation: reply in free text.

Classification, advice and conversation failures degrade to fallback
behaviour. Extraction and persistence failures abort the task and the
caller gets the generic apology with ``error: True``.
"""
import json
import logging
from datetime import date, datetime, timedelta
from typing import Callable, Optional

from pydantic import ValidationError

from ai import CompletionError, CompletionService
from models import Classification, Task, TaskInfo
from prompts import (
    get_advice_prompt,
    get_classification_prompt,
    get_conversational_prompt,
    get_extraction_prompt,
)

logger = logging.getLogger(__name__)

AGENT_NAME = "Task Assistant Agent"

FALLBACK_ADVICE = (
    "Good luck with your task! Break it down into smaller steps and tackle them one at a time."
)
FALLBACK_GREETING = (
    "Hello! I'm your task assistant. I can help you remember things and manage your tasks. "
    "Try saying something like 'Remind me to study tomorrow'!"
)
ERROR_MESSAGE = (
    "I apologize, but I encountered an error processing your request. Please try again."
)


class TaskExtractionError(Exception):
    """The completion reply could not be turned into a valid TaskInfo."""


def _parse_json_object(text: str) -> dict:
    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def format_task_date(task_date: date, today: Optional[date] = None) -> str:
    """Human-friendly label: "today", "tomorrow" or e.g. "Sunday, February 1, 2026"."""
    if isinstance(task_date, datetime):
        task_date = task_date.date()
    if today is None:
        today = date.today()

    if task_date == today:
        return "today"
    if task_date == today + timedelta(days=1):
        return "tomorrow"
    return f"{task_date:%A}, {task_date:%B} {task_date.day}, {task_date.year}"


class Agent:
    """Stateless orchestrator; collaborators are passed in.

    Args:
        completion: service used for every model call.
        save_task: persists a task, called as
            ``save_task(title=..., task_date=..., notes=..., advice=...)``.
        now: clock, injectable for tests.
    """

    name = AGENT_NAME

    def __init__(
        self,
        completion: CompletionService,
        save_task: Callable[..., Task],
        now: Callable[[], datetime] = datetime.now,
    ):
        self.completion = completion
        self.save_task = save_task
        self.now = now

    async def process(self, user_message: str) -> dict:
        """Process one user message and return the response payload."""
        logger.info("Agent processing: %s", user_message)

        try:
            classification = await self.classify(user_message)

            if classification.is_task:
                return await self.handle_task(user_message)
            return await self.handle_conversation(user_message)
        except Exception:
            logger.exception("Agent error")
            return {"message": ERROR_MESSAGE, "error": True}

    async def classify(self, user_message: str) -> Classification:
        """Never raises: any failure classifies the message as conversation."""
        try:
            response = await self.completion.complete(
                get_classification_prompt(), user_message, json_mode=True
            )
            classification = Classification.model_validate(_parse_json_object(response))
        except (CompletionError, ValueError, ValidationError) as e:
            logger.warning("Classification failed, treating as conversation: %s", e)
            return Classification(is_task=False, confidence=0.0)

        logger.info(
            "Classification: is_task=%s confidence=%.2f",
            classification.is_task, classification.confidence
        )
        return classification

    async def extract_task_info(self, user_message: str) -> TaskInfo:
        current_moment = self.now().astimezone().isoformat(timespec="seconds")
        try:
            response = await self.completion.complete(
                get_extraction_prompt(current_moment), user_message, json_mode=True
            )
            payload = _parse_json_object(response)
            task_info = TaskInfo.model_validate(
                {key: payload.get(key) for key in ("title", "date", "notes")}
            )
        except (CompletionError, ValueError, ValidationError) as e:
            raise TaskExtractionError("Failed to extract task information") from e

        logger.info("Extracted task info: %s", task_info.model_dump())
        return task_info

    async def generate_advice(self, title: str) -> str:
        try:
            advice = await self.completion.complete(get_advice_prompt(title), title)
        except CompletionError as e:
            logger.warning("Advice generation failed, using fallback: %s", e)
            return FALLBACK_ADVICE

        advice = advice.strip()
        if not advice:
            return FALLBACK_ADVICE
        logger.info("Generated advice for task: %s", title)
        return advice

    async def handle_task(self, user_message: str) -> dict:
        task_info = await self.extract_task_info(user_message)
        task_info.advice = await self.generate_advice(task_info.title)

        saved = self.save_task(
            title=task_info.title,
            task_date=task_info.date,
            notes=task_info.notes,
            advice=task_info.advice,
        )

        formatted_date = format_task_date(saved.date, self.now().date())
        return {
            "message": f"✓ I've added \"{saved.title}\" to your tasks for {formatted_date}.\n\n{saved.advice}",
            "task": {
                "id": saved.id,
                "title": saved.title,
                "date": saved.date,
                "notes": saved.notes,
                "advice": saved.advice,
            },
            "isTask": True,
        }

    async def handle_conversation(self, user_message: str) -> dict:
        try:
            response = await self.completion.complete(
                get_conversational_prompt(), user_message
            )
        except CompletionError as e:
            logger.warning("Conversation reply failed, using fallback: %s", e)
            return {"message": FALLBACK_GREETING, "isTask": False}

        return {"message": response, "isTask": False}
