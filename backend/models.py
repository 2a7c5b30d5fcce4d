from datetime import date as date_type, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

TITLE_MAX_LENGTH = 200


class Task(BaseModel):
    id: str
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    date: date_type
    advice: str = ""
    notes: str = ""
    completed: bool = False
    created_at: datetime


class TaskInfo(BaseModel):
    """Draft task produced by extraction, before it is persisted."""
    title: str = Field(min_length=1, max_length=TITLE_MAX_LENGTH)
    date: date_type
    notes: str = ""
    advice: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def strip_title(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("notes", "advice", mode="before")
    @classmethod
    def none_to_empty(cls, value):
        return "" if value is None else value


class Classification(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    is_task: bool = Field(alias="isTask", strict=True)
    confidence: float = Field(ge=0.0, le=1.0)


class TaskUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    completed: Optional[bool] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=TITLE_MAX_LENGTH)
    date: Optional[date_type] = None
    notes: Optional[str] = None


class ChatRequest(BaseModel):
    message: str
