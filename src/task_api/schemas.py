from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


# PUBLIC_INTERFACE
class TaskIn(BaseModel):
    """
    Request body for creating or updating a task.

    Both fields are optional and may be null, which reads the same as absent.
    Unknown keys, including a client-sent "id", are ignored; values must
    already be a JSON string and a JSON boolean.
    """

    model_config = ConfigDict(
        extra="ignore",
        json_schema_extra={
            "example": {
                "title": "buy milk",
                "completed": False,
            }
        },
    )

    title: Optional[str] = Field(default=None, strict=True, description="Task title; empty or null on update means unchanged")
    completed: Optional[bool] = Field(default=None, strict=True, description="Completion status flag; null means false")

    @property
    def title_value(self) -> str:
        return self.title or ""

    @property
    def completed_value(self) -> bool:
        return bool(self.completed)


# PUBLIC_INTERFACE
class TaskOut(BaseModel):
    """
    Schema returned by the API for a task.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": 1,
                "title": "buy milk",
                "completed": False,
            }
        }
    )

    id: int = Field(..., description="Unique identifier of the task")
    title: str = Field(..., description="Task title")
    completed: bool = Field(..., description="Completion status flag")
