"""Data models for the reminder banner."""

from pydantic import BaseModel, ConfigDict


class ReminderState(BaseModel):
    """What the reminder banner shows."""

    model_config = ConfigDict(frozen=True)

    text: str | None = None
    visible: bool = False
