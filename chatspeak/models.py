import enum
import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

def utcnow():
    return datetime.now(timezone.utc)

class DispatchState(str, enum.Enum):
    idle = "idle"
    speaking = "speaking"

class Command(str, enum.Enum):
    tts = "tts"
    volume = "volume"
    help = "help"
    stats = "stats"
    none = "none"

class ParsedCommand(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Command
    payload: str | None = None

class ChatEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    speaker: str
    text: str
    is_self: bool = False

class VolumeInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    volume: float
    volume_percent: int
    usage_count: int

class Job(BaseModel):
    """A speech request waiting for (or under) synthesis. Never mutated."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    requester: str = Field(min_length=1)
    text: str
    volume: float
    volume_percent: int
    usage_count: int
    enqueued_at: datetime = Field(default_factory=utcnow)

    @classmethod
    def create(cls, requester: str, text: str, info: VolumeInfo) -> "Job":
        return cls(
            requester=requester,
            text=text,
            volume=info.volume,
            volume_percent=info.volume_percent,
            usage_count=info.usage_count,
        )
