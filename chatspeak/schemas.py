from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

class VolumeResponse(BaseModel):
    """Body of GET /api/tts/{user}/json on the volume service."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    success: bool
    volume: float | None = Field(default=None, allow_inf_nan=False)
    volume_percent: float | None = Field(default=None, alias="volumePercent", allow_inf_nan=False)
    tts_count: int | None = Field(default=None, alias="ttsCount")

    @model_validator(mode="after")
    def require_volume_on_success(self):
        # error bodies may leave the numbers out, successful ones may not
        if self.success and None in (self.volume, self.volume_percent, self.tts_count):
            raise ValueError("successful volume payload is missing volume, volumePercent or ttsCount")
        return self

class JobOut(BaseModel):
    id: str
    requester: str
    text: str
    volume_percent: int
    usage_count: int
    enqueued_at: datetime

class QueueOut(BaseModel):
    state: str
    in_flight: JobOut | None = None
    length: int
    jobs: list[JobOut]
