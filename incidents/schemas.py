"""
Request schemas for incidents and their attachments.

Payloads use camelCase keys (``behaviorType``, ``safetyRating``); validation
errors report fields under the same names.
"""
import datetime as dt
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from .models import BEHAVIOR_TYPES, MOOD_OPTIONS

MAX_PHOTO_BYTES = 10 * 1024 * 1024

BehaviorType = Literal[BEHAVIOR_TYPES]
Mood = Literal[MOOD_OPTIONS]


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PhotoAttachment(CamelModel):
    id: str = Field(..., min_length=1)
    filename: str = Field(..., min_length=1, max_length=255)
    caption: str = ''
    timestamp: dt.datetime
    size: int = Field(..., ge=0, le=MAX_PHOTO_BYTES)
    type: str = Field(..., pattern=r'^image/')
    data_url: str = Field(..., min_length=1)


class IncidentCreate(CamelModel):
    date: dt.date
    time: dt.time
    behavior_type: BehaviorType
    description: str = Field(..., min_length=1)
    feelings: Optional[str] = None
    impact: Optional[str] = None
    mood_before: Optional[Mood] = None
    mood_after: Optional[Mood] = None
    safety_rating: Optional[int] = Field(None, ge=1, le=5)
    transcription: Optional[str] = None
    photos: List[PhotoAttachment] = Field(default_factory=list)

    @field_validator('feelings', 'impact', 'mood_before', 'mood_after',
                     'safety_rating', 'transcription', mode='before')
    @classmethod
    def blank_to_none(cls, value):
        # Forms post untouched optional inputs as empty strings
        if isinstance(value, str) and not value.strip():
            return None
        return value


class IncidentUpdate(IncidentCreate):
    """Partial update: every field optional, but required columns reject null."""
    date: dt.date = None
    time: dt.time = None
    behavior_type: BehaviorType = None
    description: str = Field(None, min_length=1)
    photos: List[PhotoAttachment] = None


class AudioRecordingCreate(CamelModel):
    filename: str = Field(..., min_length=1, max_length=255)
    duration: int = Field(..., ge=0)
    transcription: Optional[str] = None


def incident_columns(payload: BaseModel, exclude_unset=False):
    """Map a validated payload to ``Incident`` column values."""
    values = payload.model_dump(exclude_unset=exclude_unset)
    if 'photos' in values and values['photos'] is not None:
        values['photos'] = [
            photo.model_dump(mode='json', by_alias=True) for photo in payload.photos
        ]
    return values
