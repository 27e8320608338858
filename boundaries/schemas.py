import datetime as dt
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .models import BOUNDARY_CATEGORIES

Category = Literal[BOUNDARY_CATEGORIES]


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)


class BoundaryCreate(CamelModel):
    template_id: Optional[int] = None
    custom_boundary: str = Field(..., min_length=10)
    category: Category
    notes: Optional[str] = None
    is_active: bool = True


class BoundaryUpdate(CamelModel):
    custom_boundary: str = Field(None, min_length=10)
    category: Category = None
    notes: Optional[str] = None
    is_active: bool = None


class ViolationCreate(CamelModel):
    boundary_id: int
    description: str = Field(..., min_length=1)
    severity: int = Field(..., ge=1, le=5)
    emotional_impact: Optional[str] = None
    action_taken: Optional[str] = None
    violated_at: Optional[dt.datetime] = None
