from datetime import datetime
from typing import Optional
from pydantic import Field

from .base import CamelModel

class DoctorCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: Optional[str] = Field(None, max_length=255)
    specialty: Optional[str] = Field(None, max_length=100)
    img: Optional[str] = Field(None, max_length=500)

class DoctorResponse(DoctorCreate):
    id: int
    created_at: Optional[datetime] = None
