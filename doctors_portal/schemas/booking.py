from datetime import datetime
from typing import List, Optional
from pydantic import Field

from .base import CamelModel

class BookingCreate(CamelModel):
    email: str = Field(..., min_length=3, max_length=255)
    service: str = Field(..., min_length=1, max_length=100)
    booking_date: str = Field(..., min_length=1, max_length=50)
    time_slot: str = Field(..., min_length=1, max_length=50)
    patient_name: Optional[str] = Field(None, max_length=200)
    phone: Optional[str] = Field(None, max_length=30)
    price: Optional[float] = Field(None, ge=0)

class BookingResponse(CamelModel):
    id: int
    email: str
    service: str
    booking_date: str
    time_slot: str
    patient_name: Optional[str] = None
    phone: Optional[str] = None
    price: Optional[float] = None
    created_at: Optional[datetime] = None

class BookingResult(CamelModel):
    success: bool
    booking: BookingResponse

class AppointmentList(CamelModel):
    success: bool = True
    result: List[BookingResponse]
