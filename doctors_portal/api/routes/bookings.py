from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.orm import Session
from typing import Optional

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_user_token, get_identity_matched_token
from ...services.booking_service import BookingService
from ...services.notification_service import (
    MailgunMailer, get_mailer, send_booking_confirmation
)
from ...schemas.booking import (
    BookingCreate, BookingResponse, BookingResult, AppointmentList
)

router = APIRouter(tags=["Bookings"])

@router.post("/booking", response_model=BookingResult)
async def create_booking(
    booking_data: BookingCreate,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    mailer: MailgunMailer = Depends(get_mailer)
):
    """Book a slot. A repeat request for the same service and date returns the existing booking."""
    booking, created = BookingService(db).create_booking(booking_data)
    booking_out = BookingResponse.model_validate(booking)

    if created:
        background_tasks.add_task(send_booking_confirmation, mailer, booking_out)

    return BookingResult(success=created, booking=booking_out)

@router.get("/myappointment", response_model=AppointmentList)
async def my_appointments(
    date: str = Query(...),
    db: Session = Depends(get_db),
    token_payload: TokenPayload = Depends(get_identity_matched_token)
):
    """List the caller's bookings on a date."""
    bookings = BookingService(db).user_bookings(token_payload.email, date)
    return AppointmentList(
        result=[BookingResponse.model_validate(b) for b in bookings]
    )

@router.get("/singleService/{booking_id}", response_model=Optional[BookingResponse])
async def get_booking(
    booking_id: int,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_current_user_token)
):
    """Fetch one booking by id; null when it does not exist."""
    return BookingService(db).get_booking(booking_id)
