from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from fastapi import HTTPException, status
from typing import List, Optional, Tuple
import logging

from ..models.booking import Booking
from ..models.service import Service
from ..schemas.booking import BookingCreate
from ..schemas.service import AvailableServiceResponse, ServiceResponse
from .availability import compute_availability

logger = logging.getLogger(__name__)

class BookingService:
    def __init__(self, db: Session):
        self.db = db

    def list_services(self) -> List[Service]:
        """Return the full service catalog."""
        return self.db.query(Service).order_by(Service.id).all()

    def available_services(self, date: str) -> List[AvailableServiceResponse]:
        """Return every service with the slots still open on ``date``."""
        catalog = [ServiceResponse.model_validate(s) for s in self.list_services()]
        bookings_on_date = self.db.query(Booking).filter(
            Booking.booking_date == date
        ).all()

        return compute_availability(catalog, bookings_on_date, date)

    def create_booking(self, booking_data: BookingCreate) -> Tuple[Booking, bool]:
        """Create a booking.

        Returns ``(booking, created)``. When the patient already holds a
        booking for the same service and date, that booking is returned
        with ``created=False`` and nothing is written.
        """
        existing = self.db.query(Booking).filter(
            Booking.email == booking_data.email,
            Booking.service == booking_data.service,
            Booking.booking_date == booking_data.booking_date
        ).first()

        if existing:
            return existing, False

        booking = Booking(**booking_data.model_dump())
        self.db.add(booking)

        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.info(
                f"Slot taken: {booking_data.service} {booking_data.booking_date} "
                f"{booking_data.time_slot}"
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Time slot already booked"
            )

        self.db.refresh(booking)
        return booking, True

    def user_bookings(self, email: str, date: str) -> List[Booking]:
        """List a patient's bookings on a date."""
        return self.db.query(Booking).filter(
            Booking.email == email,
            Booking.booking_date == date
        ).order_by(Booking.id).all()

    def get_booking(self, booking_id: int) -> Optional[Booking]:
        return self.db.query(Booking).filter(Booking.id == booking_id).first()
