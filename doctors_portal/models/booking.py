from sqlalchemy import Column, Integer, String, DateTime, Numeric, UniqueConstraint
from sqlalchemy.sql import func

from ..core.database import Base

class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        # One patient per slot; a losing concurrent insert fails here
        UniqueConstraint("service", "booking_date", "time_slot", name="uq_booking_slot"),
    )

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), index=True, nullable=False)

    # Service.name, not a foreign key: the catalog is edited outside this API
    service = Column(String(100), nullable=False)
    booking_date = Column(String(50), index=True, nullable=False)
    time_slot = Column(String(50), nullable=False)

    patient_name = Column(String(200), nullable=True)
    phone = Column(String(30), nullable=True)
    price = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime, server_default=func.now())

    def __repr__(self):
        return f"<Booking(id={self.id}, service='{self.service}', date='{self.booking_date}', slot='{self.time_slot}')>"
