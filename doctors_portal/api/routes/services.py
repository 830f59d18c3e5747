from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_user_token
from ...services.booking_service import BookingService
from ...schemas.service import (
    ServiceResponse, AvailableServiceResponse, ServiceNameResponse
)

router = APIRouter(tags=["Services"])

@router.get("/services", response_model=List[ServiceResponse])
async def list_services(db: Session = Depends(get_db)):
    """List the service catalog."""
    return BookingService(db).list_services()

@router.get("/available", response_model=List[AvailableServiceResponse])
async def available_services(
    date: str = Query(..., min_length=1),
    db: Session = Depends(get_db)
):
    """List every service with the slots still open on the given date."""
    return BookingService(db).available_services(date)

@router.get("/servicesName", response_model=List[ServiceNameResponse])
async def service_names(
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_current_user_token)
):
    return BookingService(db).list_services()
