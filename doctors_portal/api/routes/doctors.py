from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...core.database import get_db
from ...core.security import TokenPayload
from ...api.deps import get_current_user_token
from ...models.doctor import Doctor
from ...schemas.base import InsertResult
from ...schemas.doctor import DoctorCreate

router = APIRouter(tags=["Doctors"])

@router.post("/addDoctor", response_model=InsertResult)
async def add_doctor(
    doctor_data: DoctorCreate,
    db: Session = Depends(get_db),
    _: TokenPayload = Depends(get_current_user_token)
):
    """Add a doctor to the roster."""
    doctor = Doctor(**doctor_data.model_dump())
    db.add(doctor)
    db.commit()
    db.refresh(doctor)

    return InsertResult(inserted_id=doctor.id)
