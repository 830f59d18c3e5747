from typing import List, Optional

from .base import CamelModel

class ServiceResponse(CamelModel):
    id: int
    name: str
    slots: List[str] = []
    price: Optional[float] = None

class AvailableServiceResponse(ServiceResponse):
    available_slots: List[str] = []

class ServiceNameResponse(CamelModel):
    id: int
    name: str
