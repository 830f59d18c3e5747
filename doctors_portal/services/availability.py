"""
Slot availability.

A service is open at a slot on a date unless some booking for that date
names the service and the slot. Dates are opaque labels compared by
equality.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Protocol, Sequence, Set

from ..schemas.service import AvailableServiceResponse, ServiceResponse


class BookedSlot(Protocol):
    service: str
    booking_date: str
    time_slot: str


def booked_slots_by_service(
    bookings: Iterable[BookedSlot], date: str
) -> Dict[str, Set[str]]:
    """Group the time slots taken on ``date`` by service name."""
    booked: Dict[str, Set[str]] = defaultdict(set)
    for booking in bookings:
        if booking.booking_date == date:
            booked[booking.service].add(booking.time_slot)
    return booked


def compute_availability(
    catalog: Sequence[ServiceResponse],
    bookings: Iterable[BookedSlot],
    date: str,
) -> List[AvailableServiceResponse]:
    """Annotate every service with the slots still open on ``date``.

    The catalog is not modified; each result is a new object whose
    ``available_slots`` keeps the order of ``slots``. Bookings for services
    missing from the catalog are ignored.
    """
    booked = booked_slots_by_service(bookings, date)

    result = []
    for service in catalog:
        taken = booked.get(service.name, set())
        result.append(
            AvailableServiceResponse(
                **service.model_dump(),
                available_slots=[slot for slot in service.slots if slot not in taken],
            )
        )
    return result
