from typing import Optional, Union

from .base import CamelModel

class PaymentIntentRequest(CamelModel):
    # Validated by the handler so a missing or bad price is a 400, not a 422
    price: Optional[Union[float, str]] = None

class PaymentIntentResponse(CamelModel):
    client_secret: str
