from fastapi import APIRouter, Depends, HTTPException, status

from ...core.security import TokenPayload, InvalidArgumentError
from ...api.deps import get_current_user_token
from ...services.payment_service import (
    StripePaymentGateway, PaymentGatewayError, PaymentNotConfiguredError,
    get_payment_gateway, to_minor_units
)
from ...schemas.payment import PaymentIntentRequest, PaymentIntentResponse

router = APIRouter(tags=["Payments"])

@router.post("/create-payment-intent", response_model=PaymentIntentResponse)
async def create_payment_intent(
    payment_data: PaymentIntentRequest,
    gateway: StripePaymentGateway = Depends(get_payment_gateway),
    _: TokenPayload = Depends(get_current_user_token)
):
    """Create a card payment intent for a price in major currency units."""
    try:
        amount = to_minor_units(payment_data.price)
    except ValueError as e:
        raise InvalidArgumentError(str(e))

    try:
        intent = await gateway.create_payment_intent(amount)
    except PaymentNotConfiguredError as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )
    except PaymentGatewayError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=str(e)
        )

    return PaymentIntentResponse(client_secret=intent["client_secret"])
