# loyaltea/routers/offers.py
from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from loyaltea.core.errors import ErrorKind, ServiceError
from loyaltea.schemas.offer import OfferPayload
from loyaltea.schemas.user import MessageResponse
from loyaltea.services.offer_service import OfferService

router = APIRouter(prefix="/offer", tags=["Offers"])


def _require_configured_provider(request: Request, provider: str) -> None:
    """Only the provider chosen by OFFER_PROVIDER is routed."""
    if provider != request.app.state.offer_decoder.provider:
        raise ServiceError(ErrorKind.UNKNOWN_PROVIDER, f"provider {provider!r} not routed")


async def read_offer_payload(request: Request, provider: str) -> OfferPayload:
    """Decode the webhook body with the configured provider's wire shape."""
    _require_configured_provider(request, provider)
    return await request.app.state.offer_decoder.read(request)


def get_offer_service(request: Request) -> OfferService:
    return request.app.state.offer_service


@router.post("/{provider}", response_model=MessageResponse)
def receive_offer(
    payload: OfferPayload = Depends(read_offer_payload),
    service: OfferService = Depends(get_offer_service),
):
    """
    Webhook receiver for forwarded offers.

    Errors:
      - 400: missing/malformed sender email or unreadable body
      - 404: provider is not the configured one
      - 500: mailing-list subscription or store failure (nothing stored)
    """
    service.ingest(payload)
    if service.subscriber is not None:
        return MessageResponse(message="Offer stored and sender subscribed successfully")
    return MessageResponse(message="Offer stored successfully")


@router.get("/{provider}", response_class=PlainTextResponse)
def verify_webhook(provider: str, request: Request):
    """Static answer for the provider's webhook registration handshake."""
    _require_configured_provider(request, provider)
    return "Webhook endpoint verified"
