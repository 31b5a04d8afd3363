# app/services/payment_gateway.py
import stripe

from app.domain.errors import GatewayUnavailable, UnknownPaymentIntent
from app.domain.types import IntentRef, IntentState, IntentStatus
from app.utils.settings import STRIPE_SECRET_KEY, GATEWAY_TIMEOUT_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)

_STATUS_MAP = {
    "succeeded": IntentState.SUCCEEDED,
    "canceled": IntentState.FAILED,
}


class StripeGateway:
    """
    Cienki adapter do Stripe PaymentIntents.
    Bez logiki biznesowej i bez retry - decyduje wywolujacy.
    """

    def __init__(self, api_key: str | None = None, timeout: float = GATEWAY_TIMEOUT_SECONDS):
        self.api_key = api_key or STRIPE_SECRET_KEY
        stripe.max_network_retries = 0
        stripe.default_http_client = stripe.RequestsClient(timeout=timeout)

    def create_intent(self, amount_minor_units: int, currency: str, metadata: dict) -> IntentRef:
        logger.info(f"Stripe create intent {amount_minor_units} {currency} metadata={metadata}")
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor_units,
                currency=currency,
                metadata=metadata,
                automatic_payment_methods={"enabled": True},
                api_key=self.api_key,
            )
        except (stripe.APIConnectionError, stripe.RateLimitError, stripe.APIError) as e:
            logger.error(f"Stripe create intent failed: {e}")
            raise GatewayUnavailable() from e

        return IntentRef(provider_id=intent.id, client_secret=intent.client_secret)

    def retrieve_status(self, provider_id: str) -> IntentStatus:
        try:
            intent = stripe.PaymentIntent.retrieve(provider_id, api_key=self.api_key)
        except stripe.InvalidRequestError as e:
            logger.warning(f"Stripe intent {provider_id} rejected: {e}")
            raise UnknownPaymentIntent(provider_id) from e
        except (stripe.APIConnectionError, stripe.RateLimitError, stripe.APIError) as e:
            logger.error(f"Stripe retrieve intent {provider_id} failed: {e}")
            raise GatewayUnavailable() from e

        status = _STATUS_MAP.get(intent.status, IntentState.PENDING)
        charged = getattr(intent, "amount_received", None) or 0

        return IntentStatus(
            provider_id=intent.id,
            status=status,
            charged_amount_minor_units=int(charged),
            transaction_ref=getattr(intent, "latest_charge", None) or intent.id,
        )
