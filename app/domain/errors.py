# app/domain/errors.py
"""
Taksonomia bledow domeny zakupow.

ValidationError   - zle wejscie, odrzucone przed jakakolwiek mutacja
ConflictError     - AlreadyOwned / AlreadyInCart, brak mutacji
PreconditionError - EmptyCart / PaymentNotCompleted, user musi powtorzyc flow
UpstreamUnavailable - bramka platnosci / katalog niedostepne, mozna ponowic
StorageError      - przejsciowy blad bazy / locka, finalize ponawiany przez wywolujacego
"""


class StoreError(Exception):
    message = "Store error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)


class ValidationError(StoreError):
    message = "Invalid request"


class TrackUnavailable(ValidationError):
    message = "Track is not available for purchase"

    def __init__(self, track_id: int, message: str | None = None):
        self.track_id = track_id
        super().__init__(message or f"Track {track_id} is not available")


class TrackNotFound(TrackUnavailable):
    def __init__(self, track_id: int):
        super().__init__(track_id, f"Track {track_id} not found")


class UnknownPaymentIntent(ValidationError):
    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(f"Unknown payment intent {provider_id}")


class PurchaseNotFound(ValidationError):
    message = "Purchase not found"


class ConflictError(StoreError):
    message = "Conflict"


class AlreadyOwned(ConflictError):
    def __init__(self, track_id: int):
        self.track_id = track_id
        super().__init__(f"You already own track {track_id}")


class AlreadyInCart(ConflictError):
    def __init__(self, track_id: int):
        self.track_id = track_id
        super().__init__(f"Track {track_id} already in cart")


class PreconditionError(StoreError):
    message = "Precondition failed"


class EmptyCart(PreconditionError):
    message = "Cart is empty"


class PaymentNotCompleted(PreconditionError):
    def __init__(self, provider_id: str, status: str):
        self.provider_id = provider_id
        self.status = status
        super().__init__(f"Payment {provider_id} not completed (status: {status})")


class PaymentAmountMismatch(PreconditionError):
    def __init__(self, provider_id: str, charged: int, expected: int):
        self.provider_id = provider_id
        self.charged = charged
        self.expected = expected
        super().__init__(
            f"Payment {provider_id} charged {charged} minor units, cart requires {expected}"
        )


class OwnershipRequired(StoreError):
    def __init__(self, track_id: int):
        self.track_id = track_id
        super().__init__("Purchase required to access full track")


class UpstreamUnavailable(StoreError):
    message = "Upstream service unavailable"


class GatewayUnavailable(UpstreamUnavailable):
    message = "Payment provider unavailable"


class CatalogUnavailable(UpstreamUnavailable):
    message = "Catalog service unavailable"


class StorageError(StoreError):
    message = "Storage temporarily unavailable"


class ConcurrentModification(StorageError):
    message = "Cart was modified by another operation"
