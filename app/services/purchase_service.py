# app/services/purchase_service.py
from typing import Dict, Any, List

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from app.data.models.entitlement import EntitlementModel
from app.data.models.purchase import PurchaseModel, PurchaseLineModel
from app.domain.errors import (
    AlreadyOwned,
    EmptyCart,
    PaymentAmountMismatch,
    PaymentNotCompleted,
    PurchaseNotFound,
    StorageError,
    UnknownPaymentIntent,
)
from app.domain.types import (
    FinalizeResult,
    IntentState,
    PurchaseStatus,
    to_minor_units,
)
from app.repos.entitlement_repo import EntitlementRepo
from app.repos.purchase_repo import PurchaseRepo
from app.repos.stats_repo import StatsRepo
from app.services.cart_service import CartService
from app.services.payment_gateway import StripeGateway
from app.utils.settings import PAYMENT_CURRENCY
from app.utils.logging import get_logger

logger = get_logger(__name__)


def purchase_to_dict(purchase: PurchaseModel) -> Dict[str, Any]:
    return {
        "id": purchase.id,
        "user_id": purchase.user_id,
        "lines": [
            {"track_id": line.track_id, "price_at_purchase": line.price_at_purchase}
            for line in purchase.lines
        ],
        "total_amount": purchase.total_amount,
        "currency": purchase.currency,
        "payment_provider_id": purchase.payment_provider_id,
        "status": purchase.status,
        "transaction_ref": purchase.transaction_ref,
        "created_at": purchase.created_at,
    }


class PurchaseService:
    """
    Serwis odpowiedzialny za zamiane koszyka w zakup i uprawnienia.

    Stany dla pary (user_id, provider_id):
        initiated -> verifying -> committed  (sukces, terminalny)
        initiated -> verifying -> rejected   (porazka, terminalny)
    Po committed nic sie nie zmienia; provider_id jest kluczem idempotencji.
    """

    def __init__(
        self,
        db: Session,
        cart_service: CartService,
        gateway: StripeGateway,
        currency: str = PAYMENT_CURRENCY,
    ):
        self.db = db
        self.cart_service = cart_service
        self.gateway = gateway
        self.currency = currency
        self.repo = PurchaseRepo(db)
        self.entitlements = EntitlementRepo(db)
        self.stats = StatsRepo(db)

    def create_intent(self, user_id: int) -> Dict[str, Any]:
        """
        Use Case: utworzenie payment intentu z aktualnego koszyka.

        Snapshot jest tylko doradczy - finalize i tak wylicza koszyk od nowa.
        """
        snapshot = self.cart_service.snapshot(user_id)
        if snapshot.is_empty:
            raise EmptyCart()

        amount_minor = to_minor_units(snapshot.total)
        track_ids = snapshot.track_ids

        intent = self.gateway.create_intent(
            amount_minor,
            self.currency,
            {
                "user_id": str(user_id),
                "track_ids": ",".join(str(t) for t in track_ids),
            },
        )

        logger.info(
            f"Payment intent {intent.provider_id} created for user {user_id}: "
            f"{amount_minor} {self.currency}, tracks {track_ids}"
        )

        return {
            "client_secret": intent.client_secret,
            "provider_id": intent.provider_id,
            "amount": snapshot.total,
            "currency": self.currency,
            "track_ids": track_ids,
        }

    def finalize(self, user_id: int, provider_id: str) -> FinalizeResult:
        """
        Use Case: potwierdzenie platnosci i zapis zakupu.

        1. Idempotency guard po payment_provider_id
        2. Weryfikacja statusu u providera (jedyne zrodlo prawdy)
        3. Pod lockiem usera: ponowny guard + koszyk wyliczony od nowa
        4. Jedna transakcja: purchase + linie + entitlements + liczniki + czyszczenie koszyka
        """
        existing = self.repo.get_by_provider_id(provider_id)
        if existing:
            return self._replay(existing, user_id)

        status = self.gateway.retrieve_status(provider_id)
        if status.status != IntentState.SUCCEEDED:
            logger.info(f"Finalize rejected for {provider_id}: status {status.status.value}")
            raise PaymentNotCompleted(provider_id, status.status.value)

        with self.cart_service.lock_service.user_lock(user_id):
            # inny request mogl zacommitowac miedzy guardem a lockiem
            existing = self.repo.get_by_provider_id(provider_id)
            if existing:
                return self._replay(existing, user_id)

            snapshot = self.cart_service.snapshot(user_id)
            if snapshot.is_empty:
                raise EmptyCart()

            owned = self.entitlements.owned_among(user_id, snapshot.track_ids)
            if owned:
                raise AlreadyOwned(min(owned))

            expected = to_minor_units(snapshot.total)
            if status.charged_amount_minor_units < expected:
                logger.warning(
                    f"Finalize rejected for {provider_id}: charged "
                    f"{status.charged_amount_minor_units}, cart requires {expected}"
                )
                raise PaymentAmountMismatch(provider_id, status.charged_amount_minor_units, expected)

            purchase = PurchaseModel(
                user_id=user_id,
                total_amount=snapshot.total,
                currency=self.currency,
                payment_provider_id=provider_id,
                status=PurchaseStatus.COMPLETED.value,
                transaction_ref=status.transaction_ref,
                lines=[
                    PurchaseLineModel(track_id=line.track_id, price_at_purchase=line.price)
                    for line in snapshot.items
                ],
            )

            try:
                self.repo.add_purchase(purchase)
                self.entitlements.add_entitlements(
                    [
                        EntitlementModel(
                            user_id=user_id,
                            track_id=line.track_id,
                            purchase_id=purchase.id,
                            payment_provider_id=provider_id,
                        )
                        for line in snapshot.items
                    ]
                )
                self.stats.increment_purchase_counts(snapshot.track_ids)
                self.cart_service.repo.delete_cart_items(user_id)
                self.cart_service.bump_version(user_id, snapshot.version)
                self.cart_service.repo.commit()
            except IntegrityError:
                self.db.rollback()
                # unique na payment_provider_id - ktos inny zacommitowal pierwszy
                existing = self.repo.get_by_provider_id(provider_id)
                if existing:
                    return self._replay(existing, user_id)
                raise StorageError(f"Finalize of {provider_id} conflicted")
            except OperationalError as e:
                self.db.rollback()
                raise StorageError(f"Finalize of {provider_id} failed: {e.orig}") from e

            result = FinalizeResult(
                purchase_id=purchase.id,
                tracks_entitled=len(snapshot.items),
                total_amount=snapshot.total,
            )

        logger.info(
            f"Purchase {result.purchase_id} committed for user {user_id} "
            f"({result.tracks_entitled} tracks, {result.total_amount} {self.currency}, {provider_id})"
        )
        return result

    def _replay(self, purchase: PurchaseModel, user_id: int) -> FinalizeResult:
        if purchase.user_id != user_id:
            #provider_id zuzyty przez innego usera
            raise UnknownPaymentIntent(purchase.payment_provider_id)

        logger.info(f"Payment {purchase.payment_provider_id} already finalized as purchase {purchase.id}")
        return FinalizeResult(
            purchase_id=purchase.id,
            tracks_entitled=len(purchase.lines),
            total_amount=purchase.total_amount,
            already_finalized=True,
        )

    def get_purchase(self, purchase_id: int, user_id: int) -> Dict[str, Any]:
        purchase = self.repo.get_purchase(purchase_id)

        # cudzy zakup wyglada tak samo jak brak zakupu
        if not purchase or purchase.user_id != user_id:
            raise PurchaseNotFound()

        return purchase_to_dict(purchase)

    def list_purchases(self, user_id: int) -> List[Dict[str, Any]]:
        return [purchase_to_dict(p) for p in self.repo.list_for_user(user_id)]

    def library(self, user_id: int) -> List[Dict[str, Any]]:
        return [
            {
                "track_id": e.track_id,
                "purchase_id": e.purchase_id,
                "purchase_date": e.purchase_date,
                "payment_provider_id": e.payment_provider_id,
            }
            for e in self.entitlements.list_for_user(user_id)
        ]
