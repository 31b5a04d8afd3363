import os

# engine aplikacji nie moze celowac w postgresa podczas testow
os.environ.setdefault("DATABASE_URL", "sqlite://")

from contextlib import contextmanager
from decimal import Decimal
from itertools import count

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from app.data.database import Base
from app.data.models import (  # noqa: F401
    CartModel,
    CartItemModel,
    PurchaseModel,
    PurchaseLineModel,
    EntitlementModel,
    TrackStatsModel,
)
from app.domain.errors import ConcurrentModification, GatewayUnavailable, TrackNotFound, UnknownPaymentIntent
from app.domain.types import IntentRef, IntentState, IntentStatus, TrackInfo
from app.services.cart_service import CartService
from app.services.purchase_service import PurchaseService
from app.services.access_service import AccessService


class FakeCatalog:
    """Katalog w pamieci zamiast HTTP."""

    def __init__(self):
        self.tracks = {}

    def set_track(self, track_id: int, price: str, active: bool = True):
        self.tracks[track_id] = TrackInfo(id=track_id, price=Decimal(price), active=active)

    def lookup(self, track_id: int) -> TrackInfo:
        if track_id not in self.tracks:
            raise TrackNotFound(track_id)
        return self.tracks[track_id]


class FakeGateway:
    """Bramka platnosci w pamieci; intenty startuja jako pending."""

    def __init__(self):
        self.intents = {}
        self.unavailable = False
        self.on_retrieve = None
        self._ids = count(1)

    def create_intent(self, amount_minor_units: int, currency: str, metadata: dict) -> IntentRef:
        if self.unavailable:
            raise GatewayUnavailable()
        provider_id = f"pi_test_{next(self._ids)}"
        self.intents[provider_id] = {
            "amount": amount_minor_units,
            "currency": currency,
            "metadata": metadata,
            "status": IntentState.PENDING,
            "charged": 0,
        }
        return IntentRef(provider_id=provider_id, client_secret=f"{provider_id}_secret")

    def succeed(self, provider_id: str, charged: int | None = None):
        intent = self.intents[provider_id]
        intent["status"] = IntentState.SUCCEEDED
        intent["charged"] = intent["amount"] if charged is None else charged

    def fail(self, provider_id: str):
        self.intents[provider_id]["status"] = IntentState.FAILED

    def retrieve_status(self, provider_id: str) -> IntentStatus:
        if self.unavailable:
            raise GatewayUnavailable()
        if provider_id not in self.intents:
            raise UnknownPaymentIntent(provider_id)
        if self.on_retrieve:
            hook, self.on_retrieve = self.on_retrieve, None
            hook(provider_id)
        intent = self.intents[provider_id]
        return IntentStatus(
            provider_id=provider_id,
            status=intent["status"],
            charged_amount_minor_units=intent["charged"],
            transaction_ref=f"ch_{provider_id}",
        )


class InMemoryLockService:
    """Per-user lock bez redisa; zajety lock = ConcurrentModification jak w LockService."""

    def __init__(self):
        self.held = set()

    @contextmanager
    def user_lock(self, user_id: int):
        if user_id in self.held:
            raise ConcurrentModification()
        self.held.add(user_id)
        try:
            yield
        finally:
            self.held.discard(user_id)


class FakePlayCounter:
    def __init__(self):
        self.plays = []

    def record_play(self, track_id: int):
        self.plays.append(track_id)


@pytest.fixture
def engine(tmp_path):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'store.db'}",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def catalog():
    catalog = FakeCatalog()
    catalog.set_track(1, "1.99")
    catalog.set_track(2, "2.49")
    catalog.set_track(3, "0.99")
    catalog.set_track(4, "1.49", active=False)
    return catalog


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def lock_service():
    return InMemoryLockService()


@pytest.fixture
def play_counter():
    return FakePlayCounter()


@pytest.fixture
def make_services(catalog, gateway, lock_service):
    """Zwraca (CartService, PurchaseService) na wspolnej sesji."""

    def _make(session):
        cart_service = CartService(db=session, catalog=catalog, lock_service=lock_service)
        purchase_service = PurchaseService(db=session, cart_service=cart_service, gateway=gateway)
        return cart_service, purchase_service

    return _make


@pytest.fixture
def cart_service(db, make_services):
    return make_services(db)[0]


@pytest.fixture
def purchase_service(db, make_services):
    return make_services(db)[1]


@pytest.fixture
def access_service(db, catalog, play_counter):
    return AccessService(read_db=db, catalog=catalog, play_counter=play_counter)


@pytest.fixture
def buy(cart_service, purchase_service, gateway):
    """Pelny flow zakupu: koszyk -> intent -> platnosc -> finalize."""

    def _buy(user_id: int, *track_ids: int):
        for track_id in track_ids:
            cart_service.add_track(user_id, track_id)
        intent = purchase_service.create_intent(user_id)
        gateway.succeed(intent["provider_id"])
        return intent["provider_id"], purchase_service.finalize(user_id, intent["provider_id"])

    return _buy
