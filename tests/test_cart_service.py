from decimal import Decimal

import pytest

from app.domain.errors import (
    AlreadyInCart,
    AlreadyOwned,
    ConcurrentModification,
    TrackNotFound,
    TrackUnavailable,
)


def test_add_track_creates_cart(cart_service):
    cart = cart_service.add_track(7, 1)

    assert cart["user_id"] == 7
    assert [i["track_id"] for i in cart["items"]] == [1]
    assert cart["total"] == Decimal("1.99")
    assert cart["item_count"] == 1


def test_add_same_track_twice_rejected(cart_service):
    cart_service.add_track(7, 1)

    with pytest.raises(AlreadyInCart):
        cart_service.add_track(7, 1)

    cart = cart_service.get_cart(7)
    assert [i["track_id"] for i in cart["items"]] == [1]


def test_add_owned_track_rejected(cart_service, buy):
    buy(7, 1)

    with pytest.raises(AlreadyOwned):
        cart_service.add_track(7, 1)

    assert cart_service.get_cart(7)["items"] == []


def test_owned_track_rejected_even_with_other_items(cart_service, buy):
    buy(7, 1)
    cart_service.add_track(7, 2)

    with pytest.raises(AlreadyOwned):
        cart_service.add_track(7, 1)

    assert [i["track_id"] for i in cart_service.get_cart(7)["items"]] == [2]


def test_add_inactive_track_rejected(cart_service):
    with pytest.raises(TrackUnavailable):
        cart_service.add_track(7, 4)

    assert cart_service.get_cart(7)["items"] == []


def test_add_unknown_track_rejected(cart_service):
    with pytest.raises(TrackNotFound):
        cart_service.add_track(7, 999)


def test_remove_is_idempotent(cart_service):
    cart_service.add_track(7, 1)

    cart_service.remove_track(7, 1)
    cart = cart_service.remove_track(7, 1)

    assert cart["items"] == []
    # brak koszyka w ogole tez nie jest bledem
    assert cart_service.remove_track(8, 1)["items"] == []


def test_remove_bumps_version(cart_service):
    cart_service.add_track(7, 1)
    before = cart_service.snapshot(7).version

    cart_service.remove_track(7, 1)

    assert cart_service.snapshot(7).version == before + 1


def test_snapshot_total_and_order(cart_service):
    cart_service.add_track(7, 2)
    cart_service.add_track(7, 1)

    snapshot = cart_service.snapshot(7)

    assert snapshot.track_ids == [2, 1]
    assert snapshot.total == Decimal("4.48")


def test_snapshot_uses_current_catalog_price(cart_service, catalog):
    cart_service.add_track(7, 1)
    catalog.set_track(1, "3.00")

    assert cart_service.snapshot(7).total == Decimal("3.00")


def test_snapshot_reports_tracks_no_longer_available(cart_service, catalog):
    cart_service.add_track(7, 1)
    cart_service.add_track(7, 2)
    catalog.set_track(2, "2.49", active=False)

    snapshot = cart_service.snapshot(7)

    assert snapshot.track_ids == [1]
    assert snapshot.unavailable_track_ids == [2]
    assert snapshot.total == Decimal("1.99")


def test_clear_empties_cart(cart_service):
    cart_service.add_track(7, 1)
    cart_service.add_track(7, 2)

    cart = cart_service.clear(7)

    assert cart["items"] == []
    assert cart["total"] == Decimal("0.00")


def test_carts_are_per_user(cart_service):
    cart_service.add_track(7, 1)
    cart_service.add_track(8, 1)

    cart_service.clear(7)

    assert cart_service.get_cart(7)["items"] == []
    assert [i["track_id"] for i in cart_service.get_cart(8)["items"]] == [1]


def test_add_while_cart_locked_rejected(cart_service, lock_service):
    lock_service.held.add(7)

    with pytest.raises(ConcurrentModification):
        cart_service.add_track(7, 1)

    lock_service.held.discard(7)
    assert cart_service.get_cart(7)["items"] == []


def test_stale_version_rejected(cart_service):
    cart_service.add_track(7, 1)

    with pytest.raises(ConcurrentModification):
        cart_service.bump_version(7, 999)
