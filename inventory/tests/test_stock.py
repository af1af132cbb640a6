import logging

import pytest
from common.exceptions import InsufficientStock, InvariantViolation, NotFound, ValidationError
from django.db import IntegrityError, transaction
from inventory import stock
from inventory.models import InventoryItem
from inventory.tests.factories import InventoryItemFactory


@pytest.mark.django_db
def test_reserve_decrements_available_only():
    item = InventoryItemFactory(total_quantity=5)

    stock.reserve(item_id=item.id, quantity=2)
    item.refresh_from_db()
    assert item.available_quantity == 3
    assert item.total_quantity == 5
    assert item.committed_quantity == 2


@pytest.mark.django_db
def test_reserve_insufficient_leaves_stock_untouched():
    item = InventoryItemFactory(total_quantity=2)

    with pytest.raises(InsufficientStock) as exc:
        stock.reserve(item_id=item.id, quantity=3)
    assert "2 unit(s)" in str(exc.value)
    item.refresh_from_db()
    assert item.available_quantity == 2


@pytest.mark.django_db
def test_reserve_exact_remaining_then_nothing_left():
    item = InventoryItemFactory(total_quantity=3)
    stock.reserve(item_id=item.id, quantity=3)
    with pytest.raises(InsufficientStock):
        stock.reserve(item_id=item.id, quantity=1)
    assert stock.available_or_zero(item.id) == 0


@pytest.mark.django_db
@pytest.mark.parametrize("quantity", [0, -1, True, "2"])
def test_reserve_rejects_non_positive_quantities(quantity):
    item = InventoryItemFactory()
    with pytest.raises(ValidationError):
        stock.reserve(item_id=item.id, quantity=quantity)


@pytest.mark.django_db
def test_reserve_and_release_unknown_item():
    with pytest.raises(NotFound):
        stock.reserve(item_id=999999, quantity=1)
    with pytest.raises(NotFound):
        stock.release(item_id=999999, quantity=1)


@pytest.mark.django_db
def test_release_credits_back():
    item = InventoryItemFactory(total_quantity=5, available_quantity=1)
    assert stock.release(item_id=item.id, quantity=3) == 4
    item.refresh_from_db()
    assert item.available_quantity == 4


@pytest.mark.django_db
def test_release_is_clamped_at_total_and_warns(caplog):
    item = InventoryItemFactory(total_quantity=5, available_quantity=4)

    with caplog.at_level(logging.WARNING, logger="assetdesk.inventory"):
        assert stock.release(item_id=item.id, quantity=3) == 5
    item.refresh_from_db()
    assert item.available_quantity == 5
    assert any(r.getMessage() == "stock.release_clamped" for r in caplog.records)


@pytest.mark.django_db
def test_set_total_moves_available_by_delta():
    item = InventoryItemFactory(total_quantity=5, available_quantity=3)

    item = stock.set_total_quantity(item_id=item.id, total_quantity=8)
    assert (item.total_quantity, item.available_quantity) == (8, 6)

    item = stock.set_total_quantity(item_id=item.id, total_quantity=2)
    assert (item.total_quantity, item.available_quantity) == (2, 0)


@pytest.mark.django_db
def test_set_total_below_committed_is_rejected():
    item = InventoryItemFactory(total_quantity=5, available_quantity=2)

    with pytest.raises(InvariantViolation):
        stock.set_total_quantity(item_id=item.id, total_quantity=2)
    item.refresh_from_db()
    assert (item.total_quantity, item.available_quantity) == (5, 2)

    with pytest.raises(ValidationError):
        stock.set_total_quantity(item_id=item.id, total_quantity=-1)


@pytest.mark.django_db
def test_database_rejects_available_above_total():
    item = InventoryItemFactory(total_quantity=2)
    with pytest.raises(IntegrityError):
        with transaction.atomic():
            InventoryItem.objects.filter(pk=item.id).update(available_quantity=3)
