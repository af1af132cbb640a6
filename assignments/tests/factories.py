import factory
from assignments.models import AssignmentLedgerEntry
from factory.django import DjangoModelFactory
from inventory.tests.factories import InventoryItemFactory
from users.tests.factories import AdminFactory, UserFactory


class AssignmentFactory(DjangoModelFactory):
    """Active ledger row; stock is not reserved, so pair with a matching item available count."""

    class Meta:
        model = AssignmentLedgerEntry

    employee = factory.SubFactory(UserFactory)
    item = factory.SubFactory(InventoryItemFactory)
    item_name = factory.LazyAttribute(lambda o: o.item.name)
    quantity = 1
    assigned_by = factory.SubFactory(AdminFactory)
