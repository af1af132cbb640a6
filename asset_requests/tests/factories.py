import factory
from asset_requests.models import AssetRequest
from common.choices import Urgency
from factory import Faker
from factory.django import DjangoModelFactory
from inventory.tests.factories import InventoryItemFactory
from users.tests.factories import UserFactory


class AssetRequestFactory(DjangoModelFactory):
    """Pending request row; goes straight to the table, bypassing stock and history."""

    class Meta:
        model = AssetRequest

    employee = factory.SubFactory(UserFactory)
    item = factory.SubFactory(InventoryItemFactory)
    item_name = factory.LazyAttribute(lambda o: o.item.name if o.item else "Standing desk")
    category = factory.LazyAttribute(lambda o: o.item.category if o.item else "")
    quantity = 1
    urgency = Urgency.NORMAL
    notes = Faker("sentence")
