from django.urls import path

from .views import (
    CategoryMetadataView,
    ItemAvailabilityView,
    ItemDetailView,
    ItemExportView,
    ItemListCreateView,
)

urlpatterns = [
    path("items/", ItemListCreateView.as_view(), name="item-list"),
    path("items/export/", ItemExportView.as_view(), name="item-export"),
    path("items/<int:item_id>/", ItemDetailView.as_view(), name="item-detail"),
    path("items/<int:item_id>/availability/", ItemAvailabilityView.as_view(), name="item-availability"),
    path("categories/", CategoryMetadataView.as_view(), name="category-metadata"),
]

# EOF
