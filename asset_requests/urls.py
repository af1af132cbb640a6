from django.urls import path

from .views import (
    RequestApproveView,
    RequestCompleteView,
    RequestDetailView,
    RequestListCreateView,
    RequestRejectView,
)

urlpatterns = [
    path("", RequestListCreateView.as_view(), name="request-list"),
    path("<int:request_id>/", RequestDetailView.as_view(), name="request-detail"),
    path("<int:request_id>/approve/", RequestApproveView.as_view(), name="request-approve"),
    path("<int:request_id>/reject/", RequestRejectView.as_view(), name="request-reject"),
    path("<int:request_id>/complete/", RequestCompleteView.as_view(), name="request-complete"),
]

# EOF
