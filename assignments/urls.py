from django.urls import path

from .views import AssignmentListCreateView, AssignmentReturnView, MyAssignmentsView, OwnItemCreateView

urlpatterns = [
    path("", AssignmentListCreateView.as_view(), name="assignment-list"),
    path("mine/", MyAssignmentsView.as_view(), name="assignment-mine"),
    path("own-items/", OwnItemCreateView.as_view(), name="assignment-own-item"),
    path("<int:entry_id>/return/", AssignmentReturnView.as_view(), name="assignment-return"),
]

# EOF
