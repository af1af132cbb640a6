"""Admin employee directory routes grouped under /api/v1/employees."""

from django.urls import path

from .views import EmployeeDetailView, EmployeeExportView, EmployeeListView

urlpatterns = [
    path("", EmployeeListView.as_view(), name="employee-list"),
    path("export/", EmployeeExportView.as_view(), name="employee-export"),
    path("<int:pk>/", EmployeeDetailView.as_view(), name="employee-detail"),
]
