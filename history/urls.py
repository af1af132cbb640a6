from django.urls import path

from .views import HistoryExportView, HistoryListView

urlpatterns = [
    path("", HistoryListView.as_view(), name="history-list"),
    path("export/", HistoryExportView.as_view(), name="history-export"),
]

# EOF
