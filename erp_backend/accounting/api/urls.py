# accounting/api/urls.py

from django.urls import include, path
from rest_framework.routers import DefaultRouter

# Canonical ViewSets live in accounting/api/view.py (singular) in this project.
from accounting.api.view import JournalEntryViewSet
from accounting.api.views.accounts import ActiveChartAccountsView

router = DefaultRouter()
router.register("journal-entries", JournalEntryViewSet, basename="journal-entry")

urlpatterns = [
    path("", include(router.urls)),
    # Master data (read-only, chart-aware)
    path("accounts/", ActiveChartAccountsView.as_view(), name="accounts"),
]
