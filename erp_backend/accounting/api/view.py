# PATH: accounting/api/view.py

"""
PATH: accounting/api/view.py

ACCOUNTING API VIEWSETS (READ-ONLY / AUDIT SAFE)

- Journal entries are looked up by entry_number (the idempotency key):
    /api/accounting/journal-entries/DEP-202401-MACHINERY-.../
- Filters (django-filter): ?source_type=PR&status=posted&entry_date=2024-01-31
- Ordering fixed to newest first

Security rules:
- requires accounting.view_journalentry
"""

from drf_spectacular.utils import extend_schema
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.viewsets import ReadOnlyModelViewSet

from accounting.api.serializers import JournalEntrySerializer
from accounting.models.journal import JournalEntry


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(ReadOnlyModelViewSet):
    """
    Read-only access to journal entries and their lines.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = JournalEntrySerializer
    http_method_names = ["get", "head", "options"]
    lookup_field = "entry_number"
    lookup_value_regex = "[^/]+"
    filterset_fields = ("source_type", "source_id", "status", "entry_date")

    queryset = (
        JournalEntry.objects.prefetch_related("lines__account")
        .order_by("-entry_date", "-created_at")
    )

    def get_queryset(self):
        if not self.request.user.has_perm("accounting.view_journalentry"):
            raise PermissionDenied("You do not have permission to view journal entries.")
        return super().get_queryset()
