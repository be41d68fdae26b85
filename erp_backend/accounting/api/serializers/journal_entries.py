# accounting/api/serializers/journal_entries.py

from rest_framework import serializers

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    account_code = serializers.CharField(source="account.code", read_only=True)
    account_name = serializers.CharField(source="account.name", read_only=True)

    class Meta:
        model = JournalLine
        fields = (
            "line_number",
            "account",
            "account_code",
            "account_name",
            "description",
            "debit",
            "credit",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    lines = JournalLineSerializer(many=True, read_only=True)

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "entry_number",
            "entry_date",
            "description",
            "reference",
            "status",
            "source_type",
            "source_id",
            "total_debit",
            "total_credit",
            "created_at",
            "lines",
        )
        read_only_fields = fields
