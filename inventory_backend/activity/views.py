# activity/views.py

"""
Read-only activity trail.

The ledger never reads its own audit trail back; this is for the
outer reporting layer only.
"""

from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from activity.filters import ActivityLogFilter
from activity.models import ActivityLog
from activity.serializers import ActivityLogSerializer


class ActivityLogViewSet(viewsets.ReadOnlyModelViewSet):
    queryset = ActivityLog.objects.all()
    serializer_class = ActivityLogSerializer
    permission_classes = [IsAuthenticated]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ActivityLogFilter
