# activity/serializers.py

from rest_framework import serializers

from activity.models import ActivityLog


class ActivityLogSerializer(serializers.ModelSerializer):
    class Meta:
        model = ActivityLog
        fields = ["id", "activity", "description", "actor", "timestamp"]
        read_only_fields = fields
