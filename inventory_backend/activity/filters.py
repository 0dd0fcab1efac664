# activity/filters.py

import django_filters

from activity.models import ActivityLog


class ActivityLogFilter(django_filters.FilterSet):
    activity = django_filters.ChoiceFilter(choices=ActivityLog.Activity.choices)
    actor = django_filters.CharFilter(lookup_expr="iexact")
    date_from = django_filters.DateFilter(field_name="timestamp", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="timestamp", lookup_expr="date__lte")

    class Meta:
        model = ActivityLog
        fields = ["activity", "actor", "date_from", "date_to"]
