# activity/admin.py

from django.contrib import admin

from activity.models import ActivityLog


@admin.register(ActivityLog)
class ActivityLogAdmin(admin.ModelAdmin):
    list_display = ("timestamp", "activity", "actor", "description")
    list_filter = ("activity", "timestamp")
    search_fields = ("description", "actor")
    readonly_fields = ("activity", "description", "actor", "timestamp")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
