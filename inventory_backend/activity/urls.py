# activity/urls.py

from django.urls import include, path
from rest_framework.routers import SimpleRouter

from activity.views import ActivityLogViewSet

router = SimpleRouter()
router.register(r"", ActivityLogViewSet, basename="activity")

urlpatterns = [
    path("", include(router.urls)),
]
