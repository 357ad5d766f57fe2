from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .auth_views import ThrottledTokenObtainPairView, ThrottledTokenRefreshView
from .views import (
    AdminListingViewSet,
    HealthView,
    ListingViewSet,
    MeView,
    NotificationViewSet,
    ProvinceViewSet,
)

router = DefaultRouter()
router.register(r"provinces", ProvinceViewSet, basename="province")
router.register(r"listings", ListingViewSet, basename="listing")
router.register(r"admin/listings", AdminListingViewSet, basename="admin-listing")
router.register(r"notifications", NotificationViewSet, basename="notification")

urlpatterns = [
    path("health/", HealthView.as_view(), name="v1-health"),
    path("auth/token/", ThrottledTokenObtainPairView.as_view(), name="v1-token-obtain-pair"),
    path("auth/token/refresh/", ThrottledTokenRefreshView.as_view(), name="v1-token-refresh"),
    path("me/", MeView.as_view(), name="v1-me"),
    path("", include(router.urls)),
]
