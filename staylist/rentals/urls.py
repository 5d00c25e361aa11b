from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views_modules import (
    ListingViewSet, BookingViewSet, FavoriteViewSet, ReviewViewSet,
)

app_name = "rentals"

router = DefaultRouter()
router.register(r"listings", ListingViewSet, basename="listing")
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"favorites", FavoriteViewSet, basename="favorite")
router.register(r"reviews", ReviewViewSet, basename="review")

urlpatterns = [
    path("", include(router.urls)),
]
