"""Orders URL configuration.

Mounted under ``/api/v1/``: ``orders/`` (list, create) and
``orders/{id}/`` (retrieve, update, delete).
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.orders.views import OrderViewSet

router = SimpleRouter(trailing_slash=True)
router.register("orders", OrderViewSet, basename="order")

urlpatterns = router.urls
