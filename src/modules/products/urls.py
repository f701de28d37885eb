"""Products URL configuration.

Mounted under ``/api/v1/``: ``products/`` (list, create) and
``products/{id}/`` (retrieve, update, delete).
"""

from __future__ import annotations

from rest_framework.routers import SimpleRouter

from modules.products.views import ProductViewSet

router = SimpleRouter(trailing_slash=True)
router.register("products", ProductViewSet, basename="product")

urlpatterns = router.urls
