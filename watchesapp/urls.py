from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import BrandViewSet, WatchViewSet

router = DefaultRouter(trailing_slash=False)
router.register(r'brands', BrandViewSet, basename='brand')
router.register(r'watches', WatchViewSet, basename='watch')

urlpatterns = [
    path('', include(router.urls)),
]
