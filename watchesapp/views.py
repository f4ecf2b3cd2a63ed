import logging

from rest_framework import viewsets, status, filters
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny

from timeless.errors import ConflictError, NotFoundError, require_fields
from timeless.policy import Actor, require_admin
from .models import Brand, Watch
from .serializer import BrandSerializer, WatchSerializer

logger = logging.getLogger(__name__)

WATCH_FIELDS = ['model', 'year', 'rental_day_price', 'condition', 'quantity', 'brand_id']


class BrandViewSet(viewsets.ModelViewSet):
    """
    Watch manufacturers.
    Anyone can browse brands, only admins can change them.
    """
    queryset = Brand.objects.all().order_by('brand_name')
    serializer_class = BrandSerializer
    http_method_names = ['get', 'post', 'put', 'patch', 'delete', 'head', 'options']

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [AllowAny]
        else:
            permission_classes = [IsAuthenticated]
        return [permission() for permission in permission_classes]

    def get_object(self):
        try:
            return Brand.objects.get(pk=self.kwargs['pk'])
        except (Brand.DoesNotExist, ValueError):
            raise NotFoundError('Brand not found')

    def check_unique_name(self, brand_name, exclude_pk=None):
        brands = Brand.objects.filter(brand_name__iexact=brand_name.strip())
        if exclude_pk is not None:
            brands = brands.exclude(pk=exclude_pk)
        if brands.exists():
            raise ConflictError('Brand already exists')

    def create(self, request, *args, **kwargs):
        """Create a new brand - Only for admin"""
        require_admin(Actor.from_user(request.user))
        require_fields(request.data, ['brand_name'])
        self.check_unique_name(request.data['brand_name'])

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Rename a brand - Only for admin"""
        require_admin(Actor.from_user(request.user))
        require_fields(request.data, ['brand_name'])
        brand = self.get_object()
        self.check_unique_name(request.data['brand_name'], exclude_pk=brand.pk)

        serializer = self.get_serializer(brand, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Delete a brand that no watch refers to - Only for admin"""
        require_admin(Actor.from_user(request.user))
        brand = self.get_object()

        if brand.watches.exists():
            raise ConflictError('Brand is still used by existing watches')

        brand.delete()
        return Response({'message': 'Brand removed'}, status=status.HTTP_200_OK)


class WatchViewSet(viewsets.ModelViewSet):
    """
    Rentable watch inventory.
    Anyone can browse watches, only admins can change them.
    """
    queryset = Watch.objects.select_related('brand').all()
    serializer_class = WatchSerializer
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ['model', 'brand__brand_name', 'description']
    ordering_fields = ['created_at', 'rental_day_price', 'year']
    ordering = ['-created_at']

    def get_permissions(self):
        if self.action in ['list', 'retrieve']:
            permission_classes = [AllowAny]
        else:
            permission_classes = [IsAuthenticated]
        return [permission() for permission in permission_classes]

    def get_object(self):
        try:
            return self.get_queryset().get(pk=self.kwargs['pk'])
        except (Watch.DoesNotExist, ValueError):
            raise NotFoundError('Watch not found')

    def ensure_brand(self, brand_id):
        try:
            found = Brand.objects.filter(pk=brand_id).exists()
        except (ValueError, TypeError):
            found = False
        if not found:
            raise NotFoundError('Brand not found')

    def create(self, request, *args, **kwargs):
        """Add a watch to the inventory - Only for admin"""
        require_admin(Actor.from_user(request.user))
        require_fields(request.data, WATCH_FIELDS)
        self.ensure_brand(request.data['brand_id'])

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        watch = serializer.save()

        logger.info('Created watch %s with quantity %s', watch.pk, watch.quantity)
        return Response(serializer.data, status=status.HTTP_201_CREATED)

    def update(self, request, *args, **kwargs):
        """Update watch details - Only for admin"""
        require_admin(Actor.from_user(request.user))
        watch = self.get_object()
        if request.data.get('brand_id') is not None:
            self.ensure_brand(request.data['brand_id'])

        serializer = self.get_serializer(watch, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, *args, **kwargs):
        """Remove a watch - Only for admin"""
        require_admin(Actor.from_user(request.user))
        watch = self.get_object()
        watch.delete()

        logger.info('Deleted watch %s', kwargs.get('pk'))
        return Response({'message': 'Watch removed'}, status=status.HTTP_200_OK)
