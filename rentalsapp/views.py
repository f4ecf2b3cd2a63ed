from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from timeless.policy import Actor
from .serializer import RentalSerializer, RentalDetailSerializer
from .services import RentalService


class RentalViewSet(viewsets.ViewSet):
    """
    Handles watch rentals.
    - Users rent watches and see their own rentals
    - Admins see every rental, move it through its statuses and delete it
    """
    permission_classes = [IsAuthenticated]
    service_class = RentalService

    def get_service(self):
        return self.service_class()

    def actor(self, request):
        return Actor.from_user(request.user)

    def create(self, request):
        """Rent one unit of a watch"""
        rental = self.get_service().create_rental(
            self.actor(request),
            request.data.get('watch_id'),
            request.data.get('rental_days'),
            collection_mode=request.data.get('collection_mode'),
        )
        return Response(RentalSerializer(rental).data, status=status.HTTP_201_CREATED)

    def list(self, request):
        """List all rentals - Only for admin"""
        rentals = self.get_service().list_rentals(self.actor(request))
        return Response(RentalDetailSerializer(rentals, many=True).data)

    @action(detail=False, methods=['get'], url_path='user')
    def my_rentals(self, request):
        """Get all rentals for the current user"""
        rentals = self.get_service().list_own_rentals(self.actor(request))
        return Response(RentalDetailSerializer(rentals, many=True).data)

    def retrieve(self, request, pk=None):
        rental = self.get_service().get_rental(self.actor(request), pk)
        return Response(RentalDetailSerializer(rental).data)

    def partial_update(self, request, pk=None):
        """Update rental status - Only for admin"""
        rental = self.get_service().update_rental_status(
            self.actor(request), pk, request.data.get('rental_status')
        )
        return Response(RentalSerializer(rental).data)

    def destroy(self, request, pk=None):
        """Delete a rental and put the watch back in stock - Only for admin"""
        self.get_service().delete_rental(self.actor(request), pk)
        return Response(
            {'message': 'Rental deleted successfully'},
            status=status.HTTP_200_OK
        )
