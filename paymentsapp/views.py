from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated

from timeless.policy import Actor
from .serializer import PaymentSerializer
from .services import PaymentService


class PaymentViewSet(viewsets.ViewSet):
    """
    Handles rental payments.
    """
    permission_classes = [IsAuthenticated]
    service_class = PaymentService

    def get_service(self):
        return self.service_class()

    def actor(self, request):
        return Actor.from_user(request.user)

    def create(self, request):
        """Pay for a rental - rental owner or admin"""
        payment = self.get_service().create_payment(
            self.actor(request),
            request.data.get('rental_id'),
            request.data.get('amount'),
            request.data.get('payment_method'),
            transaction_id=request.data.get('transaction_id'),
            comment=request.data.get('comment'),
        )
        return Response(PaymentSerializer(payment).data, status=status.HTTP_201_CREATED)

    def list(self, request):
        """List all payments - Only for admin"""
        payments = self.get_service().list_payments(self.actor(request))
        return Response(PaymentSerializer(payments, many=True).data)

    @action(detail=False, methods=['get'], url_path='user/me')
    def my_payments(self, request):
        """Get all payments for the current user's rentals"""
        payments = self.get_service().list_own_payments(self.actor(request))
        return Response(PaymentSerializer(payments, many=True).data)

    def retrieve(self, request, pk=None):
        payment = self.get_service().get_payment(self.actor(request), pk)
        return Response(PaymentSerializer(payment).data)

    def partial_update(self, request, pk=None):
        """Update payment status - Only for admin"""
        payment = self.get_service().update_payment_status(
            self.actor(request),
            pk,
            request.data.get('payment_status'),
            transaction_id=request.data.get('transaction_id'),
        )
        return Response(PaymentSerializer(payment).data)

    def destroy(self, request, pk=None):
        """Delete a payment - Only for admin"""
        self.get_service().delete_payment(self.actor(request), pk)
        return Response({'message': 'Payment removed'}, status=status.HTTP_200_OK)
