import logging

from django.db import transaction
from rest_framework import viewsets, status
from rest_framework.decorators import action
from rest_framework.response import Response
from rest_framework.permissions import IsAuthenticated, AllowAny

from rentalsapp.services import RentalService
from timeless.authentication import issue_token
from timeless.errors import ConflictError, NotFoundError, UnauthorizedError, ValidationError, require_fields
from timeless.policy import Actor, READ, UPDATE, DELETE, authorize, require_admin
from .models import Address, User
from .serializer import (
    AddressSerializer, UserSerializer, RegisterSerializer, ProfileUpdateSerializer, RoleSerializer,
)

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ['street_address', 'suburb', 'state', 'postcode']
USER_FIELDS = ['first_name', 'last_name', 'email', 'phone_number', 'password']
REGISTRATION_FIELDS = ['first_name', 'last_name', 'email', 'password'] + ADDRESS_FIELDS


def email_taken(email, exclude_pk=None):
    users = User.objects.filter(email__iexact=email)
    if exclude_pk is not None:
        users = users.exclude(pk=exclude_pk)
    return users.exists()


class UserViewSet(viewsets.GenericViewSet):
    """
    User registration, authentication, and profile management.
    """
    queryset = User.objects.select_related('address').order_by('-created_at')
    serializer_class = UserSerializer

    def get_permissions(self):
        if self.action in ['register', 'login']:
            permission_classes = [AllowAny]
        else:
            permission_classes = [IsAuthenticated]
        return [permission() for permission in permission_classes]

    def get_user(self, pk):
        try:
            return self.get_queryset().get(pk=pk)
        except (User.DoesNotExist, ValueError):
            raise NotFoundError('User not found')

    @action(detail=False, methods=['post'])
    def register(self, request):
        """Register a new user together with their address"""
        data = request.data
        require_fields(data, REGISTRATION_FIELDS)

        serializer = RegisterSerializer(data={field: data[field] for field in USER_FIELDS if field in data})
        serializer.is_valid(raise_exception=True)
        if email_taken(serializer.validated_data['email']):
            raise ConflictError('User with this email already exists')

        address_serializer = AddressSerializer(data={field: data[field] for field in ADDRESS_FIELDS})
        address_serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            address = address_serializer.save()
            user = serializer.save(address=address)

        logger.info('Registered user %s', user.pk)
        token = issue_token(user)
        return Response(
            {
                'message': 'User registered successfully',
                'token': token.key,
                'user': UserSerializer(user).data
            },
            status=status.HTTP_201_CREATED
        )

    @action(detail=False, methods=['post'])
    def login(self, request):
        """Authenticate user and return token"""
        email = request.data.get('email')
        password = request.data.get('password')

        if not email or not password:
            raise ValidationError('Email and password are required')
        if not isinstance(email, str) or not isinstance(password, str):
            raise ValidationError('Email and password must be text')

        try:
            user = User.objects.select_related('address').get(email__iexact=email.strip())
        except User.DoesNotExist:
            raise UnauthorizedError('Invalid email or password')

        if not user.is_active or not user.check_password(password):
            raise UnauthorizedError('Invalid email or password')

        token = issue_token(user)

        return Response(
            {
                'token': token.key,
                'user': UserSerializer(user).data
            },
            status=status.HTTP_200_OK
        )

    @action(detail=False, methods=['get', 'patch'])
    def profile(self, request):
        """Get or update the current user's profile"""
        user = request.user
        if request.method == 'GET':
            return Response(UserSerializer(user).data)

        data = request.data
        serializer = ProfileUpdateSerializer(user, data=data, partial=True)
        serializer.is_valid(raise_exception=True)

        email = serializer.validated_data.get('email')
        if email and email_taken(email, exclude_pk=user.pk):
            raise ConflictError('User with this email already exists')

        address_data = {field: data[field] for field in ADDRESS_FIELDS if data.get(field)}
        with transaction.atomic():
            if address_data:
                if user.address is not None:
                    address_serializer = AddressSerializer(user.address, data=address_data, partial=True)
                else:
                    address_serializer = AddressSerializer(data=address_data)
                address_serializer.is_valid(raise_exception=True)
                user.address = address_serializer.save()
            user = serializer.save()

        return Response(
            {
                'message': 'Profile updated successfully',
                'token': issue_token(user).key,
                'user': UserSerializer(user).data
            },
            status=status.HTTP_200_OK
        )

    def list(self, request):
        """List every user - Only for admin"""
        require_admin(Actor.from_user(request.user))
        return Response(UserSerializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        """Get one user - Only for admin"""
        require_admin(Actor.from_user(request.user))
        return Response(UserSerializer(self.get_user(pk)).data)

    def destroy(self, request, pk=None):
        """Delete a user - Only for admin"""
        actor = Actor.from_user(request.user)
        require_admin(actor)
        user = self.get_user(pk)

        # the user's rentals go too, so their units return to stock first
        rentals = RentalService()
        with transaction.atomic():
            for rental_id in list(rentals.rentals.ids_for_user(user.pk)):
                rentals.delete_rental(actor, rental_id)
            user.delete()
        logger.info('Deleted user %s', pk)
        return Response({'message': 'User removed'}, status=status.HTTP_200_OK)

    @action(detail=True, methods=['patch'])
    def role(self, request, pk=None):
        """Change a user's role - Only for admin"""
        require_admin(Actor.from_user(request.user))
        user = self.get_user(pk)

        serializer = RoleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user.role = serializer.validated_data['role']
        user.save(update_fields=['role', 'updated_at'])

        logger.info('User %s role set to %s', user.pk, user.role)
        return Response(
            {
                'message': 'User role updated',
                'user': UserSerializer(user).data
            },
            status=status.HTTP_200_OK
        )


class AddressViewSet(viewsets.GenericViewSet):
    """
    Postal addresses. Each user owns the address linked to their profile.
    """
    queryset = Address.objects.all().order_by('-created_at')
    serializer_class = AddressSerializer
    permission_classes = [IsAuthenticated]

    def get_address(self, pk):
        try:
            return Address.objects.get(pk=pk)
        except (Address.DoesNotExist, ValueError):
            raise NotFoundError('Address not found')

    def owner_of(self, address):
        resident = address.residents.order_by('pk').first()
        return resident.pk if resident else None

    def create(self, request):
        """Create an address and link it to the current user"""
        require_fields(request.data, ADDRESS_FIELDS)
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        with transaction.atomic():
            address = serializer.save()
            request.user.address = address
            request.user.save(update_fields=['address', 'updated_at'])

        return Response(self.get_serializer(address).data, status=status.HTTP_201_CREATED)

    def list(self, request):
        """List every address - Only for admin"""
        require_admin(Actor.from_user(request.user))
        return Response(self.get_serializer(self.get_queryset(), many=True).data)

    def retrieve(self, request, pk=None):
        address = self.get_address(pk)
        authorize(Actor.from_user(request.user), READ, self.owner_of(address),
                  message='Not authorized to view this address')
        return Response(self.get_serializer(address).data)

    def partial_update(self, request, pk=None):
        address = self.get_address(pk)
        authorize(Actor.from_user(request.user), UPDATE, self.owner_of(address),
                  message='Not authorized to update this address')

        serializer = self.get_serializer(address, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)

    def destroy(self, request, pk=None):
        address = self.get_address(pk)
        authorize(Actor.from_user(request.user), DELETE, self.owner_of(address),
                  message='Not authorized to delete this address')
        address.delete()
        return Response({'message': 'Address deleted successfully'}, status=status.HTTP_200_OK)
