from django.urls import path, include
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response


@api_view(['GET'])
@permission_classes([AllowAny])
def index(request):
    return Response({'message': 'Hello, world!'})


urlpatterns = [
    path('', index, name='index'),
    path('api/', include('usersapp.urls')),
    path('api/', include('watchesapp.urls')),
    path('api/', include('rentalsapp.urls')),
    path('api/', include('paymentsapp.urls')),
]
