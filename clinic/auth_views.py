"""
Authentication views.

Registration, username/password login and access-token refresh.  All
three are public routes in the access policy.  They authenticate with
``OptionalBearerJWTAuthentication``: a leftover expired header is
ignored, while a bad credential still surfaces as a 401 rather than a
403.
"""
from __future__ import annotations

from rest_framework import status
from rest_framework.decorators import api_view, authentication_classes
from rest_framework.response import Response

from .authentication import OptionalBearerJWTAuthentication
from .serializers.auth import LoginSerializer, RefreshSerializer, RegisterSerializer
from .services import auth as auth_service


@api_view(['POST'])
@authentication_classes([OptionalBearerJWTAuthentication])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    payload = auth_service.register(
        username=vd['username'],
        email=vd['email'],
        password=vd['password'],
        full_name=vd.get('fullName', ''),
        role=vd['role'],
    )
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@authentication_classes([OptionalBearerJWTAuthentication])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    vd = s.validated_data
    return Response(auth_service.login(request, username=vd['username'], password=vd['password']))


@api_view(['POST'])
@authentication_classes([OptionalBearerJWTAuthentication])
def refresh_view(request):
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    return Response(auth_service.refresh(s.validated_data['refreshToken']))
