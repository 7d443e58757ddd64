"""
Authentication views.

Staff log in with their username (or email) and password and receive
both a DRF token and a JWT pair.  Self-registration is gated by the
authorized-personnel whitelist: only a person whose national ID is on
the list, active and not yet used, may create an account, and only
with the role they were authorized for.
"""
from __future__ import annotations

import logging

from django.db import transaction
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView
from django.contrib.auth import authenticate

from records.models import User
from records.serializers.auth import LoginSerializer, RegisterSerializer
from records.services.audit import safe_log_action
from records.services.personnel import check_can_register

logger = logging.getLogger(__name__)


def serialize_user(user: User) -> dict:
    return {
        'id': user.id,
        'username': user.username,
        'email': user.email,
        'nombre': user.display_name(),
        'role': user.role,
        'ci': user.ci,
        'cargo': user.cargo,
        'especialidad': user.especialidad,
    }


def _token_payload(user: User) -> dict:
    token_obj, _ = Token.objects.get_or_create(user=user)
    refresh = RefreshToken.for_user(user)
    return {
        'ok': True,
        'token': token_obj.key,
        'jwt_access': str(refresh.access_token),
        'jwt_refresh': str(refresh),
        'role': user.role,
        'user': serialize_user(user),
    }


# ---------------------------------------------------------------------
# Username/password login
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login with username (or email) and password.
    Any ``role`` sent by the client is ignored.
    """
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    username = s.validated_data['username']
    password = s.validated_data['password']

    user = authenticate(request, username=username, password=password)
    if not user:
        logger.info('failed login for %s', username)
        safe_log_action(user=None, action='login', object_type='user', object_id=None,
                        detail={'result': 'fail', 'username': username, 'ip': request.META.get('REMOTE_ADDR')})
        return Response({'ok': False, 'detail': 'Usuario o contraseña incorrectos'}, status=400)

    safe_log_action(user=user, action='login', object_type='user', object_id=user.id,
                    detail={'result': 'ok', 'ip': request.META.get('REMOTE_ADDR')})
    return Response(_token_payload(user), status=200)


login_view.cls.throttle_scope = 'login'


# ---------------------------------------------------------------------
# Whitelist-gated self registration
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    s = RegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data

    if User.objects.filter(username__iexact=v['username']).exists():
        return Response({'ok': False, 'detail': 'El nombre de usuario ya está en uso'}, status=400)
    if User.objects.filter(email__iexact=v['email']).exists():
        return Response({'ok': False, 'detail': 'El email ya está registrado'}, status=400)
    if User.objects.filter(ci=v['ci']).exists():
        return Response({'ok': False, 'detail': 'Esta cédula ya tiene un usuario registrado'}, status=400)

    try:
        with transaction.atomic():
            entry = check_can_register(v['ci'], v['role'])
            user = User.objects.create_user(
                username=v['username'],
                email=v['email'],
                password=v['password'],
                role=v['role'],
                ci=v['ci'],
                nombre=v['nombre'],
                cargo=v.get('cargo') or entry.cargo,
                especialidad=v.get('especialidad', ''),
            )
            entry.registrado = True
            entry.save(update_fields=['registrado', 'updated_at'])
    except PermissionError as e:
        logger.info('registration refused for %s: %s', v['ci'], e)
        safe_log_action(user=None, action='register', object_type='user', object_id=None,
                        detail={'result': 'refused', 'ci': v['ci'], 'reason': str(e)})
        return Response({'ok': False, 'detail': str(e)}, status=403)

    logger.info('staff user %s registered as %s', user.username, user.role)
    safe_log_action(user=user, action='register', object_type='user', object_id=user.id,
                    detail={'result': 'ok', 'ci': user.ci, 'role': user.role})
    return Response(_token_payload(user), status=201)


register_view.cls.throttle_scope = 'register'


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me_view(request):
    return Response({'ok': True, 'user': serialize_user(request.user)})


# ---------------------------------------------------------------------
# JWT: refresh & logout
# ---------------------------------------------------------------------
@api_view(['POST'])
@permission_classes([AllowAny])
def jwt_refresh_view(request):
    """Return a new access token from refresh token."""
    view = TokenRefreshView.as_view()
    resp = view(request._request)
    if isinstance(resp, Response):
        data = dict(resp.data)
        if 'access' in data and 'jwt_access' not in data:
            data['jwt_access'] = data.pop('access')
        return Response(data, status=resp.status_code)
    return resp


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def jwt_logout_view(request):
    """Blacklist current user's refresh tokens (all or a given one)."""
    refresh = request.data.get('refresh')
    count = 0
    if refresh:
        try:
            RefreshToken(refresh).blacklist()
            count = 1
        except Exception as e:
            return Response({'ok': False, 'detail': f'Token inválido: {e}'}, status=400)
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    Token.objects.filter(user=request.user).delete()
    safe_log_action(user=request.user, action='logout', object_type='user', object_id=request.user.id,
                    detail={'blacklisted': count})
    return Response({'ok': True, 'blacklisted': count})
