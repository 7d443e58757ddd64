"""
Dashboard endpoints.

Each returns the statistics cards of its dashboard and the view modes
offered from the main view.  Payloads are cached briefly; pass
``?refresh=1`` to bypass the cache.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.navigation import AdminView, DoctorView, transition
from records.permissions import IsAdministrative, IsClinical
from records.services.dashboard import admin_dashboard, doctor_dashboard

VIEW_SETS = {'admin': AdminView, 'medico': DoctorView}


def _wants_refresh(request) -> bool:
    return str(request.query_params.get('refresh') or '').lower() in ('1', 'true')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdministrative])
def admin_dashboard_view(request):
    return Response(admin_dashboard(refresh=_wants_refresh(request)))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsClinical])
def doctor_dashboard_view(request):
    return Response(doctor_dashboard(request.user, refresh=_wants_refresh(request)))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def navigate_view(request, dashboard: str):
    """Resolve the next view mode: body ``{"current": "...", "action": "..."}``."""
    views = VIEW_SETS.get(dashboard)
    if views is None:
        return Response({'ok': False, 'detail': f'Dashboard desconocido: {dashboard}'}, status=404)
    try:
        current = views(request.data.get('current') or views.MAIN.value)
        target = transition(current, str(request.data.get('action') or ''))
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'view': target.value})
