"""
Authorized-personnel whitelist management.

Every endpoint here is restricted to ``SUPER_ADMIN``.  Entries are
looked up by national ID; deleting an entry only deactivates it and a
reason is mandatory.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import IsSuperAdmin
from records.serializers.personnel import (
    AuthorizedPersonnelSerializer,
    AuthorizedPersonnelUpdateSerializer,
    DeactivateSerializer,
    PersonnelListQuerySerializer,
)
from records.services.personnel import (
    bulk_create_personnel,
    create_personnel,
    deactivate_personnel,
    get_by_ci_or_404,
    list_personnel,
    personnel_stats,
    serialize_personnel,
    update_personnel,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def personnel_collection(request):
    if request.method == 'POST':
        s = AuthorizedPersonnelSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            entry = create_personnel(request.user, s.validated_data)
        except ValueError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
        return Response({'ok': True, 'data': serialize_personnel(entry)}, status=201)

    q = PersonnelListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    data = list_personnel(
        estado=q.validated_data.get('estado'),
        rol=q.validated_data.get('rol'),
        registrado=q.validated_data.get('registrado'),
        departamento=q.validated_data.get('departamento'),
    )
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def personnel_stats_view(request):
    return Response({'ok': True, 'data': personnel_stats()})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def personnel_bulk(request):
    """Bulk load; each row succeeds or fails on its own."""
    try:
        result = bulk_create_personnel(request.user, request.data.get('personnel'))
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, **result}, status=201 if result['created'] else 200)


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsSuperAdmin])
def personnel_detail(request, ci: str):
    entry = get_by_ci_or_404(ci)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_personnel(entry)})

    if request.method == 'PUT':
        s = AuthorizedPersonnelUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        try:
            entry = update_personnel(request.user, entry, s.validated_data)
        except ValueError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
        return Response({'ok': True, 'data': serialize_personnel(entry)})

    s = DeactivateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        entry = deactivate_personnel(request.user, entry, s.validated_data['motivoBaja'])
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_personnel(entry)})
