"""
Hospitalization format views.

Sections (``signos-vitales``, ``laboratorio``, ``orden-medica``,
``evolucion-medica``) share one set of add/update/delete handlers; the
section slug comes from the URL.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import ClinicalWriteOrReadOnly
from records.serializers.hospitalization import (
    AdmissionSummarySerializer,
    FormatCreateSerializer,
    FormatVitalSignsSerializer,
    LabResultSerializer,
    MedicalEvolutionSerializer,
    MedicalOrderSerializer,
)
from records.services.hospitalization import (
    add_entry,
    create_format,
    delete_entry,
    get_format_by_admission,
    get_format_or_404,
    get_section,
    medical_orders,
    serialize_entry,
    serialize_format,
    serialize_summary,
    update_entry,
    upsert_summary,
)

# section slug -> input serializer
SECTION_SERIALIZERS = {
    'signos-vitales': FormatVitalSignsSerializer,
    'laboratorio': LabResultSerializer,
    'orden-medica': MedicalOrderSerializer,
    'evolucion-medica': MedicalEvolutionSerializer,
}


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def format_by_admission(request, admision_id: int):
    return Response({'ok': True, 'data': serialize_format(get_format_by_admission(admision_id))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def format_create(request):
    s = FormatCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        formato = create_format(request.user, s.validated_data['admisionId'])
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_format(formato)}, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def section_add(request, pk: int, section: str):
    get_section(section)
    formato = get_format_or_404(pk)
    s = SECTION_SERIALIZERS[section](data=request.data)
    s.is_valid(raise_exception=True)
    sec, obj = add_entry(request.user, section, formato, s.validated_data)
    return Response({'ok': True, 'data': serialize_entry(sec, obj)}, status=201)


@api_view(['PUT', 'DELETE'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def section_entry(request, section: str, pk: int):
    get_section(section)
    if request.method == 'DELETE':
        delete_entry(request.user, section, pk)
        return Response(status=204)
    s = SECTION_SERIALIZERS[section](data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    sec, obj = update_entry(request.user, section, pk, s.validated_data)
    return Response({'ok': True, 'data': serialize_entry(sec, obj)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def format_orders(request, pk: int):
    data = medical_orders(get_format_or_404(pk))
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['PUT'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def format_summary(request, pk: int):
    formato = get_format_or_404(pk)
    s = AdmissionSummarySerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    summary = upsert_summary(request.user, formato, s.validated_data)
    return Response({'ok': True, 'data': serialize_summary(summary)})
