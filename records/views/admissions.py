"""
Admission views: open emergency or hospitalization stays and discharge them.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import AdministrativeWriteOrReadOnly
from records.serializers.admission import AdmissionCreateSerializer, DischargeSerializer
from records.services.admissions import (
    active_admissions,
    admissions_for_patient,
    create_admission,
    discharge,
    get_admission_or_404,
    serialize_admission,
)
from records.services.patients import get_patient_or_404


@api_view(['POST'])
@permission_classes([IsAuthenticated, AdministrativeWriteOrReadOnly])
def admission_create(request):
    s = AdmissionCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    admission = create_admission(request.user, s.validated_data)
    return Response({'ok': True, 'data': serialize_admission(admission)}, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admissions_by_patient(request, patient_id: int):
    patient = get_patient_or_404(patient_id)
    data = admissions_for_patient(patient.id)
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def admissions_active(request):
    data = active_admissions()
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, AdministrativeWriteOrReadOnly])
def admission_discharge(request, pk: int):
    s = DischargeSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    admission = get_admission_or_404(pk)
    try:
        admission = discharge(request.user, admission, fecha_alta=s.validated_data.get('fechaAlta'),
                              observaciones=s.validated_data.get('observaciones'))
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_admission(admission)})
