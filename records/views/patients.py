"""
Patient views.

Administrative staff register and update patients; every authenticated
staff member may read them.  Patients are never deleted through the
API.  The timeline endpoint returns the merged, most-recent-first
history used by the clinical record screen.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import AdministrativeWriteOrReadOnly
from records.serializers.patient import (
    PatientCreateSerializer,
    PatientListQuerySerializer,
    PatientSearchSerializer,
    PatientUpdateSerializer,
)
from records.services.patients import (
    create_patient,
    find_patient,
    get_patient_or_404,
    latest_patients,
    list_patients,
    patient_timeline,
    serialize_patient,
    serialize_patient_detail,
    update_patient,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AdministrativeWriteOrReadOnly])
def patients_collection(request):
    if request.method == 'POST':
        s = PatientCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            patient, admission = create_patient(request.user, s.validated_data)
        except ValueError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
        return Response({'ok': True, 'data': serialize_patient(patient), 'admisionInicialId': admission.id},
                        status=201)

    q = PatientListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    page = q.validated_data.get('page') or 1
    page_size = q.validated_data.get('pageSize') or 20
    data, total = list_patients(q.validated_data.get('q'), page, page_size)
    return Response({'ok': True, 'data': data,
                     'pagination': {'total': total, 'page': page, 'pageSize': page_size}})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def recent_patients(request):
    """The ten most recently registered patients."""
    return Response({'ok': True, 'data': latest_patients(10)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def search_patient(request):
    """Exact lookup by ``ci`` or ``nroHistoria``."""
    s = PatientSearchSerializer(data=request.query_params)
    s.is_valid(raise_exception=True)
    patient = find_patient(ci=s.validated_data.get('ci'), nro_historia=s.validated_data.get('nroHistoria'))
    if not patient:
        return Response({'ok': False, 'detail': 'Paciente no encontrado'}, status=404)
    return Response({'ok': True, 'data': serialize_patient_detail(patient)})


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, AdministrativeWriteOrReadOnly])
def patient_detail(request, pk: int):
    patient = get_patient_or_404(pk)
    if request.method == 'PUT':
        s = PatientUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        patient = update_patient(request.user, patient, s.validated_data)
    return Response({'ok': True, 'data': serialize_patient_detail(patient)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def patient_timeline_view(request, pk: int):
    patient = get_patient_or_404(pk)
    events = patient_timeline(patient)
    return Response({'ok': True, 'pacienteId': patient.id, 'count': len(events), 'data': events})
