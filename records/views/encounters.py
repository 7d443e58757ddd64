"""
Encounter views.

Physicians record encounters; any staff member may read them.  There is
no update or delete: the clinical record is append-only.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import ClinicalWriteOrReadOnly
from records.serializers.encounter import EncounterCreateSerializer, EncounterFromAppointmentSerializer
from records.services.encounters import (
    ENCOUNTER_TYPES,
    create_encounter,
    create_from_appointment,
    encounter_detail,
    encounters_by_type,
    encounters_for_patient,
    encounters_today,
    get_encounter_or_404,
    serialize_encounter,
)
from records.services.patients import get_patient_or_404


@api_view(['POST'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def encounter_create(request):
    s = EncounterCreateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        encounter = create_encounter(request.user, s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_encounter(encounter)}, status=201)


@api_view(['POST'])
@permission_classes([IsAuthenticated, ClinicalWriteOrReadOnly])
def encounter_from_appointment(request):
    """Attend an appointment; the appointment becomes COMPLETADA."""
    s = EncounterFromAppointmentSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    try:
        encounter = create_from_appointment(request.user, s.validated_data)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_encounter(encounter)}, status=201)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def encounters_by_patient(request, patient_id: int):
    patient = get_patient_or_404(patient_id)
    data = encounters_for_patient(patient.id)
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def encounters_of_today(request):
    data, fecha = encounters_today()
    return Response({'ok': True, 'data': data, 'count': len(data), 'fecha': fecha})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def encounters_of_type(request, tipo: str):
    try:
        data = encounters_by_type(tipo)
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e), 'tiposPermitidos': ENCOUNTER_TYPES}, status=400)
    return Response({'ok': True, 'data': data, 'count': len(data), 'tipo': tipo.upper()})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def encounter_detail_view(request, pk: int):
    return Response({'ok': True, 'data': encounter_detail(get_encounter_or_404(pk))})
