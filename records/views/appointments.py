"""
Appointment views.
"""
from __future__ import annotations

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from records.permissions import AdministrativeWriteOrReadOnly, IsStaff
from records.serializers.appointment import (
    AppointmentCreateSerializer,
    AppointmentListQuerySerializer,
    AppointmentStatusSerializer,
)
from records.services.appointments import (
    change_status,
    create_appointment,
    get_appointment_or_404,
    list_appointments,
    serialize_appointment,
)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, AdministrativeWriteOrReadOnly])
def appointments_collection(request):
    if request.method == 'POST':
        s = AppointmentCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        try:
            cita = create_appointment(request.user, s.validated_data)
        except ValueError as e:
            return Response({'ok': False, 'detail': str(e)}, status=400)
        return Response({'ok': True, 'data': serialize_appointment(cita)}, status=201)

    q = AppointmentListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    data = list_appointments(
        fecha=q.validated_data.get('fecha'),
        estado=q.validated_data.get('estado'),
        paciente_id=q.validated_data.get('pacienteId'),
    )
    return Response({'ok': True, 'data': data, 'count': len(data)})


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def appointment_detail(request, pk: int):
    return Response({'ok': True, 'data': serialize_appointment(get_appointment_or_404(pk))})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsStaff])
def appointment_status(request, pk: int):
    """Complete or cancel a scheduled appointment."""
    s = AppointmentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    cita = get_appointment_or_404(pk)
    try:
        cita = change_status(request.user, cita, s.validated_data['estado'])
    except ValueError as e:
        return Response({'ok': False, 'detail': str(e)}, status=400)
    return Response({'ok': True, 'data': serialize_appointment(cita)})
