"""
Appointments: scheduling, listing and status changes.

Appointments are never deleted; cancelling one only changes its status.
A completed or cancelled appointment is final.
"""
from __future__ import annotations

import logging

from django.db import transaction
from rest_framework.exceptions import NotFound

from records.models import Appointment, Patient, User
from records.services.audit import safe_log_action
from records.services.dashboard import mark_stale

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS = {
    Appointment.ESTADO_PROGRAMADA: {Appointment.ESTADO_COMPLETADA, Appointment.ESTADO_CANCELADA},
    Appointment.ESTADO_COMPLETADA: set(),
    Appointment.ESTADO_CANCELADA: set(),
}


def serialize_appointment(c: Appointment) -> dict:
    medico = c.medico
    return {
        'id': c.id,
        'pacienteId': c.patient_id,
        'fecha': c.fecha.isoformat() if c.fecha else None,
        'hora': c.hora,
        'especialidad': c.especialidad,
        'medico': (
            {'id': medico.id, 'nombre': medico.display_name(), 'especialidad': medico.especialidad}
            if medico else None
        ),
        'motivo': c.motivo,
        'estado': c.estado,
        'createdAt': c.created_at.isoformat() if c.created_at else None,
    }


def get_appointment_or_404(pk) -> Appointment:
    cita = Appointment.objects.select_related('patient', 'medico').filter(id=pk).first()
    if not cita:
        raise NotFound('Cita no encontrada')
    return cita


def create_appointment(current_user, data: dict) -> Appointment:
    patient = Patient.objects.filter(id=data['pacienteId']).first()
    if not patient:
        raise NotFound('Paciente no encontrado')
    medico = None
    if data.get('medicoId'):
        medico = User.objects.filter(id=data['medicoId'], role=User.ROLE_MEDICO, is_active=True).first()
        if not medico:
            raise ValueError('El médico indicado no existe o no está activo')
    cita = Appointment.objects.create(
        patient=patient,
        fecha=data['fecha'],
        hora=data['hora'],
        especialidad=data['especialidad'],
        medico=medico,
        motivo=data.get('motivo', ''),
        created_by=current_user,
    )
    logger.info('appointment %s scheduled for patient %s on %s', cita.id, patient.id, cita.fecha)
    safe_log_action(user=current_user, action='appointment_create', object_type='appointment', object_id=cita.id,
                    detail={'pacienteId': patient.id, 'fecha': cita.fecha.isoformat()})
    mark_stale()
    return cita


def list_appointments(*, fecha=None, estado: str | None = None, paciente_id: int | None = None) -> list[dict]:
    qs = Appointment.objects.select_related('medico').order_by('fecha', 'hora', 'id')
    if fecha:
        qs = qs.filter(fecha=fecha)
    if estado:
        qs = qs.filter(estado=estado)
    if paciente_id:
        qs = qs.filter(patient_id=paciente_id)
    return [serialize_appointment(c) for c in qs]


def change_status(current_user, cita: Appointment, estado: str) -> Appointment:
    """Move an appointment to ``estado``. Raises ``ValueError`` on a forbidden move.

    The row is re-read under lock before the transition is checked.
    """
    with transaction.atomic():
        cita = Appointment.objects.select_for_update().get(pk=cita.pk)
        if estado == cita.estado:
            return cita
        if estado not in ALLOWED_TRANSITIONS.get(cita.estado, set()):
            raise ValueError(f'No se puede pasar una cita {cita.estado} a {estado}')
        previous = cita.estado
        cita.estado = estado
        cita.save(update_fields=['estado', 'updated_at'])
    logger.info('appointment %s: %s -> %s', cita.id, previous, estado)
    safe_log_action(user=current_user, action='appointment_status', object_type='appointment', object_id=cita.id,
                    detail={'from': previous, 'to': estado})
    mark_stale()
    return cita
