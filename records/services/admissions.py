"""
Admissions: emergency and hospitalization stays, and discharge.
"""
from __future__ import annotations

import logging

from django.utils import timezone
from rest_framework.exceptions import NotFound

from records.models import Admission, Patient
from records.services.audit import safe_log_action
from records.services.dashboard import mark_stale

logger = logging.getLogger(__name__)


def serialize_admission(a: Admission) -> dict:
    return {
        'id': a.id,
        'pacienteId': a.patient_id,
        'tipo': a.tipo,
        'servicio': a.servicio,
        'fechaAdmision': a.fecha_admision.isoformat() if a.fecha_admision else None,
        'horaAdmision': a.hora_admision,
        'formaIngreso': a.forma_ingreso,
        'habitacion': a.habitacion,
        'cama': a.cama,
        'diagnostico': a.diagnostico,
        'observaciones': a.observaciones,
        'fechaAlta': a.fecha_alta.isoformat() if a.fecha_alta else None,
        'estado': a.estado,
        'createdAt': a.created_at.isoformat() if a.created_at else None,
    }


def get_admission_or_404(pk) -> Admission:
    admission = Admission.objects.select_related('patient').filter(id=pk).first()
    if not admission:
        raise NotFound('Admisión no encontrada')
    return admission


def create_admission(current_user, data: dict) -> Admission:
    patient = Patient.objects.filter(id=data['pacienteId']).first()
    if not patient:
        raise NotFound('Paciente no encontrado')
    admission = Admission.objects.create(
        patient=patient,
        tipo=data['tipo'],
        servicio=data['servicio'],
        fecha_admision=data['fechaAdmision'],
        hora_admision=data.get('horaAdmision'),
        forma_ingreso=data.get('formaIngreso') or 'AMBULANTE',
        habitacion=data.get('habitacion', ''),
        cama=data.get('cama', ''),
        diagnostico=data.get('diagnostico', ''),
        observaciones=data.get('observaciones', ''),
        created_by=current_user,
    )
    logger.info('admission %s (%s) opened for patient %s', admission.id, admission.tipo, patient.id)
    safe_log_action(user=current_user, action='admission_create', object_type='admission', object_id=admission.id,
                    detail={'pacienteId': patient.id, 'tipo': admission.tipo, 'servicio': admission.servicio})
    mark_stale()
    return admission


def discharge(current_user, admission: Admission, *, fecha_alta=None, observaciones: str | None = None) -> Admission:
    """Close an active admission. Raises ``ValueError`` if already discharged."""
    if admission.estado == Admission.ESTADO_ALTA:
        raise ValueError('La admisión ya fue dada de alta')
    fecha_alta = fecha_alta or timezone.localdate()
    if fecha_alta < admission.fecha_admision:
        raise ValueError('La fecha de alta no puede ser anterior a la admisión')
    admission.estado = Admission.ESTADO_ALTA
    admission.fecha_alta = fecha_alta
    update_fields = ['estado', 'fecha_alta']
    if observaciones:
        admission.observaciones = observaciones
        update_fields.append('observaciones')
    admission.save(update_fields=update_fields)
    logger.info('admission %s discharged on %s', admission.id, fecha_alta)
    safe_log_action(user=current_user, action='admission_discharge', object_type='admission',
                    object_id=admission.id, detail={'fechaAlta': fecha_alta.isoformat()})
    mark_stale()
    return admission


def admissions_for_patient(patient_id) -> list[dict]:
    qs = Admission.objects.filter(patient_id=patient_id).order_by('-fecha_admision', '-id')
    return [serialize_admission(a) for a in qs]


def active_admissions() -> list[dict]:
    """Open clinical stays (the initial registration admission is excluded)."""
    qs = (
        Admission.objects.select_related('patient')
        .filter(estado=Admission.ESTADO_ACTIVA, tipo__isnull=False)
        .order_by('-fecha_admision', '-id')
    )
    return [
        {
            **serialize_admission(a),
            'paciente': {'id': a.patient.id, 'nroHistoria': a.patient.nro_historia,
                         'apellidosNombres': a.patient.apellidos_nombres, 'ci': a.patient.ci},
        }
        for a in qs
    ]
