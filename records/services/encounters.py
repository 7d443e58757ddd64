"""
Clinical encounters.

Encounters are append-only: there is no update or delete.  Creating one
from an appointment completes that appointment in the same transaction.
"""
from __future__ import annotations

import logging

from django.db import transaction
from django.utils import timezone
from rest_framework.exceptions import NotFound

from records.models import Admission, Appointment, DiagnosticImpression, Encounter, Patient, VitalSigns
from records.services.audit import safe_log_action
from records.services.dashboard import mark_stale

logger = logging.getLogger(__name__)

ENCOUNTER_TYPES = [c for c, _ in Encounter.TIPO_CHOICES]
BY_TYPE_LIMIT = 100


def _staff(user) -> dict | None:
    if user is None:
        return None
    return {
        'id': user.id,
        'nombre': user.display_name(),
        'cargo': user.cargo,
        'especialidad': user.especialidad,
        'role': user.role,
    }


def serialize_encounter(e: Encounter) -> dict:
    return {
        'id': e.id,
        'pacienteId': e.patient_id,
        'admisionId': e.admision_id,
        'citaId': e.cita_id,
        'tipo': e.tipo,
        'fecha': e.fecha.isoformat() if e.fecha else None,
        'hora': e.hora,
        'motivoConsulta': e.motivo_consulta,
        'enfermedadActual': e.enfermedad_actual,
        'procedencia': e.procedencia,
        'nroCama': e.nro_cama,
        'createdBy': _staff(e.created_by),
        'signosVitales': [
            {
                'id': sv.id,
                'taSistolica': sv.ta_sistolica,
                'taDiastolica': sv.ta_diastolica,
                'pulso': sv.pulso,
                'temperatura': str(sv.temperatura) if sv.temperatura is not None else None,
                'fr': sv.fr,
                'observaciones': sv.observaciones,
                'registradoEn': sv.registrado_en.isoformat() if sv.registrado_en else None,
            }
            for sv in e.signos_vitales.all()
        ],
        'impresiones': [
            {'id': i.id, 'codigoCie': i.codigo_cie, 'descripcion': i.descripcion, 'clase': i.clase}
            for i in e.impresiones.all()
        ],
    }


def _with_patient(e: Encounter) -> dict:
    p = e.patient
    return {
        **serialize_encounter(e),
        'paciente': {'id': p.id, 'nroHistoria': p.nro_historia, 'apellidosNombres': p.apellidos_nombres, 'ci': p.ci},
    }


def _base_queryset():
    return (
        Encounter.objects.select_related('patient', 'created_by')
        .prefetch_related('signos_vitales', 'impresiones')
    )


def get_encounter_or_404(pk) -> Encounter:
    encounter = _base_queryset().filter(id=pk).first()
    if not encounter:
        raise NotFound('Encuentro no encontrado')
    return encounter


def _record(current_user, patient: Patient, data: dict, cita: Appointment | None = None) -> Encounter:
    admision = None
    if data.get('admisionId'):
        admision = Admission.objects.filter(id=data['admisionId'], patient=patient).first()
        if not admision:
            raise ValueError('La admisión no pertenece al paciente')
    now = timezone.localtime()
    encounter = Encounter.objects.create(
        patient=patient,
        admision=admision,
        cita=cita,
        tipo=data.get('tipo') or 'CONSULTA',
        fecha=data.get('fecha') or now.date(),
        hora=data.get('hora') or now.strftime('%H:%M'),
        motivo_consulta=data.get('motivoConsulta', ''),
        enfermedad_actual=data.get('enfermedadActual', ''),
        procedencia=data.get('procedencia', ''),
        nro_cama=data.get('nroCama', ''),
        created_by=current_user,
    )
    for sv in data.get('signosVitales') or []:
        VitalSigns.objects.create(
            encuentro=encounter,
            ta_sistolica=sv.get('taSistolica'),
            ta_diastolica=sv.get('taDiastolica'),
            pulso=sv.get('pulso'),
            temperatura=sv.get('temperatura'),
            fr=sv.get('fr'),
            observaciones=sv.get('observaciones', ''),
        )
    for imp in data.get('impresiones') or []:
        DiagnosticImpression.objects.create(
            encuentro=encounter,
            codigo_cie=imp.get('codigoCie', ''),
            descripcion=imp.get('descripcion', ''),
            clase=imp.get('clase', ''),
        )
    return encounter


def create_encounter(current_user, data: dict) -> Encounter:
    patient = Patient.objects.filter(id=data['pacienteId']).first()
    if not patient:
        raise NotFound('Paciente no encontrado')
    with transaction.atomic():
        encounter = _record(current_user, patient, data)
    logger.info('encounter %s (%s) recorded for patient %s', encounter.id, encounter.tipo, patient.id)
    safe_log_action(user=current_user, action='encounter_create', object_type='encounter', object_id=encounter.id,
                    detail={'pacienteId': patient.id, 'tipo': encounter.tipo})
    mark_stale()
    return get_encounter_or_404(encounter.id)


def create_from_appointment(current_user, data: dict) -> Encounter:
    """Attend a scheduled appointment: record the encounter and complete the appointment."""
    with transaction.atomic():
        cita = Appointment.objects.select_for_update().select_related('patient').filter(id=data['citaId']).first()
        if not cita:
            raise NotFound('Cita no encontrada')
        if cita.estado != Appointment.ESTADO_PROGRAMADA:
            raise ValueError(f'La cita está {cita.estado} y no puede atenderse')
        fields = dict(data)
        fields.setdefault('fecha', cita.fecha)
        encounter = _record(current_user, cita.patient, fields, cita=cita)
        cita.estado = Appointment.ESTADO_COMPLETADA
        cita.save(update_fields=['estado', 'updated_at'])
    logger.info('appointment %s attended as encounter %s', cita.id, encounter.id)
    safe_log_action(user=current_user, action='encounter_from_appointment', object_type='encounter',
                    object_id=encounter.id, detail={'citaId': cita.id, 'pacienteId': cita.patient_id})
    mark_stale()
    return get_encounter_or_404(encounter.id)


def encounters_for_patient(patient_id) -> list[dict]:
    qs = _base_queryset().filter(patient_id=patient_id).order_by('-fecha', '-hora', '-id')
    return [serialize_encounter(e) for e in qs]


def encounters_today() -> tuple[list[dict], str]:
    today = timezone.localdate()
    qs = _base_queryset().filter(fecha=today).order_by('-hora', '-id')
    return [_with_patient(e) for e in qs], today.isoformat()


def encounters_by_type(tipo: str) -> list[dict]:
    """Latest encounters of ``tipo``. Raises ``ValueError`` for an unknown type."""
    tipo = (tipo or '').upper()
    if tipo not in ENCOUNTER_TYPES:
        raise ValueError(f"Tipo de encuentro inválido. Permitidos: {', '.join(ENCOUNTER_TYPES)}")
    qs = _base_queryset().filter(tipo=tipo).order_by('-fecha', '-hora', '-id')[:BY_TYPE_LIMIT]
    return [_with_patient(e) for e in qs]


def encounter_detail(e: Encounter) -> dict:
    return _with_patient(e)
