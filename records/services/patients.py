"""
Patient registration, lookup and the payloads the dashboards read.

Registering a patient always opens an initial ambulatory admission so
every record has a starting point on its timeline.
"""
from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from records.models import Admission, MilitaryRecord, Patient
from records.services.admissions import serialize_admission
from records.services.appointments import serialize_appointment
from records.services.audit import safe_log_action
from records.services.dashboard import mark_stale
from records.services.encounters import serialize_encounter
from records.services.timeline import build_timeline
from records.validators import calculate_age, normalize_ci

logger = logging.getLogger(__name__)

# request key -> model field
PATIENT_FIELDS = [
    ('apellidosNombres', 'apellidos_nombres'),
    ('fechaNacimiento', 'fecha_nacimiento'),
    ('sexo', 'sexo'),
    ('nacionalidad', 'nacionalidad'),
    ('direccion', 'direccion'),
    ('telefono', 'telefono'),
    ('lugarNacimiento', 'lugar_nacimiento'),
    ('estado', 'estado'),
    ('region', 'region'),
]


def get_patient_or_404(pk) -> Patient:
    patient = Patient.objects.filter(id=pk).first()
    if not patient:
        raise NotFound('Paciente no encontrado')
    return patient


def serialize_patient(p: Patient) -> dict:
    militar = getattr(p, 'militar', None)
    return {
        'id': p.id,
        'nroHistoria': p.nro_historia,
        'ci': p.ci,
        'apellidosNombres': p.apellidos_nombres,
        'fechaNacimiento': p.fecha_nacimiento.isoformat() if p.fecha_nacimiento else None,
        'edad': calculate_age(p.fecha_nacimiento),
        'sexo': p.sexo,
        'nacionalidad': p.nacionalidad,
        'direccion': p.direccion,
        'telefono': p.telefono,
        'lugarNacimiento': p.lugar_nacimiento,
        'estado': p.estado,
        'region': p.region,
        'militar': (
            {'grado': militar.grado, 'componente': militar.componente, 'unidad': militar.unidad}
            if militar else None
        ),
        'createdAt': timezone.localtime(p.created_at).isoformat() if p.created_at else None,
    }


def serialize_patient_detail(p: Patient) -> dict:
    """Patient plus its admissions, encounters and appointments."""
    admisiones = p.admisiones.order_by('-fecha_admision', '-id')
    encuentros = (
        p.encuentros.select_related('created_by')
        .prefetch_related('signos_vitales', 'impresiones')
        .order_by('-fecha', '-hora', '-id')
    )
    citas = p.citas.select_related('medico').order_by('-fecha', '-hora', '-id')
    return {
        **serialize_patient(p),
        'admisiones': [serialize_admission(a) for a in admisiones],
        'encuentros': [serialize_encounter(e) for e in encuentros],
        'citas': [serialize_appointment(c) for c in citas],
    }


def patient_timeline(p: Patient) -> list[dict]:
    events = build_timeline(serialize_patient_detail(p))
    logger.info('timeline for patient %s: %d events', p.id, len(events))
    return [e.as_dict() for e in events]


def _apply_militar(patient: Patient, militar: dict | None) -> None:
    if militar is None:
        return
    MilitaryRecord.objects.update_or_create(
        patient=patient,
        defaults={
            'grado': militar.get('grado', ''),
            'componente': militar.get('componente', ''),
            'unidad': militar.get('unidad', ''),
        },
    )


def create_patient(current_user, data: dict) -> tuple[Patient, Admission]:
    """Create the patient and its initial ambulatory admission.

    Raises ``ValueError`` when the history number or national ID is
    already registered.
    """
    if Patient.objects.filter(nro_historia=data['nroHistoria']).exists():
        raise ValueError(f"Ya existe un paciente con historia {data['nroHistoria']}")
    if Patient.objects.filter(ci=data['ci']).exists():
        raise ValueError(f"Ya existe un paciente con cédula {data['ci']}")

    fields = {field: data[key] for key, field in PATIENT_FIELDS if data.get(key) is not None}
    now = timezone.localtime()
    try:
        with transaction.atomic():
            patient = Patient.objects.create(
                nro_historia=data['nroHistoria'],
                ci=data['ci'],
                created_by=current_user,
                **fields,
            )
            _apply_militar(patient, data.get('militar'))
            admission = Admission.objects.create(
                patient=patient,
                fecha_admision=data.get('fechaAdmision') or now.date(),
                hora_admision=data.get('horaAdmision') or now.strftime('%H:%M'),
                forma_ingreso=data.get('formaIngreso') or 'AMBULANTE',
                created_by=current_user,
            )
    except IntegrityError:
        # lost a race with a concurrent registration of the same patient
        raise ValueError('Ya existe un paciente con esa historia o cédula')

    logger.info('patient %s registered (historia %s)', patient.id, patient.nro_historia)
    safe_log_action(user=current_user, action='patient_create', object_type='patient', object_id=patient.id,
                    detail={'nroHistoria': patient.nro_historia, 'admisionId': admission.id})
    mark_stale()
    return patient, admission


def update_patient(current_user, patient: Patient, data: dict) -> Patient:
    changed = []
    for key, field in PATIENT_FIELDS:
        if key in data:
            setattr(patient, field, data[key])
            changed.append(key)
    with transaction.atomic():
        patient.save()
        if 'militar' in data:
            if data['militar'] is None:
                MilitaryRecord.objects.filter(patient=patient).delete()
            else:
                _apply_militar(patient, data['militar'])
            changed.append('militar')
    safe_log_action(user=current_user, action='patient_update', object_type='patient', object_id=patient.id,
                    detail={'fields': changed})
    return patient


def list_patients(q: str | None = None, page: int = 1, page_size: int = 20) -> tuple[list[dict], int]:
    qs = Patient.objects.select_related('militar').order_by('-created_at', '-id')
    if q:
        qs = qs.filter(
            Q(apellidos_nombres__icontains=q) | Q(ci__icontains=q) | Q(nro_historia__icontains=q)
        )
    total = qs.count()
    start = (page - 1) * page_size
    return [serialize_patient(p) for p in qs[start:start + page_size]], total


def latest_patients(limit: int = 10) -> list[dict]:
    qs = Patient.objects.select_related('militar').order_by('-created_at', '-id')[:limit]
    return [serialize_patient(p) for p in qs]


def find_patient(*, ci: str | None = None, nro_historia: str | None = None) -> Patient | None:
    """Exact lookup by national ID (normalized) or history number."""
    if ci:
        normalized = normalize_ci(ci)
        return Patient.objects.filter(ci=normalized).first() if normalized else None
    if nro_historia:
        return Patient.objects.filter(nro_historia=nro_historia.strip()).first()
    return None
