"""
Hospitalization format: the chart kept for one admission.

Each format owns four repeating sections (vital signs, lab results,
medical orders and medical evolutions) that share the same add, update
and delete operations, plus a single admission summary that is upserted.
"""
from __future__ import annotations

import datetime as dt
import logging
from dataclasses import dataclass
from decimal import Decimal

from django.db import IntegrityError
from rest_framework.exceptions import NotFound

from records.models import (
    Admission,
    AdmissionSummary,
    FormatVitalSigns,
    HospitalizationFormat,
    LabResult,
    MedicalEvolution,
    MedicalOrder,
)
from records.services.audit import safe_log_action

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Section:
    model: type
    related_name: str
    key: str
    # request key -> model field
    fields: tuple


SECTIONS = {
    'signos-vitales': Section(
        FormatVitalSigns, 'signos_vitales', 'signosVitales',
        (('fecha', 'fecha'), ('hora', 'hora'), ('taSistolica', 'ta_sistolica'),
         ('taDiastolica', 'ta_diastolica'), ('pulso', 'pulso'), ('temperatura', 'temperatura'),
         ('fr', 'fr'), ('saturacion', 'saturacion'), ('observaciones', 'observaciones')),
    ),
    'laboratorio': Section(
        LabResult, 'laboratorios', 'laboratorios',
        (('fecha', 'fecha'), ('examen', 'examen'), ('resultado', 'resultado'), ('observaciones', 'observaciones')),
    ),
    'orden-medica': Section(
        MedicalOrder, 'ordenes_medicas', 'ordenesMedicas',
        (('fecha', 'fecha'), ('hora', 'hora'), ('indicacion', 'indicacion'), ('ejecutada', 'ejecutada')),
    ),
    'evolucion-medica': Section(
        MedicalEvolution, 'evoluciones_medicas', 'evolucionesMedicas',
        (('fecha', 'fecha'), ('hora', 'hora'), ('nota', 'nota')),
    ),
}


def _json(value):
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def serialize_entry(section: Section, obj) -> dict:
    data = {'id': obj.id, 'formatoId': obj.formato_id}
    data.update({key: _json(getattr(obj, field)) for key, field in section.fields})
    if isinstance(obj, MedicalEvolution):
        data['medico'] = {'id': obj.medico.id, 'nombre': obj.medico.display_name()} if obj.medico else None
    return data


def serialize_summary(summary: AdmissionSummary | None) -> dict | None:
    if summary is None:
        return None
    return {
        'id': summary.id,
        'motivoIngreso': summary.motivo_ingreso,
        'diagnosticoIngreso': summary.diagnostico_ingreso,
        'plan': summary.plan,
        'updatedAt': summary.updated_at.isoformat() if summary.updated_at else None,
    }


def serialize_format(f: HospitalizationFormat) -> dict:
    data = {
        'id': f.id,
        'admisionId': f.admision_id,
        'pacienteId': f.patient_id,
        'createdAt': f.created_at.isoformat() if f.created_at else None,
    }
    for section in SECTIONS.values():
        rows = getattr(f, section.related_name).order_by('fecha', 'id')
        data[section.key] = [serialize_entry(section, r) for r in rows]
    data['resumenIngreso'] = serialize_summary(getattr(f, 'resumen_ingreso', None))
    return data


def get_section(slug: str) -> Section:
    try:
        return SECTIONS[slug]
    except KeyError:
        raise NotFound(f'Sección desconocida: {slug}')


def get_format_or_404(pk) -> HospitalizationFormat:
    f = HospitalizationFormat.objects.filter(id=pk).first()
    if not f:
        raise NotFound('Formato de hospitalización no encontrado')
    return f


def get_format_by_admission(admision_id) -> HospitalizationFormat:
    f = HospitalizationFormat.objects.filter(admision_id=admision_id).first()
    if not f:
        raise NotFound('Formato de hospitalización no encontrado')
    return f


def create_format(current_user, admision_id) -> HospitalizationFormat:
    """Open the format for an admission. Raises ``ValueError`` if one exists."""
    admission = Admission.objects.filter(id=admision_id).first()
    if not admission:
        raise NotFound('Admisión no encontrada')
    if HospitalizationFormat.objects.filter(admision=admission).exists():
        raise ValueError('Ya existe un formato para esta admisión')
    try:
        f = HospitalizationFormat.objects.create(admision=admission, patient_id=admission.patient_id)
    except IntegrityError:
        raise ValueError('Ya existe un formato para esta admisión')
    logger.info('hospitalization format %s opened for admission %s', f.id, admission.id)
    safe_log_action(user=current_user, action='format_create', object_type='hospitalization_format',
                    object_id=f.id, detail={'admisionId': admission.id})
    return f


def add_entry(current_user, slug: str, formato: HospitalizationFormat, data: dict):
    section = get_section(slug)
    fields = {field: data[key] for key, field in section.fields if key in data}
    if section.model is MedicalEvolution:
        fields['medico'] = current_user
    obj = section.model.objects.create(formato=formato, **fields)
    safe_log_action(user=current_user, action=f'format_add_{section.related_name}',
                    object_type='hospitalization_format', object_id=formato.id, detail={'entryId': obj.id})
    return section, obj


def _entry_or_404(section: Section, pk):
    obj = section.model.objects.filter(id=pk).first()
    if not obj:
        raise NotFound('Registro no encontrado')
    return obj


def update_entry(current_user, slug: str, pk, data: dict):
    section = get_section(slug)
    obj = _entry_or_404(section, pk)
    for key, field in section.fields:
        if key in data:
            setattr(obj, field, data[key])
    obj.save()
    safe_log_action(user=current_user, action=f'format_update_{section.related_name}',
                    object_type='hospitalization_format', object_id=obj.formato_id, detail={'entryId': obj.id})
    return section, obj


def delete_entry(current_user, slug: str, pk) -> None:
    section = get_section(slug)
    obj = _entry_or_404(section, pk)
    formato_id, entry_id = obj.formato_id, obj.id
    obj.delete()
    safe_log_action(user=current_user, action=f'format_delete_{section.related_name}',
                    object_type='hospitalization_format', object_id=formato_id, detail={'entryId': entry_id})


def medical_orders(formato: HospitalizationFormat) -> list[dict]:
    section = SECTIONS['orden-medica']
    rows = formato.ordenes_medicas.order_by('-fecha', '-hora', '-id')
    return [serialize_entry(section, r) for r in rows]


def upsert_summary(current_user, formato: HospitalizationFormat, data: dict) -> AdmissionSummary:
    summary, created = AdmissionSummary.objects.update_or_create(
        formato=formato,
        defaults={
            key: data[src]
            for src, key in (('motivoIngreso', 'motivo_ingreso'),
                             ('diagnosticoIngreso', 'diagnostico_ingreso'),
                             ('plan', 'plan'))
            if src in data
        },
    )
    safe_log_action(user=current_user, action='format_summary', object_type='hospitalization_format',
                    object_id=formato.id, detail={'created': created})
    return summary