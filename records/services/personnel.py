"""
Authorized-personnel whitelist.

Only people on the whitelist (active, not yet registered and not
expired) may self-register as staff, and only with the role they were
authorized for.  Entries are deactivated, never deleted.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Count, Q
from django.utils import timezone
from rest_framework.exceptions import NotFound

from records.models import AuthorizedPersonnel
from records.services.audit import safe_log_action
from records.validators import normalize_ci

logger = logging.getLogger(__name__)

FIELD_MAP = [
    ('nombreCompleto', 'nombre_completo'),
    ('email', 'email'),
    ('rolAutorizado', 'rol_autorizado'),
    ('departamento', 'departamento'),
    ('cargo', 'cargo'),
    ('fechaIngreso', 'fecha_ingreso'),
    ('fechaVencimiento', 'fecha_vencimiento'),
    ('estado', 'estado'),
]


def serialize_personnel(p: AuthorizedPersonnel) -> dict:
    return {
        'id': p.id,
        'ci': p.ci,
        'nombreCompleto': p.nombre_completo,
        'email': p.email,
        'rolAutorizado': p.rol_autorizado,
        'departamento': p.departamento,
        'cargo': p.cargo,
        'fechaIngreso': p.fecha_ingreso.isoformat() if p.fecha_ingreso else None,
        'fechaVencimiento': p.fecha_vencimiento.isoformat() if p.fecha_vencimiento else None,
        'estado': p.estado,
        'registrado': p.registrado,
        'motivoBaja': p.motivo_baja,
        'createdAt': p.created_at.isoformat() if p.created_at else None,
        'updatedAt': p.updated_at.isoformat() if p.updated_at else None,
    }


def get_by_ci_or_404(ci: str) -> AuthorizedPersonnel:
    normalized = normalize_ci(ci)
    entry = AuthorizedPersonnel.objects.filter(ci=normalized).first() if normalized else None
    if not entry:
        raise NotFound('Personal autorizado no encontrado')
    return entry


def list_personnel(*, estado=None, rol=None, registrado=None, departamento=None) -> list[dict]:
    qs = AuthorizedPersonnel.objects.order_by('nombre_completo', 'id')
    if estado:
        qs = qs.filter(estado=estado)
    if rol:
        qs = qs.filter(rol_autorizado=rol)
    if registrado is not None:
        qs = qs.filter(registrado=registrado)
    if departamento:
        qs = qs.filter(departamento__icontains=departamento)
    return [serialize_personnel(p) for p in qs]


def personnel_stats() -> dict:
    today = timezone.localdate()
    activo = Q(estado=AuthorizedPersonnel.ESTADO_ACTIVO)
    agg = AuthorizedPersonnel.objects.aggregate(
        total=Count('id'),
        activos=Count('id', filter=activo),
        inactivos=Count('id', filter=Q(estado=AuthorizedPersonnel.ESTADO_INACTIVO)),
        registrados=Count('id', filter=Q(registrado=True)),
        pendientes=Count('id', filter=activo & Q(registrado=False)),
        vencidos=Count('id', filter=activo & Q(fecha_vencimiento__lt=today)),
    )
    por_rol = {rol: 0 for rol, _ in AuthorizedPersonnel.ROL_CHOICES}
    for row in AuthorizedPersonnel.objects.values('rol_autorizado').annotate(n=Count('id')):
        por_rol[row['rol_autorizado']] = row['n']
    return {**agg, 'porRol': por_rol}


def create_personnel(current_user, data: dict) -> AuthorizedPersonnel:
    if AuthorizedPersonnel.objects.filter(ci=data['ci']).exists():
        raise ValueError(f"La cédula {data['ci']} ya está en la lista de personal autorizado")
    fields = {field: data[key] for key, field in FIELD_MAP if key in data and key != 'estado'}
    entry = AuthorizedPersonnel.objects.create(ci=data['ci'], created_by=current_user, **fields)
    logger.info('whitelist entry %s added (%s)', entry.ci, entry.rol_autorizado)
    safe_log_action(user=current_user, action='personnel_create', object_type='authorized_personnel',
                    object_id=entry.id, detail={'ci': entry.ci, 'rol': entry.rol_autorizado})
    return entry


def update_personnel(current_user, entry: AuthorizedPersonnel, data: dict) -> AuthorizedPersonnel:
    changed = []
    for key, field in FIELD_MAP:
        if key in data:
            setattr(entry, field, data[key])
            changed.append(key)
    if entry.fecha_vencimiento and entry.fecha_vencimiento < entry.fecha_ingreso:
        raise ValueError('La fecha de vencimiento debe ser posterior a la fecha de ingreso')
    if data.get('estado') == AuthorizedPersonnel.ESTADO_ACTIVO:
        entry.motivo_baja = ''
    entry.save()
    safe_log_action(user=current_user, action='personnel_update', object_type='authorized_personnel',
                    object_id=entry.id, detail={'ci': entry.ci, 'fields': changed})
    return entry


def deactivate_personnel(current_user, entry: AuthorizedPersonnel, motivo: str) -> AuthorizedPersonnel:
    if entry.estado == AuthorizedPersonnel.ESTADO_INACTIVO:
        raise ValueError('El registro ya se encuentra inactivo')
    entry.estado = AuthorizedPersonnel.ESTADO_INACTIVO
    entry.motivo_baja = motivo
    entry.save(update_fields=['estado', 'motivo_baja', 'updated_at'])
    logger.info('whitelist entry %s deactivated', entry.ci)
    safe_log_action(user=current_user, action='personnel_deactivate', object_type='authorized_personnel',
                    object_id=entry.id, detail={'ci': entry.ci, 'motivoBaja': motivo})
    return entry


def bulk_create_personnel(current_user, rows: list) -> dict:
    """Validate and insert each row independently; report a result per row."""
    from records.serializers.personnel import AuthorizedPersonnelSerializer

    limit = getattr(settings, 'PERSONNEL_BULK_MAX', 100)
    if not isinstance(rows, list) or not rows:
        raise ValueError('Debe enviar una lista "personnel" con al menos un registro')
    if len(rows) > limit:
        raise ValueError(f'Máximo {limit} registros por carga')

    results = []
    for index, row in enumerate(rows):
        s = AuthorizedPersonnelSerializer(data=row)
        if not s.is_valid():
            results.append({'index': index, 'ci': row.get('ci') if isinstance(row, dict) else None,
                            'ok': False, 'errors': s.errors})
            continue
        try:
            with transaction.atomic():
                entry = create_personnel(current_user, s.validated_data)
        except (ValueError, IntegrityError) as e:
            results.append({'index': index, 'ci': s.validated_data['ci'], 'ok': False, 'errors': str(e)})
            continue
        results.append({'index': index, 'ci': entry.ci, 'ok': True, 'id': entry.id})
    created = sum(1 for r in results if r['ok'])
    logger.info('bulk whitelist load: %d created, %d failed', created, len(results) - created)
    return {'created': created, 'failed': len(results) - created, 'results': results}


def check_can_register(ci: str, role: str) -> AuthorizedPersonnel:
    """Whitelist entry allowing ``ci`` to register as ``role``.

    Raises ``PermissionError`` with the reason when registration is not
    allowed.
    """
    entry = AuthorizedPersonnel.objects.filter(ci=ci).first()
    if not entry:
        raise PermissionError('La cédula no se encuentra en la lista de personal autorizado')
    if entry.estado != AuthorizedPersonnel.ESTADO_ACTIVO:
        raise PermissionError('El personal autorizado se encuentra inactivo')
    if entry.registrado:
        raise PermissionError('Esta cédula ya tiene un usuario registrado')
    if entry.fecha_vencimiento and entry.fecha_vencimiento < timezone.localdate():
        raise PermissionError('La autorización ha vencido')
    if entry.rol_autorizado != role:
        raise PermissionError(f'La cédula está autorizada para el rol {entry.rol_autorizado}')
    return entry
