"""
Dashboard statistics for the administrative and medical views.

Both payloads are cached for ``DASHBOARD_CACHE_SECONDS``; writes that
change the numbers broadcast a refresh so clients re-fetch.
"""
from __future__ import annotations

import logging

from django.conf import settings
from django.core.cache import cache
from django.db.models import Q
from django.utils import timezone

from records.models import Admission, Appointment, AuditEvent, Encounter, Patient, User
from records.navigation import AdminView, DoctorView, available_actions
from records.services.broadcast import broadcast_refresh

logger = logging.getLogger(__name__)

ADMIN_KEY = 'dashboard:admin'
DOCTOR_KEY = 'dashboard:medico:{user_id}'


def _ttl() -> int:
    return getattr(settings, 'DASHBOARD_CACHE_SECONDS', 60)


def admin_stats() -> dict:
    today = timezone.localdate()
    return {
        'totalPacientes': Patient.objects.count(),
        'usuariosActivos': User.objects.filter(is_active=True).count(),
        'citasHoy': Appointment.objects.filter(fecha=today, estado=Appointment.ESTADO_PROGRAMADA).count(),
        'registrosAuditoria': AuditEvent.objects.count(),
    }


def doctor_stats(user) -> dict:
    today = timezone.localdate()
    clinical = Admission.objects.filter(tipo__isnull=False)
    pending = Appointment.objects.filter(fecha=today, estado=Appointment.ESTADO_PROGRAMADA)
    if getattr(user, 'role', None) == User.ROLE_MEDICO:
        pending = pending.filter(Q(medico=user) | Q(medico__isnull=True))
    return {
        'pacientesActivos': clinical.filter(estado=Admission.ESTADO_ACTIVA).values('patient').distinct().count(),
        'admisionesHoy': clinical.filter(fecha_admision=today).count(),
        'altasPendientes': clinical.filter(
            estado=Admission.ESTADO_ACTIVA, tipo=Admission.TIPO_HOSPITALIZACION
        ).count(),
        'consultasPendientes': pending.count(),
        'encuentrosHoy': Encounter.objects.filter(fecha=today).count(),
    }


def recent_patients_for(user, limit: int = 5) -> list[dict]:
    """Patients most recently seen by ``user`` (newest encounter first)."""
    seen, ids = [], set()
    qs = (
        Encounter.objects.filter(created_by=user)
        .select_related('patient')
        .order_by('-fecha', '-hora', '-id')
    )
    for e in qs[:limit * 4]:
        if e.patient_id in ids:
            continue
        ids.add(e.patient_id)
        seen.append({'id': e.patient.id, 'nroHistoria': e.patient.nro_historia,
                     'apellidosNombres': e.patient.apellidos_nombres, 'ultimaAtencion': e.fecha.isoformat()})
        if len(seen) >= limit:
            break
    return seen


def admin_dashboard(refresh: bool = False) -> dict:
    payload = None if refresh else cache.get(ADMIN_KEY)
    if payload is None:
        payload = {'ok': True, 'stats': admin_stats(), 'views': available_actions(AdminView),
                   'generatedAt': timezone.now().isoformat()}
        cache.set(ADMIN_KEY, payload, _ttl())
    return payload


def doctor_dashboard(user, refresh: bool = False) -> dict:
    key = DOCTOR_KEY.format(user_id=user.id)
    payload = None if refresh else cache.get(key)
    if payload is None:
        payload = {'ok': True, 'stats': doctor_stats(user), 'views': available_actions(DoctorView),
                   'recientes': recent_patients_for(user), 'generatedAt': timezone.now().isoformat()}
        cache.set(key, payload, _ttl())
    return payload


def invalidate() -> list[str]:
    """Drop cached dashboards; returns the keys removed."""
    keys = [ADMIN_KEY] + [
        DOCTOR_KEY.format(user_id=uid)
        for uid in User.objects.filter(role__in=[User.ROLE_MEDICO, User.ROLE_SUPER_ADMIN]).values_list('id', flat=True)
    ]
    cache.delete_many(keys)
    return keys


def mark_stale() -> None:
    """Invalidate cached dashboards and tell connected clients to re-fetch."""
    keys = invalidate()
    logger.debug('dashboards invalidated: %s', keys)
    broadcast_refresh(*keys)
