"""
Dashboard view modes.

Each dashboard is a small state machine: from ``MAIN`` an action opens
one of the dashboard's views, and ``back`` from any view returns to
``MAIN``.  Any other move is rejected with ``ValueError``.
"""
from __future__ import annotations

from enum import Enum

BACK = 'back'


class AdminView(str, Enum):
    MAIN = 'main'
    REGISTER_PATIENT = 'register-patient'
    CREATE_APPOINTMENT = 'create-appointment'
    SEARCH_PATIENT = 'search-patient'


class DoctorView(str, Enum):
    MAIN = 'main'
    PATIENTS = 'patients'
    NEW_ADMISSION = 'new-admission'
    REGISTER_ENCOUNTER = 'register-encounter'


LABELS = {
    AdminView.REGISTER_PATIENT: 'Registrar Nuevo Paciente',
    AdminView.CREATE_APPOINTMENT: 'Generar Cita Médica',
    AdminView.SEARCH_PATIENT: 'Consultar Historia Clínica',
    DoctorView.PATIENTS: 'Ver Pacientes',
    DoctorView.NEW_ADMISSION: 'Nueva Admisión',
    DoctorView.REGISTER_ENCOUNTER: 'Registrar Encuentro',
}


def transition(current, action: str):
    """Next view after ``action`` is taken on ``current``."""
    views = type(current)
    if action == BACK:
        return views.MAIN
    if current is not views.MAIN:
        raise ValueError(f"'{action}' no está disponible desde la vista {current.value}")
    try:
        target = views(action)
    except ValueError:
        raise ValueError(f"Acción desconocida: {action}")
    if target is views.MAIN:
        raise ValueError('Ya se encuentra en la vista principal')
    return target


def available_actions(views) -> list[dict]:
    """Actions offered on the main view of a dashboard."""
    return [{'id': v.value, 'label': LABELS[v]} for v in views if v is not views.MAIN]
