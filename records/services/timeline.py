"""
Clinical timeline for a single patient.

Merges the registration event, admissions, encounters and appointments
of one patient into display events ordered most recent first.  Source
records are the dictionaries produced by the patient serializers
(camelCase keys) and are passed through untouched as ``detalle``.

Dates and times reach this module in several shapes: ``YYYY-MM-DD``
strings, ISO datetimes (``T`` or space separated), bare ``HH:MM[:SS]``
strings and native ``date``/``datetime``/``time`` values.  Appointment
and encounter times written by older clients are full ISO datetimes on
1970-01-01 where only the time of day means anything; the time is read
from the text after the separator so the epoch date is ignored.

Nothing here raises on bad data.  A date that cannot be read becomes an
unknown moment that sorts after every known date, and the event is still
emitted with ``N/A`` placeholders.
"""
from __future__ import annotations

import datetime as dt
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable

logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'
MIDNIGHT = dt.time(0, 0, 0)

_DATE_RE = re.compile(r'^(\d{4})-(\d{2})-(\d{2})(?:[T ]|$)')
_ISO_TIME_RE = re.compile(r'^\d{4}-\d{2}-\d{2}[T ](\d{1,2}):(\d{2})(?::(\d{2}))?')
_BARE_TIME_RE = re.compile(r'^(\d{1,2}):(\d{2})(?::(\d{2}))?(?:\.\d+)?$')


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def parse_date(value: Any) -> dt.date | None:
    """Calendar date of ``value``, or None when it cannot be read."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if not isinstance(value, str):
        return None
    m = _DATE_RE.match(value.strip())
    if not m:
        return None
    try:
        return dt.date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def _build_time(hours: str, minutes: str, seconds: str | None) -> dt.time | None:
    try:
        return dt.time(int(hours), int(minutes), int(seconds or 0))
    except ValueError:
        return None


def parse_time(value: Any) -> dt.time | None:
    """Wall-clock time of ``value``, or None when absent or unreadable."""
    if isinstance(value, dt.datetime):
        return value.time().replace(microsecond=0, tzinfo=None)
    if isinstance(value, dt.time):
        return value.replace(microsecond=0, tzinfo=None)
    if not isinstance(value, str):
        return None
    text = value.strip()
    m = _BARE_TIME_RE.match(text) or _ISO_TIME_RE.match(text)
    if not m:
        return None
    return _build_time(m.group(1), m.group(2), m.group(3))


class MomentKind(str, Enum):
    UNKNOWN = 'unknown'
    DATE_ONLY = 'date'
    DATE_TIME = 'datetime'


@dataclass(frozen=True)
class Moment:
    """When an event happened, as far as the source record tells."""
    kind: MomentKind
    date: dt.date | None = None
    time: dt.time | None = None

    @classmethod
    def of(cls, date_value: Any, time_value: Any = None) -> 'Moment':
        date = parse_date(date_value)
        time = parse_time(time_value)
        if date is None:
            return cls(MomentKind.UNKNOWN, None, time)
        if time is None:
            return cls(MomentKind.DATE_ONLY, date, None)
        return cls(MomentKind.DATE_TIME, date, time)

    def sort_key(self) -> tuple[int, dt.datetime]:
        """Orderable key; unknown dates rank below every known date."""
        time = self.time or MIDNIGHT
        if self.kind is MomentKind.UNKNOWN:
            return (0, dt.datetime.combine(dt.date.min, time))
        return (1, dt.datetime.combine(self.date, time))

    @property
    def display_date(self) -> str:
        return self.date.isoformat() if self.date else NOT_AVAILABLE

    @property
    def display_time(self) -> str:
        return self.time.strftime('%H:%M') if self.time else NOT_AVAILABLE


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------

@dataclass
class TimelineEvent:
    tipo: str
    moment: Moment
    icono: str
    titulo: str
    descripcion: str
    color: str
    detalle: Any = None

    @property
    def fecha(self) -> str:
        return self.moment.display_date

    @property
    def hora(self) -> str:
        return self.moment.display_time

    def as_dict(self) -> dict:
        return {
            'tipo': self.tipo,
            'fecha': self.fecha,
            'hora': self.hora,
            'icono': self.icono,
            'titulo': self.titulo,
            'descripcion': self.descripcion,
            'color': self.color,
            'detalle': self.detalle,
        }


def compare_events(a: TimelineEvent, b: TimelineEvent) -> int:
    """-1 when ``a`` is more recent than ``b``, 1 when older, 0 on a tie."""
    ka, kb = a.moment.sort_key(), b.moment.sort_key()
    if ka == kb:
        return 0
    return -1 if ka > kb else 1


def sort_events(events: Iterable[TimelineEvent]) -> list[TimelineEvent]:
    """Most recent first. Ties keep their input order (sorted() is stable)."""
    return sorted(events, key=lambda e: e.moment.sort_key(), reverse=True)


def _get(record: Any, *keys: str) -> Any:
    if not isinstance(record, Mapping):
        return None
    for key in keys:
        value = record.get(key)
        if value not in (None, ''):
            return value
    return None


def _text(value: Any) -> str:
    if value in (None, ''):
        return NOT_AVAILABLE
    return str(value)


def _code(record: Any, key: str) -> str | None:
    """Kind or status code of ``record``; non-string values count as missing."""
    value = _get(record, key)
    return value if isinstance(value, str) else None


def _items(patient: Any, key: str) -> list:
    value = _get(patient, key)
    if isinstance(value, (list, tuple)):
        return list(value)
    return []


def _staff_name(staff: Any) -> str | None:
    if isinstance(staff, Mapping):
        return _get(staff, 'nombre', 'name', 'username')
    return staff or None


COLLECTION_KEYS = ('admisiones', 'encuentros', 'citas')


def _moment(date_value: Any, time_value: Any, source: str) -> Moment:
    moment = Moment.of(date_value, time_value)
    if moment.kind is MomentKind.UNKNOWN:
        logger.warning('timeline: unreadable date %r on %s record', date_value, source)
    return moment


def registration_event(patient: Any) -> TimelineEvent:
    created = _get(patient, 'createdAt')
    return TimelineEvent(
        tipo='registro',
        moment=_moment(created, created, 'registration'),
        icono='user-plus',
        titulo='Registro del paciente',
        descripcion=(
            f"Historia {_text(_get(patient, 'nroHistoria'))} abierta para "
            f"{_text(_get(patient, 'apellidosNombres'))}"
        ),
        color='info',
        detalle=(
            {k: v for k, v in patient.items() if k not in COLLECTION_KEYS}
            if isinstance(patient, Mapping) else patient
        ),
    )


def admission_event(admission: Any) -> TimelineEvent:
    moment = _moment(_get(admission, 'fechaAdmision', 'fecha'), _get(admission, 'horaAdmision', 'hora'), 'admission')
    tipo = _get(admission, 'tipo')
    servicio = _get(admission, 'servicio')
    if not tipo and not servicio:
        return TimelineEvent(
            tipo='admision',
            moment=moment,
            icono='clipboard',
            titulo='Registro inicial',
            descripcion=f"Admisión ambulatoria inicial · Forma de ingreso: {_text(_get(admission, 'formaIngreso'))}",
            color='secondary',
            detalle=admission,
        )
    if tipo == 'EMERGENCIA':
        titulo, icono, color = 'Admisión por emergencia', 'ambulance', 'danger'
    elif tipo == 'HOSPITALIZACION':
        titulo, icono, color = 'Hospitalización', 'hospital', 'primary'
    else:
        titulo, icono, color = 'Admisión', 'hospital', 'primary'
    descripcion = (
        f"Servicio: {_text(servicio)} · "
        f"Habitación: {_text(_get(admission, 'habitacion'))} · "
        f"Cama: {_text(_get(admission, 'cama'))} · "
        f"Diagnóstico: {_text(_get(admission, 'diagnostico'))} · "
        f"Alta: {_text(_get(admission, 'fechaAlta'))}"
    )
    return TimelineEvent('admision', moment, icono, titulo, descripcion, color, admission)


ENCOUNTER_PRESENTATION = {
    'EMERGENCIA': ('Atención de emergencia', 'siren', 'danger'),
    'HOSPITALIZACION': ('Evolución de hospitalización', 'bed', 'primary'),
    'CONSULTA': ('Consulta médica', 'stethoscope', 'success'),
    'OTRO': ('Encuentro clínico', 'notes', 'secondary'),
}


def encounter_event(encounter: Any) -> TimelineEvent:
    moment = _moment(_get(encounter, 'fecha'), _get(encounter, 'hora'), 'encounter')
    titulo, icono, color = ENCOUNTER_PRESENTATION.get(_code(encounter, 'tipo'), ENCOUNTER_PRESENTATION['OTRO'])
    staff = _get(encounter, 'createdBy')
    specialty = _get(staff, 'especialidad', 'cargo') if isinstance(staff, Mapping) else None
    descripcion = f"Atendido por {_text(_staff_name(staff))} ({_text(specialty)})"
    motivo = _get(encounter, 'motivoConsulta')
    if motivo:
        descripcion += f" · Motivo: {motivo}"
    return TimelineEvent('encuentro', moment, icono, titulo, descripcion, color, encounter)


APPOINTMENT_PRESENTATION = {
    'PROGRAMADA': ('Cita programada', 'clock', 'warning'),
    'COMPLETADA': ('Cita completada', 'check-circle', 'success'),
    'CANCELADA': ('Cita cancelada', 'x-circle', 'danger'),
}


def appointment_event(appointment: Any) -> TimelineEvent:
    moment = _moment(
        _get(appointment, 'fechaCita', 'fecha'), _get(appointment, 'horaCita', 'hora'), 'appointment'
    )
    titulo, icono, color = APPOINTMENT_PRESENTATION.get(
        _code(appointment, 'estado'), APPOINTMENT_PRESENTATION['PROGRAMADA']
    )
    descripcion = (
        f"Especialidad: {_text(_get(appointment, 'especialidad'))} · "
        f"Médico: {_text(_staff_name(_get(appointment, 'medico')))}"
    )
    motivo = _get(appointment, 'motivo')
    if motivo:
        descripcion += f" · Motivo: {motivo}"
    return TimelineEvent('cita', moment, icono, titulo, descripcion, color, appointment)


def build_timeline(patient: Any) -> list[TimelineEvent]:
    """All events for ``patient``, most recent first.

    Always returns ``1 + admissions + encounters + appointments`` events;
    absent collections count as empty.
    """
    events = [registration_event(patient)]
    events.extend(admission_event(a) for a in _items(patient, 'admisiones'))
    events.extend(encounter_event(e) for e in _items(patient, 'encuentros'))
    events.extend(appointment_event(c) for c in _items(patient, 'citas'))
    return sort_events(events)
