"""
Timeline aggregation and ordering.

These tests run on plain dictionaries and need no database.
"""
import datetime as dt

import pytest

from records.services.timeline import (
    Moment,
    MomentKind,
    NOT_AVAILABLE,
    TimelineEvent,
    admission_event,
    appointment_event,
    build_timeline,
    compare_events,
    encounter_event,
    parse_date,
    parse_time,
    sort_events,
)


def _event(tag, fecha, hora=None):
    return TimelineEvent('cita', Moment.of(fecha, hora), 'clock', tag, '', 'warning', {'tag': tag})


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('value, expected', [
    ('2024-03-05', dt.date(2024, 3, 5)),
    ('2024-03-05T10:00:00Z', dt.date(2024, 3, 5)),
    ('2024-03-05 10:00:00', dt.date(2024, 3, 5)),
    (dt.datetime(2024, 3, 5, 23, 59), dt.date(2024, 3, 5)),
    (dt.date(2024, 3, 5), dt.date(2024, 3, 5)),
])
def test_parse_date_accepts_known_shapes(value, expected):
    assert parse_date(value) == expected


@pytest.mark.parametrize('value', [None, '', 'not-a-date', '2024-13-01', '2024-02-30', '05/03/2024', 20240305])
def test_parse_date_rejects_everything_else(value):
    assert parse_date(value) is None


@pytest.mark.parametrize('value, expected', [
    ('9:05', dt.time(9, 5)),
    ('09:05', dt.time(9, 5)),
    ('14:30:15', dt.time(14, 30, 15)),
    ('1970-01-01T14:30:00.000Z', dt.time(14, 30)),
    ('1970-01-01 08:15', dt.time(8, 15)),
    (dt.datetime(2024, 1, 1, 7, 45, 12), dt.time(7, 45, 12)),
    (dt.time(18, 0), dt.time(18, 0)),
])
def test_parse_time_accepts_known_shapes(value, expected):
    assert parse_time(value) == expected


@pytest.mark.parametrize('value', [None, '', 'mediodía', '25:00', '12:75', dt.date(2024, 1, 1)])
def test_parse_time_unreadable_is_none(value):
    assert parse_time(value) is None


def test_epoch_anchored_time_keeps_wall_clock():
    cita = {'fecha': '2025-01-10', 'horaCita': '1970-01-01T14:30:00.000Z', 'estado': 'PROGRAMADA'}
    event = appointment_event(cita)
    assert event.moment.time == dt.time(14, 30, 0)
    assert event.moment.date == dt.date(2025, 1, 10)
    assert event.hora == '14:30'


def test_moment_kinds_and_missing_time_defaults_to_midnight():
    assert Moment.of('2024-01-01').kind is MomentKind.DATE_ONLY
    assert Moment.of('2024-01-01', '10:00').kind is MomentKind.DATE_TIME
    assert Moment.of('garbage', '10:00').kind is MomentKind.UNKNOWN
    assert Moment.of('2024-01-01').sort_key() == Moment.of('2024-01-01', '00:00:00').sort_key()


# ---------------------------------------------------------------------------
# Ordering
# ---------------------------------------------------------------------------

def test_sort_is_descending_and_unknown_dates_go_last():
    events = [
        _event('bad', 'not-a-date', '23:59'),
        _event('old', '2023-05-01'),
        _event('new', '2025-01-01'),
        _event('mid', '2024-06-15', '09:00'),
    ]
    assert [e.titulo for e in sort_events(events)] == ['new', 'mid', 'old', 'bad']


def test_valid_date_beats_unparseable_date():
    bad, good = _event('bad', 'not-a-date'), _event('good', '2025-01-01')
    assert compare_events(good, bad) == -1
    assert compare_events(bad, good) == 1
    assert sort_events([bad, good])[0] is good


def test_time_breaks_same_day_order():
    morning, evening = _event('am', '2024-06-15', '08:00'), _event('pm', '2024-06-15', '1970-01-01T20:00:00.000Z')
    assert [e.titulo for e in sort_events([morning, evening])] == ['pm', 'am']


def test_ties_keep_input_order():
    a, b, c = _event('a', '2024-01-01'), _event('b', '2024-01-01', '00:00'), _event('c', '2024-01-01')
    assert compare_events(a, b) == 0
    assert sort_events([a, b, c]) == [a, b, c]
    assert sort_events([c, a, b]) == [c, a, b]


def test_sort_is_idempotent():
    events = [_event(str(i), f'2024-0{1 + i % 3}-1{i}', f'{i}:00') for i in range(8)]
    events.append(_event('bad', None))
    once = sort_events(events)
    assert sort_events(once) == once


# ---------------------------------------------------------------------------
# Aggregation
# ---------------------------------------------------------------------------

@pytest.mark.parametrize('a, e, p', [(0, 0, 0), (1, 0, 0), (0, 3, 0), (2, 1, 4), (5, 5, 5)])
def test_event_count_is_one_plus_records(a, e, p):
    patient = {
        'createdAt': '2024-01-01T08:00:00Z',
        'admisiones': [{'fechaAdmision': '2024-01-01'} for _ in range(a)],
        'encuentros': [{'fecha': '2024-02-01', 'tipo': 'CONSULTA'} for _ in range(e)],
        'citas': [{'fecha': '2024-03-01', 'estado': 'PROGRAMADA'} for _ in range(p)],
    }
    assert len(build_timeline(patient)) == 1 + a + e + p


@pytest.mark.parametrize('patient', [{}, {'admisiones': None, 'encuentros': None, 'citas': None}, None])
def test_absent_collections_yield_only_registration(patient):
    events = build_timeline(patient)
    assert len(events) == 1
    assert events[0].tipo == 'registro'


def test_initial_admission_is_presented_as_registration():
    event = admission_event({'fechaAdmision': '2024-01-01', 'formaIngreso': 'AMBULANTE'})
    assert event.titulo == 'Registro inicial'
    assert 'AMBULANTE' in event.descripcion
    clinical = admission_event({'fechaAdmision': '2024-01-01', 'tipo': 'HOSPITALIZACION', 'servicio': 'Cirugía'})
    assert clinical.titulo != event.titulo
    assert clinical.color != event.color


def test_emergency_admission_has_its_own_color():
    emergency = admission_event({'fechaAdmision': '2024-01-01', 'tipo': 'EMERGENCIA', 'servicio': 'Urgencias'})
    hosp = admission_event({'fechaAdmision': '2024-01-01', 'tipo': 'HOSPITALIZACION', 'servicio': 'Cirugía'})
    assert emergency.color == 'danger'
    assert hosp.color != 'danger'


def test_clinical_admission_fills_missing_fields_with_placeholder():
    event = admission_event({'fechaAdmision': '2024-01-01', 'tipo': 'HOSPITALIZACION', 'servicio': 'Cirugía'})
    assert f'Cama: {NOT_AVAILABLE}' in event.descripcion
    assert 'Servicio: Cirugía' in event.descripcion


def test_encounter_names_staff_or_placeholder():
    named = encounter_event({
        'fecha': '2024-06-15', 'hora': '09:00:00', 'tipo': 'CONSULTA',
        'createdBy': {'nombre': 'Dra. Pérez', 'especialidad': 'Cardiología'},
    })
    assert 'Dra. Pérez (Cardiología)' in named.descripcion
    anonymous = encounter_event({'fecha': '2024-06-15', 'tipo': 'CONSULTA'})
    assert f'Atendido por {NOT_AVAILABLE} ({NOT_AVAILABLE})' in anonymous.descripcion


@pytest.mark.parametrize('estado, color', [
    ('PROGRAMADA', 'warning'),
    ('COMPLETADA', 'success'),
    ('CANCELADA', 'danger'),
    ('DESCONOCIDO', 'warning'),
    (None, 'warning'),
])
def test_appointment_presentation_follows_status(estado, color):
    assert appointment_event({'fecha': '2025-01-10', 'estado': estado}).color == color


def test_appointment_motive_only_when_present():
    without = appointment_event({'fecha': '2025-01-10', 'especialidad': 'Pediatría'})
    with_motive = appointment_event({'fecha': '2025-01-10', 'especialidad': 'Pediatría', 'motivo': 'Control'})
    assert 'Motivo' not in without.descripcion
    assert with_motive.descripcion.endswith('Motivo: Control')


def test_malformed_record_is_still_emitted():
    patient = {
        'createdAt': '2024-01-01T08:00:00Z',
        'encuentros': [{'fecha': 'ayer', 'hora': '??', 'tipo': 'RARO'}, 'not-a-record'],
    }
    events = build_timeline(patient)
    assert len(events) == 3
    degraded = events[-2:]
    assert all(e.fecha == NOT_AVAILABLE and e.hora == NOT_AVAILABLE for e in degraded)
    assert events[0].tipo == 'registro'


def test_non_string_kind_and_status_use_default_presentation():
    patient = {
        'createdAt': '2020-01-01T08:00:00Z',
        'encuentros': [{'fecha': '2024-06-15', 'tipo': ['CONSULTA']}],
        'citas': [{'fecha': '2025-01-10', 'estado': {'x': 1}}],
    }
    cita, encuentro, registro = build_timeline(patient)
    assert (cita.tipo, cita.titulo, cita.color) == ('cita', 'Cita programada', 'warning')
    assert (encuentro.tipo, encuentro.titulo, encuentro.color) == ('encuentro', 'Encuentro clínico', 'secondary')
    assert registro.tipo == 'registro'


def test_detail_is_the_original_record():
    cita = {'fecha': '2025-01-10', 'estado': 'PROGRAMADA', 'id': 7}
    (registration, event) = build_timeline({'createdAt': '2020-01-01', 'citas': [cita]})[::-1]
    assert event.detalle is cita
    assert 'citas' not in registration.detalle


def test_end_to_end_order():
    patient = {
        'createdAt': '2024-01-01T08:00:00Z',
        'admisiones': [{'fechaAdmision': '2024-01-01', 'formaIngreso': 'AMBULANTE'}],
        'encuentros': [{'fecha': '2024-06-15', 'hora': '09:00:00', 'tipo': 'CONSULTA'}],
        'citas': [{'fecha': '2025-01-10', 'horaCita': '1970-01-01T15:00:00.000Z', 'estado': 'PROGRAMADA'}],
    }
    events = build_timeline(patient)
    assert [e.tipo for e in events] == ['cita', 'encuentro', 'registro', 'admision']
    assert [(e.fecha, e.hora) for e in events[:2]] == [('2025-01-10', '15:00'), ('2024-06-15', '09:00')]
    assert events[3].titulo == 'Registro inicial'
    assert set(events[0].as_dict()) == {
        'tipo', 'fecha', 'hora', 'icono', 'titulo', 'descripcion', 'color', 'detalle'
    }
