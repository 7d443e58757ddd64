import datetime as dt

import pytest
from django.urls import reverse
from rest_framework.test import APIClient

from records.models import AuthorizedPersonnel, User

pytestmark = pytest.mark.django_db

TODAY = dt.date.today()


@pytest.fixture
def superadmin():
    return User.objects.create_user(username='root', password='P@ssw0rd1', role=User.ROLE_SUPER_ADMIN)


@pytest.fixture
def su_client(superadmin):
    client = APIClient()
    client.force_authenticate(user=superadmin)
    return client


def whitelist(ci='V-11111111', rol=User.ROLE_MEDICO, **extra):
    fields = dict(ci=ci, nombre_completo='Ana Torres', rol_autorizado=rol, fecha_ingreso=TODAY - dt.timedelta(days=30))
    fields.update(extra)
    return AuthorizedPersonnel.objects.create(**fields)


def register(client, ci='V-11111111', role=User.ROLE_MEDICO, username='atorres'):
    return client.post(reverse('register_view'), {
        'username': username, 'email': f'{username}@hospital.test', 'password': 'P@ssw0rd1',
        'ci': ci, 'nombre': 'Ana Torres', 'role': role, 'especialidad': 'Pediatría',
    }, format='json')


# ---------------------------------------------------------------------
# Whitelist management
# ---------------------------------------------------------------------
def test_create_list_and_fetch_by_ci(su_client):
    r = su_client.post('/api/authorized-personnel', {
        'ci': 'v22222222', 'nombreCompleto': 'Luis Rivas', 'rolAutorizado': 'ADMIN',
        'departamento': 'Admisión', 'fechaIngreso': '2025-01-01',
    }, format='json')
    assert r.status_code == 201
    assert r.data['data']['ci'] == 'V-22222222'
    assert r.data['data']['estado'] == 'ACTIVO'
    assert r.data['data']['registrado'] is False

    r = su_client.post('/api/authorized-personnel', {
        'ci': 'V-22222222', 'nombreCompleto': 'Otro', 'rolAutorizado': 'ADMIN', 'fechaIngreso': '2025-01-01',
    }, format='json')
    assert r.status_code == 400

    r = su_client.get('/api/authorized-personnel', {'rol': 'ADMIN'})
    assert r.data['count'] == 1
    r = su_client.get('/api/authorized-personnel/V22222222')
    assert r.data['data']['nombreCompleto'] == 'Luis Rivas'
    r = su_client.get('/api/authorized-personnel/V-99999999')
    assert r.status_code == 404


def test_expiry_before_start_is_rejected(su_client):
    r = su_client.post('/api/authorized-personnel', {
        'ci': 'V-22222222', 'nombreCompleto': 'Luis Rivas', 'rolAutorizado': 'ADMIN',
        'fechaIngreso': '2025-01-10', 'fechaVencimiento': '2025-01-01',
    }, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False


def test_stats_count_states(su_client):
    whitelist('V-11111111')
    whitelist('V-22222222', rol=User.ROLE_ADMIN, registrado=True)
    whitelist('V-33333333', estado=AuthorizedPersonnel.ESTADO_INACTIVO)
    whitelist('V-44444444', fecha_vencimiento=TODAY - dt.timedelta(days=1))
    r = su_client.get('/api/authorized-personnel/stats')
    stats = r.data['data']
    assert stats['total'] == 4
    assert stats['activos'] == 3
    assert stats['inactivos'] == 1
    assert stats['registrados'] == 1
    assert stats['pendientes'] == 2
    assert stats['vencidos'] == 1
    assert stats['porRol'] == {'ADMIN': 1, 'MEDICO': 3}


def test_update_and_deactivate_requires_reason(su_client):
    whitelist()
    r = su_client.put('/api/authorized-personnel/V-11111111', {'cargo': 'Residente'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['cargo'] == 'Residente'

    r = su_client.delete('/api/authorized-personnel/V-11111111', {}, format='json')
    assert r.status_code == 400
    r = su_client.delete('/api/authorized-personnel/V-11111111', {'motivoBaja': 'Renuncia'}, format='json')
    assert r.status_code == 200
    assert r.data['data']['estado'] == 'INACTIVO'
    assert r.data['data']['motivoBaja'] == 'Renuncia'
    assert AuthorizedPersonnel.objects.filter(ci='V-11111111').exists()

    r = su_client.delete('/api/authorized-personnel/V-11111111', {'motivoBaja': 'Otra vez'}, format='json')
    assert r.status_code == 400


def test_bulk_load_reports_each_row(su_client):
    rows = [
        {'ci': 'V-10000001', 'nombreCompleto': 'Uno', 'rolAutorizado': 'MEDICO', 'fechaIngreso': '2025-01-01'},
        {'ci': 'V-10000001', 'nombreCompleto': 'Repetido', 'rolAutorizado': 'MEDICO', 'fechaIngreso': '2025-01-01'},
        {'ci': 'X-1', 'nombreCompleto': 'Malo', 'rolAutorizado': 'MEDICO', 'fechaIngreso': '2025-01-01'},
        {'ci': 'E-10000002', 'nombreCompleto': 'Dos', 'rolAutorizado': 'ADMIN', 'fechaIngreso': '2025-01-01'},
    ]
    r = su_client.post('/api/authorized-personnel/bulk', {'personnel': rows}, format='json')
    assert r.status_code == 201
    assert r.data['created'] == 2
    assert r.data['failed'] == 2
    assert [row['ok'] for row in r.data['results']] == [True, False, False, True]
    assert 'ci' in r.data['results'][2]['errors']


def test_bulk_load_limit(su_client):
    rows = [{'ci': f'V-{20000000 + i}', 'nombreCompleto': f'Persona {i}', 'rolAutorizado': 'MEDICO',
             'fechaIngreso': '2025-01-01'} for i in range(101)]
    r = su_client.post('/api/authorized-personnel/bulk', {'personnel': rows}, format='json')
    assert r.status_code == 400
    assert AuthorizedPersonnel.objects.count() == 0


def test_whitelist_is_super_admin_only():
    client = APIClient()
    client.force_authenticate(user=User.objects.create_user(username='adm', password='x', role=User.ROLE_ADMIN))
    assert client.get('/api/authorized-personnel').status_code == 403
    assert client.get('/api/authorized-personnel/stats').status_code == 403


# ---------------------------------------------------------------------
# Whitelist-gated registration
# ---------------------------------------------------------------------
def test_register_marks_entry_used():
    entry = whitelist()
    r = register(APIClient())
    assert r.status_code == 201
    assert r.data['role'] == 'MEDICO'
    assert r.data['jwt_access'] and r.data['token']
    entry.refresh_from_db()
    assert entry.registrado is True
    user = User.objects.get(username='atorres')
    assert user.ci == 'V-11111111'
    assert user.especialidad == 'Pediatría'


def test_register_refused_when_not_listed():
    r = register(APIClient())
    assert r.status_code == 403
    assert r.data['ok'] is False
    assert not User.objects.filter(username='atorres').exists()


@pytest.mark.parametrize('extra', [
    {'estado': AuthorizedPersonnel.ESTADO_INACTIVO},
    {'registrado': True},
    {'fecha_vencimiento': TODAY - dt.timedelta(days=1)},
])
def test_register_refused_for_unusable_entry(extra):
    entry = whitelist(**extra)
    r = register(APIClient())
    assert r.status_code == 403
    entry.refresh_from_db()
    assert entry.registrado == extra.get('registrado', False)
    assert not User.objects.filter(username='atorres').exists()


def test_register_refused_for_other_role():
    whitelist(rol=User.ROLE_ADMIN)
    r = register(APIClient(), role=User.ROLE_MEDICO)
    assert r.status_code == 403
    assert 'ADMIN' in r.data['detail']


def test_register_cannot_claim_super_admin():
    whitelist()
    r = register(APIClient(), role=User.ROLE_SUPER_ADMIN)
    assert r.status_code == 400


# ---------------------------------------------------------------------
# Login
# ---------------------------------------------------------------------
def test_login_by_username_or_email_returns_jwt_and_token():
    User.objects.create_user(username='medico1', email='medico1@hospital.test', password='P@ssw0rd1',
                             role=User.ROLE_MEDICO)
    client = APIClient()
    for ident in ('medico1', 'MEDICO1@hospital.test'):
        r = client.post(reverse('login_view'), {'username': ident, 'password': 'P@ssw0rd1'}, format='json')
        assert r.status_code == 200
        assert r.data['jwt_access'] and r.data['jwt_refresh'] and r.data['token']

    r = client.post(reverse('login_view'), {'username': 'medico1', 'password': 'wrong'}, format='json')
    assert r.status_code == 400
    assert r.data['ok'] is False


def test_no_role_bypass_in_login():
    u = User.objects.create_user(username='u1', password='P@ssw0rd1', role=User.ROLE_ADMIN)
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'u1', 'password': 'P@ssw0rd1', 'role': 'SUPER_ADMIN'},
                    format='json')
    assert r.status_code == 200
    assert r.data['role'] == 'ADMIN'
    u.refresh_from_db()
    assert u.role == 'ADMIN'


def test_token_authenticates_me_and_logout_revokes_it():
    User.objects.create_user(username='u2', password='P@ssw0rd1', role=User.ROLE_ADMIN)
    client = APIClient()
    r = client.post(reverse('login_view'), {'username': 'u2', 'password': 'P@ssw0rd1'}, format='json')
    client.credentials(HTTP_AUTHORIZATION=f"Token {r.data['token']}")
    me = client.get(reverse('me_view'))
    assert me.status_code == 200
    assert me.data['user']['username'] == 'u2'

    r = client.post(reverse('jwt_logout_view'), {}, format='json')
    assert r.status_code == 200
    assert r.data['blacklisted'] == 1
    assert client.get(reverse('me_view')).status_code in (401, 403)
