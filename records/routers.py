"""
URL mappings for the records API.

Paths carry no trailing slash.  Literal segments (``stats``, ``bulk``,
``ultimos``, ``hoy``...) are listed before the parameterised routes
they would otherwise be captured by.
"""
from django.urls import path, include

from .auth_views import login_view, register_view, me_view, jwt_refresh_view, jwt_logout_view
from .views import admissions, appointments, dashboard, encounters, health, hospitalization, patients, personnel


urlpatterns = [
    path('', include('django_prometheus.urls')),
    path('healthz', health.healthz, name='healthz'),

    # Authentication
    path('api/auth/login', login_view, name='login_view'),
    path('api/auth/register', register_view, name='register_view'),
    path('api/auth/refresh', jwt_refresh_view, name='jwt_refresh_view'),
    path('api/auth/logout', jwt_logout_view, name='jwt_logout_view'),
    path('api/auth/me', me_view, name='me_view'),

    # Authorized personnel whitelist
    path('api/authorized-personnel', personnel.personnel_collection, name='personnel_collection'),
    path('api/authorized-personnel/stats', personnel.personnel_stats_view, name='personnel_stats'),
    path('api/authorized-personnel/bulk', personnel.personnel_bulk, name='personnel_bulk'),
    path('api/authorized-personnel/<str:ci>', personnel.personnel_detail, name='personnel_detail'),

    # Patients
    path('api/pacientes', patients.patients_collection, name='patients_collection'),
    path('api/pacientes/ultimos', patients.recent_patients, name='recent_patients'),
    path('api/pacientes/search', patients.search_patient, name='search_patient'),
    path('api/pacientes/<int:pk>', patients.patient_detail, name='patient_detail'),
    path('api/pacientes/<int:pk>/timeline', patients.patient_timeline_view, name='patient_timeline'),

    # Admissions
    path('api/admisiones', admissions.admission_create, name='admission_create'),
    path('api/admisiones/activas', admissions.admissions_active, name='admissions_active'),
    path('api/admisiones/paciente/<int:patient_id>', admissions.admissions_by_patient, name='admissions_by_patient'),
    path('api/admisiones/<int:pk>/alta', admissions.admission_discharge, name='admission_discharge'),

    # Encounters
    path('api/encuentros', encounters.encounter_create, name='encounter_create'),
    path('api/encuentros/desde-cita', encounters.encounter_from_appointment, name='encounter_from_appointment'),
    path('api/encuentros/hoy', encounters.encounters_of_today, name='encounters_today'),
    path('api/encuentros/paciente/<int:patient_id>', encounters.encounters_by_patient, name='encounters_by_patient'),
    path('api/encuentros/tipo/<str:tipo>', encounters.encounters_of_type, name='encounters_by_type'),
    path('api/encuentros/<int:pk>', encounters.encounter_detail_view, name='encounter_detail'),

    # Appointments
    path('api/citas', appointments.appointments_collection, name='appointments_collection'),
    path('api/citas/<int:pk>', appointments.appointment_detail, name='appointment_detail'),
    path('api/citas/<int:pk>/estado', appointments.appointment_status, name='appointment_status'),

    # Hospitalization format
    path('api/formato-hospitalizacion', hospitalization.format_create, name='format_create'),
    path('api/formato-hospitalizacion/admision/<int:admision_id>', hospitalization.format_by_admission,
         name='format_by_admission'),
    path('api/formato-hospitalizacion/<int:pk>/ordenes-medicas', hospitalization.format_orders, name='format_orders'),
    path('api/formato-hospitalizacion/<int:pk>/resumen-ingreso', hospitalization.format_summary,
         name='format_summary'),
    path('api/formato-hospitalizacion/<int:pk>/<slug:section>', hospitalization.section_add, name='section_add'),
    path('api/formato-hospitalizacion/<slug:section>/<int:pk>', hospitalization.section_entry, name='section_entry'),

    # Dashboards
    path('api/dashboard/admin', dashboard.admin_dashboard_view, name='admin_dashboard'),
    path('api/dashboard/medico', dashboard.doctor_dashboard_view, name='doctor_dashboard'),
    path('api/dashboard/<str:dashboard>/navegar', dashboard.navigate_view, name='dashboard_navigate'),
]
