"""
Django admin registrations for the records models.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    Admission,
    Appointment,
    AuditEvent,
    AuthorizedPersonnel,
    Encounter,
    HospitalizationFormat,
    Patient,
    User,
)


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    fieldsets = BaseUserAdmin.fieldsets + (
        ('Hospital', {'fields': ('role', 'ci', 'nombre', 'cargo', 'especialidad')}),
    )
    list_display = ('username', 'nombre', 'role', 'ci', 'is_active')
    list_filter = ('role', 'is_active')


@admin.register(AuthorizedPersonnel)
class AuthorizedPersonnelAdmin(admin.ModelAdmin):
    list_display = ('ci', 'nombre_completo', 'rol_autorizado', 'estado', 'registrado', 'fecha_vencimiento')
    list_filter = ('estado', 'rol_autorizado', 'registrado')
    search_fields = ('ci', 'nombre_completo', 'email')


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('nro_historia', 'ci', 'apellidos_nombres', 'sexo', 'created_at')
    search_fields = ('nro_historia', 'ci', 'apellidos_nombres')


@admin.register(Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'tipo', 'servicio', 'fecha_admision', 'estado')
    list_filter = ('tipo', 'estado')


@admin.register(Encounter)
class EncounterAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'tipo', 'fecha', 'hora', 'created_by')
    list_filter = ('tipo',)


@admin.register(Appointment)
class AppointmentAdmin(admin.ModelAdmin):
    list_display = ('id', 'patient', 'fecha', 'hora', 'especialidad', 'estado')
    list_filter = ('estado', 'especialidad')


admin.site.register(HospitalizationFormat)


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
