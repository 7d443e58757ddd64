"""
Database models for the Hospital JMV records backend.

These models capture registered staff, the authorized-personnel
whitelist, patients and their clinical history: admissions, medical
encounters, appointments and the hospitalization format attached to an
admission.  Field names follow the hospital's own vocabulary so that the
JSON produced by the views maps one-to-one to what the dashboards show.
"""
from __future__ import annotations

from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """Hospital staff account.

    Roles mirror the dashboards: ``SUPER_ADMIN`` manages the
    whitelist, ``ADMIN`` runs the administrative dashboard and
    ``MEDICO`` documents clinical encounters.
    """
    ROLE_SUPER_ADMIN = 'SUPER_ADMIN'
    ROLE_ADMIN = 'ADMIN'
    ROLE_MEDICO = 'MEDICO'
    ROLE_CHOICES = [
        (ROLE_SUPER_ADMIN, 'Super administrador'),
        (ROLE_ADMIN, 'Administrativo'),
        (ROLE_MEDICO, 'Médico'),
    ]
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_ADMIN, db_index=True)
    ci = models.CharField(max_length=12, unique=True, null=True, blank=True)
    nombre = models.CharField(max_length=255, blank=True)
    cargo = models.CharField(max_length=120, blank=True)
    especialidad = models.CharField(max_length=120, blank=True)

    def display_name(self) -> str:
        return self.nombre or self.get_full_name() or self.username

    def __str__(self) -> str:
        return f"{self.username} ({self.role})"


class AuthorizedPersonnel(models.Model):
    """Whitelist entry that allows a person to self-register as staff.

    Entries are never deleted: deactivation flips ``estado`` and records
    the reason in ``motivo_baja``.
    """
    ESTADO_ACTIVO = 'ACTIVO'
    ESTADO_INACTIVO = 'INACTIVO'
    ESTADO_CHOICES = [(ESTADO_ACTIVO, 'Activo'), (ESTADO_INACTIVO, 'Inactivo')]
    ROL_CHOICES = [(User.ROLE_ADMIN, 'Administrativo'), (User.ROLE_MEDICO, 'Médico')]

    ci = models.CharField(max_length=12, unique=True)
    nombre_completo = models.CharField(max_length=255)
    email = models.EmailField(blank=True)
    rol_autorizado = models.CharField(max_length=20, choices=ROL_CHOICES, db_index=True)
    departamento = models.CharField(max_length=120, blank=True)
    cargo = models.CharField(max_length=120, blank=True)
    fecha_ingreso = models.DateField()
    fecha_vencimiento = models.DateField(null=True, blank=True)
    estado = models.CharField(max_length=10, choices=ESTADO_CHOICES, default=ESTADO_ACTIVO, db_index=True)
    registrado = models.BooleanField(default=False)
    motivo_baja = models.CharField(max_length=255, blank=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='authorized_personnel'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.ci} {self.nombre_completo} ({self.rol_autorizado})"


class Patient(models.Model):
    """Archival patient record identified by its history number."""
    SEXO_CHOICES = [('M', 'Masculino'), ('F', 'Femenino')]

    nro_historia = models.CharField(max_length=8, unique=True)
    ci = models.CharField(max_length=12, unique=True)
    apellidos_nombres = models.CharField(max_length=255, db_index=True)
    fecha_nacimiento = models.DateField(null=True, blank=True)
    sexo = models.CharField(max_length=1, choices=SEXO_CHOICES, blank=True)
    nacionalidad = models.CharField(max_length=60, blank=True)
    direccion = models.CharField(max_length=255, blank=True)
    telefono = models.CharField(max_length=20, blank=True)
    lugar_nacimiento = models.CharField(max_length=120, blank=True)
    estado = models.CharField(max_length=60, blank=True)
    region = models.CharField(max_length=60, blank=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='patients_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    def __str__(self) -> str:
        return f"{self.nro_historia} {self.apellidos_nombres}"


class MilitaryRecord(models.Model):
    """Optional military-personnel data attached to a patient."""
    patient = models.OneToOneField(Patient, on_delete=models.CASCADE, related_name='militar')
    grado = models.CharField(max_length=60, blank=True)
    componente = models.CharField(max_length=60, blank=True)
    unidad = models.CharField(max_length=120, blank=True)

    def __str__(self) -> str:
        return f"{self.grado} {self.componente} ({self.patient_id})"


class Admission(models.Model):
    """One hospital stay or ambulatory registration event.

    The admission created together with the patient has neither ``tipo``
    nor ``servicio``; the timeline presents it as the initial
    registration rather than as a clinical admission.
    """
    TIPO_EMERGENCIA = 'EMERGENCIA'
    TIPO_HOSPITALIZACION = 'HOSPITALIZACION'
    TIPO_CHOICES = [(TIPO_EMERGENCIA, 'Emergencia'), (TIPO_HOSPITALIZACION, 'Hospitalización')]

    FORMA_CHOICES = [
        ('AMBULANTE', 'Ambulante'),
        ('AMBULANCIA', 'Ambulancia'),
        ('TRANSFERENCIA', 'Transferencia'),
    ]

    ESTADO_ACTIVA = 'ACTIVA'
    ESTADO_ALTA = 'ALTA'
    ESTADO_CHOICES = [(ESTADO_ACTIVA, 'Activa'), (ESTADO_ALTA, 'Alta')]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='admisiones')
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES, null=True, blank=True)
    servicio = models.CharField(max_length=60, null=True, blank=True)
    fecha_admision = models.DateField(db_index=True)
    # Stored as text: legacy rows carry a full ISO datetime anchored at 1970-01-01
    hora_admision = models.CharField(max_length=32, null=True, blank=True)
    forma_ingreso = models.CharField(max_length=20, choices=FORMA_CHOICES, default='AMBULANTE')
    habitacion = models.CharField(max_length=20, blank=True)
    cama = models.CharField(max_length=20, blank=True)
    diagnostico = models.TextField(blank=True)
    observaciones = models.TextField(blank=True)
    fecha_alta = models.DateField(null=True, blank=True)
    estado = models.CharField(max_length=10, choices=ESTADO_CHOICES, default=ESTADO_ACTIVA, db_index=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='admissions_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [models.Index(fields=['patient', 'fecha_admision'], name='admision_patient_fecha_idx')]

    def __str__(self) -> str:
        return f"Admision {self.id} {self.tipo or 'INICIAL'} p={self.patient_id}"


class Appointment(models.Model):
    """A scheduled visit; becomes an encounter once attended."""
    ESTADO_PROGRAMADA = 'PROGRAMADA'
    ESTADO_COMPLETADA = 'COMPLETADA'
    ESTADO_CANCELADA = 'CANCELADA'
    ESTADO_CHOICES = [
        (ESTADO_PROGRAMADA, 'Programada'),
        (ESTADO_COMPLETADA, 'Completada'),
        (ESTADO_CANCELADA, 'Cancelada'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='citas')
    fecha = models.DateField(db_index=True)
    hora = models.CharField(max_length=32, blank=True)
    especialidad = models.CharField(max_length=120)
    medico = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments_assigned'
    )
    motivo = models.TextField(blank=True)
    estado = models.CharField(max_length=12, choices=ESTADO_CHOICES, default=ESTADO_PROGRAMADA, db_index=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='appointments_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['fecha', 'estado'], name='cita_fecha_estado_idx')]

    def __str__(self) -> str:
        return f"Cita {self.id} {self.fecha} {self.estado}"


class Encounter(models.Model):
    """A clinical visit documented by staff. Append-only."""
    TIPO_CHOICES = [
        ('EMERGENCIA', 'Emergencia'),
        ('HOSPITALIZACION', 'Hospitalización'),
        ('CONSULTA', 'Consulta'),
        ('OTRO', 'Otro'),
    ]

    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='encuentros')
    admision = models.ForeignKey(
        Admission, null=True, blank=True, on_delete=models.SET_NULL, related_name='encuentros'
    )
    cita = models.OneToOneField(
        Appointment, null=True, blank=True, on_delete=models.SET_NULL, related_name='encuentro'
    )
    tipo = models.CharField(max_length=20, choices=TIPO_CHOICES, db_index=True)
    fecha = models.DateField(db_index=True)
    hora = models.CharField(max_length=32, blank=True)
    motivo_consulta = models.TextField(blank=True)
    enfermedad_actual = models.TextField(blank=True)
    procedencia = models.CharField(max_length=120, blank=True)
    nro_cama = models.CharField(max_length=20, blank=True)
    created_by = models.ForeignKey(
        User, null=True, blank=True, on_delete=models.SET_NULL, related_name='encounters_created'
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        indexes = [models.Index(fields=['patient', 'fecha'], name='encuentro_patient_fecha_idx')]

    def __str__(self) -> str:
        return f"Encuentro {self.id} {self.tipo} p={self.patient_id}"


class VitalSigns(models.Model):
    encuentro = models.ForeignKey(Encounter, on_delete=models.CASCADE, related_name='signos_vitales')
    ta_sistolica = models.PositiveSmallIntegerField(null=True, blank=True)
    ta_diastolica = models.PositiveSmallIntegerField(null=True, blank=True)
    pulso = models.PositiveSmallIntegerField(null=True, blank=True)
    temperatura = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    fr = models.PositiveSmallIntegerField(null=True, blank=True)
    observaciones = models.TextField(blank=True)
    registrado_en = models.DateTimeField(auto_now_add=True)


class DiagnosticImpression(models.Model):
    encuentro = models.ForeignKey(Encounter, on_delete=models.CASCADE, related_name='impresiones')
    codigo_cie = models.CharField(max_length=10, blank=True)
    descripcion = models.TextField(blank=True)
    clase = models.CharField(max_length=40, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)


# ---------------------------------------------------------------------------
# Hospitalization format (one per admission)
# ---------------------------------------------------------------------------

class HospitalizationFormat(models.Model):
    admision = models.OneToOneField(Admission, on_delete=models.CASCADE, related_name='formato')
    patient = models.ForeignKey(Patient, on_delete=models.CASCADE, related_name='formatos')
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self) -> str:
        return f"Formato {self.id} admision={self.admision_id}"


class FormatVitalSigns(models.Model):
    formato = models.ForeignKey(HospitalizationFormat, on_delete=models.CASCADE, related_name='signos_vitales')
    fecha = models.DateField()
    hora = models.CharField(max_length=32, blank=True)
    ta_sistolica = models.PositiveSmallIntegerField(null=True, blank=True)
    ta_diastolica = models.PositiveSmallIntegerField(null=True, blank=True)
    pulso = models.PositiveSmallIntegerField(null=True, blank=True)
    temperatura = models.DecimalField(max_digits=4, decimal_places=1, null=True, blank=True)
    fr = models.PositiveSmallIntegerField(null=True, blank=True)
    saturacion = models.PositiveSmallIntegerField(null=True, blank=True)
    observaciones = models.TextField(blank=True)


class LabResult(models.Model):
    formato = models.ForeignKey(HospitalizationFormat, on_delete=models.CASCADE, related_name='laboratorios')
    fecha = models.DateField()
    examen = models.CharField(max_length=120)
    resultado = models.TextField(blank=True)
    observaciones = models.TextField(blank=True)


class MedicalOrder(models.Model):
    formato = models.ForeignKey(HospitalizationFormat, on_delete=models.CASCADE, related_name='ordenes_medicas')
    fecha = models.DateField()
    hora = models.CharField(max_length=32, blank=True)
    indicacion = models.TextField()
    ejecutada = models.BooleanField(default=False)


class MedicalEvolution(models.Model):
    formato = models.ForeignKey(HospitalizationFormat, on_delete=models.CASCADE, related_name='evoluciones_medicas')
    fecha = models.DateField()
    hora = models.CharField(max_length=32, blank=True)
    nota = models.TextField()
    medico = models.ForeignKey(User, null=True, blank=True, on_delete=models.SET_NULL, related_name='evoluciones')


class AdmissionSummary(models.Model):
    formato = models.OneToOneField(HospitalizationFormat, on_delete=models.CASCADE, related_name='resumen_ingreso')
    motivo_ingreso = models.TextField(blank=True)
    diagnostico_ingreso = models.TextField(blank=True)
    plan = models.TextField(blank=True)
    updated_at = models.DateTimeField(auto_now=True)


class AuditEvent(models.Model):
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    action = models.CharField(max_length=64)
    object_type = models.CharField(max_length=64, blank=True, null=True)
    object_id = models.BigIntegerField(blank=True, null=True)
    detail = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=['action', 'created_at'], name='audit_action_created_idx'),
            models.Index(fields=['object_type', 'object_id', 'created_at'], name='audit_object_created_idx'),
        ]

    def __str__(self):
        return f"{self.action}:{self.user_id}@{self.created_at:%F %T}"
