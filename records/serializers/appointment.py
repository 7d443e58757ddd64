from rest_framework import serializers

from records.models import Appointment
from records.validators import clean_text
from records.services.timeline import parse_time


class AppointmentCreateSerializer(serializers.Serializer):
    pacienteId = serializers.IntegerField()
    fecha = serializers.DateField()
    hora = serializers.CharField(max_length=32)
    especialidad = serializers.CharField(max_length=120)
    medicoId = serializers.IntegerField(required=False, allow_null=True)
    motivo = serializers.CharField(required=False, allow_blank=True)

    def validate_hora(self, v):
        if parse_time(v) is None:
            raise serializers.ValidationError('Hora inválida (formato HH:MM)')
        return v

    def validate_especialidad(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('La especialidad es obligatoria')
        return v

    def validate_motivo(self, v):
        return clean_text(v)


class AppointmentListQuerySerializer(serializers.Serializer):
    fecha = serializers.DateField(required=False)
    estado = serializers.ChoiceField(choices=[c for c, _ in Appointment.ESTADO_CHOICES], required=False)
    pacienteId = serializers.IntegerField(required=False)


class AppointmentStatusSerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=[c for c, _ in Appointment.ESTADO_CHOICES])
