from rest_framework import serializers

from records.models import Admission
from records.validators import clean_text
from records.services.timeline import parse_time


class AdmissionCreateSerializer(serializers.Serializer):
    pacienteId = serializers.IntegerField()
    tipo = serializers.ChoiceField(choices=[c for c, _ in Admission.TIPO_CHOICES])
    servicio = serializers.CharField(max_length=60)
    fechaAdmision = serializers.DateField()
    horaAdmision = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)
    formaIngreso = serializers.ChoiceField(
        choices=[c for c, _ in Admission.FORMA_CHOICES], required=False, default='AMBULANTE'
    )
    habitacion = serializers.CharField(required=False, allow_blank=True, max_length=20)
    cama = serializers.CharField(required=False, allow_blank=True, max_length=20)
    diagnostico = serializers.CharField(required=False, allow_blank=True)
    observaciones = serializers.CharField(required=False, allow_blank=True)

    def validate_horaAdmision(self, v):
        if v and parse_time(v) is None:
            raise serializers.ValidationError('Hora inválida (formato HH:MM)')
        return v or None

    def validate_diagnostico(self, v):
        return clean_text(v)

    def validate_observaciones(self, v):
        return clean_text(v)


class DischargeSerializer(serializers.Serializer):
    fechaAlta = serializers.DateField(required=False)
    observaciones = serializers.CharField(required=False, allow_blank=True)
