from rest_framework import serializers

from records.models import Encounter
from records.validators import clean_text
from records.services.timeline import parse_time


class VitalSignsSerializer(serializers.Serializer):
    taSistolica = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=400)
    taDiastolica = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=300)
    pulso = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=300)
    temperatura = serializers.DecimalField(max_digits=4, decimal_places=1, required=False, allow_null=True)
    fr = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=120)
    observaciones = serializers.CharField(required=False, allow_blank=True)


class DiagnosticImpressionSerializer(serializers.Serializer):
    codigoCie = serializers.CharField(required=False, allow_blank=True, max_length=10)
    descripcion = serializers.CharField(required=False, allow_blank=True)
    clase = serializers.CharField(required=False, allow_blank=True, max_length=40)


class EncounterFieldsSerializer(serializers.Serializer):
    tipo = serializers.ChoiceField(choices=[c for c, _ in Encounter.TIPO_CHOICES])
    fecha = serializers.DateField(required=False)
    hora = serializers.CharField(required=False, allow_blank=True, max_length=32)
    motivoConsulta = serializers.CharField(required=False, allow_blank=True)
    enfermedadActual = serializers.CharField(required=False, allow_blank=True)
    procedencia = serializers.CharField(required=False, allow_blank=True, max_length=120)
    nroCama = serializers.CharField(required=False, allow_blank=True, max_length=20)
    admisionId = serializers.IntegerField(required=False, allow_null=True)
    signosVitales = VitalSignsSerializer(required=False, many=True)
    impresiones = DiagnosticImpressionSerializer(required=False, many=True)

    def validate_hora(self, v):
        if v and parse_time(v) is None:
            raise serializers.ValidationError('Hora inválida (formato HH:MM)')
        return v

    def validate_motivoConsulta(self, v):
        return clean_text(v)

    def validate_enfermedadActual(self, v):
        return clean_text(v)


class EncounterCreateSerializer(EncounterFieldsSerializer):
    pacienteId = serializers.IntegerField()


class EncounterFromAppointmentSerializer(EncounterFieldsSerializer):
    citaId = serializers.IntegerField()
    tipo = serializers.ChoiceField(choices=[c for c, _ in Encounter.TIPO_CHOICES], required=False, default='CONSULTA')
