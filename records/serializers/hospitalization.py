from rest_framework import serializers

from records.validators import clean_text
from records.services.timeline import parse_time


def _check_hora(v):
    if v and parse_time(v) is None:
        raise serializers.ValidationError('Hora inválida (formato HH:MM)')
    return v


class FormatCreateSerializer(serializers.Serializer):
    admisionId = serializers.IntegerField()


class FormatVitalSignsSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    hora = serializers.CharField(required=False, allow_blank=True, max_length=32)
    taSistolica = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=400)
    taDiastolica = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=300)
    pulso = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=300)
    temperatura = serializers.DecimalField(max_digits=4, decimal_places=1, required=False, allow_null=True)
    fr = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=120)
    saturacion = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=100)
    observaciones = serializers.CharField(required=False, allow_blank=True)

    def validate_hora(self, v):
        return _check_hora(v)


class LabResultSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    examen = serializers.CharField(max_length=120)
    resultado = serializers.CharField(required=False, allow_blank=True)
    observaciones = serializers.CharField(required=False, allow_blank=True)

    def validate_examen(self, v):
        return clean_text(v)


class MedicalOrderSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    hora = serializers.CharField(required=False, allow_blank=True, max_length=32)
    indicacion = serializers.CharField()
    ejecutada = serializers.BooleanField(required=False, default=False)

    def validate_hora(self, v):
        return _check_hora(v)

    def validate_indicacion(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('La indicación es obligatoria')
        return v


class MedicalEvolutionSerializer(serializers.Serializer):
    fecha = serializers.DateField()
    hora = serializers.CharField(required=False, allow_blank=True, max_length=32)
    nota = serializers.CharField()

    def validate_hora(self, v):
        return _check_hora(v)

    def validate_nota(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('La nota es obligatoria')
        return v


class AdmissionSummarySerializer(serializers.Serializer):
    motivoIngreso = serializers.CharField(required=False, allow_blank=True)
    diagnosticoIngreso = serializers.CharField(required=False, allow_blank=True)
    plan = serializers.CharField(required=False, allow_blank=True)
