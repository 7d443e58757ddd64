from rest_framework import serializers

from records.models import Admission, Patient
from records.validators import normalize_ci, is_valid_history_number, is_valid_phone, clean_text
from records.services.timeline import parse_time


class MilitaryRecordSerializer(serializers.Serializer):
    grado = serializers.CharField(required=False, allow_blank=True, max_length=60)
    componente = serializers.CharField(required=False, allow_blank=True, max_length=60)
    unidad = serializers.CharField(required=False, allow_blank=True, max_length=120)


class PatientUpdateSerializer(serializers.Serializer):
    apellidosNombres = serializers.CharField(required=False, max_length=255)
    fechaNacimiento = serializers.DateField(required=False, allow_null=True)
    sexo = serializers.ChoiceField(choices=[c for c, _ in Patient.SEXO_CHOICES], required=False, allow_blank=True)
    nacionalidad = serializers.CharField(required=False, allow_blank=True, max_length=60)
    direccion = serializers.CharField(required=False, allow_blank=True, max_length=255)
    telefono = serializers.CharField(required=False, allow_blank=True, max_length=20)
    lugarNacimiento = serializers.CharField(required=False, allow_blank=True, max_length=120)
    estado = serializers.CharField(required=False, allow_blank=True, max_length=60)
    region = serializers.CharField(required=False, allow_blank=True, max_length=60)
    militar = MilitaryRecordSerializer(required=False, allow_null=True)

    def validate_apellidosNombres(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('El nombre debe tener al menos 2 caracteres')
        return v

    def validate_telefono(self, v):
        v = (v or '').strip()
        if v and not is_valid_phone(v):
            raise serializers.ValidationError('Teléfono inválido (formato 0414-1234567)')
        return v

    def validate_direccion(self, v):
        return clean_text(v)


class PatientCreateSerializer(PatientUpdateSerializer):
    nroHistoria = serializers.CharField(max_length=8)
    ci = serializers.CharField(max_length=12)
    apellidosNombres = serializers.CharField(max_length=255)
    formaIngreso = serializers.ChoiceField(
        choices=[c for c, _ in Admission.FORMA_CHOICES], required=False, default='AMBULANTE'
    )
    fechaAdmision = serializers.DateField(required=False, allow_null=True)
    horaAdmision = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=32)

    def validate_nroHistoria(self, v):
        v = (v or '').strip()
        if not is_valid_history_number(v):
            raise serializers.ValidationError('Número de historia inválido (formato 12-34-56)')
        return v

    def validate_ci(self, v):
        ci = normalize_ci(v)
        if not ci:
            raise serializers.ValidationError('Cédula inválida (formato V-12345678)')
        return ci

    def validate_horaAdmision(self, v):
        if v and parse_time(v) is None:
            raise serializers.ValidationError('Hora inválida (formato HH:MM)')
        return v or None


class PatientListQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True)
    page = serializers.IntegerField(required=False, min_value=1)
    pageSize = serializers.IntegerField(required=False, min_value=1, max_value=200)


class PatientSearchSerializer(serializers.Serializer):
    ci = serializers.CharField(required=False, allow_blank=True)
    nroHistoria = serializers.CharField(required=False, allow_blank=True)

    def validate(self, attrs):
        if not (attrs.get('ci') or attrs.get('nroHistoria')):
            raise serializers.ValidationError('Indique ci o nroHistoria')
        return attrs
