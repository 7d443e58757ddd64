from rest_framework import serializers

from records.models import AuthorizedPersonnel
from records.validators import normalize_ci, clean_text


class AuthorizedPersonnelSerializer(serializers.Serializer):
    ci = serializers.CharField(max_length=12)
    nombreCompleto = serializers.CharField(max_length=255)
    email = serializers.EmailField(required=False, allow_blank=True)
    rolAutorizado = serializers.ChoiceField(choices=[c for c, _ in AuthorizedPersonnel.ROL_CHOICES])
    departamento = serializers.CharField(required=False, allow_blank=True, max_length=120)
    cargo = serializers.CharField(required=False, allow_blank=True, max_length=120)
    fechaIngreso = serializers.DateField()
    fechaVencimiento = serializers.DateField(required=False, allow_null=True)

    def validate_ci(self, v):
        ci = normalize_ci(v)
        if not ci:
            raise serializers.ValidationError('Cédula inválida (formato V-12345678)')
        return ci

    def validate_nombreCompleto(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('El nombre debe tener al menos 2 caracteres')
        return v

    def validate(self, attrs):
        start, end = attrs.get('fechaIngreso'), attrs.get('fechaVencimiento')
        if start and end and end < start:
            raise serializers.ValidationError({'fechaVencimiento': 'Debe ser posterior a la fecha de ingreso'})
        return attrs


class AuthorizedPersonnelUpdateSerializer(AuthorizedPersonnelSerializer):
    ci = None
    nombreCompleto = serializers.CharField(required=False, max_length=255)
    rolAutorizado = serializers.ChoiceField(choices=[c for c, _ in AuthorizedPersonnel.ROL_CHOICES], required=False)
    fechaIngreso = serializers.DateField(required=False)
    estado = serializers.ChoiceField(choices=[c for c, _ in AuthorizedPersonnel.ESTADO_CHOICES], required=False)


class PersonnelListQuerySerializer(serializers.Serializer):
    estado = serializers.ChoiceField(choices=[c for c, _ in AuthorizedPersonnel.ESTADO_CHOICES], required=False)
    rol = serializers.ChoiceField(choices=[c for c, _ in AuthorizedPersonnel.ROL_CHOICES], required=False)
    registrado = serializers.BooleanField(required=False, allow_null=True, default=None)
    departamento = serializers.CharField(required=False, allow_blank=True)


class DeactivateSerializer(serializers.Serializer):
    motivoBaja = serializers.CharField(max_length=255)

    def validate_motivoBaja(self, v):
        v = clean_text(v)
        if not v:
            raise serializers.ValidationError('Indique el motivo de la baja')
        return v
