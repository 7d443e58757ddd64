from rest_framework import serializers

from records.models import User
from records.validators import normalize_ci, clean_text


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField()

    def validate_username(self, v):
        v = (v or '').strip()
        if not v:
            raise serializers.ValidationError('El usuario no puede estar vacío')
        return v

    def validate_password(self, v):
        if not v:
            raise serializers.ValidationError('La contraseña no puede estar vacía')
        return v


class RegisterSerializer(serializers.Serializer):
    username = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True, min_length=8)
    ci = serializers.CharField(max_length=12)
    nombre = serializers.CharField(max_length=255)
    role = serializers.ChoiceField(choices=[User.ROLE_ADMIN, User.ROLE_MEDICO])
    cargo = serializers.CharField(required=False, allow_blank=True, max_length=120)
    especialidad = serializers.CharField(required=False, allow_blank=True, max_length=120)

    def validate_ci(self, v):
        ci = normalize_ci(v)
        if not ci:
            raise serializers.ValidationError('Cédula inválida (formato V-12345678)')
        return ci

    def validate_nombre(self, v):
        v = clean_text(v)
        if len(v) < 2:
            raise serializers.ValidationError('El nombre debe tener al menos 2 caracteres')
        return v
