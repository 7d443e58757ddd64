from django.contrib.auth.hashers import make_password
from django.core.management.base import BaseCommand
from django.utils import timezone

from records.models import AuthorizedPersonnel, User

TEST_SET = [
    ("superadmin", User.ROLE_SUPER_ADMIN, "V-10000001", "Super Administrador", ""),
    ("admin1", User.ROLE_ADMIN, "V-10000002", "Admisión Central", ""),
    ("medico1", User.ROLE_MEDICO, "V-10000003", "Dra. Medicina Interna", "Medicina Interna"),
]


class Command(BaseCommand):
    help = "Ensure one user per staff role exists with password=Hospital123 (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--password", default="Hospital123")

    def handle(self, *args, **opts):
        password = make_password(opts["password"])
        for username, role, ci, nombre, especialidad in TEST_SET:
            u, created = User.objects.get_or_create(
                username=username,
                defaults={"role": role, "ci": ci, "nombre": nombre, "especialidad": especialidad,
                          "password": password, "is_active": True},
            )
            if not created:
                u.password = password
                u.role = role
                u.is_active = True
                u.save(update_fields=["password", "role", "is_active"])
            if role != User.ROLE_SUPER_ADMIN:
                AuthorizedPersonnel.objects.update_or_create(
                    ci=ci,
                    defaults={"nombre_completo": nombre, "rol_autorizado": role, "registrado": True,
                              "fecha_ingreso": timezone.localdate()},
                )
            self.stdout.write(self.style.SUCCESS(f"ok: {username} ({role})"))
        self.stdout.write(self.style.SUCCESS("All test users ensured."))
