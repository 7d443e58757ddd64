from django.core.management.base import BaseCommand
from django.utils import timezone

from records.models import User
from records.services.broadcast import broadcast_refresh
from records.services.dashboard import admin_dashboard, doctor_dashboard, invalidate


class Command(BaseCommand):
    help = "Rebuild the cached dashboard payloads and broadcast a WebSocket refresh event."

    def handle(self, *args, **options):
        now = timezone.now()
        keys_refreshed = invalidate()

        admin_dashboard(refresh=True)
        clinical = User.objects.filter(role__in=[User.ROLE_MEDICO, User.ROLE_SUPER_ADMIN], is_active=True)
        for user in clinical:
            doctor_dashboard(user, refresh=True)

        broadcast_refresh(*keys_refreshed)
        self.stdout.write(self.style.SUCCESS(f"Refreshed {len(keys_refreshed)} keys at {now}"))
