from django.core.management.base import BaseCommand

from booths.services.admin_service import BoothAdminService
from booths.stores.django_store import DjangoBoothStore, DjangoParticipantCounter


class Command(BaseCommand):
    help = "Delete expired operator sessions and code attempts past the retention window."

    def handle(self, *args, **options):
        service = BoothAdminService.build(DjangoBoothStore(), DjangoParticipantCounter())
        result = service.purge_expired()
        self.stdout.write(
            self.style.SUCCESS(
                f"Purged {result.sessions} session(s) and {result.attempts} code attempt(s)"
            )
        )
