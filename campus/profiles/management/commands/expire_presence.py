from django.core.management.base import BaseCommand

from profiles.presence import expire_stale


class Command(BaseCommand):
    help = "Mark users offline whose last heartbeat is older than the staleness window."

    def handle(self, *args, **options):
        expired = expire_stale()
        self.stdout.write(self.style.SUCCESS(f"Expired {expired} presence record(s)"))
