from django.core.management.base import BaseCommand

from subscriptions.services import SubscriptionLifecycleService


class Command(BaseCommand):
    help = "Mark premium subscriptions whose end date has passed as expired."

    def handle(self, *args, **options):
        expired = SubscriptionLifecycleService().expire_lapsed()

        if not expired:
            self.stdout.write("No subscriptions to expire.")
            return

        self.stdout.write(self.style.SUCCESS(f"{expired} subscription(s) marked as expired."))
