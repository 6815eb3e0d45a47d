from django.core.management.base import BaseCommand
from django.utils import timezone

from policies.lifecycle import derive_status
from policies.models import Policy


class Command(BaseCommand):
    help = "Persists the expiry-derived status of every policy. Meant for a daily cron."

    def add_arguments(self, parser):
        parser.add_argument(
            "--policy-id",
            type=int,
            help="Limit the run to a single policy.",
        )
        parser.add_argument(
            "--dry-run",
            action="store_true",
            help="Report the changes without writing them.",
        )

    def handle(self, *args, **options):
        qs = Policy.objects.all().only("id", "status", "expiry_date")
        if options.get("policy_id"):
            qs = qs.filter(id=options["policy_id"])

        today = timezone.localdate()
        checked = changed = 0
        for policy in qs.iterator():
            checked += 1
            status = derive_status(policy.expiry_date, today=today)
            if status == policy.status:
                continue
            changed += 1
            if options.get("verbosity", 1) > 1:
                self.stdout.write(f"{policy.id}: {policy.status} -> {status}")
            if not options.get("dry_run"):
                # queryset update keeps updated_at untouched
                Policy.objects.filter(pk=policy.pk).update(status=status)

        suffix = " (dry run)" if options.get("dry_run") else ""
        self.stdout.write(self.style.SUCCESS(f"Policies checked: {checked}, updated: {changed} (date: {today}){suffix}"))
