import datetime

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.utils import timezone

from customers.models import Customer
from policies.catalog import get_plan
from policies.lifecycle import add_years, compute_expiry_date
from policies.models import Policy


class Command(BaseCommand):
    help = "Creates demo customers and policies covering every back-office status tab."

    def add_arguments(self, parser):
        parser.add_argument(
            "--admin-password",
            default="demo1234",
            help="Password for the demo admin user (admin@demo.com).",
        )

    def handle(self, *args, **options):
        User = get_user_model()

        admin, _ = User.objects.get_or_create(
            username="admin@demo.com",
            defaults={"email": "admin@demo.com", "is_staff": True, "is_superuser": True},
        )
        admin.set_password(options["admin_password"])
        admin.save()

        today = timezone.localdate()

        def rel(days):
            return today + datetime.timedelta(days=days)

        policies_data = [
            # Active, freshly bought
            {
                "policy_number": "RSA-DEMO-0001",
                "plan": "Kalyan_002",
                "start_date": today,
                "customer": dict(customer_name="Ravi Kumar", email="ravi@example.com", phone_number="9876543210", address="12 MG Road", city="Bengaluru", vehicle_number="KA01AB1234"),
            },
            # Active, most popular plan
            {
                "policy_number": "RSA-DEMO-0002",
                "plan": "Kalyan_003",
                "start_date": rel(-200),
                "customer": dict(customer_name="Anita Sharma", email="anita@example.com", phone_number="9123456780", address="4 Park Street", city="Kolkata", vehicle_number="WB02CD5678"),
            },
            # Expiring soon (12 days left)
            {
                "policy_number": "RSA-DEMO-0003",
                "plan": "Kalyan_001",
                "start_date": rel(-353),
                "customer": dict(customer_name="Suresh Patel", email="", phone_number="9988776655", address="7 CG Road", city="Ahmedabad", vehicle_number="GJ01EF9012"),
            },
            # Expiring soon (25 days left)
            {
                "policy_number": "RSA-DEMO-0004",
                "plan": "Kalyan_002",
                "start_date": add_years(rel(25), -2),
                "customer": dict(customer_name="Meera Iyer", email="meera@example.com", phone_number="9090909090", address="22 Anna Salai", city="Chennai", vehicle_number="TN09GH3456"),
            },
            # Expired
            {
                "policy_number": "RSA-DEMO-0005",
                "plan": "Kalyan_001",
                "start_date": rel(-400),
                "customer": dict(customer_name="Vikram Singh", email="vikram@example.com", phone_number="9812345678", address="3 Civil Lines", city="Jaipur", vehicle_number="RJ14IJ7890"),
            },
        ]

        for pdata in policies_data:
            plan = get_plan(pdata["plan"])
            customer, _ = Customer.objects.update_or_create(
                vehicle_number=pdata["customer"]["vehicle_number"],
                defaults=pdata["customer"],
            )
            Policy.objects.update_or_create(
                policy_number=pdata["policy_number"],
                defaults={
                    "plan_id": plan.id,
                    "policy_type": plan.name,
                    "amount": plan.price,
                    "original_price": plan.original_price,
                    "duration": plan.duration,
                    "start_date": pdata["start_date"],
                    "expiry_date": compute_expiry_date(pdata["start_date"], plan.duration),
                    "customer": customer,
                },
            )

        self.stdout.write(self.style.SUCCESS(f"Demo data ready: {len(policies_data)} policies. Admin: admin@demo.com"))
