from django.db import models

from customers.models import Customer
from .lifecycle import Status, compute_expiry_date, derive_status, generate_policy_number


class Policy(models.Model):
    STATUS = Status.CHOICES

    plan_id = models.CharField("Plan", max_length=40, blank=True)
    policy_number = models.CharField(max_length=30, unique=True)
    policy_type = models.CharField(max_length=80)
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    original_price = models.DecimalField(max_digits=12, decimal_places=2, null=True, blank=True)
    duration = models.CharField(max_length=20)
    start_date = models.DateField()
    expiry_date = models.DateField()
    status = models.CharField(max_length=20, choices=STATUS, default=Status.ACTIVE)
    customer = models.ForeignKey(
        Customer,
        null=True,
        blank=True,
        on_delete=models.SET_NULL,
        related_name="policies",
    )
    payment_id = models.CharField(max_length=80, blank=True)
    order_id = models.CharField(max_length=80, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Policy"
        verbose_name_plural = "Policies"
        constraints = [
            models.UniqueConstraint(
                fields=["order_id", "payment_id"],
                condition=~models.Q(payment_id=""),
                name="uniq_policy_per_gateway_payment",
            ),
        ]

    def __str__(self):
        plate = getattr(self.customer, "vehicle_number", "") if self.customer_id else ""
        return f"{self.policy_number} - {plate}".strip(" -")

    def save(self, *args, **kwargs):
        if not self.policy_number:
            self.policy_number = generate_policy_number()
        if self.start_date and not self.expiry_date:
            self.expiry_date = compute_expiry_date(self.start_date, self.duration)
        self.status = derive_status(self.expiry_date)
        update_fields = kwargs.get("update_fields")
        if update_fields is not None and "status" not in update_fields:
            kwargs["update_fields"] = list(update_fields) + ["status"]
        super().save(*args, **kwargs)

    @property
    def live_status(self):
        return derive_status(self.expiry_date)
