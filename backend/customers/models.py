from django.db import models


class Customer(models.Model):
    customer_name = models.CharField("Name", max_length=120)
    email = models.EmailField(blank=True)
    phone_number = models.CharField("Mobile", max_length=20, blank=True)
    address = models.CharField(max_length=255, blank=True)
    city = models.CharField(max_length=80, blank=True)
    vehicle_number = models.CharField("Vehicle registration", max_length=20, blank=True, db_index=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        verbose_name = "Customer"
        verbose_name_plural = "Customers"

    def __str__(self):
        return f"{self.customer_name} - {self.vehicle_number}".strip(" -")

    def save(self, *args, **kwargs):
        if self.vehicle_number:
            self.vehicle_number = self.vehicle_number.strip().upper()
        super().save(*args, **kwargs)
