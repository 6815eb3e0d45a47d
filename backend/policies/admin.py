from django.contrib import admin
from .models import Policy


@admin.register(Policy)
class PolicyAdmin(admin.ModelAdmin):
    list_display = ("policy_number", "policy_type", "customer", "amount", "live_status", "start_date", "expiry_date")
    search_fields = ("policy_number", "customer__customer_name", "customer__vehicle_number", "order_id", "payment_id")
    list_filter = ("status", "policy_type")
    readonly_fields = ("order_id", "payment_id", "created_at", "updated_at")
