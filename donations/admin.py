from django.contrib import admin
from .models import Donation, DonationHistory, DonationReceipt


class DonationHistoryInline(admin.TabularInline):
    model = DonationHistory
    extra = 0
    can_delete = False
    readonly_fields = ("action", "action_date")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Donation)
class DonationAdmin(admin.ModelAdmin):
    list_display = ("amount", "user", "pet", "payment_method", "status", "donation_date")
    list_select_related = ("user", "pet")
    list_filter = ("status", "payment_method")
    search_fields = ("user__name", "user__email")
    date_hierarchy = "donation_date"
    ordering = ("-donation_date",)
    inlines = (DonationHistoryInline,)

    # new donations go through the intake pipeline so history and receipt exist
    def has_add_permission(self, request):
        return False


@admin.register(DonationReceipt)
class DonationReceiptAdmin(admin.ModelAdmin):
    list_display = ("receipt_number", "donor_name", "donor_email", "status", "receipt_date")
    search_fields = ("receipt_number", "donor_name", "donor_email")
    date_hierarchy = "receipt_date"
    ordering = ("-receipt_date",)

    # receipts are issued by the intake pipeline and frozen afterwards
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
