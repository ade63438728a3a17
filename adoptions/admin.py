from django.contrib import admin
from .models import AdoptionApplication

@admin.register(AdoptionApplication)
class AdoptionApplicationAdmin(admin.ModelAdmin):
    list_display = ("pk", "pet", "user", "status", "reviewed_by", "application_date")
    list_select_related = ("pet", "user", "reviewed_by")
    list_filter = ("status",)
    search_fields = ("pet__name", "user__name", "user__email")
    date_hierarchy = "application_date"
    ordering = ("-application_date",)
    # status changes go through the review workflow so the pet cascade runs
    readonly_fields = ("status",)
