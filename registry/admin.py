from django.contrib import admin
from .models import Pet, Role, User

@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name",)
    search_fields = ("name",)

@admin.register(User)
class UserAdmin(admin.ModelAdmin):
    list_display = ("name", "email", "role", "status", "created_at")
    list_select_related = ("role",)
    list_filter = ("status", "role")
    search_fields = ("name", "email")
    exclude = ("credential",)
    ordering = ("name",)

@admin.register(Pet)
class PetAdmin(admin.ModelAdmin):
    list_display = ("name", "species", "breed", "status", "added_by", "created_at")
    list_select_related = ("added_by",)
    list_filter = ("status", "species")
    search_fields = ("name", "breed")
    date_hierarchy = "created_at"
    ordering = ("-created_at",)
