from django.apps import AppConfig
from django.db.models.signals import post_migrate


def seed_roles_after_migrate(sender, using=None, apps=None, **kwargs):
    # migrating backwards past registry's first migration leaves no table to seed
    try:
        apps.get_model("registry", "Role")
    except LookupError:
        return
    from .services import seed_required_roles

    seed_required_roles(using=using)


class RegistryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "registry"

    def ready(self):
        post_migrate.connect(seed_roles_after_migrate, sender=self, dispatch_uid="registry.seed_roles")
