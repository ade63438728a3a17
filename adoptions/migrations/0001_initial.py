import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("registry", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="AdoptionApplication",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("application_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Approved", "Approved"), ("Rejected", "Rejected")], default="Pending", max_length=20)),
                ("pet", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="applications", to="registry.pet")),
                ("reviewed_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="reviewed_applications", to="registry.user")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="applications", to="registry.user")),
            ],
            options={"ordering": ("-application_date",)},
        ),
    ]
