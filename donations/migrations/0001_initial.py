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
            name="Donation",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("amount", models.DecimalField(decimal_places=2, max_digits=10)),
                ("donation_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("payment_method", models.CharField(default="Unknown", max_length=50)),
                ("status", models.CharField(choices=[("Pending", "Pending"), ("Completed", "Completed"), ("Failed", "Failed")], default="Pending", max_length=20)),
                ("pet", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="donations", to="registry.pet")),
                ("user", models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name="donations", to="registry.user")),
            ],
            options={"ordering": ("-donation_date",)},
        ),
        migrations.AddConstraint(
            model_name="donation",
            constraint=models.CheckConstraint(condition=models.Q(("amount__gte", 0)), name="donations_amount_non_negative"),
        ),
        migrations.CreateModel(
            name="DonationHistory",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("action", models.CharField(max_length=50)),
                ("action_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("donation", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="history", to="donations.donation")),
            ],
            options={"ordering": ("action_date", "pk"), "verbose_name_plural": "donation history"},
        ),
        migrations.CreateModel(
            name="DonationReceipt",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("receipt_number", models.CharField(max_length=64, unique=True)),
                ("receipt_date", models.DateTimeField(default=django.utils.timezone.now)),
                ("donor_name", models.CharField(max_length=100)),
                ("donor_email", models.EmailField(max_length=254)),
                ("donor_address", models.CharField(blank=True, default="", max_length=255)),
                ("payment_method", models.CharField(max_length=50)),
                ("status", models.CharField(max_length=20)),
                ("transaction_id", models.CharField(max_length=64)),
                ("notes", models.TextField(blank=True)),
                ("donation", models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name="receipt", to="donations.donation")),
            ],
        ),
    ]
