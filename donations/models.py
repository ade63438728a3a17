from django.db import models
from django.utils import timezone

from pawsitive.errors import Internal
from registry.models import Pet, User


class Donation(models.Model):
    class Status(models.TextChoices):
        PENDING = "Pending", "Pending"
        COMPLETED = "Completed", "Completed"
        FAILED = "Failed", "Failed"

    amount = models.DecimalField(max_digits=10, decimal_places=2)
    donation_date = models.DateTimeField(default=timezone.now)
    payment_method = models.CharField(max_length=50, default="Unknown")
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    user = models.ForeignKey(User, on_delete=models.PROTECT, related_name="donations")
    pet = models.ForeignKey(Pet, on_delete=models.SET_NULL, null=True, blank=True, related_name="donations")

    class Meta:
        ordering = ("-donation_date",)
        constraints = [
            models.CheckConstraint(condition=models.Q(amount__gte=0), name="donations_amount_non_negative"),
        ]

    def __str__(self):
        return f"{self.amount} ({self.payment_method}, {self.status})"


class WriteOnceModel(models.Model):
    """Rows are inserted once and never updated in place."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise Internal(f"{type(self).__name__} {self.pk} is write-once")
        super().save(*args, **kwargs)


class DonationHistory(WriteOnceModel):
    class Action(models.TextChoices):
        CREATED = "Created", "Created"
        UPDATED = "Updated", "Updated"
        REFUNDED = "Refunded", "Refunded"

    # free text; Action lists the values the pipeline writes
    action = models.CharField(max_length=50)
    action_date = models.DateTimeField(default=timezone.now)
    donation = models.ForeignKey(Donation, on_delete=models.CASCADE, related_name="history")

    class Meta:
        ordering = ("action_date", "pk")
        verbose_name_plural = "donation history"

    def __str__(self):
        return f"{self.action} @ {self.action_date:%Y-%m-%d %H:%M}"


class DonationReceipt(WriteOnceModel):
    receipt_number = models.CharField(max_length=64, unique=True)
    receipt_date = models.DateTimeField(default=timezone.now)
    # donor_* are copied from the user at issuance, not joined live
    donor_name = models.CharField(max_length=100)
    donor_email = models.EmailField(max_length=254)
    donor_address = models.CharField(max_length=255, blank=True, default="")
    payment_method = models.CharField(max_length=50)
    status = models.CharField(max_length=20)
    transaction_id = models.CharField(max_length=64)
    notes = models.TextField(blank=True)
    donation = models.OneToOneField(Donation, on_delete=models.CASCADE, related_name="receipt")

    def __str__(self):
        return self.receipt_number
