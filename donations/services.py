"""
Donation intake.

Recording a donation writes three rows in one transaction: the donation, its
"Created" history entry and its receipt. A caller can never see a donation
without a receipt, and a failure at any step leaves nothing behind.
"""

import logging
from datetime import datetime
from typing import List

from django.utils import timezone

from pawsitive.errors import NotFound
from pawsitive.transactions import atomic_unit, store_errors
from registry.models import User
from registry.services import find_pet, get_user

from .models import Donation, DonationHistory, DonationReceipt
from .schemas import RecordDonationRequest
from .utils import build_receipt_number

logger = logging.getLogger(__name__)


def issue_receipt(donation: Donation, donor: User, issued_at: datetime) -> DonationReceipt:
    """Snapshot the donor's details onto a new receipt for ``donation``."""
    number = build_receipt_number(donation.pk, issued_at)
    return DonationReceipt.objects.create(
        donation=donation,
        receipt_number=number,
        receipt_date=issued_at,
        donor_name=donor.name,
        donor_email=donor.email,
        donor_address=donor.address or "",
        payment_method=donation.payment_method,
        status=donation.status,
        transaction_id=number,
    )


def record_donation(request: RecordDonationRequest) -> Donation:
    with atomic_unit():
        user = get_user(request.user_id)
        pet = find_pet(request.pet_id)
        if request.pet_id is not None and pet is None:
            logger.info("Pet %s not found; recording donation without a pet", request.pet_id)

        created_at = timezone.now()
        donation = Donation.objects.create(
            user=user,
            pet=pet,
            amount=request.amount,
            payment_method=request.payment_method,
            status=request.status,
            donation_date=created_at,
        )
        DonationHistory.objects.create(
            donation=donation,
            action=DonationHistory.Action.CREATED,
            action_date=created_at,
        )
        receipt = issue_receipt(donation, user, created_at)

    logger.info(
        "Donation %s recorded: %s by user %s via %s, receipt %s",
        donation.pk, donation.amount, user.pk, donation.payment_method, receipt.receipt_number,
    )
    return donation


def _with_relations():
    return Donation.objects.select_related("user", "pet")


def list_donations() -> List[Donation]:
    with store_errors():
        return list(_with_relations())


def list_by_user(user_id: int) -> List[Donation]:
    with store_errors():
        user = get_user(user_id)
        return list(_with_relations().filter(user=user))


def get_donation(donation_id: int) -> Donation:
    with store_errors():
        try:
            return _with_relations().get(pk=donation_id)
        except Donation.DoesNotExist:
            raise NotFound("Donation not found")


def list_history(donation_id: int) -> List[DonationHistory]:
    with store_errors():
        donation = get_donation(donation_id)
        return list(donation.history.all())


def get_receipt(donation_id: int) -> DonationReceipt:
    with store_errors():
        donation = get_donation(donation_id)
        try:
            return DonationReceipt.objects.get(donation=donation)
        except DonationReceipt.DoesNotExist:
            raise NotFound("Receipt not found")
