from decimal import Decimal
from typing import Optional

from pydantic import Field, field_validator

from pawsitive.schemas import RecordId, RequestModel, canonical_choice

from .models import Donation
from .utils import normalize_amount


class RecordDonationRequest(RequestModel):
    user_id: RecordId
    amount: Decimal
    payment_method: str = Field(default="Unknown", min_length=1, max_length=50)
    status: str = Donation.Status.PENDING
    # an unknown pet is dropped rather than rejected
    pet_id: Optional[RecordId] = None

    @field_validator("amount", mode="before")
    @classmethod
    def _well_formed_amount(cls, v):
        return normalize_amount(v)

    @field_validator("status")
    @classmethod
    def _known_status(cls, v):
        return canonical_choice(v, Donation.Status.values)
