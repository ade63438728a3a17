from typing import Optional

from pydantic import field_validator

from pawsitive.schemas import RecordId, RequestModel, canonical_choice

from .models import AdoptionApplication

_STATUSES = AdoptionApplication.Status.values


class SubmitApplicationRequest(RequestModel):
    pet_id: RecordId
    user_id: RecordId
    status: Optional[str] = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, v):
        return canonical_choice(v, _STATUSES)


class ReviewApplicationRequest(RequestModel):
    status: Optional[str] = None
    reviewed_by: Optional[RecordId] = None

    @field_validator("status")
    @classmethod
    def _known_status(cls, v):
        return canonical_choice(v, _STATUSES)
