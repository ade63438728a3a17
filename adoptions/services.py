"""
Adoption application lifecycle.

Pending is the initial state; Approved and Rejected end the review. Approving
an application marks its pet Adopted inside the same transaction, so an
approved application is never observed next to an available pet.
"""

import logging
from typing import List

from pawsitive.errors import NotFound
from pawsitive.transactions import atomic_unit, store_errors
from registry.models import Pet
from registry.services import get_pet, get_user

from .models import AdoptionApplication
from .schemas import ReviewApplicationRequest, SubmitApplicationRequest

logger = logging.getLogger(__name__)

Status = AdoptionApplication.Status


def _with_relations():
    return AdoptionApplication.objects.select_related("pet", "user", "reviewed_by")


def _mark_pet_adopted(application: AdoptionApplication) -> None:
    pet = application.pet
    others = (
        AdoptionApplication.objects.filter(pet=pet, status=Status.APPROVED)
        .exclude(pk=application.pk)
        .values_list("pk", flat=True)
    )
    if others:
        # Concurrent or repeated approvals for one pet are allowed; make them visible.
        logger.warning(
            "Pet %s already has approved application(s) %s; approving %s as well",
            pet.pk, list(others), application.pk,
        )
    if pet.status == Pet.Status.ADOPTED:
        logger.info("Pet %s is already adopted, nothing to change", pet.pk)
        return
    pet.status = Pet.Status.ADOPTED
    pet.save(update_fields=["status"])


def submit_application(request: SubmitApplicationRequest) -> AdoptionApplication:
    with atomic_unit():
        pet = get_pet(request.pet_id)
        user = get_user(request.user_id)
        application = AdoptionApplication.objects.create(
            pet=pet,
            user=user,
            status=request.status or Status.PENDING,
        )
        if application.status == Status.APPROVED:
            _mark_pet_adopted(application)

    logger.info("Application %s submitted by user %s for pet %s (%s)", application.pk, user.pk, pet.pk, application.status)
    return application


def review_application(application_id: int, request: ReviewApplicationRequest) -> AdoptionApplication:
    with atomic_unit():
        try:
            application = (
                AdoptionApplication.objects.select_for_update()
                .select_related("pet")
                .get(pk=application_id)
            )
        except AdoptionApplication.DoesNotExist:
            raise NotFound("Application not found")

        # resolve everything before the first write
        reviewer = None
        if request.reviewed_by is not None:
            try:
                reviewer = get_user(request.reviewed_by)
            except NotFound:
                raise NotFound("Reviewer not found")

        if request.status is not None:
            application.status = request.status
            if application.status == Status.APPROVED:
                _mark_pet_adopted(application)
        if reviewer is not None:
            application.reviewed_by = reviewer
        application.save()

    logger.info(
        "Application %s reviewed: status=%s reviewer=%s",
        application.pk, application.status, application.reviewed_by_id,
    )
    return application


def list_applications() -> List[AdoptionApplication]:
    with store_errors():
        return list(_with_relations())


def get_application(application_id: int) -> AdoptionApplication:
    with store_errors():
        try:
            return _with_relations().get(pk=application_id)
        except AdoptionApplication.DoesNotExist:
            raise NotFound("Application not found")


def list_by_applicant(user_id: int) -> List[AdoptionApplication]:
    with store_errors():
        user = get_user(user_id)
        return list(_with_relations().filter(user=user))


def list_by_pet(pet_id: int) -> List[AdoptionApplication]:
    with store_errors():
        pet = get_pet(pet_id)
        return list(_with_relations().filter(pet=pet))
