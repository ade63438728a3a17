import json
from unittest.mock import patch

from django.db import DatabaseError, OperationalError
from django.test import TestCase
from django.urls import reverse

from adoptions import services
from adoptions.models import AdoptionApplication
from adoptions.schemas import ReviewApplicationRequest, SubmitApplicationRequest
from pawsitive.errors import Internal, InvalidInput, NotFound, Transient
from registry.models import Pet, User


class AdoptionFixtureMixin:
    @classmethod
    def setUpTestData(cls):
        cls.admin = User.objects.create(name="Rita Admin", email="rita@example.com")
        cls.applicant = User.objects.create(name="Sam Applicant", email="sam@example.com")
        cls.other = User.objects.create(name="Kim Other", email="kim@example.com")
        cls.pet = Pet.objects.create(name="Pepper", species="Cat", age=2, added_by=cls.admin)

    def submit(self, **overrides):
        body = {"pet_id": self.pet.pk, "user_id": self.applicant.pk}
        body.update(overrides)
        return services.submit_application(SubmitApplicationRequest.from_payload(body))

    def review(self, application, **body):
        return services.review_application(application.pk, ReviewApplicationRequest.from_payload(body))


class SubmitApplicationTests(AdoptionFixtureMixin, TestCase):
    def test_defaults_to_pending_and_is_retrievable(self):
        app = self.submit()
        self.assertEqual(app.status, "Pending")
        self.assertIsNotNone(app.application_date)
        fetched = services.get_application(app.pk)
        self.assertEqual(fetched.pk, app.pk)
        self.assertEqual(fetched.user, self.applicant)
        self.assertIsNone(fetched.reviewed_by)

    def test_explicit_status_is_canonicalised(self):
        app = self.submit(status="rejected")
        self.assertEqual(app.status, "Rejected")

    def test_submitting_as_approved_adopts_the_pet(self):
        self.submit(status="Approved")
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Adopted")

    def test_unknown_pet_or_user(self):
        with self.assertRaisesMessage(NotFound, "Pet not found"):
            self.submit(pet_id=9999)
        with self.assertRaisesMessage(NotFound, "User not found"):
            self.submit(user_id=9999)
        self.assertEqual(AdoptionApplication.objects.count(), 0)

    def test_missing_reference_is_invalid(self):
        with self.assertRaises(InvalidInput):
            SubmitApplicationRequest.from_payload({"pet_id": self.pet.pk})

    def test_nested_or_unknown_shapes_are_rejected(self):
        with self.assertRaises(InvalidInput):
            SubmitApplicationRequest.from_payload({"pet": {"id": self.pet.pk}, "user_id": self.applicant.pk})
        with self.assertRaises(InvalidInput):
            SubmitApplicationRequest.from_payload({"pet_id": str(self.pet.pk), "user_id": self.applicant.pk})
        with self.assertRaises(InvalidInput):
            SubmitApplicationRequest.from_payload({"pet_id": self.pet.pk, "user_id": self.applicant.pk, "status": "Maybe"})


class ReviewApplicationTests(AdoptionFixtureMixin, TestCase):
    def test_approval_adopts_pet_in_same_unit(self):
        app = self.submit()
        self.assertEqual(app.status, "Pending")

        reviewed = self.review(app, status="Approved", reviewed_by=self.admin.pk)

        self.assertEqual(reviewed.status, "Approved")
        self.assertEqual(reviewed.reviewed_by, self.admin)
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Adopted")
        stored = AdoptionApplication.objects.get(pk=app.pk)
        self.assertEqual(stored.status, "Approved")

    def test_approval_is_case_insensitive(self):
        app = self.submit()
        reviewed = self.review(app, status="APPROVED")
        self.assertEqual(reviewed.status, "Approved")
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Adopted")

    def test_rejection_leaves_pet_available(self):
        app = self.submit()
        self.review(app, status="Rejected", reviewed_by=self.admin.pk)
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Available")

    def test_approving_already_adopted_pet_is_not_an_error(self):
        first = self.submit()
        second = self.submit(user_id=self.other.pk)
        self.review(first, status="Approved")
        with self.assertLogs("adoptions.services", level="WARNING") as logs:
            reviewed = self.review(second, status="Approved")
        self.assertEqual(reviewed.status, "Approved")
        self.assertIn("already has approved application", logs.output[0])
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Adopted")

    def test_reapproving_is_idempotent(self):
        app = self.submit()
        self.review(app, status="Approved")
        self.review(app, status="Approved")
        self.pet.refresh_from_db()
        self.assertEqual(self.pet.status, "Adopted")

    def test_reviewer_only_update_keeps_status(self):
        app = self.submit()
        reviewed = self.review(app, reviewed_by=self.admin.pk)
        self.assertEqual(reviewed.status, "Pending")
        self.assertEqual(reviewed.reviewed_by, self.admin)

    def test_unknown_reviewer_changes_nothing(self):
        app = self.submit()
        with self.assertRaisesMessage(NotFound, "Reviewer not found"):
            self.review(app, status="Approved", reviewed_by=9999)
        app.refresh_from_db()
        self.pet.refresh_from_db()
        self.assertEqual(app.status, "Pending")
        self.assertEqual(self.pet.status, "Available")

    def test_failed_application_write_rolls_back_pet(self):
        app = self.submit()
        with patch.object(AdoptionApplication, "save", side_effect=DatabaseError("disk I/O error")):
            with self.assertRaises(Internal):
                self.review(app, status="Approved", reviewed_by=self.admin.pk)
        app.refresh_from_db()
        self.pet.refresh_from_db()
        self.assertEqual(app.status, "Pending")
        self.assertIsNone(app.reviewed_by)
        self.assertEqual(self.pet.status, "Available")

    def test_unknown_application(self):
        with self.assertRaisesMessage(NotFound, "Application not found"):
            services.review_application(9999, ReviewApplicationRequest())


class ListingTests(AdoptionFixtureMixin, TestCase):
    def test_list_by_applicant_and_pet(self):
        mine = self.submit()
        other_pet = Pet.objects.create(name="Rex", species="Dog", added_by=self.admin)
        theirs = self.submit(pet_id=other_pet.pk, user_id=self.other.pk)

        self.assertEqual([a.pk for a in services.list_by_applicant(self.applicant.pk)], [mine.pk])
        self.assertEqual([a.pk for a in services.list_by_pet(other_pet.pk)], [theirs.pk])
        self.assertEqual({a.pk for a in services.list_applications()}, {mine.pk, theirs.pk})

    def test_listing_unknown_user_or_pet(self):
        with self.assertRaises(NotFound):
            services.list_by_applicant(9999)
        with self.assertRaises(NotFound):
            services.list_by_pet(9999)

    def test_store_timeout_is_transient(self):
        with patch("adoptions.services.get_pet", side_effect=OperationalError("database is locked")):
            with self.assertRaises(Transient):
                self.submit()


class ApplicationApiTests(AdoptionFixtureMixin, TestCase):
    def post_json(self, url, payload):
        return self.client.post(url, data=json.dumps(payload), content_type="application/json")

    def put_json(self, url, payload):
        return self.client.put(url, data=json.dumps(payload), content_type="application/json")

    def test_submit_then_approve(self):
        r = self.post_json(reverse("adoptions:list"), {"pet_id": self.pet.pk, "user_id": self.applicant.pk})
        self.assertEqual(r.status_code, 201, r.content)
        data = json.loads(r.content)
        self.assertEqual(data["status"], "Pending")
        self.assertEqual(r["Location"], f"/api/applications/{data['id']}/")

        url = reverse("adoptions:detail", args=[data["id"]])
        r = self.put_json(url, {"status": "Approved", "reviewed_by": self.admin.pk})
        self.assertEqual(r.status_code, 200, r.content)
        data = json.loads(r.content)
        self.assertEqual(data["status"], "Approved")
        self.assertEqual(data["pet"]["status"], "Adopted")
        self.assertEqual(data["reviewed_by"]["id"], self.admin.pk)

        r = self.client.get(url)
        self.assertEqual(json.loads(r.content)["status"], "Approved")

    def test_submit_requires_json_object(self):
        url = reverse("adoptions:list")
        r = self.client.post(url, data={"pet_id": "x"})  # not JSON
        self.assertEqual(r.status_code, 400)
        self.assertEqual(json.loads(r.content)["error"], "invalid_input")

        r = self.post_json(url, [self.pet.pk, self.applicant.pk])
        self.assertEqual(r.status_code, 400)

    def test_submit_missing_reference(self):
        r = self.post_json(reverse("adoptions:list"), {"user_id": self.applicant.pk})
        self.assertEqual(r.status_code, 400)
        self.assertIn("pet_id", json.loads(r.content)["detail"])
        self.assertEqual(AdoptionApplication.objects.count(), 0)

    def test_submit_unknown_pet(self):
        r = self.post_json(reverse("adoptions:list"), {"pet_id": 9999, "user_id": self.applicant.pk})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(json.loads(r.content), {"error": "not_found", "detail": "Pet not found"})

    def test_get_unknown_application(self):
        r = self.client.get(reverse("adoptions:detail", args=[9999]))
        self.assertEqual(r.status_code, 404)

    def test_list_endpoints(self):
        self.submit()
        r = self.client.get(reverse("adoptions:list"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(len(json.loads(r.content)), 1)

        r = self.client.get(reverse("adoptions:by-applicant", args=[self.applicant.pk]))
        self.assertEqual(len(json.loads(r.content)), 1)
        r = self.client.get(reverse("adoptions:by-applicant", args=[self.other.pk]))
        self.assertEqual(json.loads(r.content), [])
        r = self.client.get(reverse("adoptions:by-applicant", args=[9999]))
        self.assertEqual(r.status_code, 404)

        r = self.client.get(reverse("adoptions:by-pet", args=[self.pet.pk]))
        self.assertEqual(len(json.loads(r.content)), 1)

    def test_delete_not_allowed(self):
        app = self.submit()
        r = self.client.delete(reverse("adoptions:detail", args=[app.pk]))
        self.assertEqual(r.status_code, 405)
