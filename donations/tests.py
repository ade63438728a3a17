import json
import re
from datetime import datetime, timezone as dt_timezone
from decimal import Decimal
from unittest.mock import patch

from django.db import DatabaseError, IntegrityError
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from donations import services
from donations.models import Donation, DonationHistory, DonationReceipt
from donations.schemas import RecordDonationRequest
from donations.utils import build_receipt_number, normalize_amount
from pawsitive.errors import Conflict, Internal, InvalidInput, NotFound
from registry.models import Pet, User


class DonationFixtureMixin:
    @classmethod
    def setUpTestData(cls):
        cls.donor = User.objects.create(
            name="Dana Donor", email="dana@example.com", address="12 Harbour Rd"
        )
        cls.pet = Pet.objects.create(name="Mochi", species="Dog", added_by=cls.donor)

    def record(self, **overrides):
        body = {"user_id": self.donor.pk, "amount": 50.0, "payment_method": "Card"}
        body.update(overrides)
        return services.record_donation(RecordDonationRequest.from_payload(body))


class RecordDonationTests(DonationFixtureMixin, TestCase):
    def test_creates_donation_history_and_receipt(self):
        donation = self.record()

        self.assertEqual(donation.amount, Decimal("50.00"))
        self.assertEqual(donation.status, "Pending")
        self.assertEqual(donation.payment_method, "Card")
        self.assertIsNone(donation.pet)

        history = services.list_history(donation.pk)
        self.assertEqual([h.action for h in history], ["Created"])

        receipt = services.get_receipt(donation.pk)
        self.assertRegex(receipt.receipt_number, rf"^REC-{donation.pk}-\d{{14}}$")
        self.assertEqual(receipt.transaction_id, receipt.receipt_number)
        self.assertEqual(receipt.donor_email, "dana@example.com")
        self.assertEqual(receipt.donor_name, "Dana Donor")
        self.assertEqual(receipt.donor_address, "12 Harbour Rd")
        self.assertEqual(receipt.payment_method, "Card")
        self.assertEqual(receipt.status, "Pending")
        self.assertEqual(DonationReceipt.objects.filter(donation=donation).count(), 1)

    def test_receipt_number_uses_creation_time(self):
        donation = self.record()
        receipt = services.get_receipt(donation.pk)
        self.assertEqual(receipt.receipt_number, build_receipt_number(donation.pk, donation.donation_date))
        self.assertEqual(receipt.receipt_date, donation.donation_date)

    def test_receipt_is_a_snapshot(self):
        donation = self.record()
        User.objects.filter(pk=self.donor.pk).update(name="Dana Renamed", email="new@example.com", address="Elsewhere")

        receipt = services.get_receipt(donation.pk)
        self.assertEqual(receipt.donor_name, "Dana Donor")
        self.assertEqual(receipt.donor_email, "dana@example.com")
        self.assertEqual(receipt.donor_address, "12 Harbour Rd")

    def test_missing_address_becomes_empty_string(self):
        user = User.objects.create(name="No Address", email="noaddr@example.com")
        donation = self.record(user_id=user.pk)
        self.assertEqual(services.get_receipt(donation.pk).donor_address, "")

    def test_explicit_status_and_pet(self):
        donation = self.record(status="completed", pet_id=self.pet.pk)
        self.assertEqual(donation.status, "Completed")
        self.assertEqual(donation.pet, self.pet)
        self.assertEqual(services.get_receipt(donation.pk).status, "Completed")

    def test_unknown_pet_is_dropped(self):
        donation = self.record(pet_id=9999)
        self.assertIsNone(donation.pet)
        self.assertEqual(Donation.objects.count(), 1)

    def test_payment_method_defaults_to_unknown(self):
        donation = services.record_donation(
            RecordDonationRequest.from_payload({"user_id": self.donor.pk, "amount": "10"})
        )
        self.assertEqual(donation.payment_method, "Unknown")

    def test_zero_amount_is_allowed(self):
        self.assertEqual(self.record(amount=0).amount, Decimal("0.00"))

    def test_unknown_user(self):
        with self.assertRaisesMessage(NotFound, "User not found"):
            self.record(user_id=9999)
        self.assertEqual(Donation.objects.count(), 0)

    def test_bad_amounts_create_nothing(self):
        for amount in (-1, "-0.50", "abc", "NaN", "Infinity", True, None, {"value": 5}, 10 ** 9, "99999999.995"):
            with self.subTest(amount=amount):
                with self.assertRaises(InvalidInput):
                    self.record(amount=amount)
        self.assertEqual(Donation.objects.count(), 0)
        self.assertEqual(DonationHistory.objects.count(), 0)
        self.assertEqual(DonationReceipt.objects.count(), 0)

    def test_missing_user_or_amount_is_invalid(self):
        with self.assertRaises(InvalidInput):
            RecordDonationRequest.from_payload({"amount": 5})
        with self.assertRaises(InvalidInput):
            RecordDonationRequest.from_payload({"user_id": self.donor.pk})
        with self.assertRaises(InvalidInput):
            RecordDonationRequest.from_payload({"user": {"id": self.donor.pk}, "amount": 5})

    def test_unknown_status_is_invalid(self):
        with self.assertRaises(InvalidInput):
            self.record(status="Refunded")


class AtomicIntakeTests(DonationFixtureMixin, TestCase):
    @patch("donations.services.issue_receipt")
    def test_receipt_failure_rolls_back_everything(self, issue_mock):
        issue_mock.side_effect = DatabaseError("disk I/O error")
        with self.assertRaises(Internal):
            self.record()
        self.assertEqual(Donation.objects.count(), 0)
        self.assertEqual(DonationHistory.objects.count(), 0)
        self.assertEqual(DonationReceipt.objects.count(), 0)

    @patch("donations.services.issue_receipt")
    def test_receipt_conflict_rolls_back_everything(self, issue_mock):
        issue_mock.side_effect = IntegrityError("UNIQUE constraint failed: receipt_number")
        with self.assertRaises(Conflict):
            self.record()
        self.assertEqual(Donation.objects.count(), 0)
        self.assertEqual(DonationHistory.objects.count(), 0)

    def test_one_receipt_per_donation(self):
        donation = self.record()
        with self.assertRaises(IntegrityError):
            DonationReceipt.objects.create(
                donation=donation,
                receipt_number="REC-X",
                donor_name="x",
                donor_email="x@example.com",
                payment_method="Card",
                status="Pending",
                transaction_id="REC-X",
            )


class WriteOnceTests(DonationFixtureMixin, TestCase):
    def test_history_and_receipt_refuse_updates(self):
        donation = self.record()
        entry = donation.history.get()
        entry.action = "Refunded"
        with self.assertRaises(Internal):
            entry.save()

        receipt = DonationReceipt.objects.get(donation=donation)
        receipt.donor_name = "Someone Else"
        with self.assertRaises(Internal):
            receipt.save()
        self.assertEqual(DonationReceipt.objects.get(pk=receipt.pk).donor_name, "Dana Donor")

    def test_deleting_donation_cascades(self):
        donation = self.record()
        donation.delete()
        self.assertEqual(DonationHistory.objects.count(), 0)
        self.assertEqual(DonationReceipt.objects.count(), 0)


class ReadTests(DonationFixtureMixin, TestCase):
    def test_list_and_get(self):
        first = self.record()
        other = User.objects.create(name="Olu", email="olu@example.com")
        second = self.record(user_id=other.pk, amount="2.35")

        self.assertEqual({d.pk for d in services.list_donations()}, {first.pk, second.pk})
        self.assertEqual([d.pk for d in services.list_by_user(other.pk)], [second.pk])
        self.assertEqual(services.get_donation(first.pk).user, self.donor)

    def test_unknown_ids(self):
        with self.assertRaises(NotFound):
            services.get_donation(9999)
        with self.assertRaises(NotFound):
            services.list_by_user(9999)
        with self.assertRaises(NotFound):
            services.list_history(9999)
        with self.assertRaises(NotFound):
            services.get_receipt(9999)


class DonationApiTests(DonationFixtureMixin, TestCase):
    def post_json(self, payload):
        return self.client.post(reverse("donations:list"), data=json.dumps(payload), content_type="application/json")

    def test_record_donation_end_to_end(self):
        r = self.post_json({"user_id": self.donor.pk, "amount": 50.0, "payment_method": "Card"})
        self.assertEqual(r.status_code, 201, r.content)
        data = json.loads(r.content)
        self.assertEqual(data["amount"], "50.00")
        self.assertEqual(data["status"], "Pending")
        self.assertEqual(data["user"]["email"], "dana@example.com")
        self.assertNotIn("receipt", data)
        self.assertEqual(r["Location"], f"/api/donations/{data['id']}/")

        r = self.client.get(reverse("donations:history", args=[data["id"]]))
        self.assertEqual(r.status_code, 200)
        history = json.loads(r.content)
        self.assertEqual(len(history), 1)
        self.assertEqual(history[0]["action"], "Created")

        r = self.client.get(reverse("donations:receipt", args=[data["id"]]))
        self.assertEqual(r.status_code, 200)
        receipt = json.loads(r.content)
        self.assertTrue(re.fullmatch(rf"REC-{data['id']}-\d{{14}}", receipt["receipt_number"]))
        self.assertEqual(receipt["donor_email"], "dana@example.com")

    def test_negative_amount_rejected(self):
        r = self.post_json({"user_id": self.donor.pk, "amount": -5})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(json.loads(r.content)["error"], "invalid_input")
        self.assertEqual(Donation.objects.count(), 0)

    def test_amount_rounding_past_column_limit_rejected(self):
        r = self.post_json({"user_id": self.donor.pk, "amount": "99999999.995"})
        self.assertEqual(r.status_code, 400)
        self.assertEqual(json.loads(r.content)["error"], "invalid_input")
        self.assertEqual(Donation.objects.count(), 0)

        r = self.client.get(reverse("donations:list"))
        self.assertEqual(r.status_code, 200)

    def test_negative_zero_amount_stored_as_zero(self):
        r = self.post_json({"user_id": self.donor.pk, "amount": "-0"})
        self.assertEqual(r.status_code, 201, r.content)
        self.assertEqual(json.loads(r.content)["amount"], "0.00")
        self.assertEqual(Donation.objects.get().amount, Decimal("0.00"))

    def test_unknown_user_is_404(self):
        r = self.post_json({"user_id": 9999, "amount": 5})
        self.assertEqual(r.status_code, 404)
        self.assertEqual(json.loads(r.content)["detail"], "User not found")

    def test_invalid_json(self):
        r = self.client.post(reverse("donations:list"), data="{not json", content_type="application/json")
        self.assertEqual(r.status_code, 400)

    @patch("donations.services.issue_receipt")
    def test_internal_failure_is_500_without_traceback(self, issue_mock):
        issue_mock.side_effect = DatabaseError("disk I/O error")
        r = self.post_json({"user_id": self.donor.pk, "amount": 5})
        self.assertEqual(r.status_code, 500)
        self.assertEqual(json.loads(r.content)["error"], "internal")
        self.assertNotIn("Traceback", r.content.decode())
        self.assertEqual(Donation.objects.count(), 0)

    def test_read_endpoints(self):
        donation = self.record(pet_id=self.pet.pk)
        r = self.client.get(reverse("donations:list"))
        self.assertEqual(r.status_code, 200)
        self.assertEqual(json.loads(r.content)[0]["pet"]["name"], "Mochi")

        r = self.client.get(reverse("donations:detail", args=[donation.pk]))
        self.assertEqual(json.loads(r.content)["id"], donation.pk)

        r = self.client.get(reverse("donations:by-user", args=[self.donor.pk]))
        self.assertEqual(len(json.loads(r.content)), 1)

        for name in ("detail", "history", "receipt"):
            r = self.client.get(reverse(f"donations:{name}", args=[9999]))
            self.assertEqual(r.status_code, 404)
        r = self.client.get(reverse("donations:by-user", args=[9999]))
        self.assertEqual(r.status_code, 404)

    def test_detail_is_read_only(self):
        donation = self.record()
        r = self.client.put(reverse("donations:detail", args=[donation.pk]))
        self.assertEqual(r.status_code, 405)


class AmountParsingTests(SimpleTestCase):
    def test_normalizes_to_cents(self):
        self.assertEqual(normalize_amount(50.0), Decimal("50.00"))
        self.assertEqual(normalize_amount("12.5"), Decimal("12.50"))
        self.assertEqual(normalize_amount(12.3), Decimal("12.30"))
        self.assertEqual(normalize_amount(Decimal("7")), Decimal("7.00"))
        self.assertEqual(normalize_amount(" 3 "), Decimal("3.00"))
        self.assertEqual(normalize_amount("99999999.994"), Decimal("99999999.99"))

    def test_negative_zero_becomes_zero(self):
        for value in ("-0", "-0.00", -0.0):
            with self.subTest(value=value):
                amount = normalize_amount(value)
                self.assertEqual(str(amount), "0.00")

    def test_rejects_malformed(self):
        for value in ("", "12,50", "1e400000", "-1", "99999999.995", float("nan"), float("inf"), False, [1]):
            with self.subTest(value=value):
                with self.assertRaises(ValueError):
                    normalize_amount(value)


class ReceiptNumberTests(SimpleTestCase):
    @override_settings(TIME_ZONE="UTC")
    def test_format(self):
        issued = datetime(2025, 3, 1, 9, 5, 7, tzinfo=dt_timezone.utc)
        self.assertEqual(build_receipt_number(42, issued), "REC-42-20250301090507")

    @override_settings(TIME_ZONE="Europe/Berlin")
    def test_rendered_in_project_time_zone(self):
        issued = datetime(2025, 3, 1, 9, 5, 7, tzinfo=dt_timezone.utc)
        self.assertEqual(build_receipt_number(7, issued), "REC-7-20250301100507")
