from django.http import JsonResponse

from pawsitive.views import WorkflowView, money, timestamp

from . import services
from .schemas import RecordDonationRequest


def donation_to_dict(donation):
    return {
        "id": donation.pk,
        "amount": money(donation.amount),
        "donation_date": timestamp(donation.donation_date),
        "payment_method": donation.payment_method,
        "status": donation.status,
        "user": {"id": donation.user.pk, "name": donation.user.name, "email": donation.user.email},
        "pet": {"id": donation.pet.pk, "name": donation.pet.name} if donation.pet_id else None,
    }


def history_to_dict(entry):
    return {
        "id": entry.pk,
        "action": entry.action,
        "action_date": timestamp(entry.action_date),
        "donation_id": entry.donation_id,
    }


def receipt_to_dict(receipt):
    return {
        "id": receipt.pk,
        "receipt_number": receipt.receipt_number,
        "receipt_date": timestamp(receipt.receipt_date),
        "donor_name": receipt.donor_name,
        "donor_email": receipt.donor_email,
        "donor_address": receipt.donor_address,
        "payment_method": receipt.payment_method,
        "status": receipt.status,
        "transaction_id": receipt.transaction_id,
        "notes": receipt.notes,
        "donation_id": receipt.donation_id,
    }


class DonationListView(WorkflowView):
    http_method_names = ["get", "post"]

    def get(self, request, *args, **kwargs):
        donations = services.list_donations()
        return JsonResponse([donation_to_dict(d) for d in donations], safe=False)

    def post(self, request, *args, **kwargs):
        payload = RecordDonationRequest.from_payload(self.read_json(request))
        donation = services.record_donation(payload)
        resp = JsonResponse(donation_to_dict(donation), status=201)
        resp["Location"] = f"/api/donations/{donation.pk}/"
        return resp


class DonationDetailView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, pk, *args, **kwargs):
        return JsonResponse(donation_to_dict(services.get_donation(pk)))


class UserDonationsView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, user_id, *args, **kwargs):
        donations = services.list_by_user(user_id)
        return JsonResponse([donation_to_dict(d) for d in donations], safe=False)


class DonationHistoryView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, pk, *args, **kwargs):
        entries = services.list_history(pk)
        return JsonResponse([history_to_dict(e) for e in entries], safe=False)


class DonationReceiptView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, pk, *args, **kwargs):
        return JsonResponse(receipt_to_dict(services.get_receipt(pk)))
