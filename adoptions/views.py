from django.http import JsonResponse

from pawsitive.views import WorkflowView, timestamp

from . import services
from .schemas import ReviewApplicationRequest, SubmitApplicationRequest


def application_to_dict(app):
    return {
        "id": app.pk,
        "status": app.status,
        "application_date": timestamp(app.application_date),
        "pet": {"id": app.pet.pk, "name": app.pet.name, "status": app.pet.status},
        "user": {"id": app.user.pk, "name": app.user.name, "email": app.user.email},
        "reviewed_by": (
            {"id": app.reviewed_by.pk, "name": app.reviewed_by.name} if app.reviewed_by_id else None
        ),
    }


class ApplicationListView(WorkflowView):
    http_method_names = ["get", "post"]

    def get(self, request, *args, **kwargs):
        apps = services.list_applications()
        return JsonResponse([application_to_dict(a) for a in apps], safe=False)

    def post(self, request, *args, **kwargs):
        payload = SubmitApplicationRequest.from_payload(self.read_json(request))
        app = services.submit_application(payload)
        resp = JsonResponse(application_to_dict(app), status=201)
        resp["Location"] = f"/api/applications/{app.pk}/"
        return resp


class ApplicationDetailView(WorkflowView):
    http_method_names = ["get", "put"]

    def get(self, request, pk, *args, **kwargs):
        return JsonResponse(application_to_dict(services.get_application(pk)))

    def put(self, request, pk, *args, **kwargs):
        payload = ReviewApplicationRequest.from_payload(self.read_json(request))
        app = services.review_application(pk, payload)
        return JsonResponse(application_to_dict(app))


class ApplicantApplicationsView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, user_id, *args, **kwargs):
        apps = services.list_by_applicant(user_id)
        return JsonResponse([application_to_dict(a) for a in apps], safe=False)


class PetApplicationsView(WorkflowView):
    http_method_names = ["get"]

    def get(self, request, pet_id, *args, **kwargs):
        apps = services.list_by_pet(pet_id)
        return JsonResponse([application_to_dict(a) for a in apps], safe=False)
