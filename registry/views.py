from django.http import JsonResponse

from pawsitive.views import WorkflowView

from . import services
from .schemas import CreateRoleRequest


def role_to_dict(role):
    return {"id": role.pk, "name": role.name}


class RoleListView(WorkflowView):
    http_method_names = ["get", "post"]

    def get(self, request, *args, **kwargs):
        return JsonResponse([role_to_dict(r) for r in services.list_roles()], safe=False)

    def post(self, request, *args, **kwargs):
        payload = CreateRoleRequest.from_payload(self.read_json(request))
        role = services.create_role(payload.name)
        return JsonResponse(role_to_dict(role), status=201)
