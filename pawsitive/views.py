import json
import logging
from decimal import Decimal

from django.http import JsonResponse
from django.utils.decorators import method_decorator
from django.views import View
from django.views.decorators.csrf import csrf_exempt

from .errors import InvalidInput, WorkflowError

logger = logging.getLogger(__name__)


def money(value: Decimal) -> str:
    return f"{value.quantize(Decimal('0.01'))}"


def timestamp(value):
    return value.isoformat() if value else None


@method_decorator(csrf_exempt, name="dispatch")
class WorkflowView(View):
    """
    JSON endpoint base. Workflow errors become ``{"error", "detail"}`` bodies
    with the status of their kind; anything else is left to Django's 500 handler.
    """

    def dispatch(self, request, *args, **kwargs):
        try:
            return super().dispatch(request, *args, **kwargs)
        except WorkflowError as e:
            logger.info("%s %s -> %s: %s", request.method, request.path, e.kind, e.message)
            return JsonResponse(e.as_dict(), status=e.status)

    def read_json(self, request):
        # must be JSON
        try:
            return json.loads(request.body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            raise InvalidInput("Request body is not valid JSON")
