import json
import logging

from django.http import JsonResponse
from django.views.decorators.csrf import csrf_exempt

from .api import BillingJSONEncoder, UnknownAction, dispatch
from .exceptions import BillingError

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════
#   VIEW 1 - api  (single JSON RPC endpoint for the web client)
#   Body: {"action": "...", "payload": {...}}
# ══════════════════════════════════════════════════════════
@csrf_exempt
def api(request):
    if request.method != 'POST':
        return JsonResponse({'error': 'Method Not Allowed'}, status=405)

    try:
        body = json.loads(request.body or b'{}')
    except ValueError:
        return JsonResponse({'error': 'The request body is not valid JSON.'}, status=400)
    if not isinstance(body, dict):
        return JsonResponse({'error': 'The request body must be a JSON object.'}, status=400)

    action  = body.get('action')
    payload = body.get('payload')
    if payload is None:
        payload = {}

    try:
        data = dispatch(action, payload)
    except BillingError as e:
        logger.warning(f'API action {action} refused: {e.message}')
        return JsonResponse({'error': e.message}, status=e.status_code)
    except UnknownAction as e:
        logger.error(str(e))
        return JsonResponse({'error': str(e)}, status=500)
    except Exception:
        logger.exception(f'API action {action} failed')
        return JsonResponse({'error': 'An internal server error occurred.'}, status=500)

    return JsonResponse({'data': data}, encoder=BillingJSONEncoder)
