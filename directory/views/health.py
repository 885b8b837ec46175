import logging

from django.db import DatabaseError, connections
from django.http import JsonResponse
from django.views.decorators.http import require_GET

logger = logging.getLogger(__name__)


@require_GET
def health(request):
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            c.fetchone()
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        return JsonResponse({'status': 'error', 'database': 'disconnected'}, status=503)
    return JsonResponse({'status': 'ok', 'database': 'connected'})
