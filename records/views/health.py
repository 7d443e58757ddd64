"""
Liveness probe: one database query and one cache round trip.
"""
import logging

from django.core.cache import cache
from django.db import connections
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def healthz(request):
    checks = {}
    try:
        with connections['default'].cursor() as c:
            c.execute('SELECT 1')
            row = c.fetchone()
        checks['db'] = bool(row and row[0] == 1)
        cache.set('healthz:ping', 1, 5)
        checks['cache'] = cache.get('healthz:ping') == 1
    except Exception as e:
        logger.error('health check failed: %s', e)
        return JsonResponse({'ok': False, 'error': str(e), **checks}, status=500)
    return JsonResponse({'ok': all(checks.values()), **checks})
