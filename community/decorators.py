import logging
from functools import wraps

from django.http import JsonResponse

logger = logging.getLogger(__name__)


def current_identity(request):
    """
    Resolve the acting user for this request.

    Returns the user's id, or None when the request carries no valid session.
    """
    user = getattr(request, 'user', None)
    if user is not None and user.is_authenticated:
        return user.pk
    return None


def json_login_required(view_func):
    """
    Reject anonymous callers with a 401 JSON body instead of the login
    redirect django.contrib.auth.decorators.login_required would issue.
    """
    @wraps(view_func)
    def _wrapped_view(request, *args, **kwargs):
        if current_identity(request) is None:
            return JsonResponse({'error': 'Unauthorized'}, status=401)
        return view_func(request, *args, **kwargs)
    return _wrapped_view


def json_endpoint(operation):
    """
    Convert any unexpected failure inside a view into an opaque 500.

    The traceback is logged with the operation name, the caller and the URL
    parameters; the response body never carries internal detail.

    Args:
        operation: Short label for the view, used in the log line
    """
    def decorator(view_func):
        @wraps(view_func)
        def _wrapped_view(request, *args, **kwargs):
            try:
                return view_func(request, *args, **kwargs)
            except Exception:
                logger.exception(
                    "Unexpected failure in %s (%s %s, user=%s, params=%s)",
                    operation, request.method, request.path, current_identity(request), kwargs,
                )
                return JsonResponse({'error': 'Internal server error'}, status=500)
        return _wrapped_view
    return decorator
