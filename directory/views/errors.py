from django.http import JsonResponse


def not_found(request, exception=None):
    """Project ``handler404``: unmatched paths answer in the API's ``{message}`` shape."""
    return JsonResponse({'message': 'Not found'}, status=404)
