from django.core.cache import cache
from .models import Approver

APPROVER_DIRECTORY_CACHE_KEY = "claim:approver-directory"


def list_approvers():
    """Active approvers as ``[{"id", "name"}]``, cached until an Approver changes."""
    approvers = cache.get(APPROVER_DIRECTORY_CACHE_KEY)
    if approvers is None:
        approvers = [
            {"id": str(approver_id), "name": name}
            for approver_id, name in Approver.objects.filter(is_active=True).values_list(
                "id", "name"
            )
        ]
        cache.set(APPROVER_DIRECTORY_CACHE_KEY, approvers, None)
    return approvers


def invalidate_approver_directory():
    cache.delete(APPROVER_DIRECTORY_CACHE_KEY)
