from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver
from .models import Approver
from .utils import invalidate_approver_directory


@receiver(post_save, sender=Approver)
@receiver(post_delete, sender=Approver)
def approver_changed(sender, instance, **kwargs):
    invalidate_approver_directory()
