"""Signals: drop the cached user directory when users change."""
from __future__ import annotations

import logging

from django.conf import settings
from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from incentives.services import invalidate_user_directory

logger = logging.getLogger(__name__)


@receiver(post_save, sender=settings.AUTH_USER_MODEL, dispatch_uid="incentives_user_saved")
@receiver(post_delete, sender=settings.AUTH_USER_MODEL, dispatch_uid="incentives_user_deleted")
def user_changed(sender, instance, **kwargs):
    logger.debug("User %s changed, invalidating the incentive user directory", instance.pk)
    invalidate_user_directory()
