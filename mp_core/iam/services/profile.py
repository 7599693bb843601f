# mp_core/iam/services/profile.py
from __future__ import annotations

import logging

from django.db import transaction

from mp_core.iam.models import UserProfile

logger = logging.getLogger(__name__)

PROFILE_FIELDS = (
    "phone",
    "crm",
    "specialty",
    "clinic_name",
    "clinic_address",
    "avatar",
    "timezone",
    "locale",
    "notifications_enabled",
    "whatsapp_enabled",
)

USER_FIELDS = ("first_name", "last_name", "email")


class ProfileService:
    @staticmethod
    @transaction.atomic
    def update(*, user, data: dict) -> UserProfile:
        """
        Updates the doctor profile (and name/email on the auth user).
        Raises UserProfile.DoesNotExist for users without a profile.
        """
        profile = UserProfile.objects.select_for_update().get(user_id=user.id)

        user_updates = [f for f in USER_FIELDS if f in data]
        for f in user_updates:
            setattr(user, f, data[f])
        if user_updates:
            user.save(update_fields=user_updates)

        profile_updates = [f for f in PROFILE_FIELDS if f in data]
        for f in profile_updates:
            setattr(profile, f, data[f])
        if profile_updates:
            profile.save(update_fields=profile_updates + ["updated_at"])

        logger.info("Profile updated user=%s fields=%s", user.id, sorted(user_updates + profile_updates))
        return profile
