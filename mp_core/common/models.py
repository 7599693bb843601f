from __future__ import annotations

import uuid

from django.db import models
from django.utils import timezone


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class ScopedModel(TimeStampedModel):
    """
    Row owned by one (tenant, facility) pair.

    The ids are plain UUID columns rather than foreign keys: every selector
    filters on both, and the middleware has already proven the caller's
    membership of that pair.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    tenant_id = models.UUIDField(db_index=True)
    facility_id = models.UUIDField(db_index=True)

    class Meta:
        abstract = True


class SoftDeleteQuerySet(models.QuerySet):
    def alive(self):
        return self.filter(deleted_at__isnull=True)

    def dead(self):
        return self.filter(deleted_at__isnull=False)


class LiveManager(models.Manager):
    """
    Manager that hides soft-deleted rows.

    Models with their own queryset use LiveManager.from_queryset(TheirQuerySet)().
    """

    def get_queryset(self):
        return super().get_queryset().filter(deleted_at__isnull=True)


class SoftDeleteModel(ScopedModel):
    """
    Scoped row that DELETE endpoints only mark as deleted.

    `objects` sees live rows; `all_objects` also sees deleted ones (admin,
    uniqueness checks, tests).
    """

    deleted_at = models.DateTimeField(null=True, blank=True, db_index=True)

    objects = LiveManager.from_queryset(SoftDeleteQuerySet)()
    all_objects = models.Manager.from_queryset(SoftDeleteQuerySet)()

    class Meta:
        abstract = True

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self, *, when=None) -> None:
        if self.deleted_at is not None:
            return
        self.deleted_at = when or timezone.now()
        self.save(update_fields=["deleted_at", "updated_at"])

    def restore(self) -> None:
        if self.deleted_at is None:
            return
        self.deleted_at = None
        self.save(update_fields=["deleted_at", "updated_at"])
