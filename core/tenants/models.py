import uuid
from django.db import models
from django.utils import timezone


class Tenant(models.Model):
    """
    A provisioned company assistant. `name` is derived from the email domain
    and is the natural key the onboarding upsert looks up.
    """
    class Status(models.TextChoices):
        ACTIVE = "active", "Active"
        DISABLED = "disabled", "Disabled"

    TYPE_COMPANY = "company"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    description = models.TextField(blank=True, default="")
    tenant_type = models.CharField(max_length=32, default=TYPE_COMPANY)

    instruction = models.TextField(blank=True, default="")
    artifact_path = models.CharField(max_length=512, blank=True, default="")
    email = models.EmailField(blank=True, default="")

    status = models.CharField(max_length=32, choices=Status.choices, default=Status.ACTIVE)
    created_at = models.DateTimeField(default=timezone.now, editable=False)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "tenants"
        indexes = [models.Index(fields=["status"], name="tenants_status_idx")]
        constraints = [models.UniqueConstraint(fields=["name"], name="uq_tenant_name")]

    def __str__(self) -> str:
        return self.name

    @property
    def is_active(self) -> bool:
        return self.status == self.Status.ACTIVE
