from django.db import models
from django.utils import timezone

from core.tenants.models import Tenant


class KnowledgeDocument(models.Model):
    """
    One row per provisioning run (never updated). Keeps both the PDF path and
    the full knowledge-base text inline.
    """
    class DocumentType(models.TextChoices):
        PDF = "PDF", "PDF"

    class Platform(models.TextChoices):
        WEB = "WEB", "Web"

    id = models.BigAutoField(primary_key=True)
    tenant = models.ForeignKey(Tenant, on_delete=models.CASCADE, related_name="documents")

    file = models.CharField(max_length=512)
    document_type = models.CharField(max_length=16, choices=DocumentType.choices, default=DocumentType.PDF)
    platform = models.CharField(max_length=16, choices=Platform.choices, default=Platform.WEB)

    title = models.CharField(max_length=255, blank=True, default="")
    description = models.TextField(blank=True, default="")
    knowledge_base_text = models.TextField(blank=True, default="")

    uploaded_at = models.DateTimeField(default=timezone.now, editable=False)
    modified_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "knowledge_documents"
        indexes = [
            models.Index(fields=["tenant", "uploaded_at"], name="kdoc_tenant_uploaded_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.tenant_id}::{self.title or self.id}"
