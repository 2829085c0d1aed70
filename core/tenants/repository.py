import logging
from dataclasses import dataclass
from typing import Optional

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from django.utils.text import Truncator

from core.common.errors import PersistenceError
from core.knowledge.models import KnowledgeDocument
from core.tenants.models import Tenant
from core.websites.domains import display_name, domain_of

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_DESCRIPTION = "Comprehensive document generated from website analysis."


@dataclass(frozen=True)
class ProvisionInput:
    email: str
    company_name: str
    instruction: str
    knowledge_base: str
    website_domain: str
    artifact_path: str
    website_description: Optional[str] = None


@dataclass(frozen=True)
class ProvisionResult:
    tenant_id: str
    document_id: int
    tenant_name: str


def tenant_name_for_email(email: str) -> str:
    return display_name(domain_of(email))


def _document_title(data: ProvisionInput) -> str:
    if data.company_name:
        title = f"Knowledge base for {data.company_name}"
    else:
        title = f"Knowledge base {data.website_domain}"
    max_length = KnowledgeDocument._meta.get_field("title").max_length
    return Truncator(title).chars(max_length, truncate="...")


def _lock_tenant(name: str):
    return Tenant.objects.select_for_update().filter(name=name).first()


def _refresh_tenant(tenant: Tenant, data: ProvisionInput) -> None:
    tenant.instruction = data.instruction
    tenant.artifact_path = data.artifact_path
    tenant.updated_at = timezone.now()
    tenant.save(update_fields=["instruction", "artifact_path", "updated_at"])


def _get_or_create_tenant(name: str, data: ProvisionInput):
    tenant = _lock_tenant(name)
    if tenant:
        _refresh_tenant(tenant, data)
        return tenant, False

    try:
        with transaction.atomic():
            tenant = Tenant.objects.create(
                name=name,
                description=data.website_description or "",
                tenant_type=Tenant.TYPE_COMPANY,
                instruction=data.instruction,
                artifact_path=data.artifact_path,
                email=data.email,
                status=Tenant.Status.ACTIVE,
            )
        return tenant, True
    except IntegrityError:
        # a concurrent run inserted the same name first; update the winner instead
        tenant = _lock_tenant(name)
        if not tenant:
            raise
        _refresh_tenant(tenant, data)
        return tenant, False


def upsert_tenant_and_document(data: ProvisionInput) -> ProvisionResult:
    """
    One transaction: upsert the tenant by its derived name, then insert a new document.
    Either both rows land or neither does.
    """
    try:
        with transaction.atomic():
            name = tenant_name_for_email(data.email)
            tenant, created = _get_or_create_tenant(name, data)
            doc = KnowledgeDocument.objects.create(
                tenant=tenant,
                file=data.artifact_path,
                document_type=KnowledgeDocument.DocumentType.PDF,
                platform=KnowledgeDocument.Platform.WEB,
                title=_document_title(data),
                description=data.website_description or DEFAULT_DOCUMENT_DESCRIPTION,
                knowledge_base_text=data.knowledge_base,
            )
    except DatabaseError as e:
        logger.exception("Provisioning failed for %s", data.email)
        raise PersistenceError() from e

    logger.info(
        "Provisioned tenant %s (%s, %s) with document %s",
        name, tenant.id, "created" if created else "updated", doc.id,
    )
    return ProvisionResult(tenant_id=str(tenant.id), document_id=doc.id, tenant_name=name)
