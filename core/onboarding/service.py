import logging
import re
from dataclasses import dataclass
from urllib.parse import quote

from django.conf import settings

from core.common.errors import (
    NotFound,
    OtpDeliveryError,
    Unauthenticated,
    UpstreamFetchError,
    ValidationError,
)
from core.knowledge.artifacts import ArtifactInput, render_knowledge_pdf
from core.onboarding.states import InvalidTransition, OnboardingEvent, OnboardingPhase, advance
from core.onboarding.store import OnboardingStore
from core.otp.emailing import send_otp_email
from core.otp.gatekeeper import CODE_LENGTH, OtpGatekeeper
from core.tenants.repository import ProvisionInput, upsert_tenant_and_document
from core.websites.analysis import WebsiteAnalysis, analyze_website_from_email
from core.websites.domains import is_company_email, normalize_email

logger = logging.getLogger(__name__)

_CODE_RE = re.compile(rf"^\d{{{CODE_LENGTH}}}$")


@dataclass(frozen=True)
class ProvisionOutcome:
    email: str
    tenant_name: str
    shareable_link: str
    instruction: str
    knowledge_base_bytes: int
    tenant_id: str
    document_id: int
    artifact_path: str
    company_name: str
    website_info: dict


def shareable_link(tenant_name: str) -> str:
    base = getattr(settings, "SHAREABLE_LINK_BASE", "https://www.ainager.com").rstrip("/")
    return f"{base}/w/{quote(tenant_name)}"


class OnboardingService:
    """
    Drives one email through request_otp -> verify_otp -> create_tenant.
    Every collaborator can be swapped (tests pass fakes); defaults are the real ones.
    """

    def __init__(
        self,
        gatekeeper=None,
        store=None,
        analyzer=analyze_website_from_email,
        notifier=send_otp_email,
        renderer=render_knowledge_pdf,
        repository=upsert_tenant_and_document,
    ):
        self.gatekeeper = gatekeeper or OtpGatekeeper()
        self.store = store or OnboardingStore()
        self.analyzer = analyzer
        self.notifier = notifier
        self.renderer = renderer
        self.repository = repository

    def _advance(self, email: str, event: OnboardingEvent) -> OnboardingPhase:
        return advance(self.store.get_phase(email), event)

    def request_otp(self, email: str) -> None:
        email = normalize_email(email)
        if not is_company_email(email):
            raise ValidationError("Please use your company email address.")

        nxt = self._advance(email, OnboardingEvent.REQUEST_OTP)

        # issue() is the atomic check: a live code makes it raise RateLimited
        code = self.gatekeeper.issue(email)
        try:
            self.notifier(email, code)
        except OtpDeliveryError:
            self.gatekeeper.revoke(email)
            raise
        except Exception as e:
            self.gatekeeper.revoke(email)
            logger.exception("Failed to deliver verification code to %s", email)
            raise OtpDeliveryError() from e

        self.store.set_phase(email, nxt)

    def verify_otp(self, email: str, code: str) -> WebsiteAnalysis:
        email = normalize_email(email)
        code = (code or "").strip()
        if not _CODE_RE.match(code):
            raise ValidationError(f"Code must be {CODE_LENGTH} digits")

        try:
            nxt = self._advance(email, OnboardingEvent.VERIFY)
        except InvalidTransition:
            raise Unauthenticated()

        if not self.gatekeeper.verify(email, code):
            raise Unauthenticated()

        try:
            analysis = self.analyzer(email)
        except Exception as e:
            logger.warning("Website analysis failed for %s: %s", email, e, exc_info=True)
            raise UpstreamFetchError() from e

        self.store.save_analysis(email, analysis)
        self.store.set_phase(email, nxt)
        return analysis

    def create_tenant(self, email: str) -> ProvisionOutcome:
        email = normalize_email(email)
        analysis = self.store.get_analysis(email)
        if analysis is None:
            raise NotFound()
        try:
            nxt = self._advance(email, OnboardingEvent.CREATE)
        except InvalidTransition:
            raise NotFound()

        artifact_path = self.renderer(
            ArtifactInput(
                domain=analysis.domain,
                title=analysis.title,
                description=analysis.description,
                content=analysis.content,
                knowledge_base=analysis.knowledge_base,
            )
        )

        result = self.repository(
            ProvisionInput(
                email=email,
                company_name=analysis.title,
                instruction=analysis.instruction,
                knowledge_base=analysis.knowledge_base,
                website_domain=analysis.domain,
                website_description=analysis.description,
                artifact_path=artifact_path,
            )
        )
        self.store.set_phase(email, nxt)

        return ProvisionOutcome(
            email=email,
            tenant_name=result.tenant_name,
            shareable_link=shareable_link(result.tenant_name),
            instruction=analysis.instruction,
            knowledge_base_bytes=len(analysis.knowledge_base.encode("utf-8")),
            tenant_id=result.tenant_id,
            document_id=result.document_id,
            artifact_path=artifact_path,
            company_name=analysis.title,
            website_info=analysis.website_info(),
        )
