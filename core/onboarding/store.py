from django.conf import settings

from core.onboarding.states import OnboardingPhase
from core.otp.store import CacheRecordStore
from core.websites.analysis import WebsiteAnalysis
from core.websites.domains import normalize_email


class OnboardingStore:
    """
    Per-email transient state between phases: the current phase and the
    stored WebsiteAnalysis. Lost on cache flush, in which case create() reports NOT_FOUND.
    """

    def __init__(self, records=None, ttl_seconds=None):
        self.records = records or CacheRecordStore("onboarding")
        self.ttl_seconds = ttl_seconds or settings.ANALYSIS_TTL_SECONDS

    def save_analysis(self, email: str, analysis: WebsiteAnalysis) -> None:
        self.records.set(f"analysis:{normalize_email(email)}", analysis.to_dict(), self.ttl_seconds)

    def get_analysis(self, email: str):
        raw = self.records.get(f"analysis:{normalize_email(email)}")
        return WebsiteAnalysis.from_dict(raw) if raw else None

    def get_phase(self, email: str) -> OnboardingPhase:
        raw = self.records.get(f"phase:{normalize_email(email)}")
        return OnboardingPhase(raw) if raw else OnboardingPhase.IDLE

    def set_phase(self, email: str, phase: OnboardingPhase) -> None:
        self.records.set(f"phase:{normalize_email(email)}", OnboardingPhase(phase).value, self.ttl_seconds)
