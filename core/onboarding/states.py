from django.db import models


class OnboardingPhase(models.TextChoices):
    IDLE = "idle", "Idle"
    OTP_REQUESTED = "otp_requested", "OTP requested"
    VERIFIED = "verified", "Verified"
    PROVISIONED = "provisioned", "Provisioned"


class OnboardingEvent(models.TextChoices):
    REQUEST_OTP = "request_otp", "Request OTP"
    VERIFY = "verify", "Verify"
    CREATE = "create", "Create"


class InvalidTransition(Exception):
    def __init__(self, phase, event):
        self.phase = phase
        self.event = event
        super().__init__(f"cannot {event} while {phase}")


# (from, event) -> to. A new request_otp restarts the flow from any phase.
TRANSITIONS = {
    (OnboardingPhase.IDLE, OnboardingEvent.REQUEST_OTP): OnboardingPhase.OTP_REQUESTED,
    (OnboardingPhase.OTP_REQUESTED, OnboardingEvent.REQUEST_OTP): OnboardingPhase.OTP_REQUESTED,
    (OnboardingPhase.VERIFIED, OnboardingEvent.REQUEST_OTP): OnboardingPhase.OTP_REQUESTED,
    (OnboardingPhase.PROVISIONED, OnboardingEvent.REQUEST_OTP): OnboardingPhase.OTP_REQUESTED,
    (OnboardingPhase.OTP_REQUESTED, OnboardingEvent.VERIFY): OnboardingPhase.VERIFIED,
    (OnboardingPhase.VERIFIED, OnboardingEvent.CREATE): OnboardingPhase.PROVISIONED,
    (OnboardingPhase.PROVISIONED, OnboardingEvent.CREATE): OnboardingPhase.PROVISIONED,
}


def advance(phase, event) -> OnboardingPhase:
    nxt = TRANSITIONS.get((OnboardingPhase(phase), OnboardingEvent(event)))
    if nxt is None:
        raise InvalidTransition(phase, event)
    return nxt
