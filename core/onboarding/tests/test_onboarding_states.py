import pytest

from core.onboarding.states import InvalidTransition, OnboardingEvent, OnboardingPhase, advance

P = OnboardingPhase
E = OnboardingEvent


@pytest.mark.parametrize("phase", list(P))
def test_request_otp_restarts_from_any_phase(phase):
    assert advance(phase, E.REQUEST_OTP) == P.OTP_REQUESTED


def test_happy_path():
    phase = P.IDLE
    for event in (E.REQUEST_OTP, E.VERIFY, E.CREATE):
        phase = advance(phase, event)
    assert phase == P.PROVISIONED


def test_create_again_after_provisioning():
    assert advance(P.PROVISIONED, E.CREATE) == P.PROVISIONED


@pytest.mark.parametrize(
    "phase,event",
    [
        (P.IDLE, E.VERIFY),
        (P.IDLE, E.CREATE),
        (P.OTP_REQUESTED, E.CREATE),
        (P.VERIFIED, E.VERIFY),
        (P.PROVISIONED, E.VERIFY),
    ],
)
def test_out_of_order_events_are_rejected(phase, event):
    with pytest.raises(InvalidTransition):
        advance(phase, event)


def test_accepts_raw_values():
    assert advance("verified", "create") == P.PROVISIONED
