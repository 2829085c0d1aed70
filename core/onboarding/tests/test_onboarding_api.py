import os
import re
import smtplib

import pytest
from django.core import mail
from django.core.mail import EmailMultiAlternatives
from rest_framework.test import APIClient

from core.knowledge.models import KnowledgeDocument
from core.tenants.models import Tenant
from core.websites.extractors import FetchError

EMAIL = "ceo@acmewidgets.com"


@pytest.fixture
def api_client():
    return APIClient()


def _last_code():
    return re.search(r"\b(\d{6})\b", mail.outbox[-1].body).group(1)


def _request(api_client, email=EMAIL):
    return api_client.post("/v1/auth/request-otp", {"email": email}, format="json")


def _verify(api_client, code, email=EMAIL):
    return api_client.post("/v1/auth/verify-otp", {"email": email, "code": code}, format="json")


def _create(api_client, email=EMAIL):
    return api_client.post("/v1/tenant/create", {"email": email}, format="json")


def _onboard(api_client):
    assert _request(api_client).status_code == 200
    assert _verify(api_client, _last_code()).status_code == 200
    return _create(api_client)


@pytest.mark.django_db
def test_company_email_onboards_end_to_end(api_client, fake_fetch, artifact_dir):
    res = _request(api_client)
    assert res.status_code == 200
    assert res.json() is True
    assert len(mail.outbox) == 1

    res = _verify(api_client, _last_code())
    assert res.status_code == 200
    assert res.json() == {
        "ok": True,
        "websiteInfo": {
            "domain": "acmewidgets.com",
            "title": "Acme Widgets",
            "description": "Acme builds precision widgets for industry.",
        },
    }

    res = _create(api_client)
    assert res.status_code == 200
    body = res.json()
    assert body["ok"] is True
    assert body["tenantName"] == "Acmewidgets"
    assert body["shareableLink"] == "https://www.ainager.com/w/Acmewidgets"
    assert body["email"] == EMAIL
    assert body["companyName"] == "Acme Widgets"
    assert body["knowledgeBaseBytes"] > 0
    assert body["instruction"].startswith("You are an AI assistant for Acme Widgets.")
    assert body["websiteInfo"]["domain"] == "acmewidgets.com"

    tenant = Tenant.objects.get(name="Acmewidgets")
    assert body["tenantId"] == str(tenant.id)
    doc = KnowledgeDocument.objects.get(id=body["documentId"])
    assert doc.tenant_id == tenant.id
    assert list(artifact_dir.glob("knowledge_acmewidgets-com_*.pdf"))
    assert os.path.isfile(body["artifactPath"])
    assert doc.file == body["artifactPath"]
    with open(body["artifactPath"], "rb") as fh:
        assert fh.read(5) == b"%PDF-"


@pytest.mark.django_db
def test_free_mail_is_rejected(api_client):
    res = _request(api_client, "user@gmail.com")
    assert res.status_code == 400
    err = res.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert err["message"] == "Please use your company email address."
    assert res.json()["ok"] is False
    assert mail.outbox == []
    assert Tenant.objects.count() == 0


@pytest.mark.django_db
def test_malformed_body_uses_error_envelope(api_client):
    res = api_client.post("/v1/auth/request-otp", {"email": "nope"}, format="json")
    assert res.status_code == 400
    err = res.json()["error"]
    assert err["code"] == "VALIDATION_ERROR"
    assert "email" in err["details"]


@pytest.mark.django_db
def test_second_request_within_ttl_is_rate_limited(api_client):
    assert _request(api_client).status_code == 200
    res = _request(api_client)
    assert res.status_code == 429
    assert res.json()["error"]["code"] == "RATE_LIMITED"
    assert int(res["Retry-After"]) > 0
    assert len(mail.outbox) == 1


@pytest.mark.django_db
def test_delivery_failure_returns_503_and_allows_retry(api_client, monkeypatch):
    def boom(self, fail_silently=False):
        raise smtplib.SMTPServerDisconnected("gone")

    monkeypatch.setattr(EmailMultiAlternatives, "send", boom)
    res = _request(api_client)
    assert res.status_code == 503
    assert res.json()["error"]["code"] == "OTP_DELIVERY_FAILED"

    monkeypatch.undo()
    assert _request(api_client).status_code == 200


@pytest.mark.django_db
def test_wrong_code_is_unauthenticated(api_client, fake_fetch):
    _request(api_client)
    wrong = "000000" if _last_code() != "000000" else "111111"
    res = _verify(api_client, wrong)
    assert res.status_code == 400
    assert res.json()["error"] == {
        "code": "UNAUTHENTICATED",
        "message": "Invalid or expired code",
        "details": {},
    }
    assert fake_fetch == []


@pytest.mark.django_db
def test_short_code_fails_validation(api_client):
    _request(api_client)
    res = _verify(api_client, "123")
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "VALIDATION_ERROR"


@pytest.mark.django_db
def test_unreachable_website(api_client, monkeypatch):
    def unreachable(url, timeout_s=None):
        raise FetchError(url, "timed out")

    monkeypatch.setattr("core.websites.analysis.fetch_html", unreachable)
    _request(api_client)
    res = _verify(api_client, _last_code())

    assert res.status_code == 400
    err = res.json()["error"]
    assert err["code"] == "WEBSITE_ANALYSIS_FAILED"
    assert "timed out" not in err["message"]

    res = _create(api_client)
    assert res.status_code == 400
    assert res.json()["error"]["code"] == "NOT_FOUND"
    assert Tenant.objects.count() == 0


@pytest.mark.django_db
def test_create_without_verification_is_not_found(api_client):
    res = _create(api_client)
    assert res.status_code == 400
    assert res.json()["error"] == {
        "code": "NOT_FOUND",
        "message": "Website analysis not found. Please restart the process.",
        "details": {},
    }


@pytest.mark.django_db
def test_two_runs_share_one_tenant(api_client, fake_fetch, artifact_dir):
    first = _onboard(api_client).json()
    second = _onboard(api_client).json()

    assert first["tenantId"] == second["tenantId"]
    assert first["documentId"] != second["documentId"]
    assert Tenant.objects.count() == 1
    assert KnowledgeDocument.objects.count() == 2
