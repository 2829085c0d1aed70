from rest_framework.decorators import api_view
from rest_framework.response import Response

from core.common.errors import OnboardingError, error_response, validation_error_response
from core.onboarding.serializers import (
    RequestOtpSerializer,
    TenantCreateSerializer,
    VerifyOtpSerializer,
)
from core.onboarding.service import OnboardingService


def get_service() -> OnboardingService:
    return OnboardingService()


@api_view(["POST"])
def request_otp(request):
    """
    POST /v1/auth/request-otp
    Body: { "email": "ceo@acme.com" }
    Response 200: true
    """
    s = RequestOtpSerializer(data=request.data)
    if not s.is_valid():
        return validation_error_response(s.errors)

    try:
        get_service().request_otp(s.validated_data["email"])
    except OnboardingError as e:
        return error_response(e)
    return Response(True)


@api_view(["POST"])
def verify_otp(request):
    """
    POST /v1/auth/verify-otp
    Body: { "email": "ceo@acme.com", "code": "123456" }
    Response 200: { "ok": true, "websiteInfo": { "domain", "title", "description" } }
    """
    s = VerifyOtpSerializer(data=request.data)
    if not s.is_valid():
        return validation_error_response(s.errors)

    try:
        analysis = get_service().verify_otp(s.validated_data["email"], s.validated_data["code"])
    except OnboardingError as e:
        return error_response(e)
    return Response({"ok": True, "websiteInfo": analysis.website_info()})


@api_view(["POST"])
def tenant_create(request):
    """
    POST /v1/tenant/create
    Body: { "email": "ceo@acme.com" }
    Uses the analysis stored by verify-otp; 400 NOT_FOUND when there is none.
    """
    s = TenantCreateSerializer(data=request.data)
    if not s.is_valid():
        return validation_error_response(s.errors)

    try:
        out = get_service().create_tenant(s.validated_data["email"])
    except OnboardingError as e:
        return error_response(e)

    return Response(
        {
            "ok": True,
            "tenantName": out.tenant_name,
            "shareableLink": out.shareable_link,
            "instruction": out.instruction,
            "knowledgeBaseBytes": out.knowledge_base_bytes,
            "email": out.email,
            "companyName": out.company_name,
            "tenantId": out.tenant_id,
            "documentId": out.document_id,
            "artifactPath": out.artifact_path,
            "websiteInfo": out.website_info,
        }
    )
