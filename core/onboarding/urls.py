from django.urls import path

from core.onboarding.views import request_otp, tenant_create, verify_otp

urlpatterns = [
    path("auth/request-otp", request_otp, name="auth-request-otp"),
    path("auth/verify-otp", verify_otp, name="auth-verify-otp"),
    path("tenant/create", tenant_create, name="tenant-create"),
]
