from django.urls import path

from core.common.api_health import db_health

urlpatterns = [
    path("db", db_health, name="health-db"),
]
