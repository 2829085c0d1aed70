import uuid

import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Tenant",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("tenant_type", models.CharField(default="company", max_length=32)),
                ("instruction", models.TextField(blank=True, default="")),
                ("artifact_path", models.CharField(blank=True, default="", max_length=512)),
                ("email", models.EmailField(blank=True, default="", max_length=254)),
                ("status", models.CharField(choices=[("active", "Active"), ("disabled", "Disabled")], default="active", max_length=32)),
                ("created_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "tenants",
                "indexes": [models.Index(fields=["status"], name="tenants_status_idx")],
                "constraints": [models.UniqueConstraint(fields=["name"], name="uq_tenant_name")],
            },
        ),
    ]
