import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("tenants", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="KnowledgeDocument",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("file", models.CharField(max_length=512)),
                ("document_type", models.CharField(choices=[("PDF", "PDF")], default="PDF", max_length=16)),
                ("platform", models.CharField(choices=[("WEB", "Web")], default="WEB", max_length=16)),
                ("title", models.CharField(blank=True, default="", max_length=255)),
                ("description", models.TextField(blank=True, default="")),
                ("knowledge_base_text", models.TextField(blank=True, default="")),
                ("uploaded_at", models.DateTimeField(default=django.utils.timezone.now, editable=False)),
                ("modified_at", models.DateTimeField(auto_now=True)),
                ("tenant", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="documents", to="tenants.tenant")),
            ],
            options={
                "db_table": "knowledge_documents",
                "indexes": [models.Index(fields=["tenant", "uploaded_at"], name="kdoc_tenant_uploaded_idx")],
            },
        ),
    ]
