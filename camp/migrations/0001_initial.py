import uuid

import django.core.serializers.json
import django.core.validators
import django.db.models.deletion
from django.db import migrations, models

import camp.models.beneficiary


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Event",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("event_name", models.CharField(max_length=255)),
                ("event_date", models.DateField(db_index=True)),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "db_table": "events",
                "ordering": ["-event_date", "-created_at"],
            },
        ),
        migrations.CreateModel(
            name="Beneficiary",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                (
                    "reg_number",
                    models.CharField(
                        editable=False,
                        help_text="Sequential registration number within the event",
                        max_length=20,
                    ),
                ),
                ("camp_date", models.DateField(blank=True, db_index=True, null=True)),
                ("name", models.CharField(max_length=255)),
                ("father_name", models.CharField(blank=True, default="", max_length=255)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                (
                    "age",
                    models.PositiveSmallIntegerField(
                        blank=True,
                        null=True,
                        validators=[
                            django.core.validators.MinValueValidator(0),
                            django.core.validators.MaxValueValidator(120),
                        ],
                    ),
                ),
                ("address", models.TextField(blank=True, default="")),
                ("state", models.CharField(blank=True, default="", max_length=100)),
                ("phone_number", models.CharField(blank=True, default="", max_length=20)),
                ("aadhar_number", models.CharField(blank=True, default="", max_length=20)),
                (
                    "type_of_aid",
                    models.JSONField(
                        blank=True, default=dict, help_text="Aid category flags and quantities"
                    ),
                ),
                (
                    "type_of_aid_display",
                    models.CharField(blank=True, default="", max_length=500),
                ),
                (
                    "current_step",
                    models.CharField(
                        choices=[
                            ("registration", "Registration"),
                            ("before_photo", "Before Photo"),
                            ("measurement", "Measurement"),
                            ("fitment", "Fitment"),
                            ("extra_items", "Extra Items"),
                            ("after_photo", "After Photo"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        db_index=True,
                        default="before_photo",
                        help_text="Next unfinished stage",
                        max_length=20,
                    ),
                ),
                (
                    "completed_steps",
                    models.JSONField(
                        blank=True, default=camp.models.beneficiary.default_completed_steps
                    ),
                ),
                ("step_volunteers", models.JSONField(blank=True, default=dict)),
                ("before_photo_url", models.URLField(blank=True, max_length=500, null=True)),
                (
                    "measurement_data",
                    models.JSONField(
                        blank=True,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        null=True,
                    ),
                ),
                (
                    "fitment_data",
                    models.JSONField(
                        blank=True,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        null=True,
                    ),
                ),
                (
                    "extra_items",
                    models.JSONField(
                        blank=True,
                        encoder=django.core.serializers.json.DjangoJSONEncoder,
                        null=True,
                    ),
                ),
                ("after_photo_url", models.URLField(blank=True, max_length=500, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "event",
                    models.ForeignKey(
                        help_text="Camp event this beneficiary was registered at",
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="beneficiaries",
                        to="camp.event",
                    ),
                ),
            ],
            options={
                "db_table": "beneficiaries",
                "ordering": ["created_at"],
                "verbose_name_plural": "Beneficiaries",
                "indexes": [
                    models.Index(
                        fields=["event", "current_step"], name="beneficiary_event_step_idx"
                    )
                ],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("event", "reg_number"), name="unique_reg_number_per_event"
                    )
                ],
            },
        ),
    ]
