import uuid

from django.core.serializers.json import DjangoJSONEncoder
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from camp import stages
from .event import Event


def default_completed_steps():
    return [stages.REGISTRATION]


class Beneficiary(models.Model):
    """
    A person receiving aid at a camp.

    ``current_step`` is the stage the beneficiary is waiting for. The payload
    fields below it are owned by individual stages (see ``camp.stages.STEP_FIELDS``)
    and are only written by the stage tracker.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event,
        on_delete=models.CASCADE,
        related_name="beneficiaries",
        help_text="Camp event this beneficiary was registered at",
    )
    reg_number = models.CharField(
        max_length=20, editable=False, help_text="Sequential registration number within the event"
    )
    camp_date = models.DateField(null=True, blank=True, db_index=True)

    # Registration details
    name = models.CharField(max_length=255)
    father_name = models.CharField(max_length=255, blank=True, default="")
    date_of_birth = models.DateField(null=True, blank=True)
    age = models.PositiveSmallIntegerField(
        null=True, blank=True, validators=[MinValueValidator(0), MaxValueValidator(120)]
    )
    address = models.TextField(blank=True, default="")
    state = models.CharField(max_length=100, blank=True, default="")
    phone_number = models.CharField(max_length=20, blank=True, default="")
    aadhar_number = models.CharField(max_length=20, blank=True, default="")
    type_of_aid = models.JSONField(
        default=dict, blank=True, help_text="Aid category flags and quantities"
    )
    type_of_aid_display = models.CharField(max_length=500, blank=True, default="")

    # Stage tracking
    current_step = models.CharField(
        max_length=20,
        choices=stages.STEP_CHOICES,
        default=stages.BEFORE_PHOTO,
        db_index=True,
        help_text="Next unfinished stage",
    )
    completed_steps = models.JSONField(default=default_completed_steps, blank=True)
    step_volunteers = models.JSONField(default=dict, blank=True)

    # Stage payloads
    before_photo_url = models.URLField(max_length=500, null=True, blank=True)
    measurement_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    fitment_data = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    extra_items = models.JSONField(null=True, blank=True, encoder=DjangoJSONEncoder)
    after_photo_url = models.URLField(max_length=500, null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "beneficiaries"
        ordering = ["created_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["event", "reg_number"], name="unique_reg_number_per_event"
            ),
        ]
        indexes = [
            models.Index(fields=["event", "current_step"], name="beneficiary_event_step_idx"),
        ]
        verbose_name_plural = "Beneficiaries"

    def __str__(self):
        return f"{self.reg_number} {self.name} ({self.current_step})"

    @property
    def is_terminal(self):
        return stages.is_terminal(self.current_step)
