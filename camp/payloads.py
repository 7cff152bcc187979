"""
Per-stage payload schemas.

Each stage the tracker can advance has its own serializer describing the
fields a volunteer must supply. ``validate_payload`` picks the schema for a
stage and returns the values to write into the stage's owned fields.
"""

from rest_framework import serializers

from camp import stages

COMFORT_LEVEL_CHOICES = [
    ("excellent", "Excellent - Perfect fit"),
    ("good", "Good - Minor adjustments needed"),
    ("fair", "Fair - Some discomfort"),
    ("poor", "Poor - Major adjustments needed"),
]


class PhotoPayloadSerializer(serializers.Serializer):
    photo_url = serializers.URLField(max_length=500)


class MeasurementPayloadSerializer(serializers.Serializer):
    """Stump measurements in centimetres."""

    length = serializers.FloatField(min_value=0, help_text="Length in cm")
    circumference = serializers.FloatField(min_value=0, help_text="Circumference in cm")
    notes = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        for field in ("length", "circumference"):
            if attrs[field] <= 0:
                raise serializers.ValidationError({field: "Must be greater than zero."})
        return attrs


class FitmentPayloadSerializer(serializers.Serializer):
    comfort_level = serializers.ChoiceField(choices=COMFORT_LEVEL_CHOICES)
    adjustments_made = serializers.CharField(required=False, allow_blank=True, default="")
    fitment_notes = serializers.CharField(required=False, allow_blank=True, default="")


class ExtraItemSerializer(serializers.Serializer):
    item = serializers.ChoiceField(choices=list(stages.EXTRA_ITEM_CATALOG.items()))
    quantity = serializers.IntegerField(min_value=1)


class ExtraItemsPayloadSerializer(serializers.Serializer):
    items = ExtraItemSerializer(many=True, allow_empty=True)

    def validate_items(self, value):
        seen = set()
        for entry in value:
            if entry["item"] in seen:
                raise serializers.ValidationError(f"Item {entry['item']} listed more than once.")
            seen.add(entry["item"])
        return value


PAYLOAD_SERIALIZERS = {
    stages.BEFORE_PHOTO: PhotoPayloadSerializer,
    stages.MEASUREMENT: MeasurementPayloadSerializer,
    stages.FITMENT: FitmentPayloadSerializer,
    stages.EXTRA_ITEMS: ExtraItemsPayloadSerializer,
    stages.AFTER_PHOTO: PhotoPayloadSerializer,
}


def validate_payload(step: str, payload) -> tuple:
    """
    Validate a stage payload.

    Returns:
        tuple: (owned field values, None) when valid, (None, errors) otherwise
    """
    serializer_class = PAYLOAD_SERIALIZERS.get(step)
    if serializer_class is None:
        return None, {"step": [f"Step {step} does not take a payload"]}

    serializer = serializer_class(data=payload if payload is not None else {})
    if not serializer.is_valid():
        return None, serializer.errors

    data = serializer.validated_data
    if step == stages.BEFORE_PHOTO:
        return {"before_photo_url": data["photo_url"]}, None
    if step == stages.AFTER_PHOTO:
        return {"after_photo_url": data["photo_url"]}, None
    if step == stages.EXTRA_ITEMS:
        return {"extra_items": [dict(entry) for entry in data["items"]]}, None
    if step == stages.MEASUREMENT:
        return {"measurement_data": dict(data)}, None
    return {"fitment_data": dict(data)}, None
