from rest_framework import serializers

from camp import stages
from camp.models import Beneficiary, Event


class EventSerializer(serializers.ModelSerializer):
    """Serializer for Event model."""

    class Meta:
        model = Event
        fields = ["id", "event_name", "event_date", "location", "created_at"]
        read_only_fields = ["id", "created_at"]


class TypeOfAidSerializer(serializers.Serializer):
    """Aid categories chosen at registration."""

    left_below_knee = serializers.BooleanField(required=False, default=False)
    left_above_knee = serializers.BooleanField(required=False, default=False)
    right_below_knee = serializers.BooleanField(required=False, default=False)
    right_above_knee = serializers.BooleanField(required=False, default=False)
    left_caliper = serializers.BooleanField(required=False, default=False)
    right_caliper = serializers.BooleanField(required=False, default=False)
    above_hand = serializers.BooleanField(required=False, default=False)
    below_hand = serializers.BooleanField(required=False, default=False)
    shoes = serializers.BooleanField(required=False, default=False)
    gloves = serializers.BooleanField(required=False, default=False)
    walker = serializers.BooleanField(required=False, default=False)
    stick = serializers.BooleanField(required=False, default=False)
    stick_qty = serializers.IntegerField(required=False, min_value=1, default=1)
    crutches = serializers.BooleanField(required=False, default=False)
    crutches_qty = serializers.IntegerField(required=False, min_value=1, default=1)
    elbow_crutches = serializers.BooleanField(required=False, default=False)
    elbow_crutches_qty = serializers.IntegerField(required=False, min_value=1, default=1)
    others = serializers.BooleanField(required=False, default=False)
    others_specify = serializers.CharField(
        required=False, allow_blank=True, default="", max_length=255
    )


class BeneficiaryDetailsSerializer(serializers.ModelSerializer):
    """Registration details a desk volunteer enters or edits."""

    age = serializers.IntegerField(required=False, allow_null=True, min_value=0, max_value=120)
    type_of_aid = TypeOfAidSerializer(required=False)

    class Meta:
        model = Beneficiary
        fields = [
            "name",
            "father_name",
            "date_of_birth",
            "age",
            "address",
            "state",
            "phone_number",
            "aadhar_number",
            "type_of_aid",
        ]

    def to_internal_value(self, data):
        validated = super().to_internal_value(data)
        if "type_of_aid" in validated:
            validated["type_of_aid"] = dict(validated["type_of_aid"])
        return validated


class BeneficiarySerializer(serializers.ModelSerializer):
    """Read representation of a beneficiary including its stage data."""

    event_id = serializers.UUIDField(source="event.id", read_only=True)
    current_step_display = serializers.SerializerMethodField()

    class Meta:
        model = Beneficiary
        fields = [
            "id",
            "event_id",
            "reg_number",
            "camp_date",
            "name",
            "father_name",
            "date_of_birth",
            "age",
            "address",
            "state",
            "phone_number",
            "aadhar_number",
            "type_of_aid",
            "type_of_aid_display",
            "current_step",
            "current_step_display",
            "completed_steps",
            "step_volunteers",
            "before_photo_url",
            "measurement_data",
            "fitment_data",
            "extra_items",
            "after_photo_url",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_current_step_display(self, obj):
        return stages.step_label(obj.current_step)


class StepQueueSerializer(BeneficiarySerializer):
    """Beneficiary waiting at a stage, with the extra items its aid suggests."""

    suggested_extra_items = serializers.SerializerMethodField()

    class Meta(BeneficiarySerializer.Meta):
        fields = BeneficiarySerializer.Meta.fields + ["suggested_extra_items"]
        read_only_fields = fields

    def get_suggested_extra_items(self, obj):
        return stages.suggested_extra_items(obj.type_of_aid)


class AdvanceRequestSerializer(serializers.Serializer):
    step = serializers.ChoiceField(choices=stages.WORK_STEPS)
    payload = serializers.DictField(required=False, default=dict)
    volunteer = serializers.CharField(required=False, allow_blank=True, default="")


class StepRequestSerializer(serializers.Serializer):
    step = serializers.ChoiceField(choices=[s for s, _ in stages.STEP_CHOICES])
    volunteer = serializers.CharField(required=False, allow_blank=True, default="")


class PhotoUploadSerializer(serializers.Serializer):
    step = serializers.ChoiceField(choices=[stages.BEFORE_PHOTO, stages.AFTER_PHOTO])
    photo = serializers.FileField()
    volunteer = serializers.CharField(required=False, allow_blank=True, default="")


class ExportQuerySerializer(serializers.Serializer):
    start = serializers.DateField(required=False)
    end = serializers.DateField(required=False)

    def validate(self, attrs):
        start, end = attrs.get("start"), attrs.get("end")
        if start and end and start > end:
            raise serializers.ValidationError("start must not be after end")
        return attrs
