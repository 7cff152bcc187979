from django.contrib import admin
from camp.models import Event, Beneficiary


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("event_name", "event_date", "location", "created_at")
    list_filter = ("event_date",)
    search_fields = ("event_name", "location")
    readonly_fields = ("created_at",)


@admin.register(Beneficiary)
class BeneficiaryAdmin(admin.ModelAdmin):
    list_display = ("reg_number", "name", "event", "current_step", "camp_date", "created_at")
    list_filter = ("current_step", "camp_date", "event")
    search_fields = ("reg_number", "name", "phone_number", "aadhar_number")
    readonly_fields = ("reg_number", "type_of_aid_display", "created_at", "updated_at")
    fieldsets = (
        ("Registration", {"fields": ("event", "reg_number", "camp_date")}),
        (
            "Personal Details",
            {
                "fields": (
                    "name",
                    "father_name",
                    "date_of_birth",
                    "age",
                    "address",
                    "state",
                    "phone_number",
                    "aadhar_number",
                )
            },
        ),
        ("Aid", {"fields": ("type_of_aid", "type_of_aid_display")}),
        ("Progress", {"fields": ("current_step", "completed_steps", "step_volunteers")}),
        (
            "Stage Data",
            {
                "fields": (
                    "before_photo_url",
                    "measurement_data",
                    "fitment_data",
                    "extra_items",
                    "after_photo_url",
                ),
                "classes": ("collapse",),
            },
        ),
        ("Timestamps", {"fields": ("created_at", "updated_at"), "classes": ("collapse",)}),
    )
