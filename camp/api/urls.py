from django.urls import path
from camp.api.views import (
    AdvanceView,
    BeneficiaryDetailView,
    BeneficiaryListView,
    CancelView,
    CompleteWithoutPayloadView,
    EventDetailView,
    EventListView,
    EventSummaryView,
    ExportView,
    PhotoUploadView,
    RevertView,
)

urlpatterns = [
    path("events/", EventListView.as_view(), name="event-list"),
    path("events/<uuid:event_id>/", EventDetailView.as_view(), name="event-detail"),
    path("events/<uuid:event_id>/summary/", EventSummaryView.as_view(), name="event-summary"),
    # Beneficiary registration and stage queues
    path(
        "events/<uuid:event_id>/beneficiaries/",
        BeneficiaryListView.as_view(),
        name="beneficiary-list",
    ),
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/",
        BeneficiaryDetailView.as_view(),
        name="beneficiary-detail",
    ),
    # Stage transitions
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/advance/",
        AdvanceView.as_view(),
        name="beneficiary-advance",
    ),
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/complete-without-payload/",
        CompleteWithoutPayloadView.as_view(),
        name="beneficiary-complete-without-payload",
    ),
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/revert/",
        RevertView.as_view(),
        name="beneficiary-revert",
    ),
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/cancel/",
        CancelView.as_view(),
        name="beneficiary-cancel",
    ),
    path(
        "events/<uuid:event_id>/beneficiaries/<uuid:beneficiary_id>/photo/",
        PhotoUploadView.as_view(),
        name="beneficiary-photo",
    ),
    # Reporting
    path("export/", ExportView.as_view(), name="beneficiary-export"),
]
