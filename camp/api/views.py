from django.http import HttpResponse
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView

from camp.api.serializers import (
    AdvanceRequestSerializer,
    BeneficiaryDetailsSerializer,
    BeneficiarySerializer,
    EventSerializer,
    ExportQuerySerializer,
    PhotoUploadSerializer,
    StepQueueSerializer,
    StepRequestSerializer,
)
from camp.services.event_service import EventService
from camp.services.export_service import ExportService
from camp.services.photo_service import PhotoService
from camp.services.registration_service import RegistrationService
from camp.services.stage_service import StageService
from camp.services.summary_service import SummaryService

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

FAILURE_STATUS = {
    "invalid": status.HTTP_400_BAD_REQUEST,
    "not_found": status.HTTP_404_NOT_FOUND,
    "conflict": status.HTTP_409_CONFLICT,
    "store_error": status.HTTP_500_INTERNAL_SERVER_ERROR,
    "object_store_error": status.HTTP_502_BAD_GATEWAY,
}


def failure_response(result):
    """Map a failed service result to an error response."""
    body = {"message": result["message"]}
    if "errors" in result:
        body["errors"] = result["errors"]
    return Response(body, status=FAILURE_STATUS.get(result.get("code"), status.HTTP_400_BAD_REQUEST))


def transition_response(result):
    if not result["success"]:
        return failure_response(result)
    return Response(
        {
            "message": result["message"],
            "changed": result["changed"],
            "beneficiary": BeneficiarySerializer(result["beneficiary"]).data,
        },
        status=status.HTTP_200_OK,
    )


class EventListView(APIView):
    """
    API endpoint to list and create camp events.

    GET  /api/v1/events/
    POST /api/v1/events/

    Request body:
    {
        "event_name": "Jaipur Limb Camp",
        "event_date": "2026-11-02",
        "location": "Jaipur"
    }
    """

    def get(self, request):
        events = EventService().list_events()
        return Response({"events": EventSerializer(events, many=True).data}, status=status.HTTP_200_OK)

    def post(self, request):
        serializer = EventSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = EventService().create_event(serializer.validated_data)
        if not result["success"]:
            return failure_response(result)
        return Response(EventSerializer(result["event"]).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """
    API endpoint for a single event.

    GET/PUT/DELETE /api/v1/events/{event_id}/
    """

    def get(self, request, event_id):
        event = EventService().get_event(event_id)
        if not event:
            return Response({"message": "Event not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(EventSerializer(event).data, status=status.HTTP_200_OK)

    def put(self, request, event_id):
        serializer = EventSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = EventService().update_event(event_id, serializer.validated_data)
        if not result["success"]:
            return failure_response(result)
        return Response(EventSerializer(result["event"]).data, status=status.HTTP_200_OK)

    def delete(self, request, event_id):
        result = EventService().delete_event(event_id)
        if not result["success"]:
            return failure_response(result)
        return Response({"message": result["message"]}, status=status.HTTP_200_OK)


class BeneficiaryListView(APIView):
    """
    API endpoint to register beneficiaries and list the queue of a stage.

    GET  /api/v1/events/{event_id}/beneficiaries/?step=measurement
    POST /api/v1/events/{event_id}/beneficiaries/

    Without ``step`` every beneficiary of the event is listed.
    """

    def get(self, request, event_id):
        step = request.query_params.get("step")
        if step:
            result = StageService().list_at_step(event_id, step)
            if not result["success"]:
                return failure_response(result)
            data = StepQueueSerializer(result["beneficiaries"], many=True).data
            return Response({"step": step, "count": len(data), "beneficiaries": data})

        event = EventService().get_event(event_id)
        if not event:
            return Response({"message": "Event not found"}, status=status.HTTP_404_NOT_FOUND)
        data = BeneficiarySerializer(event.beneficiaries.order_by("created_at"), many=True).data
        return Response({"count": len(data), "beneficiaries": data})

    def post(self, request, event_id):
        serializer = BeneficiaryDetailsSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = RegistrationService().register_beneficiary(event_id, serializer.validated_data)
        if not result["success"]:
            return failure_response(result)
        return Response(
            {
                "message": result["message"],
                "beneficiary": BeneficiarySerializer(result["beneficiary"]).data,
            },
            status=status.HTTP_201_CREATED,
        )


class BeneficiaryDetailView(APIView):
    """
    API endpoint to read and edit a beneficiary's registration details.

    GET   /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/
    PATCH /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/
    """

    def get(self, request, event_id, beneficiary_id):
        beneficiary = RegistrationService().get_beneficiary(event_id, beneficiary_id)
        if not beneficiary:
            return Response({"message": "Beneficiary not found"}, status=status.HTTP_404_NOT_FOUND)
        return Response(BeneficiarySerializer(beneficiary).data, status=status.HTTP_200_OK)

    def patch(self, request, event_id, beneficiary_id):
        serializer = BeneficiaryDetailsSerializer(data=request.data, partial=True)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = RegistrationService().update_details(
            event_id, beneficiary_id, serializer.validated_data
        )
        if not result["success"]:
            return failure_response(result)
        return Response(
            {
                "message": result["message"],
                "beneficiary": BeneficiarySerializer(result["beneficiary"]).data,
            },
            status=status.HTTP_200_OK,
        )


class AdvanceView(APIView):
    """
    API endpoint to complete a stage and move the beneficiary on.

    POST /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/advance/

    Request body:
    {
        "step": "measurement",
        "payload": {"length": 42.5, "circumference": 31, "notes": ""},
        "volunteer": "Asha"
    }
    """

    def post(self, request, event_id, beneficiary_id):
        serializer = AdvanceRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = StageService().advance(
            event_id, beneficiary_id, data["step"], data["payload"], volunteer=data["volunteer"]
        )
        return transition_response(result)


class CompleteWithoutPayloadView(APIView):
    """
    API endpoint to pass a photo stage without taking the photo.

    POST /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/complete-without-payload/

    Request body:
    {
        "step": "after_photo",
        "volunteer": "Asha"
    }
    """

    def post(self, request, event_id, beneficiary_id):
        serializer = StepRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = StageService().complete_without_payload(
            event_id, beneficiary_id, data["step"], volunteer=data["volunteer"]
        )
        return transition_response(result)


class RevertView(APIView):
    """
    API endpoint to send a beneficiary back one stage.

    POST /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/revert/

    Request body:
    {
        "step": "extra_items"
    }
    """

    def post(self, request, event_id, beneficiary_id):
        serializer = StepRequestSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        result = StageService().revert(event_id, beneficiary_id, serializer.validated_data["step"])
        return transition_response(result)


class CancelView(APIView):
    """
    API endpoint to cancel a beneficiary.

    POST /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/cancel/
    """

    def post(self, request, event_id, beneficiary_id):
        result = StageService().cancel(event_id, beneficiary_id)
        return transition_response(result)


class PhotoUploadView(APIView):
    """
    API endpoint to upload a before/after photo and complete that stage.

    POST /api/v1/events/{event_id}/beneficiaries/{beneficiary_id}/photo/
    (multipart: step, photo, volunteer)
    """

    parser_classes = [MultiPartParser, FormParser, JSONParser]

    def post(self, request, event_id, beneficiary_id):
        serializer = PhotoUploadSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        data = serializer.validated_data
        result = PhotoService().upload_step_photo(
            event_id, beneficiary_id, data["step"], data["photo"], volunteer=data["volunteer"]
        )
        return transition_response(result)


class EventSummaryView(APIView):
    """
    API endpoint for the camp summary of an event.

    GET /api/v1/events/{event_id}/summary/
    """

    def get(self, request, event_id):
        result = SummaryService().get_summary(event_id)
        if not result["success"]:
            return failure_response(result)
        return Response(result["data"], status=status.HTTP_200_OK)


class ExportView(APIView):
    """
    API endpoint to download beneficiaries as an Excel workbook.

    GET /api/v1/export/?start=2026-11-01&end=2026-11-30
    """

    def get(self, request):
        serializer = ExportQuerySerializer(data=request.query_params)
        if not serializer.is_valid():
            return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

        start = serializer.validated_data.get("start")
        end = serializer.validated_data.get("end")
        service = ExportService()
        content = service.export_workbook(start, end)

        response = HttpResponse(content, content_type=XLSX_CONTENT_TYPE)
        response["Content-Disposition"] = (
            f'attachment; filename="{service.export_filename(start, end)}"'
        )
        return response
