import logging
import uuid

from django.conf import settings
from django.utils import timezone
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action

from accounts.authentication import BearerTokenAuthentication, OptionalBearerTokenAuthentication
from core.exceptions import NotFoundError
from core.responses import success_response

from .models import Event
from .permissions import CanEditEvent, Principal
from .serializers import EventSerializer, SyncChangesSerializer
from .services import EventQuery, changed_since, create_event, delete_event, paginate, update_event, visible_events

logger = logging.getLogger(__name__)


class EventViewSet(viewsets.GenericViewSet):
    serializer_class = EventSerializer
    queryset = Event.objects.all()

    def get_authenticators(self):
        # Reads accept a broken token as anonymous; writes must present a valid one.
        if self.request.method in permissions.SAFE_METHODS:
            return [OptionalBearerTokenAuthentication()]
        return [BearerTokenAuthentication()]

    def get_permissions(self):
        if self.action in ["list", "retrieve", "sync_changes"]:
            return [permissions.AllowAny()]
        if self.action == "create":
            if settings.EVENTS_ALLOW_ANONYMOUS_CREATE:
                return [permissions.AllowAny()]
            return [permissions.IsAuthenticated()]
        return [permissions.IsAuthenticated(), CanEditEvent()]

    def get_object(self):
        try:
            event_id = uuid.UUID(str(self.kwargs["pk"]))
        except ValueError:
            raise NotFoundError("Event not found")

        event = self.get_queryset().filter(pk=event_id).first()
        if event is None:
            raise NotFoundError("Event not found")
        self.check_object_permissions(self.request, event)
        return event

    def list(self, request):
        query = EventQuery.from_params(request.query_params)
        principal = Principal.from_user(request.user)
        events = paginate(visible_events(query, principal), query)

        data = self.get_serializer(events, many=True).data
        return success_response(data, count=len(data), deviceId=request.device_id)

    def retrieve(self, request, pk=None):
        event = self.get_object()
        return success_response(self.get_serializer(event).data)

    def create(self, request):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        created_by = request.user if request.user.is_authenticated else None
        event, created = create_event(validated_data=serializer.validated_data, created_by=created_by)
        data = self.get_serializer(event).data
        if not created:
            return success_response(data, message="Event already exists", isDuplicate=True)
        return success_response(data, status=status.HTTP_201_CREATED, message="Event created successfully")

    def update(self, request, pk=None):
        event = self.get_object()
        serializer = self.get_serializer(event, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        event = update_event(event, serializer.validated_data)
        return success_response(self.get_serializer(event).data, message="Event updated successfully")

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        event = self.get_object()
        delete_event(event)
        return success_response(message="Event deleted successfully")

    @action(detail=False, methods=["get"], url_path="sync/changes")
    def sync_changes(self, request):
        serializer = SyncChangesSerializer(data=request.query_params)
        serializer.is_valid(raise_exception=True)

        sync_time = timezone.now()
        events = changed_since(serializer.validated_data.get("lastSyncAt"))
        return success_response(
            {
                "events": self.get_serializer(events, many=True).data,
                "lastSyncAt": sync_time.isoformat(),
            }
        )
