"""
API views for direct messaging.

URL Structure:
    /api/v1/messages/send/                   POST
    /api/v1/messages/recent/                 GET
    /api/v1/messages/unread-count/           GET
    /api/v1/messages/{user_id}/              GET
    /api/v1/messages/{user_id}/mark-read/    POST

Design Decisions:
    - Views are thin; all rules live in MessageService/ConversationService
    - Service error codes map to HTTP statuses through ERROR_STATUS
    - Realtime fan-out happens inside the services, not here
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from chat.serializers import (
    ConversationSummarySerializer,
    MessageCreateSerializer,
    MessageSerializer,
)
from chat.services import ConversationService, MessageService

ERROR_STATUS = {
    "MISSING_RECEIVER": status.HTTP_400_BAD_REQUEST,
    "EMPTY_CONTENT": status.HTTP_400_BAD_REQUEST,
    "CONTENT_TOO_LONG": status.HTTP_400_BAD_REQUEST,
    "SELF_MESSAGE": status.HTTP_400_BAD_REQUEST,
    "NOT_CONNECTED": status.HTTP_403_FORBIDDEN,
    "USER_NOT_FOUND": status.HTTP_404_NOT_FOUND,
}


def error_response(result) -> Response:
    """Response for a failed ServiceResult."""
    return Response(
        {"error": result.error, "error_code": result.error_code},
        status=ERROR_STATUS.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )


class SendMessageView(APIView):
    """
    Send a message to a connected user.

    POST /api/v1/messages/send/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="send_message",
        summary="Send message",
        description=(
            "Send a text message to a user you follow or who follows you. "
            "Both participants receive realtime updates."
        ),
        request=MessageCreateSerializer,
        responses={
            201: MessageSerializer,
            400: OpenApiResponse(description="Missing receiver or invalid content"),
            403: OpenApiResponse(description="Users are not connected"),
            404: OpenApiResponse(description="Receiver not found"),
        },
        tags=["Messages"],
    )
    def post(self, request):
        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            sender=request.user,
            receiver_id=serializer.validated_data.get("receiver_id"),
            content=serializer.validated_data.get("content"),
        )
        if not result.success:
            return error_response(result)

        return Response(
            MessageSerializer(result.data).data,
            status=status.HTTP_201_CREATED,
        )


class RecentConversationsView(APIView):
    """
    The authenticated user's conversations, most recent first.

    GET /api/v1/messages/recent/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_recent_conversations",
        summary="Recent conversations",
        responses={200: ConversationSummarySerializer(many=True)},
        tags=["Messages"],
    )
    def get(self, request):
        summaries = ConversationService.list_recent_conversations(request.user.id)
        return Response(ConversationSummarySerializer(summaries, many=True).data)


class UnreadCountView(APIView):
    """
    Total unread messages for the authenticated user.

    GET /api/v1/messages/unread-count/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="get_unread_count",
        summary="Unread message count",
        responses={200: OpenApiResponse(description='{"unread_count": <int>}')},
        tags=["Messages"],
    )
    def get(self, request):
        return Response(
            {"unread_count": MessageService.get_unread_total(request.user.id)}
        )


class ConversationMessagesView(APIView):
    """
    Messages exchanged with a user, oldest first.

    GET /api/v1/messages/{user_id}/

    Fetching marks the user's messages to you as read.
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_messages",
        summary="List messages with a user",
        responses={
            200: MessageSerializer(many=True),
            403: OpenApiResponse(description="Users are not connected"),
        },
        tags=["Messages"],
    )
    def get(self, request, user_id):
        result = MessageService.list_messages(request.user, user_id)
        if not result.success:
            return error_response(result)

        return Response(MessageSerializer(result.data, many=True).data)


class MarkReadView(APIView):
    """
    Mark every message from a user as read.

    POST /api/v1/messages/{user_id}/mark-read/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="mark_messages_read",
        summary="Mark messages read",
        request=None,
        responses={
            200: OpenApiResponse(description='{"rows_updated": <int>}'),
            403: OpenApiResponse(description="Users are not connected"),
        },
        tags=["Messages"],
    )
    def post(self, request, user_id):
        result = MessageService.mark_read(request.user, user_id)
        if not result.success:
            return error_response(result)

        return Response({"rows_updated": result.data})
