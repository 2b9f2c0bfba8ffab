from django.conf import settings
from rest_framework import serializers

from tasktracker.constants.messages import ValidationErrors
from tasktracker.constants.task import (
    SORT_FIELD_CREATED_AT,
    SORT_FIELDS,
    SORT_ORDER_DESC,
    SORT_ORDERS,
    TaskPriority,
    TaskStatus,
    TaskVisibility,
)
from tasktracker.serializers.object_id_field import ObjectIdField


class GetTaskQueryParamsSerializer(serializers.Serializer):
    page = serializers.IntegerField(
        required=False,
        default=1,
        min_value=1,
        error_messages={
            "min_value": ValidationErrors.PAGE_POSITIVE,
        },
    )
    limit = serializers.IntegerField(
        required=False,
        default=settings.TASKS_DEFAULT_PAGE_LIMIT,
        min_value=1,
        max_value=settings.TASKS_MAX_PAGE_LIMIT,
        error_messages={
            "min_value": ValidationErrors.LIMIT_POSITIVE,
            "max_value": ValidationErrors.MAX_LIMIT_EXCEEDED.format(settings.TASKS_MAX_PAGE_LIMIT),
        },
    )
    sortBy = serializers.ChoiceField(choices=SORT_FIELDS, required=False, default=SORT_FIELD_CREATED_AT)
    order = serializers.ChoiceField(choices=SORT_ORDERS, required=False, default=SORT_ORDER_DESC)
    team = ObjectIdField(required=False)
    assignedTo = ObjectIdField(required=False)
    status = serializers.ChoiceField(choices=[status.value for status in TaskStatus], required=False)
    priority = serializers.ChoiceField(choices=[priority.value for priority in TaskPriority], required=False)
    visibility = serializers.ChoiceField(choices=[visibility.value for visibility in TaskVisibility], required=False)
    dueAfter = serializers.DateTimeField(required=False)
    dueBefore = serializers.DateTimeField(required=False)
    tag = serializers.CharField(required=False)
    overdue = serializers.BooleanField(required=False, allow_null=True, default=None)
    includeArchived = serializers.BooleanField(required=False, default=False)
    search = serializers.CharField(required=False, max_length=100)

    def validate(self, data):
        due_after, due_before = data.get("dueAfter"), data.get("dueBefore")
        if due_after and due_before and due_after > due_before:
            raise serializers.ValidationError({"dueAfter": ValidationErrors.DUE_WINDOW_INVALID})
        return data

    def get_filters(self) -> dict:
        """Validated filters without pagination and sort keys; unset filters are dropped."""
        paging_keys = {"page", "limit", "sortBy", "order"}
        return {
            key: value
            for key, value in self.validated_data.items()
            if key not in paging_keys and value is not None
        }
