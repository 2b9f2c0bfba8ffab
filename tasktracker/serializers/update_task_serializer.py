from rest_framework import serializers

from tasktracker.constants.messages import ValidationErrors
from tasktracker.constants.task import TaskPriority, TaskStatus
from tasktracker.serializers.object_id_field import ObjectIdField


class UpdateTaskSerializer(serializers.Serializer):
    """
    Partial update. A field that is present (even as null) is applied; absent fields are untouched.
    """

    title = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    priority = serializers.ChoiceField(required=False, choices=[priority.value for priority in TaskPriority])
    status = serializers.ChoiceField(required=False, choices=[status.value for status in TaskStatus])
    tags = serializers.ListField(child=serializers.CharField(allow_blank=True, trim_whitespace=False), required=False)
    dueDate = serializers.DateTimeField(required=False, allow_null=True)
    assignedTo = ObjectIdField(required=False, allow_null=True)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError(ValidationErrors.EMPTY_UPDATE)
        return data
