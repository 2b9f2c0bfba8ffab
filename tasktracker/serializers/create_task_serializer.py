from rest_framework import serializers

from tasktracker.constants.task import TaskPriority, TaskStatus
from tasktracker.serializers.object_id_field import ObjectIdField


class CreateTaskSerializer(serializers.Serializer):
    title = serializers.CharField(required=True, allow_blank=True, help_text="Title of the task")
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, help_text="Description of the task"
    )
    priority = serializers.ChoiceField(
        required=False,
        choices=[priority.value for priority in TaskPriority],
        default=TaskPriority.MEDIUM.value,
        help_text="Priority of the task (low, medium, high, critical)",
    )
    status = serializers.ChoiceField(
        required=False,
        choices=[status.value for status in TaskStatus],
        default=TaskStatus.TODO.value,
        help_text="Status of the task (todo, in-progress, completed)",
    )
    tags = serializers.ListField(
        child=serializers.CharField(allow_blank=True, trim_whitespace=False),
        required=False,
        default=list,
        help_text="Free-form tags; trimmed and de-duplicated",
    )
    dueDate = serializers.DateTimeField(
        required=False, allow_null=True, help_text="Due date in ISO format (UTC); required for team tasks"
    )
    team = ObjectIdField(required=False, allow_null=True, help_text="Team ID; omit for a personal task")
    assignedTo = ObjectIdField(required=False, allow_null=True, help_text="Team member to assign the task to")
