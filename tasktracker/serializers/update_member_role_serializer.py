from rest_framework import serializers

from tasktracker.constants.permissions import TeamRole


class UpdateMemberRoleSerializer(serializers.Serializer):
    role = serializers.ChoiceField(
        choices=[role.value for role in TeamRole],
        help_text="New role; owner can only be granted through an ownership transfer",
    )
