from rest_framework import serializers


class CreateTeamSerializer(serializers.Serializer):
    """
    Shape check only; name length and uniqueness are enforced by TeamService.
    """

    name = serializers.CharField(required=True, allow_blank=True, help_text="Team name (1-50 characters)")
    description = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, help_text="Optional description (up to 200 characters)"
    )
