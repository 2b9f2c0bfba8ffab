from rest_framework import serializers

from tasktracker.constants.messages import ValidationErrors


class UpdateTeamSerializer(serializers.Serializer):
    name = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        if not data:
            raise serializers.ValidationError(ValidationErrors.EMPTY_UPDATE)
        return data
