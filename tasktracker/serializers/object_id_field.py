from bson import ObjectId
from rest_framework import serializers

from tasktracker.constants.messages import ValidationErrors


class ObjectIdField(serializers.CharField):
    """A 24-hex document reference, kept as a string."""

    def to_internal_value(self, data):
        value = super().to_internal_value(data)
        if not ObjectId.is_valid(value):
            raise serializers.ValidationError(ValidationErrors.INVALID_OBJECT_ID.format(value))
        return value
