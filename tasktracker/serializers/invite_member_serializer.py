from rest_framework import serializers


class InviteMemberSerializer(serializers.Serializer):
    email = serializers.EmailField(required=True, help_text="E-mail address of the person to invite")

    def validate_email(self, value):
        return value.strip().lower()
