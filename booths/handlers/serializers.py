"""Serializers for request input and for rendering domain models.

Output serializers read attributes straight off the frozen domain
dataclasses; id value objects render through their ``__str__``.
"""

from rest_framework import serializers


class OperatorInfoSerializer(serializers.Serializer):
    """Operator details submitted at sign-in."""

    name = serializers.CharField(max_length=100, allow_blank=True)
    contact = serializers.CharField(max_length=40, required=False, allow_blank=True, allow_null=True)
    email = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    organization = serializers.CharField(
        max_length=100, required=False, allow_blank=True, allow_null=True
    )
    notes = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StartSessionSerializer(serializers.Serializer):
    """Input for POST /api/operator/sessions."""

    code = serializers.CharField(max_length=32, trim_whitespace=True)
    operator = OperatorInfoSerializer()


class QuickStartSessionSerializer(serializers.Serializer):
    """Input for POST /api/operator/sessions/quick."""

    code = serializers.CharField(max_length=32, trim_whitespace=True)


class CodeExpirySerializer(serializers.Serializer):
    """Input for assigning or regenerating a booth code."""

    expiry_days = serializers.IntegerField(min_value=1, required=False)


class OperationFilterSerializer(serializers.Serializer):
    """Query parameters for operation history."""

    booth_id = serializers.UUIDField(required=False)
    operator_name = serializers.CharField(required=False)
    started_from = serializers.DateTimeField(required=False)
    started_to = serializers.DateTimeField(required=False)
    is_active = serializers.BooleanField(required=False, allow_null=True, default=None)


class ParticipantTallySerializer(serializers.Serializer):
    """Participant counts by gender and school level."""

    total = serializers.IntegerField()
    male = serializers.IntegerField()
    female = serializers.IntegerField()
    elementary = serializers.IntegerField()
    middle = serializers.IntegerField()
    high = serializers.IntegerField()


class DurationSerializer(serializers.Serializer):
    hours = serializers.IntegerField()
    minutes = serializers.IntegerField()
    total_minutes = serializers.IntegerField()


class BoothOperationSerializer(serializers.Serializer):
    """Serializer for BoothOperation domain model."""

    id = serializers.CharField()
    booth_id = serializers.CharField()
    operator_name = serializers.CharField()
    operator_contact = serializers.CharField(allow_null=True)
    operator_email = serializers.CharField(allow_null=True)
    operator_organization = serializers.CharField(allow_null=True)
    started_at = serializers.DateTimeField()
    ended_at = serializers.DateTimeField(allow_null=True)
    is_active = serializers.BooleanField()
    total_participants = serializers.IntegerField()


class SessionStartSerializer(serializers.Serializer):
    token = serializers.CharField()
    expires_at = serializers.DateTimeField()
    booth_name = serializers.CharField()
    operation = BoothOperationSerializer()


class SessionViewSerializer(serializers.Serializer):
    booth_id = serializers.CharField()
    booth_name = serializers.CharField()
    operation = BoothOperationSerializer()
    expires_at = serializers.DateTimeField()
    last_activity_at = serializers.DateTimeField()
    duration = DurationSerializer()
    participants = ParticipantTallySerializer()


class OperationSummarySerializer(serializers.Serializer):
    operation = BoothOperationSerializer()
    duration = DurationSerializer()
    participants = serializers.IntegerField()


class OperationHistorySerializer(serializers.Serializer):
    booth_name = serializers.CharField(allow_null=True)
    operation = BoothOperationSerializer()
    duration = DurationSerializer()


class BoothCodeSerializer(serializers.Serializer):
    """Serializer for a booth's code listing."""

    id = serializers.CharField()
    name = serializers.CharField()
    code = serializers.CharField(allow_null=True)
    code_expires_at = serializers.DateTimeField(allow_null=True)
    is_active = serializers.BooleanField()
    max_operators = serializers.IntegerField()


class CodeAssignmentSerializer(serializers.Serializer):
    booth_id = serializers.CharField()
    code = serializers.CharField()
    expires_at = serializers.DateTimeField()


class OperationStatsSerializer(serializers.Serializer):
    total_operations = serializers.IntegerField()
    active_operations = serializers.IntegerField()
    total_operators = serializers.IntegerField()
    average_duration_minutes = serializers.IntegerField()
    total_participants = serializers.IntegerField()
