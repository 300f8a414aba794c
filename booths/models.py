"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Booth(models.Model):
    """Persistence model for booths."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    code = models.CharField(max_length=6, unique=True, blank=True, null=True)
    code_expires_at = models.DateTimeField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    max_operators = models.PositiveIntegerField(default=3)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_operators__gte=1),
                name="booth_max_operators_positive",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class BoothOperation(models.Model):
    """Persistence model for an operator's tenure at a booth."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    booth = models.ForeignKey(Booth, on_delete=models.CASCADE, related_name="operations")
    operator_name = models.CharField(max_length=100)
    operator_contact = models.CharField(max_length=20, blank=True, null=True)
    operator_email = models.CharField(max_length=100, blank=True, null=True)
    operator_organization = models.CharField(max_length=100, blank=True, null=True)
    notes = models.TextField(blank=True, null=True)
    started_at = models.DateTimeField()
    ended_at = models.DateTimeField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    total_participants = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-started_at"]
        indexes = [
            models.Index(fields=["booth", "is_active"], name="operation_booth_active_idx"),
            models.Index(fields=["-started_at"], name="operation_started_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(is_active=True, ended_at__isnull=True)
                    | models.Q(is_active=False, ended_at__isnull=False)
                ),
                name="operation_active_iff_not_ended",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.operator_name} @ {self.booth_id}"


class OperatorSession(models.Model):
    """Persistence model for operator bearer tokens."""

    id = models.BigAutoField(primary_key=True)
    token = models.CharField(max_length=64, unique=True)
    operation = models.ForeignKey(
        BoothOperation, on_delete=models.CASCADE, related_name="sessions"
    )
    created_at = models.DateTimeField()
    expires_at = models.DateTimeField()
    last_activity_at = models.DateTimeField()
    address = models.CharField(max_length=45, blank=True, null=True)

    class Meta:
        indexes = [
            models.Index(fields=["expires_at"], name="session_expires_idx"),
        ]

    def __str__(self) -> str:
        return f"session {self.token[:8]}…"


class CodeAttempt(models.Model):
    """Append-only audit log of code submissions."""

    id = models.BigAutoField(primary_key=True)
    attempted_code = models.CharField(max_length=32)
    address = models.CharField(max_length=45, blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    attempted_at = models.DateTimeField()
    success = models.BooleanField(default=False)
    booth = models.ForeignKey(
        Booth,
        on_delete=models.SET_NULL,
        blank=True,
        null=True,
        related_name="code_attempts",
    )
    failure_reason = models.CharField(max_length=32, blank=True, null=True)

    class Meta:
        ordering = ["-attempted_at"]
        indexes = [
            models.Index(fields=["address", "attempted_at"], name="attempt_address_time_idx"),
            models.Index(fields=["attempted_at"], name="attempt_time_idx"),
        ]

    def __str__(self) -> str:
        outcome = "ok" if self.success else self.failure_reason
        return f"{self.attempted_code} from {self.address} ({outcome})"


class DailyStat(models.Model):
    """Per-booth, per-day rollup updated when operations close."""

    id = models.BigAutoField(primary_key=True)
    booth = models.ForeignKey(Booth, on_delete=models.CASCADE, related_name="daily_stats")
    stat_date = models.DateField()
    total_participants = models.PositiveIntegerField(default=0)
    male_count = models.PositiveIntegerField(default=0)
    female_count = models.PositiveIntegerField(default=0)
    elementary_count = models.PositiveIntegerField(default=0)
    middle_count = models.PositiveIntegerField(default=0)
    high_count = models.PositiveIntegerField(default=0)
    operator_count = models.PositiveIntegerField(default=0)
    operation_hours = models.DecimalField(max_digits=7, decimal_places=2, default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=["booth", "stat_date"], name="unique_booth_stat_date"),
        ]
        indexes = [
            models.Index(fields=["stat_date"], name="daily_stat_date_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.booth_id} {self.stat_date}"


class Participant(models.Model):
    """Participant registration at a booth.

    Owned by the registration flow; booth access only reads it to count
    visitors during an operation.
    """

    GENDER_CHOICES = [("male", "Male"), ("female", "Female"), ("other", "Other")]
    SCHOOL_LEVEL_CHOICES = [
        ("elementary", "Elementary"),
        ("middle", "Middle"),
        ("high", "High"),
        ("other", "Other"),
    ]

    id = models.BigAutoField(primary_key=True)
    booth = models.ForeignKey(Booth, on_delete=models.CASCADE, related_name="participants")
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, default="other")
    school_level = models.CharField(max_length=10, choices=SCHOOL_LEVEL_CHOICES, default="other")
    created_at = models.DateTimeField()

    class Meta:
        indexes = [
            models.Index(fields=["booth", "created_at"], name="participant_booth_time_idx"),
        ]

    def __str__(self) -> str:
        return f"participant {self.pk} @ {self.booth_id}"
