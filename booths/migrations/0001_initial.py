import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Booth",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("code", models.CharField(blank=True, max_length=6, null=True, unique=True)),
                ("code_expires_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("max_operators", models.PositiveIntegerField(default=3)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="BoothOperation",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("operator_name", models.CharField(max_length=100)),
                ("operator_contact", models.CharField(blank=True, max_length=20, null=True)),
                ("operator_email", models.CharField(blank=True, max_length=100, null=True)),
                ("operator_organization", models.CharField(blank=True, max_length=100, null=True)),
                ("notes", models.TextField(blank=True, null=True)),
                ("started_at", models.DateTimeField()),
                ("ended_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("total_participants", models.PositiveIntegerField(default=0)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booth",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="operations",
                        to="booths.booth",
                    ),
                ),
            ],
            options={
                "ordering": ["-started_at"],
            },
        ),
        migrations.CreateModel(
            name="OperatorSession",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("token", models.CharField(max_length=64, unique=True)),
                ("created_at", models.DateTimeField()),
                ("expires_at", models.DateTimeField()),
                ("last_activity_at", models.DateTimeField()),
                ("address", models.GenericIPAddressField(blank=True, null=True)),
                (
                    "operation",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="booths.boothoperation",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="CodeAttempt",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("attempted_code", models.CharField(max_length=32)),
                ("address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.TextField(blank=True, null=True)),
                ("attempted_at", models.DateTimeField()),
                ("success", models.BooleanField(default=False)),
                ("failure_reason", models.CharField(blank=True, max_length=32, null=True)),
                (
                    "booth",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="code_attempts",
                        to="booths.booth",
                    ),
                ),
            ],
            options={
                "ordering": ["-attempted_at"],
            },
        ),
        migrations.CreateModel(
            name="DailyStat",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                ("stat_date", models.DateField()),
                ("total_participants", models.PositiveIntegerField(default=0)),
                ("male_count", models.PositiveIntegerField(default=0)),
                ("female_count", models.PositiveIntegerField(default=0)),
                ("elementary_count", models.PositiveIntegerField(default=0)),
                ("middle_count", models.PositiveIntegerField(default=0)),
                ("high_count", models.PositiveIntegerField(default=0)),
                ("operator_count", models.PositiveIntegerField(default=0)),
                ("operation_hours", models.DecimalField(decimal_places=2, default=0, max_digits=7)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "booth",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="daily_stats",
                        to="booths.booth",
                    ),
                ),
            ],
        ),
        migrations.CreateModel(
            name="Participant",
            fields=[
                ("id", models.BigAutoField(primary_key=True, serialize=False)),
                (
                    "gender",
                    models.CharField(
                        choices=[("male", "Male"), ("female", "Female"), ("other", "Other")],
                        default="other",
                        max_length=10,
                    ),
                ),
                (
                    "school_level",
                    models.CharField(
                        choices=[
                            ("elementary", "Elementary"),
                            ("middle", "Middle"),
                            ("high", "High"),
                            ("other", "Other"),
                        ],
                        default="other",
                        max_length=10,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                (
                    "booth",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="participants",
                        to="booths.booth",
                    ),
                ),
            ],
        ),
        migrations.AddConstraint(
            model_name="booth",
            constraint=models.CheckConstraint(
                condition=models.Q(max_operators__gte=1),
                name="booth_max_operators_positive",
            ),
        ),
        migrations.AddIndex(
            model_name="boothoperation",
            index=models.Index(fields=["booth", "is_active"], name="operation_booth_active_idx"),
        ),
        migrations.AddIndex(
            model_name="boothoperation",
            index=models.Index(fields=["-started_at"], name="operation_started_idx"),
        ),
        migrations.AddConstraint(
            model_name="boothoperation",
            constraint=models.CheckConstraint(
                condition=(
                    models.Q(is_active=True, ended_at__isnull=True)
                    | models.Q(is_active=False, ended_at__isnull=False)
                ),
                name="operation_active_iff_not_ended",
            ),
        ),
        migrations.AddIndex(
            model_name="operatorsession",
            index=models.Index(fields=["expires_at"], name="session_expires_idx"),
        ),
        migrations.AddIndex(
            model_name="codeattempt",
            index=models.Index(fields=["address", "attempted_at"], name="attempt_address_time_idx"),
        ),
        migrations.AddIndex(
            model_name="codeattempt",
            index=models.Index(fields=["attempted_at"], name="attempt_time_idx"),
        ),
        migrations.AddIndex(
            model_name="dailystat",
            index=models.Index(fields=["stat_date"], name="daily_stat_date_idx"),
        ),
        migrations.AddConstraint(
            model_name="dailystat",
            constraint=models.UniqueConstraint(fields=("booth", "stat_date"), name="unique_booth_stat_date"),
        ),
        migrations.AddIndex(
            model_name="participant",
            index=models.Index(fields=["booth", "created_at"], name="participant_booth_time_idx"),
        ),
    ]
