from django.contrib import admin

from booths.models import Booth, BoothOperation, CodeAttempt, DailyStat, OperatorSession


class BoothOperationInline(admin.TabularInline):
    model = BoothOperation
    extra = 0
    fields = ["operator_name", "started_at", "ended_at", "is_active", "total_participants"]
    readonly_fields = fields
    can_delete = False


@admin.register(Booth)
class BoothAdmin(admin.ModelAdmin):
    list_display = ["name", "code", "code_expires_at", "is_active", "max_operators"]
    list_filter = ["is_active"]
    search_fields = ["name", "code"]
    readonly_fields = ["code", "code_expires_at"]
    inlines = [BoothOperationInline]


@admin.register(BoothOperation)
class BoothOperationAdmin(admin.ModelAdmin):
    list_display = ["operator_name", "booth", "started_at", "ended_at", "is_active"]
    list_filter = ["is_active", "booth"]
    search_fields = ["operator_name", "operator_contact"]

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(CodeAttempt)
class CodeAttemptAdmin(admin.ModelAdmin):
    list_display = ["attempted_code", "address", "attempted_at", "success", "failure_reason"]
    list_filter = ["success", "failure_reason"]
    search_fields = ["attempted_code", "address"]

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(OperatorSession)
class OperatorSessionAdmin(admin.ModelAdmin):
    list_display = ["operation", "created_at", "expires_at", "last_activity_at"]
    exclude = ["token"]


@admin.register(DailyStat)
class DailyStatAdmin(admin.ModelAdmin):
    list_display = ["booth", "stat_date", "operator_count", "operation_hours", "total_participants"]
    list_filter = ["booth"]
