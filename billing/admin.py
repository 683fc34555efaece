from django.contrib import admin
from .models import (
    Account, MeterSequence, PriceSetting,
    MeterReading, Bill, Announcement
)

# ── Customize admin site headers ─────────────────────────────
admin.site.site_header  = 'Community Water Billing'
admin.site.site_title   = 'Water Billing Admin'
admin.site.index_title  = 'Administration Dashboard'


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display    = ['meter_id', 'name', 'phone_number', 'role', 'created_at']
    list_filter     = ['role']
    search_fields   = ['meter_id', 'name', 'phone_number']
    ordering        = ['created_at']
    readonly_fields = ['password', 'created_at']
    fieldsets = (
        ('Account Information', {'fields': ('meter_id', 'role')}),
        ('Contact & Address',   {'fields': ('name', 'phone_number', 'address')}),
        ('Audit',               {'fields': ('password', 'created_at'), 'classes': ('collapse',)}),
    )


@admin.register(MeterSequence)
class MeterSequenceAdmin(admin.ModelAdmin):
    list_display  = ['name', 'last_value']


@admin.register(PriceSetting)
class PriceSettingAdmin(admin.ModelAdmin):
    list_display    = ['key', 'value', 'version', 'updated_at']
    readonly_fields = ['version', 'updated_at']


@admin.register(MeterReading)
class MeterReadingAdmin(admin.ModelAdmin):
    list_display  = ['account', 'date', 'previous_reading', 'reading', 'consumption']
    list_filter   = ['date']
    search_fields = ['account__meter_id', 'account__name']
    ordering      = ['-date']


@admin.register(Bill)
class BillAdmin(admin.ModelAdmin):
    list_display    = ['account', 'issue_date', 'due_date', 'consumption',
                        'amount', 'status', 'payment_date']
    list_filter     = ['status', 'issue_date']
    search_fields   = ['account__meter_id', 'account__name']
    ordering        = ['-issue_date']
    readonly_fields = ['amount', 'consumption', 'issue_date', 'due_date']


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display  = ['date', 'message']
    ordering      = ['-date']
