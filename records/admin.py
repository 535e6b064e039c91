"""
Django admin registrations for the records models.

Superusers can inspect users, patients and the audit trail at
``/admin/``.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import User, Patient, AuditEvent


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'role', 'is_active', 'is_staff')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'first_name', 'last_name', 'email')
    fieldsets = BaseUserAdmin.fieldsets + (('Clinic', {'fields': ('role',)}),)


@admin.register(Patient)
class PatientAdmin(admin.ModelAdmin):
    list_display = ('id', 'first_name', 'last_name', 'dob', 'gender', 'created_at')
    list_filter = ('gender',)
    search_fields = ('first_name', 'last_name')


@admin.register(AuditEvent)
class AuditEventAdmin(admin.ModelAdmin):
    list_display = ('action', 'user', 'object_type', 'object_id', 'created_at')
    list_filter = ('action',)
    search_fields = ('object_id', 'user__username')
    readonly_fields = ('user', 'action', 'object_type', 'object_id', 'detail', 'created_at')
