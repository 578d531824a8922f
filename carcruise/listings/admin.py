from django.contrib import admin, messages
from django.core.exceptions import ValidationError

from . import services
from .models import Listing, Booking, Review


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'title', 'location', 'country', 'price', 'owner', 'created_at'
    )
    list_filter = (
        'country',
        'owner',
        'created_at',
    )
    date_hierarchy = 'created_at'
    search_fields = ('id', 'title', 'location', 'country', 'description', 'owner__email')
    autocomplete_fields = ('owner',)
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('-created_at',)
    list_select_related = ('owner',)

    def delete_model(self, request, obj):
        services.delete_listing(obj)

    def delete_queryset(self, request, queryset):
        for listing in queryset:
            services.delete_listing(listing)


def _apply_status(modeladmin, request, qs, target):
    changed = 0
    for booking in qs:
        try:
            if services.update_booking_status(booking, target):
                changed += 1
        except ValidationError as exc:
            modeladmin.message_user(request, f"Booking {booking.pk}: {exc.messages[0]}", level=messages.WARNING)
    modeladmin.message_user(request, f"{changed} booking(s) set to {target}.")


@admin.action(description="Approve selected bookings")
def approve_bookings(modeladmin, request, qs):
    _apply_status(modeladmin, request, qs, Booking.Status.APPROVED)


@admin.action(description="Reject selected bookings")
def reject_bookings(modeladmin, request, qs):
    _apply_status(modeladmin, request, qs, Booking.Status.REJECTED)


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'listing_id', 'owner_email', 'renter_email',
        'status', 'pickup_date', 'return_date', 'created_at'
    )

    # Filter/search for moderation
    list_filter = (
        'status',
        'pickup_date',
        'return_date',
        'created_at',
    )
    date_hierarchy = 'created_at'
    search_fields = ('full_name', 'mobile_number', 'owner__email', 'user__email')
    autocomplete_fields = ('user', 'owner')
    raw_id_fields = ('listing',)
    ordering = ('-created_at',)
    list_select_related = ('owner', 'user')
    actions = (approve_bookings, reject_bookings)

    @admin.display(ordering='owner__email', description='Owner')
    def owner_email(self, obj):
        return getattr(obj.owner, 'email', None)

    @admin.display(ordering='user__email', description='Renter')
    def renter_email(self, obj):
        return getattr(obj.user, 'email', None)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'listing_id', 'author', 'rating', 'created_at')
    list_filter = ('rating', 'created_at')
    date_hierarchy = 'created_at'
    search_fields = ('comment', 'author__email')
    autocomplete_fields = ('author',)
    raw_id_fields = ('listing',)
    list_select_related = ('author',)
