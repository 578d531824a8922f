from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.contrib.auth.forms import BaseUserCreationForm, UserChangeForm
from django.db.models import Count

from carcruise.listings.models import Booking, Listing

from .models import CustomUser


class AccountCreationForm(BaseUserCreationForm):
    class Meta:
        model = CustomUser
        fields = ('email', 'first_name', 'last_name', 'phone_number')


class AccountChangeForm(UserChangeForm):
    class Meta:
        model = CustomUser
        fields = '__all__'


class OwnedListingInline(admin.TabularInline):
    model = Listing
    fields = ('title', 'location', 'price', 'created_at')
    readonly_fields = fields
    extra = 0
    show_change_link = True
    can_delete = False


class RenterBookingInline(admin.TabularInline):
    """Bookings the user made as a renter."""
    model = Booking
    fk_name = 'user'
    fields = ('listing_id', 'status', 'pickup_date', 'return_date', 'created_at')
    readonly_fields = fields
    extra = 0
    show_change_link = True
    can_delete = False


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    add_form = AccountCreationForm
    form = AccountChangeForm
    model = CustomUser
    inlines = (OwnedListingInline, RenterBookingInline)

    list_display = ('id', 'email', 'phone_number', 'listings_total', 'bookings_total', 'is_staff', 'is_active')
    list_filter = ('is_staff', 'is_active')
    search_fields = ('email', 'first_name', 'last_name', 'phone_number')
    ordering = ('-date_joined',)
    readonly_fields = ('last_login', 'date_joined')

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        ('Contact', {'fields': ('first_name', 'last_name', 'phone_number')}),
        ('Access', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups')}),
        ('Dates', {'fields': ('last_login', 'date_joined')}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('email', 'first_name', 'last_name', 'phone_number', 'password1', 'password2'),
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            listings_total=Count('listings', distinct=True),
            bookings_total=Count('bookings', distinct=True),
        )

    @admin.display(description='Listings', ordering='listings_total')
    def listings_total(self, obj):
        return obj.listings_total

    @admin.display(description='Bookings', ordering='bookings_total')
    def bookings_total(self, obj):
        return obj.bookings_total
