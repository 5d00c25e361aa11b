from django.contrib import admin

from .models import Listing, ListingImage, Booking, Review, Favorite


class ListingImageInline(admin.TabularInline):
    model = ListingImage
    extra = 0
    fields = ('position', 'url')
    ordering = ('position', 'id')


@admin.register(Listing)
class ListingAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'title', 'city', 'country', 'category',
        'price_per_night', 'beds', 'owner_id', 'created_at'
    )
    list_filter = (
        'category',
        'beds',
        'country',
        'created_at',  # date filter sidebar (Today / Past 7 days / etc.)
    )
    date_hierarchy = 'created_at'
    search_fields = ('id', 'title', 'city', 'country', 'description', 'owner_id')
    readonly_fields = ('created_at', 'updated_at')
    ordering = ('-created_at',)
    inlines = (ListingImageInline,)


@admin.action(description="Reject selected pending bookings")
def reject_pending_bookings(modeladmin, request, qs):
    updated = qs.filter(status=Booking.PENDING).update(status=Booking.CANCELED)
    modeladmin.message_user(request, f"{updated} booking(s) rejected.")


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = (
        'id', 'listing', 'listing_owner', 'guest_id',
        'status', 'start_date', 'end_date', 'created_at'
    )

    # Filter/search for moderation
    list_filter = (
        'status',
        'start_date',
        'end_date',
        'created_at',
    )
    date_hierarchy = 'created_at'
    search_fields = ('listing__title', 'listing__owner_id', 'guest_id')
    autocomplete_fields = ('listing',)
    ordering = ('-created_at',)
    list_select_related = ('listing',)
    actions = (reject_pending_bookings,)

    @admin.display(ordering='listing__owner_id', description='Owner')
    def listing_owner(self, obj):
        listing = getattr(obj, 'listing', None)
        return getattr(listing, 'owner_id', None)


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ('id', 'listing', 'author_id', 'stars', 'created_at')
    list_filter = ('stars', 'created_at')
    date_hierarchy = 'created_at'
    search_fields = ('listing__title', 'author_id', 'text')
    autocomplete_fields = ('listing',)
    readonly_fields = ('created_at',)
    list_select_related = ('listing',)


@admin.register(Favorite)
class FavoriteAdmin(admin.ModelAdmin):
    list_display = ('id', 'listing', 'user_id', 'created_at')
    list_filter = ('created_at',)
    search_fields = ('listing__title', 'user_id')
    autocomplete_fields = ('listing',)
    list_select_related = ('listing',)
