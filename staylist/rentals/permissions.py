from rest_framework import permissions


def caller_id(request):
    """External user id of the authenticated caller, as a string, or None."""
    user = getattr(request, "user", None)
    if not user or not user.is_authenticated:
        return None
    uid = getattr(user, "id", None)
    return str(uid) if uid is not None else None


class IsListingOwnerOrReadOnly(permissions.BasePermission):
    """Read for everyone; write only for the listing owner."""
    message = "Only the listing owner can modify this listing."

    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.owner_id == caller_id(request)


class IsBookingGuestOrListingOwner(permissions.BasePermission):
    """Bookings are visible to their guest and to the owner of the listing."""
    message = "You are not a party to this booking."

    def has_object_permission(self, request, view, obj):
        uid = caller_id(request)
        listing = getattr(obj, "listing", None)
        return obj.guest_id == uid or (listing is not None and listing.owner_id == uid)
