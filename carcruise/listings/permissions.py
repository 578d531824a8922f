from rest_framework import permissions


class IsListingOwnerOrReadOnly(permissions.BasePermission):
    """Read for everyone; write only for the listing owner."""
    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        return obj.owner_id == getattr(request.user, "id", None)


class IsBookingRenterOrOwner(permissions.BasePermission):
    """
    Read allowed for the booking's renter or the listing owner.
    status/approve/reject: only the listing owner.
    cancel: only the renter.
    """
    def has_object_permission(self, request, view, obj):
        user_id = getattr(request.user, "id", None)
        if request.method in permissions.SAFE_METHODS:
            return obj.user_id == user_id or obj.owner_id == user_id

        action = getattr(view, "action", None)
        if action in ("set_status", "approve", "reject"):
            return obj.owner_id == user_id
        if action == "cancel":
            return obj.user_id == user_id

        return False


class IsReviewAuthorOrAdmin(permissions.BasePermission):
    """Read for everyone; write only for review author or staff."""
    def has_object_permission(self, request, view, obj):
        if request.method in permissions.SAFE_METHODS:
            return True
        user = request.user
        return bool(
            user
            and user.is_authenticated
            and (obj.author_id == user.id or user.is_staff)
        )
