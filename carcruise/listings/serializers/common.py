from rest_framework import serializers


class PublicUserTinySerializer(serializers.Serializer):
    """Public projection for nested user references."""
    id = serializers.IntegerField()
    email = serializers.EmailField(allow_null=True, required=False)


class ReviewShortSerializer(serializers.Serializer):
    """Public projection for reviews shown on listing cards/details."""
    id = serializers.IntegerField()
    rating = serializers.IntegerField()
    comment = serializers.CharField(allow_blank=True, allow_null=True, required=False)
    author = PublicUserTinySerializer()
    created_at = serializers.DateTimeField()


class PriceBreakdownSerializer(serializers.Serializer):
    rental_days = serializers.DecimalField(max_digits=None, decimal_places=1)
    price_per_day = serializers.DecimalField(max_digits=None, decimal_places=2)
    subtotal = serializers.DecimalField(max_digits=None, decimal_places=2)
    gst_amount = serializers.DecimalField(max_digits=None, decimal_places=2)
    total_amount = serializers.DecimalField(max_digits=None, decimal_places=2)


def tiny_user(user):
    if not user:
        return None
    return {"id": user.id, "email": user.email}
