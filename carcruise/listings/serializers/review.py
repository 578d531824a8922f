from rest_framework import serializers

from carcruise.listings.models import Listing, Review
from carcruise.listings.serializers.common import PublicUserTinySerializer


class ReviewSerializer(serializers.ModelSerializer):
    author = PublicUserTinySerializer(read_only=True)
    listing = serializers.PrimaryKeyRelatedField(queryset=Listing.objects.all())
    comment = serializers.CharField(allow_blank=False, trim_whitespace=True)

    class Meta:
        model = Review
        fields = ("id", "listing", "author", "rating", "comment", "created_at")
        read_only_fields = ("id", "author", "created_at")

    def validate_rating(self, value):
        if not (1 <= value <= 5):
            raise serializers.ValidationError("Rating must be between 1 and 5.")
        return value

    def create(self, validated_data):
        validated_data["author"] = self.context["request"].user
        return super().create(validated_data)
