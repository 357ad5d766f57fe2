from django.contrib.auth import get_user_model
from rest_framework import serializers

from market.models import Listing, Location, Province
from market.search import SearchFilters
from notifications.models import Notification
from reports.models import Report

User = get_user_model()


class UserMeSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "username", "email", "profile_name", "phone", "role"]
        read_only_fields = ["id", "username", "email", "role"]

    def validate_profile_name(self, value):
        return value.strip()

    def validate_phone(self, value):
        phone = value.strip().replace(" ", "")
        if not phone:
            return ""
        digits = phone[1:] if phone.startswith("+") else phone
        if not digits.isdigit() or not 6 <= len(digits) <= 15:
            raise serializers.ValidationError("Enter a valid phone number.")
        return phone


class ProvinceSerializer(serializers.ModelSerializer):
    class Meta:
        model = Province
        fields = ["id", "code", "name", "country", "country_code", "latitude", "longitude"]


class LocationSerializer(serializers.ModelSerializer):
    province = ProvinceSerializer(read_only=True)

    class Meta:
        model = Location
        fields = ["id", "code", "name", "department_name", "country", "latitude", "longitude", "province"]


class ListingSerializer(serializers.ModelSerializer):
    owner_id = serializers.IntegerField(read_only=True)
    location = LocationSerializer(read_only=True)

    class Meta:
        model = Listing
        fields = [
            "id",
            "owner_id",
            "title",
            "age",
            "description",
            "price",
            "phone",
            "use_whatsapp",
            "photos",
            "status",
            "reports",
            "location",
            "valid_until",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class AdminListingSerializer(ListingSerializer):
    class Meta(ListingSerializer.Meta):
        fields = ListingSerializer.Meta.fields + ["is_deleted"]
        read_only_fields = fields


class ListingQuerySerializer(serializers.Serializer):
    """Query-string filters shared by the public, owner and admin listing searches."""

    location = serializers.CharField(required=False, allow_blank=True)
    query = serializers.CharField(required=False, allow_blank=True)
    status = serializers.CharField(required=False, allow_blank=True)
    province = serializers.CharField(required=False, allow_blank=True)
    user_id = serializers.IntegerField(required=False, min_value=1)
    only_whatsapp = serializers.BooleanField(required=False, default=False)
    age = serializers.CharField(required=False, allow_blank=True)
    price = serializers.DecimalField(required=False, max_digits=12, decimal_places=2, min_value=0)
    price_min = serializers.DecimalField(required=False, max_digits=12, decimal_places=2, min_value=0)
    price_max = serializers.DecimalField(required=False, max_digits=12, decimal_places=2, min_value=0)
    include_deleted = serializers.BooleanField(required=False, default=False)

    def validate(self, attrs):
        low, high = attrs.get("price_min"), attrs.get("price_max")
        if low is not None and high is not None and low > high:
            raise serializers.ValidationError({"price_min": "price_min cannot exceed price_max"})
        return attrs

    def to_filters(self) -> SearchFilters:
        data = self.validated_data
        return SearchFilters(
            location=data.get("location") or None,
            query=data.get("query") or None,
            status=data.get("status") or None,
            province=data.get("province") or None,
            user_id=data.get("user_id"),
            only_whatsapp=data.get("only_whatsapp", False),
            age=data.get("age") or None,
            price=data.get("price"),
            price_min=data.get("price_min"),
            price_max=data.get("price_max"),
            include_deleted=data.get("include_deleted", False),
        )


class ReportCreateSerializer(serializers.Serializer):
    # Blank reasons are rejected by the engine with its own error code.
    reason = serializers.CharField(required=False, allow_blank=True, max_length=120)
    additional_info = serializers.CharField(required=False, allow_blank=True)
    contact_info = serializers.CharField(required=False, allow_blank=True, max_length=255)


class ReportSerializer(serializers.ModelSerializer):
    class Meta:
        model = Report
        fields = ["id", "listing", "reason", "additional_info", "contact_info", "created_at"]
        read_only_fields = fields


class StatusUpdateSerializer(serializers.Serializer):
    status = serializers.CharField()


class NotificationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Notification
        fields = ["id", "kind", "title", "body", "payload", "read_at", "created_at"]
        read_only_fields = fields
