# hostel/serializers.py
from django.conf import settings
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
from rest_framework import serializers

from hostel.models import Bed, Building, Floor, Room, Student
from payments import services as payment_services
from payments.constants import CASH, PAYMENT_METHOD_CHOICES
from payments.validators import validate_completion_amount


class BuildingSerializer(serializers.ModelSerializer):
    floor_count = serializers.IntegerField(source="floors.count", read_only=True)

    class Meta:
        model = Building
        fields = ["id", "name", "address", "floor_count", "created_at"]
        read_only_fields = ["id", "created_at"]


class FloorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Floor
        fields = ["id", "building", "floor_number", "name"]

    def validate(self, attrs):
        if Floor.objects.filter(
            building=attrs["building"],
            floor_number=attrs["floor_number"]
        ).exists():
            raise serializers.ValidationError("Floor already exists in this building")
        return attrs


class RoomSerializer(serializers.ModelSerializer):
    occupied = serializers.SerializerMethodField()

    class Meta:
        model = Room
        fields = ["id", "floor", "room_number", "capacity", "base_rent", "occupied"]

    def get_occupied(self, obj):
        return obj.beds.filter(is_occupied=True).count()

    def validate_capacity(self, value):
        if value < 1:
            raise serializers.ValidationError("Capacity must be at least 1.")
        return value

    def validate(self, attrs):
        if Room.objects.filter(
            floor=attrs["floor"],
            room_number=attrs["room_number"]
        ).exists():
            raise serializers.ValidationError("Room already exists on this floor")
        return attrs


class BedSerializer(serializers.ModelSerializer):
    effective_rent = serializers.IntegerField(read_only=True)
    label = serializers.CharField(source="__str__", read_only=True)

    class Meta:
        model = Bed
        fields = ["id", "room", "bed_number", "monthly_rent", "effective_rent", "is_occupied", "label"]
        read_only_fields = ["is_occupied"]

    def validate(self, attrs):
        room = attrs["room"]
        if Bed.objects.filter(room=room, bed_number=attrs["bed_number"]).exists():
            raise serializers.ValidationError("Bed already exists in this room")
        if room.beds.count() >= room.capacity:
            raise serializers.ValidationError("Room is already at full capacity")
        return attrs


class StudentSerializer(serializers.ModelSerializer):
    bed_label = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = [
            "id",
            "full_name",
            "phone",
            "email",
            "guardian_name",
            "guardian_phone",
            "bed",
            "bed_label",
            "admission_date",
            "last_payment_date",
            "monthly_rent",
            "security_deposit",
            "status",
            "checked_out_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_bed_label(self, obj):
        return str(obj.bed) if obj.bed else None


class StudentCreateSerializer(serializers.ModelSerializer):
    bed = serializers.PrimaryKeyRelatedField(queryset=Bed.objects.select_related("room"), required=False, allow_null=True)
    monthly_rent = serializers.IntegerField(required=False, min_value=0)
    initial_payment = serializers.IntegerField(required=False, min_value=1, write_only=True)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHOD_CHOICES, default=CASH, write_only=True)

    class Meta:
        model = Student
        fields = [
            "full_name",
            "phone",
            "email",
            "guardian_name",
            "guardian_phone",
            "bed",
            "admission_date",
            "monthly_rent",
            "security_deposit",
            "status",
            "initial_payment",
            "payment_method",
        ]

    def validate_bed(self, bed):
        if bed is not None and bed.is_occupied:
            raise serializers.ValidationError("Bed is already occupied")
        return bed

    def validate(self, attrs):
        bed = attrs.get("bed")
        if "monthly_rent" not in attrs:
            if bed is None:
                raise serializers.ValidationError({"monthly_rent": "Monthly rent is required when no bed is assigned"})
            # rent follows the bed unless overridden
            attrs["monthly_rent"] = bed.effective_rent

        if attrs.get("initial_payment"):
            total_due = (
                attrs["monthly_rent"]
                + attrs.get("security_deposit", 0)
                + settings.REGISTRATION_FEE
            )
            try:
                validate_completion_amount(attrs["initial_payment"], total_due)
            except DjangoValidationError as exc:
                raise serializers.ValidationError({"initial_payment": exc.messages})
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        initial_payment = validated_data.pop("initial_payment", None)
        payment_method = validated_data.pop("payment_method", CASH)
        recorded_by = self.context.get("user")

        validated_data.setdefault("admission_date", timezone.localdate())
        student = Student.objects.create(**validated_data)

        if initial_payment:
            payment_services.record_admission_payment(
                student,
                initial_payment,
                method=payment_method,
                recorded_by=recorded_by,
            )
            student.refresh_from_db()
        return student


class StudentCheckoutSerializer(serializers.Serializer):
    checkout_date = serializers.DateField(required=False)

    def validate(self, attrs):
        student = self.context["student"]
        if student.status == Student.CHECKED_OUT:
            raise serializers.ValidationError("Student is already checked out")
        checkout_date = attrs.get("checkout_date") or timezone.localdate()
        if checkout_date < student.admission_date:
            raise serializers.ValidationError({"checkout_date": "Checkout date cannot be before admission date"})
        attrs["checkout_date"] = checkout_date
        return attrs

    @transaction.atomic
    def save(self, **kwargs):
        student = self.context["student"]
        if student.bed_id:
            Bed.objects.filter(pk=student.bed_id).update(is_occupied=False)
        student.bed = None
        student.status = Student.CHECKED_OUT
        student.checked_out_at = self.validated_data["checkout_date"]
        student.save(update_fields=["bed", "status", "checked_out_at"])
        return student
