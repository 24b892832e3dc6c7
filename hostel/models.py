# hostel/models.py
from django.db import models
from django.utils import timezone


class Building(models.Model):
    name = models.CharField(max_length=100, unique=True)
    address = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    def __str__(self):
        return self.name


class Floor(models.Model):
    building = models.ForeignKey(Building, on_delete=models.CASCADE, related_name="floors")
    floor_number = models.IntegerField()
    name = models.CharField(max_length=50, blank=True)

    class Meta:
        unique_together = ("building", "floor_number")
        ordering = ["building", "floor_number"]

    def __str__(self):
        return f"{self.building} - Floor {self.floor_number}"


class Room(models.Model):
    floor = models.ForeignKey(Floor, on_delete=models.CASCADE, related_name="rooms")
    room_number = models.CharField(max_length=10)
    capacity = models.PositiveIntegerField(default=2)
    base_rent = models.PositiveIntegerField(default=0)

    class Meta:
        unique_together = ("floor", "room_number")
        ordering = ["floor", "room_number"]

    def __str__(self):
        return f"{self.floor.building} - {self.room_number}"


class Bed(models.Model):
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="beds")
    bed_number = models.CharField(max_length=10)
    # overrides the room's base rent when set
    monthly_rent = models.PositiveIntegerField(null=True, blank=True)
    is_occupied = models.BooleanField(default=False)

    class Meta:
        unique_together = ("room", "bed_number")
        ordering = ["room", "bed_number"]

    def __str__(self):
        return f"{self.room} - Bed {self.bed_number}"

    @property
    def effective_rent(self):
        if self.monthly_rent is not None:
            return self.monthly_rent
        return self.room.base_rent


class Student(models.Model):
    ACTIVE = "ACTIVE"
    CHECKED_OUT = "CHECKED_OUT"
    SUSPENDED = "SUSPENDED"
    PENDING_ADMISSION = "PENDING_ADMISSION"

    STATUS_CHOICES = [
        (ACTIVE, "Active"),
        (CHECKED_OUT, "Checked out"),
        (SUSPENDED, "Suspended"),
        (PENDING_ADMISSION, "Pending admission"),
    ]

    full_name = models.CharField(max_length=150)
    phone = models.CharField(max_length=20)
    email = models.EmailField(blank=True)
    guardian_name = models.CharField(max_length=150, blank=True)
    guardian_phone = models.CharField(max_length=20, blank=True)

    bed = models.ForeignKey(Bed, on_delete=models.SET_NULL, null=True, blank=True, related_name="students")

    admission_date = models.DateField(default=timezone.localdate)
    # anchor of the rent cycle; moved forward only when a cycle is fully paid
    last_payment_date = models.DateField(null=True, blank=True)
    monthly_rent = models.PositiveIntegerField(default=0)
    security_deposit = models.PositiveIntegerField(default=0)

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=ACTIVE)
    checked_out_at = models.DateField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        indexes = [
            models.Index(fields=["status"], name="hostel_student_status_idx"),
        ]
        ordering = ["-created_at"]

    def __str__(self):
        return f"{self.full_name} ({self.phone})"

    @property
    def is_active(self):
        return self.status == self.ACTIVE
