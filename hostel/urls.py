from django.urls import path
from hostel.views import (
    BuildingListCreateView,
    FloorListCreateView,
    RoomListCreateView,
    BedListCreateView,
    VacantBedListView,
    StudentListCreateView,
    StudentDetailView,
    StudentCheckoutView,
)

urlpatterns = [
    # Inventory
    path("buildings", BuildingListCreateView.as_view(), name="building-list"), # list / create buildings
    path("floors", FloorListCreateView.as_view(), name="floor-list"), # list (?building_id=) / create floors
    path("rooms", RoomListCreateView.as_view(), name="room-list"), # list (?floor_id=) / create rooms
    path("beds", BedListCreateView.as_view(), name="bed-list"), # list (?room_id=) / create beds
    path("beds/vacant", VacantBedListView.as_view(), name="vacant-beds"), # beds available for admission

    # Students
    path("students", StudentListCreateView.as_view(), name="student-list"), # list / admit students
    path("students/<int:student_id>", StudentDetailView.as_view(), name="student-detail"), # student details
    path("students/<int:student_id>/checkout", StudentCheckoutView.as_view(), name="student-checkout"), # check a student out and free the bed
]
