# hostel/views.py
import logging

from django.db.models import Q
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from account.permissions import IsAdmin, IsAdminOrWarden
from hostel.models import Bed, Building, Floor, Room, Student
from hostel.pagination import StandardResultsSetPagination
from hostel.serializers import (
    BedSerializer,
    BuildingSerializer,
    FloorSerializer,
    RoomSerializer,
    StudentCheckoutSerializer,
    StudentCreateSerializer,
    StudentSerializer,
)

logger = logging.getLogger(__name__)


def _int_param(request, name):
    value = request.GET.get(name)
    if value in (None, ""):
        return None
    return int(value)


class BuildingListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        buildings = Building.objects.prefetch_related("floors").order_by("name")
        return Response(BuildingSerializer(buildings, many=True).data)

    def post(self, request):
        if not IsAdmin().has_permission(request, self):
            return Response({"detail": "Access denied"}, status=status.HTTP_403_FORBIDDEN)

        serializer = BuildingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class FloorListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        floors = Floor.objects.select_related("building")
        try:
            building_id = _int_param(request, "building_id")
        except ValueError:
            return Response({"error": "Invalid building_id"}, status=status.HTTP_400_BAD_REQUEST)
        if building_id is not None:
            floors = floors.filter(building_id=building_id)
        return Response(FloorSerializer(floors, many=True).data)

    def post(self, request):
        serializer = FloorSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class RoomListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        rooms = Room.objects.select_related("floor__building")
        try:
            floor_id = _int_param(request, "floor_id")
        except ValueError:
            return Response({"error": "Invalid floor_id"}, status=status.HTTP_400_BAD_REQUEST)
        if floor_id is not None:
            rooms = rooms.filter(floor_id=floor_id)
        return Response(RoomSerializer(rooms, many=True).data)

    def post(self, request):
        serializer = RoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class BedListCreateView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        beds = Bed.objects.select_related("room__floor__building")
        try:
            room_id = _int_param(request, "room_id")
        except ValueError:
            return Response({"error": "Invalid room_id"}, status=status.HTTP_400_BAD_REQUEST)
        if room_id is not None:
            beds = beds.filter(room_id=room_id)
        return Response(BedSerializer(beds, many=True).data)

    def post(self, request):
        serializer = BedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data, status=status.HTTP_201_CREATED)


class VacantBedListView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request):
        beds = Bed.objects.select_related("room__floor__building").filter(is_occupied=False)
        return Response(BedSerializer(beds, many=True).data)


class StudentListCreateView(APIView):
    """
    GET /api/v1/students?status=ACTIVE&search=ram

    POST /api/v1/students
        Admits a student. ``initial_payment`` (optional) is recorded against
        the admission balance.
    """
    permission_classes = [IsAuthenticated, IsAdminOrWarden]
    pagination_class = StandardResultsSetPagination

    def get(self, request):
        students = Student.objects.select_related("bed__room__floor__building")

        status_filter = request.GET.get("status")
        search = request.GET.get("search")

        if status_filter:
            valid_statuses = [choice for choice, _ in Student.STATUS_CHOICES]
            if status_filter.upper() not in valid_statuses:
                return Response(
                    {"error": f"Invalid status. Must be one of {valid_statuses}"},
                    status=status.HTTP_400_BAD_REQUEST
                )
            students = students.filter(status=status_filter.upper())

        if search:
            students = students.filter(Q(full_name__icontains=search) | Q(phone__icontains=search))

        paginator = self.pagination_class()
        page = paginator.paginate_queryset(students, request)
        return paginator.get_paginated_response(StudentSerializer(page, many=True).data)

    def post(self, request):
        serializer = StudentCreateSerializer(data=request.data, context={"user": request.user})
        serializer.is_valid(raise_exception=True)
        student = serializer.save()
        logger.info("Admitted student %s (%s) on %s", student.id, student.full_name, student.admission_date)
        return Response(StudentSerializer(student).data, status=status.HTTP_201_CREATED)


class StudentDetailView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def get(self, request, student_id):
        try:
            student = Student.objects.select_related("bed__room__floor__building").get(id=student_id)
        except Student.DoesNotExist:
            return Response({"error": "Student not found"}, status=status.HTTP_404_NOT_FOUND)

        return Response(StudentSerializer(student).data, status=status.HTTP_200_OK)


class StudentCheckoutView(APIView):
    permission_classes = [IsAuthenticated, IsAdminOrWarden]

    def post(self, request, student_id):
        try:
            student = Student.objects.get(id=student_id)
        except Student.DoesNotExist:
            return Response({"error": "Student not found"}, status=status.HTTP_404_NOT_FOUND)

        serializer = StudentCheckoutSerializer(data=request.data, context={"student": student})
        serializer.is_valid(raise_exception=True)
        student = serializer.save()
        logger.info("Checked out student %s on %s", student.id, student.checked_out_at)

        return Response({
            "message": "Student checked out",
            "student": StudentSerializer(student).data,
        }, status=status.HTTP_200_OK)
