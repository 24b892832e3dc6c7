# hostel/signals.py
from django.db.models.signals import post_save
from django.dispatch import receiver
from .models import Bed, Student


@receiver(post_save, sender=Student)
def mark_bed_occupied(sender, instance, **kwargs):
    if instance.bed_id and instance.is_active:
        Bed.objects.filter(pk=instance.bed_id, is_occupied=False).update(is_occupied=True)
