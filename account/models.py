# account/models.py
from django.db import models
from django.contrib.auth.models import BaseUserManager, AbstractBaseUser


class Role(models.Model):
    ADMIN = 'ADMIN'
    WARDEN = 'WARDEN'

    ROLE_CHOICES = [
        (ADMIN, 'Admin'),
        (WARDEN, 'Warden'),
    ]

    name = models.CharField(max_length=20, choices=ROLE_CHOICES, unique=True)

    def __str__(self):
        return self.name


class UserManager(BaseUserManager):
    def create_user(self, email, name, password=None, role=None):
        """``role`` may be a Role instance or one of the role names."""
        if not email:
            raise ValueError("Users must have an email address")

        if role is not None and not isinstance(role, Role):
            role = Role.objects.get(name=role)

        user = self.model(email=self.normalize_email(email), name=name, role=role)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, name, password=None):
        user = self.create_user(email, name, password=password, role=Role.ADMIN)
        user.is_admin = True
        user.save(using=self._db, update_fields=["is_admin"])
        return user


class User(AbstractBaseUser):
    """Hostel staff account. Students do not log in."""

    email = models.EmailField(verbose_name="Email", max_length=255, unique=True)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=20, blank=True)
    role = models.ForeignKey(Role, on_delete=models.SET_NULL, null=True)
    is_active = models.BooleanField(default=True)
    is_admin = models.BooleanField(default=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = ["name"]

    def __str__(self):
        return f"{self.name} <{self.email}>"

    @property
    def role_name(self):
        return self.role.name if self.role_id else None

    def has_role(self, *names):
        return self.role_name in names

    # Django admin hooks
    def has_perm(self, perm, obj=None):
        return self.is_admin

    def has_module_perms(self, app_label):
        return True

    @property
    def is_staff(self):
        return self.is_admin
