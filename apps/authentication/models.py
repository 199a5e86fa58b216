"""
Authentication models.
Agent is the custom User — office staff who run dispatch, finance and management.
Drivers are fleet master data (apps.fleet), not login accounts.
"""

import uuid
from django.db import models
from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin, BaseUserManager


class AgentManager(BaseUserManager):
    def create_user(self, phone, password=None, **extra):
        if not phone:
            raise ValueError("Phone number is required.")
        user = self.model(phone=phone, **extra)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, phone, password, **extra):
        extra.setdefault("is_staff", True)
        extra.setdefault("is_superuser", True)
        extra.setdefault("role", Agent.Role.ADMIN)
        return self.create_user(phone, password, **extra)


class Agent(AbstractBaseUser, PermissionsMixin):
    """Every staff member — identified by phone."""

    class Role(models.TextChoices):
        DISPATCHER = "DISPATCHER", "Dispatcher"
        ACCOUNTANT = "ACCOUNTANT", "Accountant"
        MANAGER    = "MANAGER",    "Manager"
        ADMIN      = "ADMIN",      "Admin"

    id            = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    phone         = models.CharField(max_length=15, unique=True)
    full_name     = models.CharField(max_length=120)
    email         = models.EmailField(blank=True)
    role          = models.CharField(max_length=12, choices=Role.choices, default=Role.DISPATCHER)
    is_active     = models.BooleanField(default=True)
    is_staff      = models.BooleanField(default=False)
    created_at    = models.DateTimeField(auto_now_add=True)

    USERNAME_FIELD  = "phone"
    REQUIRED_FIELDS = ["full_name"]

    objects = AgentManager()

    class Meta:
        verbose_name = "Agent"
        indexes = [
            models.Index(fields=["phone"], name="agent_phone_idx"),
            models.Index(fields=["role"],  name="agent_role_idx"),
        ]

    def __str__(self):
        return f"{self.full_name} ({self.role})"

    def has_role(self, *roles) -> bool:
        return self.is_superuser or self.role in roles
