"""Authentication: registration, login, profile, staff roles."""

import re
from django.contrib.auth import get_user_model
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework import serializers
from drf_spectacular.utils import extend_schema

from apps.authentication.permissions import require_role

Agent = get_user_model()

# ── Validators ────────────────────────────────────────────────────────────────
NG_PHONE_PATTERN = re.compile(r"^(\+?234|0)([789][01]\d{8})$")


def validate_ng_phone(value):
    if not NG_PHONE_PATTERN.match(value):
        raise serializers.ValidationError("Enter a valid Nigerian phone number (+234 or 080…).")


# ── Serializers ───────────────────────────────────────────────────────────────
class AgentRegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(write_only=True, min_length=8)
    phone    = serializers.CharField(validators=[validate_ng_phone])

    class Meta:
        model  = Agent
        fields = ["phone", "full_name", "email", "password"]

    def create(self, validated_data):
        password = validated_data.pop("password")
        agent = Agent(**validated_data)
        agent.set_password(password)
        agent.save()
        return agent


class AgentProfileSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Agent
        fields = ["id", "phone", "full_name", "email", "role", "created_at"]
        read_only_fields = ["id", "phone", "role", "created_at"]


class AgentRoleSerializer(serializers.ModelSerializer):
    class Meta:
        model  = Agent
        fields = ["id", "phone", "full_name", "role", "is_active"]
        read_only_fields = ["id", "phone", "full_name"]


# ── Views ─────────────────────────────────────────────────────────────────────
@extend_schema(tags=["Auth"])
class RegisterView(generics.CreateAPIView):
    """POST /api/auth/register/ — Create a staff account (starts as DISPATCHER)."""
    queryset         = Agent.objects.all()
    serializer_class = AgentRegisterSerializer
    permission_classes = [AllowAny]

    def create(self, request, *args, **kwargs):
        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        agent = serializer.save()
        return Response(
            {"message": "Account created. Please log in.", "id": str(agent.id)},
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=["Auth"])
class ProfileView(generics.RetrieveUpdateAPIView):
    """GET/PATCH /api/auth/me/ — Retrieve or update own profile."""
    serializer_class   = AgentProfileSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user


@extend_schema(tags=["Auth"], summary="Change a staff member's role (Admin only)")
class AgentRoleView(generics.UpdateAPIView):
    """PATCH /api/auth/agents/{id}/role/"""
    queryset           = Agent.objects.all()
    serializer_class   = AgentRoleSerializer
    permission_classes = [IsAuthenticated]
    http_method_names  = ["patch"]

    def update(self, request, *args, **kwargs):
        denied = require_role(request, ("ADMIN",))
        if denied:
            return denied
        return super().update(request, *args, **kwargs)
