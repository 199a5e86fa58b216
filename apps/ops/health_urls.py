"""Health probes: live/ for the load balancer, deep/ for on-call."""
from django.urls import path
from .views import DeepHealthView, LivenessView

urlpatterns = [
    path("live/", LivenessView.as_view(),   name="health-live"),
    path("deep/", DeepHealthView.as_view(), name="health-deep"),
]
