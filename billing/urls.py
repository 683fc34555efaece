from django.urls import path
from . import views

urlpatterns = [

#     ── API ───────────────────────────────────────────────
    path('api/',                            views.api,                    name='api'),
]
