from django.urls import path

from callback.views import msg_callback

app_name = "callback"

urlpatterns = [
    path("msg", msg_callback, name="msg"),
]
