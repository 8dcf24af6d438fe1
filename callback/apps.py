from django.apps import AppConfig


class CallbackConfig(AppConfig):
    """第三方 webhook / 回调推送接收。"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "callback"
