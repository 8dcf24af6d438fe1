from django.apps import AppConfig


class WxConfig(AppConfig):
    """公众号 / 小程序接口代理。"""

    default_auto_field = "django.db.models.BigAutoField"
    name = "wx"
