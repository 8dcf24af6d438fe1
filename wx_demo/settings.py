"""
Django settings for wx_demo.

所有配置均从环境变量读取（可放在项目根目录的 .env 中，由 python-dotenv 加载）。
"""

import json
import os
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parent.parent

SECRET_KEY = os.getenv("DJANGO_SECRET_KEY", "django-insecure-wx-demo")
DEBUG = os.getenv("DJANGO_DEBUG", "true").lower() in ("1", "true", "yes")
ALLOWED_HOSTS = [h.strip() for h in os.getenv("DJANGO_ALLOWED_HOSTS", "*").split(",") if h.strip()]

INSTALLED_APPS = [
    "django.contrib.staticfiles",
    "wx",
    "callback",
]

MIDDLEWARE = [
    "django.middleware.security.SecurityMiddleware",
    "django.middleware.common.CommonMiddleware",
    "django.middleware.csrf.CsrfViewMiddleware",
]

ROOT_URLCONF = "wx_demo.urls"
WSGI_APPLICATION = "wx_demo.wsgi.application"

# 本项目不落库，所有数据均透传给微信接口
DATABASES = {}

LANGUAGE_CODE = "zh-hans"
TIME_ZONE = "Asia/Shanghai"
USE_I18N = True
USE_TZ = True

STATIC_URL = "static/"
DEFAULT_AUTO_FIELD = "django.db.models.BigAutoField"

# 上传素材时，超过该大小的文件落到临时文件而非内存
FILE_UPLOAD_MAX_MEMORY_SIZE = 5 * 1024 * 1024
DATA_UPLOAD_MAX_MEMORY_SIZE = 20 * 1024 * 1024


# ==========================================
# 缓存 / Redis
# ==========================================
REDIS_URL = os.getenv("REDIS_URL", "")

if REDIS_URL:
    CACHES = {
        "default": {
            "BACKEND": "django_redis.cache.RedisCache",
            "LOCATION": REDIS_URL,
            "OPTIONS": {"CLIENT_CLASS": "django_redis.client.DefaultClient"},
        }
    }
else:
    CACHES = {
        "default": {
            "BACKEND": "django.core.cache.backends.locmem.LocMemCache",
            "LOCATION": "wx-demo",
        }
    }


# ==========================================
# 微信公众号 / 小程序
# ==========================================
def _load_app_configs(env_name, fallback):
    """读取 JSON 数组形式的多账号配置，未配置时退回单账号环境变量。"""
    raw = os.getenv(env_name, "").strip()
    if raw:
        return json.loads(raw)
    if fallback.get("appId"):
        return [fallback]
    return []


WX_MP_CONFIGS = _load_app_configs(
    "WX_MP_CONFIGS",
    {
        "appId": os.getenv("WX_APPID", ""),
        "secret": os.getenv("WX_APPSECRET", ""),
        "token": os.getenv("WX_TOKEN", ""),
        "aesKey": os.getenv("WX_ENCODING_AES_KEY", ""),
    },
)

WX_MA_CONFIGS = _load_app_configs(
    "WX_MA_CONFIGS",
    {
        "appId": os.getenv("WX_MA_APPID", ""),
        "secret": os.getenv("WX_MA_SECRET", ""),
        "token": os.getenv("WX_MA_TOKEN", ""),
        "aesKey": os.getenv("WX_MA_AES_KEY", ""),
        "msgDataFormat": os.getenv("WX_MA_MSG_DATA_FORMAT", "JSON"),
    },
)

# access_token 存储：memory | redis（redis 需同时配置 REDIS_URL）
WX_SESSION_BACKEND = os.getenv("WX_SESSION_BACKEND", "memory")


# ==========================================
# 通用回调 /msg
# ==========================================
MSG_CALLBACK = {
    "API_URL": os.getenv("MSG_CALLBACK_API_URL", "http://127.0.0.1:8989/api"),
    "WX_ID": os.getenv("MSG_CALLBACK_WX_ID", "cherfei0611"),
    "DEDUP_TTL_SECONDS": float(os.getenv("MSG_CALLBACK_DEDUP_TTL_SECONDS", "5")),
    # memory | redis
    "DEDUP_BACKEND": os.getenv("MSG_CALLBACK_DEDUP_BACKEND", "memory"),
    "WEATHER_MESSAGE": os.getenv(
        "MSG_CALLBACK_WEATHER_MESSAGE",
        "2025年12月17日，星期三，上海今日天气信息是。\n"
        "天气状况：多云转晴\n"
        "气温：最高温度 13℃，最低温度 4℃\n"
        "实时气温：约为 12℃ 左右\n"
        "风力风向：北风 2-3 级\n"
        "湿度：约为 56% - 63%\n"
        "空气质量：良/轻度污染，建议佩戴口罩",
    ),
    "DEFAULT_IMAGE_PATH": os.getenv(
        "MSG_CALLBACK_DEFAULT_IMAGE_PATH",
        "C:\\Users\\Administrator\\Downloads\\生鲜海报-产品组合-原图002.png",
    ),
    "BODY_LOG_LIMIT": 10_000,
}

HTTP_CLIENT = {
    "TIMEOUT": float(os.getenv("HTTP_CLIENT_TIMEOUT", "600")),
    "POOL_MAXSIZE": int(os.getenv("HTTP_CLIENT_POOL_MAXSIZE", "1000")),
}


# ==========================================
# Celery
# ==========================================
CELERY_BROKER_URL = os.getenv("CELERY_BROKER_URL", REDIS_URL or "memory://")
CELERY_RESULT_BACKEND = os.getenv("CELERY_RESULT_BACKEND", None)
# 没有真实 broker（memory://）时不会有 worker 消费队列，默认改为就地同步执行
CELERY_TASK_ALWAYS_EAGER = os.getenv(
    "CELERY_TASK_ALWAYS_EAGER",
    "true" if CELERY_BROKER_URL.startswith("memory://") else "false",
).lower() in ("1", "true", "yes")
CELERY_TIMEZONE = TIME_ZONE


# ==========================================
# 日志
# ==========================================
LOG_DIR = os.getenv("LOG_DIR", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

LOGGING = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "verbose": {
            "format": "%(asctime)s %(levelname)s [%(name)s:%(lineno)d] %(message)s",
        },
    },
    "handlers": {
        "console": {
            "class": "logging.StreamHandler",
            "formatter": "verbose",
        },
    },
    "root": {
        "handlers": ["console"],
        "level": LOG_LEVEL,
    },
    "loggers": {
        "django": {"handlers": ["console"], "level": "WARNING", "propagate": False},
    },
}

if LOG_DIR:
    os.makedirs(LOG_DIR, exist_ok=True)
    LOGGING["handlers"]["file"] = {
        "class": "logging.handlers.RotatingFileHandler",
        "filename": os.path.join(LOG_DIR, "wx_demo.log"),
        "maxBytes": 50 * 1024 * 1024,
        "backupCount": 5,
        "encoding": "utf-8",
        "formatter": "verbose",
    }
    LOGGING["root"]["handlers"].append("file")
