"""Wechat service package."""

from .client import get_ma_client, get_mp_client, reset_clients
from .exceptions import (
    AppConfigNotFoundError,
    InvalidParamError,
    UserCheckError,
    WxServiceError,
)

__all__ = [
    "get_ma_client",
    "get_mp_client",
    "reset_clients",
    "AppConfigNotFoundError",
    "InvalidParamError",
    "UserCheckError",
    "WxServiceError",
]
