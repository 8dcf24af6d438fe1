"""按 appid 初始化公众号 / 小程序的 WeChatClient 对象。"""

import logging
import threading

from django.conf import settings
from wechatpy import WeChatClient
from wechatpy.session.memorystorage import MemoryStorage

from .exceptions import AppConfigNotFoundError, InvalidParamError

logger = logging.getLogger(__name__)

_lock = threading.Lock()
_clients: dict[tuple[str, str, str], WeChatClient] = {}


def _index_configs(configs) -> dict[str, dict]:
    """appId 为空的配置忽略；appId 重复时保留第一条。"""
    index: dict[str, dict] = {}
    for config in configs or []:
        appid = (config.get("appId") or "").strip()
        if not appid or appid in index:
            continue
        index[appid] = config
    return index


def _get_config(configs, appid: str, label: str, setting_name: str) -> dict:
    if not appid or not appid.strip():
        raise InvalidParamError("appid参数不能为空！")
    config = _index_configs(configs).get(appid)
    if not config:
        raise AppConfigNotFoundError(
            f"未找到对应appid=[{appid}]的{label}配置，请检查 {setting_name} 配置，确保appId已正确填写！"
        )
    return config


def get_mp_config(appid: str) -> dict:
    return _get_config(settings.WX_MP_CONFIGS, appid, "公众号", "WX_MP_CONFIGS")


def get_ma_config(appid: str) -> dict:
    return _get_config(settings.WX_MA_CONFIGS, appid, "小程序", "WX_MA_CONFIGS")


def _session_storage():
    """access_token 存储，redis 模式下多进程共享同一份 token。"""
    if settings.WX_SESSION_BACKEND == "redis":
        from django_redis import get_redis_connection
        from wechatpy.session.redisstorage import RedisStorage

        return RedisStorage(get_redis_connection("default"), prefix="wechatpy")
    return MemoryStorage()


def _get_client(kind: str, config: dict) -> WeChatClient:
    appid = config["appId"]
    key = (kind, appid, config.get("secret") or "")
    with _lock:
        client = _clients.get(key)
        if client is None:
            logger.info("[WX] 初始化 %s 客户端 appid=%s", kind, appid)
            client = WeChatClient(appid, config.get("secret"), session=_session_storage())
            _clients[key] = client
    return client


def get_mp_client(appid: str) -> WeChatClient:
    """返回公众号客户端；appid 未配置时抛出 AppConfigNotFoundError。"""
    return _get_client("mp", get_mp_config(appid))


def get_ma_client(appid: str) -> WeChatClient:
    """返回小程序客户端（code2session 走 client.wxa）。"""
    return _get_client("ma", get_ma_config(appid))


def reset_clients() -> None:
    with _lock:
        _clients.clear()
