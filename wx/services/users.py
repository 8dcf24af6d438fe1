"""
用户相关接口：小程序登录 / 解密用户信息，公众号批量拉取用户信息。
"""

from __future__ import annotations

import hashlib
import hmac
import logging

from wechatpy.crypto import WeChatWxaCrypto

from .client import get_ma_client, get_ma_config, get_mp_client
from .exceptions import InvalidParamError, UserCheckError
from .params import is_blank, split_csv

logger = logging.getLogger(__name__)

# 微信 user/info/batchget 单次最多 100 个 openid
BATCH_SIZE = 100


# ==========================================
# 1. 小程序
# ==========================================

def login(appid: str, code: str) -> dict:
    """用 wx.login 拿到的 code 换取 openid / session_key。"""
    if is_blank(code):
        raise InvalidParamError("empty jscode")
    client = get_ma_client(appid)
    session = client.wxa.code_to_session(code)
    logger.info("[WX] 小程序登录成功 appid=%s openid=%s", appid, session.get("openid"))
    return session


def check_user_info(session_key: str, raw_data: str, signature: str) -> bool:
    """校验 signature == sha1(rawData + session_key)。"""
    if is_blank(session_key) or raw_data is None or is_blank(signature):
        return False
    expected = hashlib.sha1(f"{raw_data}{session_key}".encode("utf-8")).hexdigest()
    return hmac.compare_digest(expected, signature)


def decrypt_user_data(appid: str, session_key, raw_data, signature, encrypted_data, iv) -> dict:
    """先校验签名再解密 encryptedData，用户信息和手机号共用。"""
    config = get_ma_config(appid)
    if not check_user_info(session_key, raw_data, signature):
        raise UserCheckError("user check failed")
    if is_blank(encrypted_data) or is_blank(iv):
        raise InvalidParamError("encryptedData和iv参数不能为空！")
    crypto = WeChatWxaCrypto(session_key, iv, config["appId"])
    return crypto.decrypt_message(encrypted_data)


# ==========================================
# 2. 公众号
# ==========================================

def _to_user_info(wx_user: dict) -> dict:
    return {
        "avatar_url": wx_user.get("headimgurl"),
        "nick_name": wx_user.get("nickname"),
        "remark": wx_user.get("remark") or "",
        "wx_account": wx_user.get("unionid") or "",
        "wx_id": wx_user.get("openid"),
    }


def _fetch_users(client, openids: list[str]) -> list[dict]:
    users: list[dict] = []
    for start in range(0, len(openids), BATCH_SIZE):
        batch = openids[start:start + BATCH_SIZE]
        logger.info(
            "[WX] 批量获取用户信息 批次=%s-%s openid数量=%s",
            start, start + len(batch) - 1, len(batch),
        )
        wx_users = client.user.get_batch(batch) or []
        logger.debug("[WX] 批量获取用户信息响应 %s", wx_users)
        users.extend(_to_user_info(wx_user) for wx_user in wx_users)
    return users


def get_user_info_list(appid: str, openids: str | None) -> dict:
    """openids 逗号分隔，返回 {list, total}。"""
    if is_blank(openids):
        raise InvalidParamError("openids参数不能为空！")
    client = get_mp_client(appid)
    openid_list = split_csv(openids)
    if not openid_list:
        raise InvalidParamError("openids参数解析后为空，请确保格式正确（多个openid用逗号分隔）！")

    logger.info("[WX] 开始批量获取用户信息 appid=%s openid数量=%s", appid, len(openid_list))
    users = _fetch_users(client, openid_list)
    logger.info("[WX] 返回用户信息列表 共%s个用户", len(users))
    return {"list": users, "total": len(users)}


def get_follower_list(appid: str, next_openid: str | None = None) -> dict:
    """拉取一页关注者并展开为用户信息。next_openid 为空表示从头开始。"""
    client = get_mp_client(appid)
    current = None if is_blank(next_openid) else next_openid
    logger.info("[WX] 开始获取用户列表 appid=%s nextOpenid=%s", appid, current)

    result = client.user.get_followers(current) or {}
    openids = (result.get("data") or {}).get("openid") or []
    logger.info(
        "[WX] 获取用户列表响应 total=%s count=%s nextOpenid=%s",
        result.get("total"), result.get("count"), result.get("next_openid"),
    )

    data = {
        "list": _fetch_users(client, openids) if openids else [],
        "total": result.get("total"),
        "count": result.get("count"),
    }
    if not is_blank(result.get("next_openid")):
        data["nextOpenid"] = result["next_openid"]
    return data
