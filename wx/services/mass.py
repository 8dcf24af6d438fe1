"""
群发消息：按 openid 列表 / 按标签群发、预览、查询状态、删除。
"""

import logging

from .client import get_mp_client
from .exceptions import InvalidParamError
from .params import first_non_blank, optional_int, require_int, require_list, require_text

logger = logging.getLogger(__name__)

PREVIEW_MSG_TYPES = ("text", "image", "voice", "mpvideo", "mpnews")


def _open_ids(request: dict) -> list[str]:
    open_ids = [str(oid).strip() for oid in require_list(request, "openIds") if str(oid).strip()]
    if not open_ids:
        raise InvalidParamError("openIds参数不能为空！")
    return open_ids


def send_text_by_open_ids(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    open_ids = _open_ids(request)
    content = require_text(request, "content")
    logger.info("[WX] 群发文本消息(openid) appid=%s 用户数=%s", appid, len(open_ids))
    return client.message.send_mass_text(open_ids, content)


def send_image_by_open_ids(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    open_ids = _open_ids(request)
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 群发图片消息(openid) appid=%s 用户数=%s mediaId=%s", appid, len(open_ids), media_id)
    return client.message.send_mass_image(open_ids, media_id)


def send_news_by_open_ids(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    open_ids = _open_ids(request)
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 群发图文消息(openid) appid=%s 用户数=%s mediaId=%s", appid, len(open_ids), media_id)
    return client.message.send_mass_article(open_ids, media_id)


def send_text_by_tag(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    tag_id = require_int(request, "tagId")
    content = require_text(request, "content")
    ignore_reprint = optional_int(request.get("sendIgnoreReprint"), "sendIgnoreReprint", 0)
    logger.info("[WX] 按标签群发文本消息 appid=%s tagId=%s", appid, tag_id)
    return client.message.send_mass_text(tag_id, content, send_ignore_reprint=ignore_reprint)


def send_news_by_tag(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    tag_id = require_int(request, "tagId")
    media_id = require_text(request, "mediaId")
    ignore_reprint = optional_int(request.get("sendIgnoreReprint"), "sendIgnoreReprint", 0)
    logger.info("[WX] 按标签群发图文消息 appid=%s tagId=%s mediaId=%s", appid, tag_id, media_id)
    return client.message.send_mass_article(tag_id, media_id, send_ignore_reprint=ignore_reprint)


def preview(appid: str, request: dict) -> dict:
    """预览消息，toUser(openid) 与 toWxName(微信号) 至少传一个。"""
    client = get_mp_client(appid)
    to_user = first_non_blank(request.get("toUser"))
    to_wx_name = first_non_blank(request.get("toWxName"))
    if not to_user and not to_wx_name:
        raise InvalidParamError("toUser或toWxName参数至少需要一个！")
    msg_type = require_text(request, "msgType").lower()
    if msg_type not in PREVIEW_MSG_TYPES:
        raise InvalidParamError(f"不支持的预览消息类型: {msg_type}")

    data = {"msgtype": msg_type}
    if to_wx_name:
        data["towxname"] = to_wx_name
    else:
        data["touser"] = to_user
    if msg_type == "text":
        data["text"] = {"content": require_text(request, "content")}
    else:
        data[msg_type] = {"media_id": require_text(request, "mediaId")}

    logger.info("[WX] 预览消息 appid=%s msgType=%s toUser=%s toWxName=%s", appid, msg_type, to_user, to_wx_name)
    return client.post("message/mass/preview", data=data)


def get_status(appid: str, msg_id: str) -> dict:
    client = get_mp_client(appid)
    if not msg_id or not str(msg_id).strip():
        raise InvalidParamError("msgId参数不能为空！")
    return client.message.get_mass(msg_id)


def delete(appid: str, msg_id: str, article_idx=None) -> dict:
    """只能删除 24 小时内群发成功的消息；article_idx=0 删除整条。"""
    client = get_mp_client(appid)
    if not msg_id or not str(msg_id).strip():
        raise InvalidParamError("msgId参数不能为空！")
    idx = optional_int(article_idx, "articleIdx", 0)
    logger.info("[WX] 删除群发消息 appid=%s msgId=%s articleIdx=%s", appid, msg_id, idx)
    return client.post("message/mass/delete", data={"msg_id": msg_id, "article_idx": idx})
