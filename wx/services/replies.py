"""
被动回复消息（同步回复）XML 构造。

只负责渲染 XML，不调用微信接口；通常由接收消息的服务直接把 XML 原样回给微信。
"""

import logging
import re

from wechatpy.replies import (
    ArticlesReply,
    ImageReply,
    MusicReply,
    TextReply,
    VideoReply,
    VoiceReply,
)

from .client import get_mp_client
from .exceptions import InvalidParamError
from .params import require_list, require_text

logger = logging.getLogger(__name__)

# 例如 [IMG1223] -> 查询 12 月 23 日的图片
IMAGE_COMMAND_PATTERN = re.compile(r"^\[IMG(\d{4})\]$")
MAX_REPLY_ARTICLES = 10


def _addressing(request: dict) -> dict:
    """wechatpy 中 target=ToUserName，source=FromUserName。"""
    return {
        "target": require_text(request, "toUser"),
        "source": require_text(request, "fromUser"),
    }


def render_text(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    content = require_text(request, "content")
    return TextReply(content=content, **addressing).render()


def render_image(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    return ImageReply(media_id=require_text(request, "mediaId"), **addressing).render()


def render_voice(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    return VoiceReply(media_id=require_text(request, "mediaId"), **addressing).render()


def render_video(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    return VideoReply(
        media_id=require_text(request, "mediaId"),
        title=request.get("title") or "",
        description=request.get("description") or "",
        **addressing,
    ).render()


def render_music(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    music_url = require_text(request, "musicUrl")
    return MusicReply(
        music_url=music_url,
        hq_music_url=request.get("hqMusicUrl") or music_url,
        thumb_media_id=request.get("thumbMediaId") or "",
        title=request.get("title") or "",
        description=request.get("description") or "",
        **addressing,
    ).render()


def render_news(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    articles = require_list(request, "articles")
    if len(articles) > MAX_REPLY_ARTICLES:
        raise InvalidParamError(f"articles最多{MAX_REPLY_ARTICLES}条！")
    reply = ArticlesReply(**addressing)
    for article in articles:
        if not isinstance(article, dict):
            raise InvalidParamError("articles参数格式不正确！")
        reply.add_article({
            "title": article.get("title") or "",
            "description": article.get("description") or "",
            "image": article.get("picUrl") or "",
            "url": article.get("url") or "",
        })
    return reply.render()


def smart_reply_content(content: str) -> str:
    content = content.strip()
    match = IMAGE_COMMAND_PATTERN.match(content)
    if match:
        date = match.group(1)
        logger.info("[WX] 检测到图片指令，日期: %s", date)
        return f"您查询的是 {date} 的图片，正在为您准备..."
    return f"收到您的消息：{content}"


def render_smart_reply(appid: str, request: dict) -> str:
    get_mp_client(appid)
    addressing = _addressing(request)
    content = require_text(request, "content")
    logger.info("[WX] 智能回复 appid=%s toUser=%s content=%s", appid, addressing["target"], content)
    return TextReply(content=smart_reply_content(content), **addressing).render()


# replyWithTemplate 中 replyMessage.msgType 支持的类型
_REPLY_RENDERERS = {
    "text": render_text,
    "image": render_image,
}


def render_reply_message(appid: str, reply_message: dict) -> str:
    if not isinstance(reply_message, dict):
        raise InvalidParamError("replyMessage参数格式不正确！")
    msg_type = str(reply_message.get("msgType") or "").lower()
    renderer = _REPLY_RENDERERS.get(msg_type)
    if renderer is None:
        raise InvalidParamError(f"不支持的回复消息类型: {reply_message.get('msgType')}")
    return renderer(appid, reply_message)
