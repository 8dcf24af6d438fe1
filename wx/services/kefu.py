"""
客服消息（主动发送）。

每个 send_* 方法校验请求体后调用 client.message 对应接口，
微信侧错误以 WeChatClientException 向上抛出。
"""

import logging

from wechatpy.exceptions import WeChatClientException

from .client import get_mp_client
from .exceptions import InvalidParamError, WxServiceError
from .params import require_list, require_text
from .templates import send_template_message

logger = logging.getLogger(__name__)


def send_text(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    content = require_text(request, "content")
    logger.info("[WX] 发送客服文本消息 appid=%s toUser=%s", appid, to_user)
    client.message.send_text(to_user, content)


def send_image(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 发送客服图片消息 appid=%s toUser=%s mediaId=%s", appid, to_user, media_id)
    client.message.send_image(to_user, media_id)


def send_voice(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 发送客服语音消息 appid=%s toUser=%s mediaId=%s", appid, to_user, media_id)
    client.message.send_voice(to_user, media_id)


def send_video(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 发送客服视频消息 appid=%s toUser=%s mediaId=%s", appid, to_user, media_id)
    # wechatpy 的 send_video 不带缩略图参数，thumbMediaId 仅在自行拼装时使用
    client.message.send_video(
        to_user,
        media_id,
        title=request.get("title"),
        description=request.get("description"),
    )


def send_music(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    music_url = require_text(request, "musicUrl")
    logger.info("[WX] 发送客服音乐消息 appid=%s toUser=%s", appid, to_user)
    client.message.send_music(
        to_user,
        music_url,
        request.get("hqMusicUrl") or music_url,
        request.get("thumbMediaId"),
        title=request.get("title"),
        description=request.get("description"),
    )


def send_news(appid: str, request: dict) -> None:
    """图文消息（点击跳转到外链）。"""
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    articles = require_list(request, "articles")
    if not all(isinstance(article, dict) for article in articles):
        raise InvalidParamError("articles参数格式不正确！")
    logger.info("[WX] 发送客服图文消息 appid=%s toUser=%s 文章数量=%s", appid, to_user, len(articles))
    client.message.send_articles(
        to_user,
        [
            {
                "title": article.get("title"),
                "description": article.get("description"),
                "url": article.get("url"),
                "picurl": article.get("picUrl"),
            }
            for article in articles
        ],
    )


def send_mp_news(appid: str, request: dict) -> None:
    """图文消息（点击跳转到图文消息页面），articles 传 media_id 即为 mpnews。"""
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    media_id = require_text(request, "mediaId")
    logger.info("[WX] 发送客服mpnews消息 appid=%s toUser=%s mediaId=%s", appid, to_user, media_id)
    client.message.send_articles(to_user, media_id)


def send_card(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    card_id = require_text(request, "cardId")
    logger.info("[WX] 发送客服卡券消息 appid=%s toUser=%s cardId=%s", appid, to_user, card_id)
    client.message.send_card(to_user, card_id)


def send_mini_program_page(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    to_user = require_text(request, "toUser")
    mini_program = {
        "title": require_text(request, "title"),
        "appid": require_text(request, "appId"),
        "pagepath": require_text(request, "pagePath"),
        "thumb_media_id": require_text(request, "thumbMediaId"),
    }
    logger.info(
        "[WX] 发送客服小程序卡片 appid=%s toUser=%s miniAppId=%s",
        appid, to_user, mini_program["appid"],
    )
    client.message.send_mini_program_page(to_user, mini_program)


# sendWithTemplate 中 kefuMessage.msgType 支持的类型
_COMBINED_KEFU_SENDERS = {
    "text": send_text,
    "image": send_image,
    "voice": send_voice,
}


def send_with_template(appid: str, request: dict) -> list[dict]:
    """先发客服消息，再发模板消息；两部分互不影响，各自记录结果。"""
    get_mp_client(appid)
    results = []

    kefu_message = request.get("kefuMessage")
    if kefu_message:
        try:
            if not isinstance(kefu_message, dict):
                raise InvalidParamError("kefuMessage参数格式不正确！")
            msg_type = str(kefu_message.get("msgType") or "").lower()
            sender = _COMBINED_KEFU_SENDERS.get(msg_type)
            if sender is None:
                raise InvalidParamError(f"不支持的客服消息类型: {kefu_message.get('msgType')}")
            sender(appid, kefu_message)
            results.append({"type": "kefu", "success": True, "message": "客服消息发送成功"})
        except (WxServiceError, WeChatClientException) as exc:
            logger.warning("[WX] 组合发送-客服消息失败 appid=%s error=%s", appid, exc)
            results.append({"type": "kefu", "success": False, "error": str(exc)})

    template_message = request.get("templateMessage")
    if template_message:
        try:
            data = send_template_message(appid, template_message)
            results.append({
                "type": "template",
                "success": True,
                "msgId": data["msgId"],
                "message": "模板消息发送成功",
            })
        except (WxServiceError, WeChatClientException) as exc:
            logger.warning("[WX] 组合发送-模板消息失败 appid=%s error=%s", appid, exc)
            results.append({"type": "template", "success": False, "error": str(exc)})

    return results
