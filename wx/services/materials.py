"""
多媒体文件管理（公众号）。

- 临时素材：media.upload / media.download，微信侧有效期 3 天。
- 永久素材：material.*，包括图文素材的新增、修改与分页查询。
"""

from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from dataclasses import dataclass

from .client import get_mp_client
from .exceptions import InvalidParamError
from .params import is_blank, optional_int, require_int, require_text

logger = logging.getLogger(__name__)

DEFAULT_TEMP_MEDIA_TYPE = "image"
MEDIA_TYPES = ("image", "voice", "video", "thumb")
MATERIAL_LIST_TYPES = ("image", "voice", "video", "news")


@dataclass(frozen=True)
class MediaFile:
    content: bytes
    content_type: str
    filename: str


@contextmanager
def _spool_to_temp_file(uploaded_file, prefix: str):
    """把上传文件写入临时文件并以二进制只读打开，退出时删除。"""
    original_name = os.path.basename(uploaded_file.name or "upload")
    fd, path = tempfile.mkstemp(prefix=prefix, suffix=f"_{original_name}")
    logger.info("[WX] 临时文件路径: %s", path)
    try:
        with os.fdopen(fd, "wb") as fp:
            for chunk in uploaded_file.chunks():
                fp.write(chunk)
        with open(path, "rb") as media:
            yield media
    finally:
        try:
            os.remove(path)
        except FileNotFoundError:
            pass


def _check_media_type(media_type: str) -> str:
    media_type = media_type.strip().lower()
    if media_type not in MEDIA_TYPES:
        raise InvalidParamError(f"不支持的mediaType: {media_type}")
    return media_type


# ==========================================
# 1. 临时素材
# ==========================================

def upload_temp_media(appid: str, files: list, media_type: str | None = None) -> list[dict]:
    client = get_mp_client(appid)
    media_type = _check_media_type(DEFAULT_TEMP_MEDIA_TYPE if is_blank(media_type) else media_type)

    media_list = []
    for uploaded_file in files:
        with _spool_to_temp_file(uploaded_file, "wx_media_") as media:
            result = client.media.upload(media_type, media)
        media_list.append({
            "mediaId": result.get("media_id") or result.get("thumb_media_id"),
            "type": result.get("type"),
            "createdAt": result.get("created_at"),
            "url": result.get("url"),
        })
        logger.info(
            "[WX] 上传临时素材成功 mediaId=%s type=%s createdAt=%s",
            media_list[-1]["mediaId"], result.get("type"), result.get("created_at"),
        )
    return media_list


def download_temp_media(appid: str, media_id: str) -> dict | MediaFile:
    """视频素材微信返回 JSON（video_url），其它素材返回文件内容。"""
    client = get_mp_client(appid)
    if is_blank(media_id):
        raise InvalidParamError("mediaId参数不能为空！")
    logger.info("[WX] 下载临时素材 appid=%s mediaId=%s", appid, media_id)
    response = client.media.download(media_id)
    if isinstance(response, dict):
        return response
    return MediaFile(
        content=response.content,
        content_type=response.headers.get("Content-Type", "application/octet-stream"),
        filename=_filename_from_response(response, media_id),
    )


def _filename_from_response(response, default: str) -> str:
    disposition = response.headers.get("Content-disposition") or ""
    for part in disposition.split(";"):
        part = part.strip()
        if part.startswith("filename="):
            return part[len("filename="):].strip('"') or default
    return default


# ==========================================
# 2. 永久素材
# ==========================================

def upload_permanent_images(appid: str, files: list) -> list[dict]:
    """上传图文消息内的图片，返回的 url 只能在图文消息中使用。"""
    client = get_mp_client(appid)
    media_list = []
    for uploaded_file in files:
        with _spool_to_temp_file(uploaded_file, "wx_image_") as media:
            url = client.media.upload_image(media)
        media_list.append({"url": url, "originalFilename": uploaded_file.name})
        logger.info("[WX] 上传永久图片成功 url=%s", url)
    return media_list


def upload_permanent_media(
    appid: str,
    files: list,
    media_type: str | None,
    title: str | None = None,
    introduction: str | None = None,
) -> list[dict]:
    client = get_mp_client(appid)
    if is_blank(media_type):
        raise InvalidParamError("mediaType参数不能为空！")
    media_type = _check_media_type(media_type)
    if media_type == "video" and is_blank(title):
        raise InvalidParamError("视频素材title参数不能为空！")

    media_list = []
    for uploaded_file in files:
        with _spool_to_temp_file(uploaded_file, "wx_media_") as media:
            if media_type == "video":
                result = client.material.add(media_type, media, title=title, introduction=introduction or "")
            else:
                result = client.material.add(media_type, media)
        media_list.append({"mediaId": result.get("media_id"), "url": result.get("url")})
        logger.info("[WX] 上传永久素材成功 mediaId=%s url=%s", result.get("media_id"), result.get("url"))
    return media_list


def _to_article(article) -> dict:
    """请求中的驼峰字段 -> 微信接口字段。"""
    if not isinstance(article, dict):
        raise InvalidParamError("图文素材格式不正确！")
    return {
        "thumb_media_id": require_text(article, "thumbMediaId"),
        "title": require_text(article, "title"),
        "content": require_text(article, "content"),
        "author": article.get("author") or "",
        "content_source_url": article.get("contentSourceUrl") or "",
        "digest": article.get("digest") or "",
        "show_cover_pic": 1 if article.get("showCoverPic") else 0,
        "need_open_comment": 1 if article.get("needOpenComment") else 0,
        "only_fans_can_comment": 1 if article.get("onlyFansCanComment") else 0,
    }


def upload_permanent_news(appid: str, request: dict) -> dict:
    client = get_mp_client(appid)
    if not isinstance(request, dict) or not isinstance(request.get("articles"), list) or not request["articles"]:
        raise InvalidParamError("图文素材内容不能为空！")
    articles = [_to_article(article) for article in request["articles"]]
    logger.info("[WX] 上传永久图文素材 appid=%s 文章数量=%s", appid, len(articles))
    result = client.material.add_articles(articles)
    logger.info("[WX] 上传永久图文素材成功 mediaId=%s", result.get("media_id"))
    return {"mediaId": result.get("media_id")}


def get_permanent_media(appid: str, media_id: str) -> dict | MediaFile:
    """图文素材返回文章列表，视频素材返回 JSON，其它素材返回文件内容。"""
    client = get_mp_client(appid)
    if is_blank(media_id):
        raise InvalidParamError("mediaId参数不能为空！")
    logger.info("[WX] 获取永久素材 appid=%s mediaId=%s", appid, media_id)
    result = client.material.get(media_id)
    if isinstance(result, list):
        return {"articles": result}
    if isinstance(result, dict):
        return result
    return MediaFile(
        content=result.content,
        content_type=result.headers.get("Content-Type", "application/octet-stream"),
        filename=_filename_from_response(result, media_id),
    )


def delete_permanent_media(appid: str, media_id: str) -> bool:
    client = get_mp_client(appid)
    if is_blank(media_id):
        raise InvalidParamError("mediaId参数不能为空！")
    logger.info("[WX] 删除永久素材 appid=%s mediaId=%s", appid, media_id)
    result = client.material.delete(media_id)
    return not isinstance(result, dict) or result.get("errcode", 0) == 0


def update_permanent_news(appid: str, request: dict) -> None:
    client = get_mp_client(appid)
    media_id = require_text(request, "mediaId")
    index = require_int(request, "index")
    article = request.get("article")
    if not article:
        raise InvalidParamError("article参数不能为空！")
    logger.info("[WX] 修改永久图文素材 appid=%s mediaId=%s index=%s", appid, media_id, index)
    client.material.update_article(media_id, index, _to_article(article))


def get_material_count(appid: str) -> dict:
    client = get_mp_client(appid)
    result = client.material.get_count()
    data = {
        "voiceCount": result.get("voice_count"),
        "videoCount": result.get("video_count"),
        "imageCount": result.get("image_count"),
        "newsCount": result.get("news_count"),
    }
    logger.info("[WX] 获取素材总数成功 %s", data)
    return data


def list_materials(appid: str, media_type: str | None, offset=None, count=None) -> dict:
    client = get_mp_client(appid)
    if is_blank(media_type):
        raise InvalidParamError("mediaType参数不能为空！")
    media_type = media_type.strip().lower()
    if media_type not in MATERIAL_LIST_TYPES:
        raise InvalidParamError(f"不支持的mediaType: {media_type}")
    offset = optional_int(offset, "offset", 0)
    count = optional_int(count, "count", 20)
    if not 1 <= count <= 20:
        raise InvalidParamError("count参数取值范围为1-20！")

    logger.info("[WX] 获取素材列表 appid=%s mediaType=%s offset=%s count=%s", appid, media_type, offset, count)
    result = client.material.batchget(media_type, offset, count)
    return {
        "totalCount": result.get("total_count"),
        "itemCount": result.get("item_count"),
        "items": result.get("item", []),
    }
