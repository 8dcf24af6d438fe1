"""多媒体文件管理接口：/wx/resources/<appid>/..."""

from urllib.parse import quote

from django.http import HttpResponse
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from wx.services import materials as material_service
from wx.services.exceptions import InvalidParamError

from .base import error_response, json_body, success_response, wx_api


def _uploaded_files(request) -> list:
    """multipart 请求中的全部文件，非 multipart 直接判为参数错误。"""
    if not request.content_type.startswith("multipart/"):
        raise InvalidParamError("请求不是multipart格式！")
    files = [f for name in request.FILES for f in request.FILES.getlist(name)]
    if not files:
        raise InvalidParamError("未找到上传的文件！")
    return files


def _file_response(media_file: material_service.MediaFile) -> HttpResponse:
    response = HttpResponse(media_file.content, content_type=media_file.content_type)
    response["Content-Disposition"] = f"attachment; filename*=UTF-8''{quote(media_file.filename)}"
    return response


# ========== 临时素材（3天有效期） ==========

@wx_api
@require_POST
def upload_temp_media(request, appid):
    media_list = material_service.upload_temp_media(
        appid, _uploaded_files(request), request.POST.get("mediaType")
    )
    return success_response(message="上传临时素材成功", mediaList=media_list, count=len(media_list))


@wx_api
@require_GET
def download_temp_media(request, appid, media_id):
    result = material_service.download_temp_media(appid, media_id)
    if isinstance(result, material_service.MediaFile):
        return _file_response(result)
    return success_response(message="获取临时素材成功", data=result)


# ========== 永久素材 ==========

@wx_api
@require_POST
def upload_permanent_image(request, appid):
    media_list = material_service.upload_permanent_images(appid, _uploaded_files(request))
    return success_response(message="上传永久图片成功", mediaList=media_list, count=len(media_list))


@wx_api
@require_POST
def upload_permanent_media(request, appid):
    files = _uploaded_files(request)
    media_list = material_service.upload_permanent_media(
        appid,
        files,
        request.POST.get("mediaType"),
        title=request.POST.get("title"),
        introduction=request.POST.get("introduction"),
    )
    return success_response(message="上传永久素材成功", mediaList=media_list, count=len(media_list))


@wx_api
@require_POST
def upload_permanent_news(request, appid):
    data = material_service.upload_permanent_news(appid, json_body(request))
    return success_response(message="上传永久图文素材成功", data=data)


@wx_api
@require_GET
def get_permanent_media(request, appid, media_id):
    result = material_service.get_permanent_media(appid, media_id)
    if isinstance(result, material_service.MediaFile):
        return _file_response(result)
    return success_response(message="获取永久素材成功", data=result)


@wx_api
@require_http_methods(["DELETE"])
def delete_permanent_media(request, appid, media_id):
    deleted = material_service.delete_permanent_media(appid, media_id)
    if not deleted:
        return error_response("删除永久素材失败", status=502)
    return success_response(message="删除永久素材成功")


@wx_api
@require_POST
def update_permanent_news(request, appid):
    material_service.update_permanent_news(appid, json_body(request))
    return success_response(message="修改永久图文素材成功")


@wx_api
@require_GET
def material_count(request, appid):
    data = material_service.get_material_count(appid)
    return success_response(message="获取素材总数成功", data=data)


@wx_api
@require_GET
def material_list(request, appid):
    data = material_service.list_materials(
        appid,
        request.GET.get("mediaType"),
        request.GET.get("offset"),
        request.GET.get("count"),
    )
    return success_response(message="获取素材列表成功", data=data)
