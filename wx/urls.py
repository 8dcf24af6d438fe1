from django.urls import path

from wx.views import kefu, mass, reply, resources, templates, users

app_name = "wx"

urlpatterns = [
    # 用户
    path("user/<str:appid>/login", users.login, name="user_login"),
    path("user/<str:appid>/info", users.info, name="user_info"),
    path("user/<str:appid>/phone", users.phone, name="user_phone"),
    path("user/<str:appid>/userInfoList", users.user_info_list, name="user_info_list"),
    path("user/<str:appid>/list", users.user_list, name="user_list"),
    # 客服消息
    path("kefu/<str:appid>/sendText", kefu.send_text, name="kefu_send_text"),
    path("kefu/<str:appid>/sendImage", kefu.send_image, name="kefu_send_image"),
    path("kefu/<str:appid>/sendVoice", kefu.send_voice, name="kefu_send_voice"),
    path("kefu/<str:appid>/sendVideo", kefu.send_video, name="kefu_send_video"),
    path("kefu/<str:appid>/sendMusic", kefu.send_music, name="kefu_send_music"),
    path("kefu/<str:appid>/sendNews", kefu.send_news, name="kefu_send_news"),
    path("kefu/<str:appid>/sendMpNews", kefu.send_mp_news, name="kefu_send_mp_news"),
    path("kefu/<str:appid>/sendCard", kefu.send_card, name="kefu_send_card"),
    path(
        "kefu/<str:appid>/sendMiniProgramPage",
        kefu.send_mini_program_page,
        name="kefu_send_mini_program_page",
    ),
    path("kefu/<str:appid>/sendWithTemplate", kefu.send_with_template, name="kefu_send_with_template"),
    # 模板消息
    path("template/<str:appid>/send", templates.send, name="template_send"),
    path("template/<str:appid>/batchSend", templates.batch_send, name="template_batch_send"),
    # 群发
    path("mass/<str:appid>/sendTextByOpenIds", mass.send_text_by_open_ids, name="mass_text_by_open_ids"),
    path("mass/<str:appid>/sendImageByOpenIds", mass.send_image_by_open_ids, name="mass_image_by_open_ids"),
    path("mass/<str:appid>/sendNewsByOpenIds", mass.send_news_by_open_ids, name="mass_news_by_open_ids"),
    path("mass/<str:appid>/sendTextByTag", mass.send_text_by_tag, name="mass_text_by_tag"),
    path("mass/<str:appid>/sendNewsByTag", mass.send_news_by_tag, name="mass_news_by_tag"),
    path("mass/<str:appid>/preview", mass.preview, name="mass_preview"),
    path("mass/<str:appid>/status/<str:msg_id>", mass.status, name="mass_status"),
    path("mass/<str:appid>/delete/<str:msg_id>", mass.delete, name="mass_delete"),
    # 素材
    path("resources/<str:appid>/temp/upload", resources.upload_temp_media, name="temp_upload"),
    path(
        "resources/<str:appid>/temp/download/<str:media_id>",
        resources.download_temp_media,
        name="temp_download",
    ),
    path(
        "resources/<str:appid>/permanent/uploadImage",
        resources.upload_permanent_image,
        name="permanent_upload_image",
    ),
    path("resources/<str:appid>/permanent/upload", resources.upload_permanent_media, name="permanent_upload"),
    path(
        "resources/<str:appid>/permanent/uploadNews",
        resources.upload_permanent_news,
        name="permanent_upload_news",
    ),
    path(
        "resources/<str:appid>/permanent/get/<str:media_id>",
        resources.get_permanent_media,
        name="permanent_get",
    ),
    path(
        "resources/<str:appid>/permanent/delete/<str:media_id>",
        resources.delete_permanent_media,
        name="permanent_delete",
    ),
    path(
        "resources/<str:appid>/permanent/updateNews",
        resources.update_permanent_news,
        name="permanent_update_news",
    ),
    path("resources/<str:appid>/permanent/count", resources.material_count, name="permanent_count"),
    path("resources/<str:appid>/permanent/list", resources.material_list, name="permanent_list"),
    # 被动回复
    path("reply/<str:appid>/text", reply.reply_text, name="reply_text"),
    path("reply/<str:appid>/image", reply.reply_image, name="reply_image"),
    path("reply/<str:appid>/voice", reply.reply_voice, name="reply_voice"),
    path("reply/<str:appid>/video", reply.reply_video, name="reply_video"),
    path("reply/<str:appid>/music", reply.reply_music, name="reply_music"),
    path("reply/<str:appid>/news", reply.reply_news, name="reply_news"),
    path("reply/<str:appid>/smartReply", reply.smart_reply, name="reply_smart"),
    path("reply/<str:appid>/replyWithTemplate", reply.reply_with_template, name="reply_with_template"),
]
