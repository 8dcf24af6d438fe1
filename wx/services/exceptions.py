"""wx 服务层异常。视图层根据异常类型映射 HTTP 状态码。"""


class WxServiceError(Exception):
    """Base class for wx service errors."""


class AppConfigNotFoundError(WxServiceError):
    pass


class InvalidParamError(WxServiceError):
    pass


class UserCheckError(WxServiceError):
    pass
