"""请求参数校验辅助函数，失败统一抛 InvalidParamError。"""

from .exceptions import InvalidParamError


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def first_non_blank(*values):
    for value in values:
        if not is_blank(value):
            return value
    return None


def require_text(data: dict, field: str) -> str:
    value = data.get(field)
    if is_blank(value) or not isinstance(value, (str, int)):
        raise InvalidParamError(f"{field}参数不能为空！")
    return str(value)


def require_list(data: dict, field: str) -> list:
    value = data.get(field)
    if not isinstance(value, list) or not value:
        raise InvalidParamError(f"{field}参数不能为空！")
    return value


def require_dict(data: dict, field: str) -> dict:
    value = data.get(field)
    if not isinstance(value, dict) or not value:
        raise InvalidParamError(f"{field}参数不能为空！")
    return value


def require_int(data: dict, field: str) -> int:
    value = data.get(field)
    if value is None or value == "" or isinstance(value, bool):
        raise InvalidParamError(f"{field}参数不能为空！")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidParamError(f"{field}参数必须是整数！")


def optional_int(value, field: str, default: int) -> int:
    if is_blank(value):
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InvalidParamError(f"{field}参数必须是整数！")


def split_csv(value: str | None) -> list[str]:
    """逗号分隔字符串 -> 去空白、去空项后的列表。"""
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]
