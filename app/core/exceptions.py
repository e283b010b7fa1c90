"""
业务异常定义
上游代理失败统一抛出 UpstreamServiceError，由调用方决定降级或返回500
"""
from typing import Optional


class BookServiceError(RuntimeError):
    """服务层异常基类"""


class ConfigurationError(BookServiceError):
    """必需的配置项缺失（例如上游代理令牌）"""


class UpstreamServiceError(BookServiceError):
    """上游AI代理不可用、返回非2xx或返回格式错误"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class WizardStateError(BookServiceError):
    """向导步骤的前置条件不满足"""


def get_error_message(error: object) -> str:
    """尽力从任意异常对象中提取可读的错误信息"""
    if isinstance(error, BaseException):
        message = str(error)
        return message or error.__class__.__name__
    if isinstance(error, str):
        return error
    message = getattr(error, "message", None)
    if message is not None:
        return str(message)
    if isinstance(error, dict) and "message" in error:
        return str(error["message"])
    return "An unknown error occurred"


class InvalidRequestError(BookServiceError):
    """请求参数通过了格式校验但语义无效（例如章节号越界）"""
