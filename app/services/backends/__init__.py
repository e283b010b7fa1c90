from typing import Optional

from app.core.config import Settings, settings as default_settings
from app.services.backends.base import GenerationBackend
from app.services.backends.proxy import ProxyGenerationBackend
from app.services.backends.template import TemplateGenerationBackend
from app.services.backends.fallback import FallbackGenerationBackend
from app.services.proxy_client import BookProxyClient


def create_generation_backend(settings: Optional[Settings] = None) -> GenerationBackend:
    """配置了代理令牌时使用 代理->模板 组合后端，否则只用模板"""
    settings = settings or default_settings
    if not settings.BOOK_PROXY_TOKEN:
        return TemplateGenerationBackend()

    client = BookProxyClient(
        token=settings.BOOK_PROXY_TOKEN,
        base_url=settings.BOOK_PROXY_BASE_URL,
        timeout=settings.BOOK_PROXY_TIMEOUT,
    )
    return FallbackGenerationBackend(
        primary=ProxyGenerationBackend(client),
        fallback=TemplateGenerationBackend(),
    )


__all__ = [
    "GenerationBackend",
    "ProxyGenerationBackend",
    "TemplateGenerationBackend",
    "FallbackGenerationBackend",
    "create_generation_backend",
]
