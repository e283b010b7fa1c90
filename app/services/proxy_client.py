"""
上游AI图书代理客户端
每次调用只发起一次请求（不重试），失败统一抛出 UpstreamServiceError
"""
import logging
from typing import Any, Dict, List, Optional

import httpx

from app.core.config import settings
from app.core.exceptions import UpstreamServiceError

logger = logging.getLogger(__name__)


class BookProxyClient:
    """上游代理HTTP客户端"""

    def __init__(
        self,
        token: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token = token if token is not None else settings.BOOK_PROXY_TOKEN
        self.base_url = (base_url or settings.BOOK_PROXY_BASE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.BOOK_PROXY_TIMEOUT
        self.transport = transport  # 测试时注入MockTransport

    @property
    def configured(self) -> bool:
        return bool(self.token)

    async def post(self, path: str, payload: Dict[str, Any]) -> Any:
        """POST JSON到代理并返回解析后的JSON"""
        if not self.token:
            raise UpstreamServiceError("BOOK_PROXY_TOKEN not configured")

        url = f"{self.base_url}/{path.lstrip('/')}"
        headers = {
            "Authorization": f"Bearer {self.token}",
            "Content-Type": "application/json",
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.warning(f"上游代理请求失败 {path}: {e}")
            raise UpstreamServiceError(f"Upstream request failed: {e}") from e

        if response.is_error:
            raise UpstreamServiceError(
                f"Upstream API error: {self._error_detail(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamServiceError("Upstream returned invalid JSON", status_code=response.status_code) from e

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        try:
            data = response.json()
        except ValueError:
            return response.reason_phrase or str(response.status_code)
        if isinstance(data, dict) and data.get("error"):
            return str(data["error"])
        return response.reason_phrase or str(response.status_code)

    # === 各端点 ===

    async def fetch_toc(self, book_idea: str) -> List[Dict[str, Any]]:
        data = await self.post("/toc", {"book_idea": book_idea})
        if not isinstance(data, list):
            raise UpstreamServiceError("Invalid TOC response format")
        return data

    async def generate_chapter(
        self, book_idea: str, chapter_number: int, title: str, author: str
    ) -> Dict[str, Any]:
        """返回代理生成的第一个章节对象"""
        data = await self.post("/generate-book-chapters", {
            "book_idea": book_idea,
            "chapters": [chapter_number],
            "title": title,
            "author": author,
        })
        chapters = data.get("generated_chapters") if isinstance(data, dict) else None
        if not isinstance(chapters, list) or not chapters or not isinstance(chapters[0], dict):
            raise UpstreamServiceError("No chapters generated by upstream API")

        chapter = chapters[0]
        if not (chapter.get("content") or chapter.get("chapter_content")):
            raise UpstreamServiceError("No content in generated chapter from upstream API")
        return chapter

    async def generate_cover(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.post("/cover", payload)
        if not isinstance(data, dict) or not (data.get("cover_url") or data.get("image_url")):
            raise UpstreamServiceError("No cover URL returned from upstream API")
        return data

    async def generate_pdf(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        data = await self.post("/pdf", payload)
        if not isinstance(data, dict) or not data.get("pdf_url"):
            raise UpstreamServiceError("No PDF URL returned from upstream API")
        return data
