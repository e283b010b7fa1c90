"""测试公共夹具：SQLite内存库、ASGI客户端、生成服务替身"""
import uuid

import httpx
import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from app.core.config import settings
from app.core.security import create_access_token
from app.db.database import get_db
from app.db.init_db import create_tables
from app.main import app
from app.services.backends import TemplateGenerationBackend
from app.services.book_generator import BookGeneratorService, get_book_generator
from app.services.proxy_client import BookProxyClient

ADMIN_KEY = "test-admin-key"
PROXY_BASE_URL = "https://proxy.test"


# ---------------------------------------------------------------------------
# 配置
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def test_settings(monkeypatch):
    """隔离外部服务：无代理令牌、无邮件密钥、固定管理员密钥"""
    monkeypatch.setattr(settings, "BOOK_PROXY_TOKEN", None)
    monkeypatch.setattr(settings, "BOOK_PROXY_BASE_URL", PROXY_BASE_URL)
    monkeypatch.setattr(settings, "RESEND_API_KEY", None)
    monkeypatch.setattr(settings, "ADMIN_ACCESS_KEY", ADMIN_KEY)
    monkeypatch.setattr(settings, "JWT_AUDIENCE", None)
    return settings


# ---------------------------------------------------------------------------
# 数据库
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def db_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_tables(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_maker(db_engine):
    return async_sessionmaker(db_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_maker):
    async with session_maker() as session:
        yield session


# ---------------------------------------------------------------------------
# 生成服务
# ---------------------------------------------------------------------------

def make_proxy_client(handler, token="proxy-token") -> BookProxyClient:
    """使用 httpx.MockTransport 的代理客户端"""
    return BookProxyClient(
        token=token,
        base_url=PROXY_BASE_URL,
        timeout=5.0,
        transport=httpx.MockTransport(handler),
    )


@pytest.fixture
def proxy_client_factory():
    return make_proxy_client


@pytest.fixture
def template_generator():
    """只用本地模板、未配置代理的生成服务"""
    return BookGeneratorService(
        backend=TemplateGenerationBackend(),
        proxy_client=BookProxyClient(token=""),
    )


# ---------------------------------------------------------------------------
# API客户端
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def client(session_maker, template_generator):
    async def override_get_db():
        async with session_maker() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_book_generator] = lambda: template_generator

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client

    app.dependency_overrides.clear()


@pytest.fixture
def use_generator():
    """替换路由使用的生成服务"""
    def _use(generator: BookGeneratorService):
        app.dependency_overrides[get_book_generator] = lambda: generator
    return _use


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def user_headers(user_id):
    token = create_access_token(user_id, email="writer@example.com")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def admin_headers():
    return {"Authorization": f"Bearer {ADMIN_KEY}"}


# ---------------------------------------------------------------------------
# 示例数据
# ---------------------------------------------------------------------------

@pytest.fixture
def sample_toc():
    return [
        {"section_name": "Getting Started", "section_ideas": ["Why habits matter", "Setting goals"], "estimated_pages": "20-22"},
        {"section_name": "Deep Work", "section_ideas": ["Focus blocks"], "estimated_pages": "20-22"},
        {"section_name": "Review", "section_ideas": ["Weekly review", "Adjusting course"], "estimated_pages": "20-22"},
    ]


@pytest.fixture
def book_payload():
    return {
        "title": "Focused Living",
        "author": "Sam Rivera",
        "book_idea": "A practical guide to building focus in a distracted world.",
    }
