import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.api import router as api_router
from app.core.config import settings
from app.core.exceptions import (
    BookServiceError,
    ConfigurationError,
    InvalidRequestError,
    UpstreamServiceError,
    WizardStateError,
    get_error_message,
)
from app.db.database import engine
from app.db.migration import run_auto_migration

# 配置日志
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """应用生命周期管理"""
    logger.info("应用正在启动...")

    if settings.AUTO_MIGRATE:
        logger.info("检查并执行数据库迁移...")
        migration_success = await run_auto_migration(engine)
        if migration_success:
            logger.info("🎉 数据库已准备就绪")
        else:
            logger.error("❌ 数据库迁移失败")
            raise RuntimeError("数据库迁移失败，应用无法启动")

    logger.info("应用启动完成")

    yield  # 应用运行期间

    logger.info("应用正在关闭...")
    await engine.dispose()
    logger.info("数据库连接已关闭")


def _validation_message(exc: RequestValidationError) -> str:
    """把校验错误整理成一句话，缺失字段单独列出"""
    missing = []
    problems = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        if error.get("type") == "missing" or (
            error.get("type") == "string_too_short" and len(loc) == 1
        ):
            missing.append(field)
        else:
            problems.append(f"{field}: {error.get('msg')}")

    if missing and not problems:
        return f"Missing required fields: {', '.join(missing)}"
    if missing:
        problems.insert(0, f"missing {', '.join(missing)}")
    return f"Invalid request: {'; '.join(problems)}"


def register_exception_handlers(app: FastAPI) -> None:
    """所有错误统一返回 {"error": message}"""

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _validation_message(exc)},
        )

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        return JSONResponse(
            status_code=exc.status_code,
            content={"error": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(BookServiceError)
    async def book_service_exception_handler(request: Request, exc: BookServiceError):
        if isinstance(exc, (InvalidRequestError, WizardStateError)):
            status_code = status.HTTP_400_BAD_REQUEST
        else:
            status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
            if isinstance(exc, (ConfigurationError, UpstreamServiceError)):
                logger.error(f"{request.method} {request.url.path} 失败: {exc}")
        return JSONResponse(status_code=status_code, content={"error": get_error_message(exc)})


def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        description=settings.PROJECT_DESCRIPTION,
        version=settings.VERSION,
        openapi_url=f"{settings.API_PREFIX}/openapi.json",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS配置（OPTIONS预检由中间件直接返回200）
    allowed_origins = settings.get_allowed_origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allowed_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=86400,
    )

    register_exception_handlers(app)

    # 根路径路由
    @app.get("/")
    async def root():
        return {
            "message": f"Welcome to {settings.PROJECT_NAME} API",
            "version": settings.VERSION,
            "docs": "/docs",
            "redoc": "/redoc"
        }

    # 注册API路由
    app.include_router(api_router, prefix=settings.API_PREFIX)

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("app.main:app", host="0.0.0.0", port=8000, reload=True)
