import secrets
import uuid
from typing import Optional

from jose import jwt
from fastapi import HTTPException, status, Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.core.config import settings

# JWT Bearer token（自行返回401，避免默认的403）
security = HTTPBearer(auto_error=False)


def verify_token(token: str) -> Optional[dict]:
    """验证认证平台签发的访问令牌"""
    options = {"verify_aud": settings.JWT_AUDIENCE is not None}
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM],
            audience=settings.JWT_AUDIENCE,
            options=options,
        )
        return payload
    except jwt.JWTError:
        return None


def create_access_token(user_id: uuid.UUID, email: Optional[str] = None) -> str:
    """签发访问令牌（仅用于本地开发和测试，生产环境令牌由认证平台签发）"""
    to_encode = {"sub": str(user_id)}
    if email:
        to_encode["email"] = email
    if settings.JWT_AUDIENCE:
        to_encode["aud"] = settings.JWT_AUDIENCE
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user_claims(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> dict:
    """获取当前用户的令牌声明"""
    if credentials is None:
        raise _unauthorized("Not authenticated")

    payload = verify_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid authentication credentials")

    user_id_str = payload.get("sub")
    if user_id_str is None:
        raise _unauthorized("Invalid authentication credentials")

    try:
        payload["user_id"] = uuid.UUID(str(user_id_str))
    except (ValueError, TypeError):
        raise _unauthorized("Invalid user ID in token")

    return payload


def get_current_user_id(claims: dict = Depends(get_current_user_claims)) -> uuid.UUID:
    """获取当前用户ID"""
    return claims["user_id"]


def require_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> None:
    """
    管理员接口鉴权

    要求 Authorization: Bearer <ADMIN_ACCESS_KEY>，
    未配置ADMIN_ACCESS_KEY时拒绝所有请求
    """
    admin_key = settings.ADMIN_ACCESS_KEY
    if not admin_key or credentials is None:
        raise _unauthorized("Unauthorized")

    if not secrets.compare_digest(credentials.credentials, admin_key):
        raise _unauthorized("Unauthorized")
