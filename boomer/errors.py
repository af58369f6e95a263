# ------------------------------------------------------------
# errors.py — 서비스 레이어 예외와 응답 envelope 변환 핸들러
# ------------------------------------------------------------

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pymongo.errors import PyMongoError
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class ServiceError(Exception):
    """서비스 레이어가 던지는 모든 예외의 베이스. status_code는 HTTP 상태코드로 그대로 사용된다."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequestError(ServiceError):
    status_code = 400


class UnauthorizedError(ServiceError):
    status_code = 401


class ForbiddenError(ServiceError):
    status_code = 403


class NotFoundError(ServiceError):
    status_code = 404


class ConflictError(ServiceError):
    # 스레드 문서 version 불일치 (동시 수정 충돌)
    status_code = 409


def envelope(status: int, message: str, data=None) -> JSONResponse:
    return JSONResponse(
        status_code=status,
        content=jsonable_encoder({"status": status, "message": message, "data": data}),
    )


def register_exception_handlers(app: FastAPI):
    """모든 에러 응답을 {status, message, data} 형태로 통일한다."""

    @app.exception_handler(ServiceError)
    async def handle_service_error(request: Request, exc: ServiceError):
        return envelope(exc.status_code, exc.message)

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        # 검증 실패는 422 대신 400으로 응답
        return envelope(400, "Invalid request", exc.errors())

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_error(request: Request, exc: StarletteHTTPException):
        return envelope(exc.status_code, str(exc.detail))

    @app.exception_handler(SQLAlchemyError)
    async def handle_sql_error(request: Request, exc: SQLAlchemyError):
        logger.exception("relational store failure on %s %s", request.method, request.url.path)
        return envelope(500, "Database error")

    @app.exception_handler(PyMongoError)
    async def handle_mongo_error(request: Request, exc: PyMongoError):
        logger.exception("document store failure on %s %s", request.method, request.url.path)
        return envelope(500, "Database error")
