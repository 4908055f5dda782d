"""Application factory for the Keyper service."""

import logging
from typing import Any, Callable, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException

from . import config
from .app_logging import setup_logger
from .domain import Envelope
from .exceptions import KeyperError
from .routes import router
from .services.store import DocumentStore, init_store

logger = logging.getLogger(__name__)

SETTINGS = [
    'NAMESPACE', 'STORE_BACKEND', 'FIRESTORE_PROJECT', 'FIRESTORE_DATABASE',
    'COLLECTION_PREFIX', 'STORE_TIMEOUT', 'STORE_READ_ATTEMPTS',
    'STORE_RETRY_DELAY', 'API_KEY_LENGTH', 'PLATFORM_ID_LENGTH',
    'TOKEN_LENGTH', 'ISSUE_ATTEMPTS', 'TOKEN_TTL_SECONDS', 'PHONE_PATTERN',
    'REDIRECT_BASE_URL', 'CORS_ORIGINS', 'LOGLEVEL'
]

HTTP_ERROR_CODES = {
    status.HTTP_404_NOT_FOUND: 'NOT_FOUND',
    status.HTTP_405_METHOD_NOT_ALLOWED: 'METHOD_NOT_ALLOWED',
}


async def render_error(request: Request, exc: KeyperError) -> Response:
    """Render a :class:`.KeyperError` as the error envelope."""
    logger.debug('%s %s failed: %s %s', request.method, request.url.path,
                 exc.code, exc.message)
    body = Envelope(success=False, message=exc.message, error_code=exc.code)
    return JSONResponse(body.to_dict(), status_code=exc.status_code)


async def render_http_error(request: Request, exc: HTTPException) -> Response:
    """Render routing errors (unknown path, wrong method) as the envelope."""
    code = HTTP_ERROR_CODES.get(exc.status_code, 'HTTP_ERROR')
    body = Envelope(success=False, message=str(exc.detail), error_code=code)
    return JSONResponse(body.to_dict(), status_code=exc.status_code,
                        headers=getattr(exc, 'headers', None))


async def render_invalid_request(request: Request,
                                 exc: RequestValidationError) -> Response:
    logger.debug('%s %s is malformed: %s', request.method, request.url.path,
                 exc.errors())
    body = Envelope(success=False, message='Malformed request',
                    error_code='VALIDATION_FAILED')
    return JSONResponse(body.to_dict(),
                        status_code=status.HTTP_400_BAD_REQUEST)


async def render_unexpected(request: Request, exc: Exception) -> Response:
    logger.exception('Unhandled error in %s %s', request.method,
                     request.url.path, exc_info=exc)
    body = Envelope(success=False, message='Internal server error',
                    error_code='INTERNAL_ERROR')
    return JSONResponse(body.to_dict(),
                        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


def create_app(store: Optional[DocumentStore] = None,
               **overrides: Any) -> FastAPI:
    """
    Initialize an instance of the Keyper application.

    Parameters
    ----------
    store : :class:`.DocumentStore`
        If not given, one is built from the settings.
    overrides
        Settings that take precedence over :mod:`keyper.config`.

    """
    settings = {key: getattr(config, key) for key in SETTINGS}
    settings.update(overrides)
    setup_logger(int(settings['LOGLEVEL']))
    if store is None:
        store = init_store(settings)
    logger.info('Store backend: %s; collection prefix: %r',
                type(store).__name__, store.prefix)

    app = FastAPI(title='Keyper', version=config.VERSION, STORE=store,
                  **settings)

    origins = [origin.strip()
               for origin in settings['CORS_ORIGINS'].split(',')
               if origin.strip()]
    logger.info('cors origins: %s', ','.join(origins))
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials='*' not in origins,
        allow_methods=['*'],
        allow_headers=['*'],
    )

    app.add_exception_handler(KeyperError, render_error)
    app.add_exception_handler(HTTPException, render_http_error)
    app.add_exception_handler(RequestValidationError, render_invalid_request)
    app.add_exception_handler(Exception, render_unexpected)
    app.include_router(router)

    @app.middleware('http')
    async def apply_response_headers(request: Request,
                                     call_next: Callable) -> Response:
        """Prevent UI redress attacks."""
        response: Response = await call_next(request)
        response.headers['Content-Security-Policy'] = "frame-ancestors 'none'"
        response.headers['X-Frame-Options'] = 'DENY'
        return response

    return app
