"""HTTP routes of the Keyper service."""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Header
from fastapi.responses import JSONResponse, PlainTextResponse, \
    RedirectResponse, Response

from . import get_config, get_store
from .controllers import ResponseData, authentication, envelope, platforms, \
    tokens, users
from .services.store import DocumentStore

router = APIRouter()

CAPABILITY = 'A Public free and Open source third party user Authenticator' \
    ' Platform.'


def _respond(response_data: ResponseData) -> Response:
    data, code, headers = response_data
    return JSONResponse(data, status_code=code, headers=headers)


@router.get('/', response_class=PlainTextResponse)
async def root() -> str:
    return CAPABILITY


@router.get('/health')
async def health() -> Dict[str, Any]:
    """Liveness probe."""
    return envelope('ok')


@router.post('/register/name={name}/email={email}/phone={phone}'
             '/platformname={platform_name}/hashedpass={hashed_password}'
             '/imageurl={image_url:path}')
async def register_platform(name: str, email: str, phone: str,
                            platform_name: str, hashed_password: str,
                            image_url: str,
                            store: DocumentStore = Depends(get_store),
                            config: Dict[str, Any] = Depends(get_config)
                            ) -> Response:
    """Register a client platform, and issue its API key."""
    return _respond(await platforms.register(
        store, config, name, email, phone, platform_name, hashed_password,
        image_url
    ))


@router.get('/redirect/{target:path}/{apikey}')
async def redirect(target: str, apikey: str,
                   config: Dict[str, Any] = Depends(get_config)) -> Response:
    _, code, headers = platforms.redirect_target(config, target, apikey)
    return RedirectResponse(headers['Location'], status_code=code)


@router.get('/apikey/{apikey}')
async def get_platform(apikey: str,
                       store: DocumentStore = Depends(get_store)) -> Response:
    return _respond(await platforms.get_platform(store, apikey))


@router.get('/checktoken/token={token:path}/apikey={apikey:path}')
async def check_token(token: str, apikey: str,
                      store: DocumentStore = Depends(get_store)) -> Response:
    """Get the profile of a signed-in user from their session token."""
    return _respond(await tokens.check_token(store, token, apikey))


@router.get('/registeruser/name={name}/email={email}/phone={phone}'
            '/hashedpass={hashed_password}')
@router.get('/registeruser/name={name}/email={email}/phone={phone}'
            '/hashedpass={hashed_password}/imageurl={image_url:path}')
async def register_user(name: str, email: str, phone: str,
                        hashed_password: str,
                        image_url: Optional[str] = None,
                        store: DocumentStore = Depends(get_store),
                        config: Dict[str, Any] = Depends(get_config)
                        ) -> Response:
    """Register an end user."""
    return _respond(await users.register(
        store, config, name, email, phone, hashed_password, image_url or None
    ))


@router.get('/signin/username={username}/password={password}'
            '/apikey={apikey}')
async def sign_in(username: str, password: str, apikey: str,
                  x_request_id: Optional[str] = Header(None),
                  store: DocumentStore = Depends(get_store),
                  config: Dict[str, Any] = Depends(get_config)) -> Response:
    """Sign in a user to a platform, and issue a session token."""
    return _respond(await authentication.sign_in(
        store, config, username, password, apikey, request_id=x_request_id
    ))
