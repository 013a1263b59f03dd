import logging
from typing import Iterable, Optional

from fastapi import Depends
from fastapi import FastAPI
from fastapi import Request
from fastapi import Response
from fastapi import status
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from iyopt.client import Client
from iyopt.cookie import OutboundCookie
from iyopt.errors import IyoptError
from iyopt.http.exception import status_code_for
from iyopt.http.exception import to_dict
from iyopt.log import request_context

__all__ = ["create_app", "apply_cookies", "get_client"]

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


class SuggestionResponse(BaseModel):
    variant_id: str
    experiment_id: str
    content: Optional[str] = None
    reward_token: Optional[str] = None


def apply_cookies(response: Response, cookies: Iterable[OutboundCookie]) -> None:
    """append one Set-Cookie header per outbound cookie."""
    for cookie in cookies:
        response.headers.append("set-cookie", cookie.to_header())


def get_client(request: Request) -> Client:
    client = getattr(request.app.state, "client", None)
    if client is None:
        raise RuntimeError("iyopt client not initialized")
    return client


def create_app(client: Client) -> FastAPI:
    """http front for a lab client.

    endpoints are plain functions since the client blocks on the remote call;
    fastapi runs them in its threadpool.
    """
    app = FastAPI(
        title="iyopt",
        version="0.1.0",
        description="Suggestion and reward endpoints backed by a remote lab.",
    )
    app.state.client = client

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next):
        with request_context(request.headers.get(REQUEST_ID_HEADER)) as request_id:
            logger.info("processing request: %s %s", request.method, request.url.path)
            response = await call_next(request)
            response.headers[REQUEST_ID_HEADER] = request_id
            return response

    @app.exception_handler(IyoptError)
    async def handle_iyopt_error(request: Request, exc: IyoptError):
        status_code = status_code_for(exc)
        logger.warning(
            "lab error: %s, status code: %d, path: %s",
            exc, status_code, request.url.path,
            extra={"status_code": status_code},
        )
        return JSONResponse(status_code=status_code, content=to_dict(exc))

    @app.get("/suggest", status_code=status.HTTP_200_OK, tags=["lab"])
    def suggest(request: Request, lab: Client = Depends(get_client)):
        result = lab.suggest_for_request(request.cookies)
        logger.info(
            "suggested variant %s of experiment %s",
            result.suggestion.variant_code,
            result.suggestion.experiment_code,
        )
        body = SuggestionResponse(**result.suggestion.to_dict())
        response = JSONResponse(content=body.model_dump())
        apply_cookies(response, result.cookies)
        return response

    @app.post("/reward", status_code=status.HTTP_204_NO_CONTENT, tags=["lab"])
    def reward(request: Request, lab: Client = Depends(get_client)):
        cookies = lab.reward_for_request(request.cookies)
        logger.info("reward accepted for cookie %s", lab.reward_cookie.name)
        response = Response(status_code=status.HTTP_204_NO_CONTENT)
        apply_cookies(response, cookies)
        return response

    @app.get("/health", tags=["info"])
    async def health() -> dict:
        return {"status": "healthy"}

    return app
