from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from commerce.logging import get_logger
from commerce.queries.params import InvalidParamError

logger = get_logger(__name__)


async def invalid_param_handler(request: Request, exc: InvalidParamError) -> JSONResponse:
    logger.info(
        "Rejected query parameter",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return JSONResponse(status_code=400, content={"detail": str(exc)})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InvalidParamError, invalid_param_handler)
