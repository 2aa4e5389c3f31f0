# shopping/api/errors.py
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shopping.domain.errors import ShoppingError, InvalidInput
from shopping.utils.logging import get_logger

logger = get_logger(__name__)


async def shopping_error_handler(request: Request, exc: ShoppingError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log(
        "Request failed",
        path=request.url.path,
        kind=exc.kind,
        detail=exc.detail,
        status_code=exc.status_code,
    )
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    #zle sformatowane body -> 400 InvalidInput zamiast domyslnego 422
    fields = [".".join(str(p) for p in err.get("loc", ()) if p != "body") for err in exc.errors()]
    error = InvalidInput("malformed request", fields=fields)
    return await shopping_error_handler(request, error)


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ShoppingError, shopping_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
