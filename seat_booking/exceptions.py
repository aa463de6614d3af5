"""Domain errors and the FastAPI handlers that render them."""

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


MISSING_PARAMETERS = "Required parameters are missing."


class BookingError(Exception):
    def __init__(self, message: str, status_code: int = 400):
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class NotFoundError(BookingError):
    def __init__(self, message: str):
        super().__init__(message, 404)


class ForbiddenError(BookingError):
    def __init__(self, message: str):
        super().__init__(message, 403)


class SeatsFullyBookedError(BookingError):
    def __init__(self):
        super().__init__("All seats are fully booked.", 409)


class NotEnoughSeatsError(BookingError):
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Only {available} seat(s) are available, cannot book {requested}.", 409
        )


class SeatConflictError(BookingError):
    """A chosen seat was taken by another booking before it could be updated."""

    def __init__(self, seat_number: int):
        self.seat_number = seat_number
        super().__init__(
            f"Seat {seat_number} was just booked by someone else, please try again.", 409
        )


class BookingFailedError(BookingError):
    def __init__(self):
        super().__init__("Internal Server Error", 500)


def error_body(message: str) -> dict:
    return {"success": False, "message": message}


async def booking_error_handler(request: Request, exc: BookingError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.warning(f"{request.method} {request.url.path} rejected: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


def _validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors or any(err.get("type") == "missing" for err in errors):
        return MISSING_PARAMETERS
    err = errors[0]
    ctx_error = (err.get("ctx") or {}).get("error")
    if ctx_error is not None:
        return str(ctx_error)
    field = ".".join(str(part) for part in err.get("loc", ())[1:])
    return f"{field}: {err.get('msg')}" if field else err.get("msg", "Invalid request.")


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    message = _validation_message(exc)
    logger.warning(f"{request.method} {request.url.path} invalid payload: {message}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=error_body(message))


async def general_500_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.opt(exception=exc).error(f"Unhandled exception on {request.method} {request.url.path}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Something went wrong."),
    )


EXCEPTION_HANDLERS = {
    BookingError: booking_error_handler,
    RequestValidationError: validation_error_handler,
    Exception: general_500_exception_handler,
}


def register_exception_handlers(app):
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
