from fastapi import Request
from fastapi.responses import JSONResponse

from src.pq.base.err_code import ErrCode
from src.pq.base.exceptions import PQException

ERR_HTTP_MAP = {
    ErrCode.INVALID_ARGUMENT: 400,
    ErrCode.IO_ERROR: 502,
    ErrCode.UNKNOWN_ERROR: 500,
}


def http_status(err: ErrCode) -> int:
    return ERR_HTTP_MAP.get(err, 500)


async def pq_exception_handler(request: Request, exc: PQException):
    return JSONResponse(status_code=http_status(exc.err), content=exc.to_dict())
