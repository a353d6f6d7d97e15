import enum


class ErrCode(enum.Enum):
    # ---------- Client / semantic errors (non-retryable) ----------
    INVALID_ARGUMENT = 10        # empty prefix, unknown operator, bad identifier

    # ---------- Storage / system ----------
    IO_ERROR = 40                # store query failed or remote store unreachable

    UNKNOWN_ERROR = 99
