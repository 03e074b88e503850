'''
bounded retry loop for remote reads. Only timeouts are retried, attempts
run back to back without any delay.

Raises
------
NoAttemptsLeftError
    _raised from the last timeout when all attempts are exhausted_
'''
import logging
from collections.abc import Callable
from typing import Concatenate, ParamSpec, TypeVar

import httpcore
import httpx

from remote_reader._errors import NoAttemptsLeftError

P = ParamSpec('P')
R = TypeVar('R')

logger = logging.getLogger(__name__)

_TIMEOUT_ERRORS = (
    httpx.TimeoutException,
    httpcore.TimeoutException,
    TimeoutError,
)


def is_timeout_error(exc: BaseException | None) -> bool:
    '''
    Whether `exc` reports a request that ran out of time (connect, read,
    write or pool timeout), as opposed to any other network failure.

    Parameters
    ----------
    exc : BaseException | None

    Returns
    -------
    bool
    '''
    if exc is None:
        return False
    return isinstance(exc, _TIMEOUT_ERRORS)


class retry_policy:

    def __init__(self, *, attempts: int = 1) -> None:
        '''
        Parameters
        ----------
        attempts : int, optional
            The maximum number of attempts, by default 1. Anything below
            one still makes a single attempt.
        '''
        self.attempts: int = max(1, attempts)

    def call_with_retries(
        self,
        func: Callable[Concatenate[str, P], R],
        url: str,
        *args: P.args,
        **kwargs: P.kwargs,
    ) -> R:
        '''
        Call `func(url, ...)` until it returns or fails with anything other
        than a timeout.

        Raises
        ------
        NoAttemptsLeftError
            If every attempt timed out.
        '''
        last_exc: BaseException | None = None
        for attempt_no in range(1, self.attempts + 1):
            logger.debug(f'GET {url} (attempt {attempt_no}/{self.attempts})')
            try:
                return func(url, *args, **kwargs)
            except Exception as exc:
                if not is_timeout_error(exc):
                    raise
                last_exc = exc
                if attempt_no < self.attempts:
                    logger.warning(
                        f'Attempt {attempt_no}/{self.attempts} for {url} timed out: {exc!r}'
                    )

        raise NoAttemptsLeftError(url, self.attempts, repr(last_exc)) from last_exc
