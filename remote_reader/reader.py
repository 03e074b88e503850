'''
**remote_reader.reader**
-----------------

The `Reader` reads remote content over HTTP GET, either as the raw
response, as the body bytes or as decoded JSON. It is configured once at
construction with option functions applied over `ReaderConfig` defaults:

    reader = Reader(retry(3), timeout(10), user_agent('my-agent/1.0'))
    data = reader.json('https://example.com/data.json')

Only timeouts are retried; every attempt gets a fresh client that is
released as soon as the response is closed.
'''
from __future__ import annotations

import contextlib
import dataclasses as dc
import datetime
import logging
from collections.abc import Callable
from typing import Any

import httpcore
import httpx

from remote_reader import http
from remote_reader._errors import BodyReadError, FetchError, StatusError
from remote_reader._json import decode_as_json

logger = logging.getLogger(__name__)

DEFAULT_RETRY: int = 1
DEFAULT_TIMEOUT: float = 5.0
DEFAULT_USER_AGENT: str = http.DEFAULT_USER_AGENT

_TRANSPORT_ERRORS = (
    httpx.HTTPError,
    httpx.InvalidURL,
    httpcore.NetworkError,
    httpcore.ProtocolError,
    httpcore.UnsupportedProtocol,
)


@dc.dataclass(frozen=True, slots=True)
class ReaderConfig:
    '''
    Configuration of a `Reader`.

    Attributes
    ----------
    retry : int
        Number of attempts per read, only timeouts trigger another one.
    timeout : float
        Seconds allowed per attempt.
    skip_tls_verify : bool
        Accept any certificate for any host.
    user_agent : str
        Value of the `User-Agent` header.
    '''
    retry: int = DEFAULT_RETRY
    timeout: float = DEFAULT_TIMEOUT
    skip_tls_verify: bool = False
    user_agent: str = DEFAULT_USER_AGENT


Option = Callable[[ReaderConfig], ReaderConfig]


def retry(attempts: int) -> Option:
    def option(config: ReaderConfig) -> ReaderConfig:
        return dc.replace(config, retry=attempts)
    return option


def timeout(duration: float | datetime.timedelta) -> Option:
    '''
    Per-attempt timeout, in seconds or as a timedelta.
    '''
    if isinstance(duration, datetime.timedelta):
        seconds = duration.total_seconds()
    else:
        seconds = float(duration)

    def option(config: ReaderConfig) -> ReaderConfig:
        return dc.replace(config, timeout=seconds)
    return option


def skip_tls_verify() -> Option:
    '''
    Disable TLS certificate and hostname verification. Anyone on the path
    can then impersonate the remote host, only use it for hosts you
    control (self-signed certificates, test setups).
    '''
    def option(config: ReaderConfig) -> ReaderConfig:
        return dc.replace(config, skip_tls_verify=True)
    return option


def user_agent(agent: str) -> Option:
    def option(config: ReaderConfig) -> ReaderConfig:
        return dc.replace(config, user_agent=agent)
    return option


def random_user_agent() -> Option:
    '''
    Use a random browser User-Agent, picked once when the reader is built.
    '''
    def option(config: ReaderConfig) -> ReaderConfig:
        return dc.replace(config, user_agent=http.UserAgent.randomize())
    return option


class Reader:
    '''
    Reads remote bytes or JSON with a fixed configuration. Readers
    are immutable and can be shared across threads.
    '''
    __slots__ = ('_config',)

    def __init__(self, *options: Option, config: ReaderConfig | None = None) -> None:
        current = config or ReaderConfig()
        for option in options:
            current = option(current)
        self._config: ReaderConfig = current

    @property
    def config(self) -> ReaderConfig:
        return self._config

    @property
    def retry(self) -> int:
        return self._config.retry

    @property
    def timeout(self) -> float:
        return self._config.timeout

    @property
    def skip_tls_verify(self) -> bool:
        return self._config.skip_tls_verify

    @property
    def user_agent(self) -> str:
        return self._config.user_agent

    def read(self, url: str) -> httpx.Response:
        '''
        Send the GET request, retrying on timeouts only.

        The body of the returned response has not been read yet, the
        caller has to close it (`contextlib.closing(reader.read(url))`).

        Parameters
        ----------
        url : str

        Returns
        -------
        httpx.Response

        Raises
        ------
        NoAttemptsLeftError
            If every attempt timed out.
        FetchError
            On any other failure to get a response, without retrying.
        '''
        policy = http.retry_policy(attempts=self.retry)
        try:
            return policy.call_with_retries(self._get, url)
        except _TRANSPORT_ERRORS as exc:
            raise FetchError(url, exc) from exc

    def bytes(self, url: str) -> bytes:
        '''
        Read the whole body of `url`.

        Parameters
        ----------
        url : str

        Returns
        -------
        bytes

        Raises
        ------
        FetchError
        StatusError
            If the response status is not 200 OK.
        BodyReadError
        '''
        with contextlib.closing(self.read(url)) as response:
            return self._read_body(response, url)

    def json(self, url: str, dest: Any = None) -> Any:
        '''
        Read `url` and decode its body as JSON into `dest`, see
        `decode_as_json` for the supported destinations. An empty body
        leaves `dest` untouched.

        Parameters
        ----------
        url : str
        dest : Any, optional
            by default None

        Returns
        -------
        Any
            `dest`, or the decoded value when no destination was given.

        Raises
        ------
        FetchError
        StatusError
        BodyReadError
        DecodeError
        '''
        with contextlib.closing(self.read(url)) as response:
            body = self._read_body(response, url)
        return decode_as_json(body, dest)

    def _read_body(self, response: httpx.Response, url: str) -> bytes:
        if response.status_code != httpx.codes.OK:
            logger.debug(f'Rejecting {url}: {response.status_code} {response.reason_phrase}')
            raise StatusError(url, response.status_code, response.reason_phrase)

        try:
            return response.read()
        except httpx.HTTPError as exc:
            raise BodyReadError(url, exc) from exc

    def _get(self, url: str) -> httpx.Response:
        deadline = http.AttemptDeadline(self.timeout)
        client = httpx.Client(
            transport=http.build_transport(skip_tls_verify=self.skip_tls_verify),
            timeout=httpx.Timeout(self.timeout),
            follow_redirects=True,
            event_hooks={
                'request': [deadline.cap_request],
                'response': [deadline.check_response],
            },
        )
        try:
            request = client.build_request(
                'GET',
                url,
                # raw bytes, header values are not limited to ascii
                headers={'User-Agent': self.user_agent.encode('utf-8')},
            )
            response = client.send(request, stream=True)
        except BaseException:
            client.close()
            raise

        return http.bind_client(response, client, deadline)
