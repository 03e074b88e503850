import contextlib
import logging
import socket
import ssl
import time
from collections.abc import Iterator

import httpx

logger = logging.getLogger(__name__)


def default_socket_options() -> list[tuple]:
    '''
    cross platform socket options for the TCP connection of a read

    Returns
    -------
    list[tuple]
    '''
    opts = []

    if hasattr(socket, 'TCP_NODELAY'):
        opts.append((socket.IPPROTO_TCP, socket.TCP_NODELAY, 1))

    if hasattr(socket, 'SO_KEEPALIVE'):
        opts.append((socket.SOL_SOCKET, socket.SO_KEEPALIVE, 1))

    if hasattr(socket, 'TCP_KEEPIDLE'):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPIDLE, 60))

    if hasattr(socket, 'TCP_KEEPINTVL'):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPINTVL, 10))

    if hasattr(socket, 'TCP_KEEPCNT'):
        opts.append((socket.IPPROTO_TCP, socket.TCP_KEEPCNT, 5))

    return opts


TLS_1_3_CIPHERS = [
    'TLS_AES_128_GCM_SHA256',
    'TLS_AES_256_GCM_SHA384',
    'TLS_CHACHA20_POLY1305_SHA256',
]
TLS_1_2_CIPHERS = [
    'ECDHE-ECDSA-AES128-GCM-SHA256',
    'ECDHE-RSA-AES128-GCM-SHA256',
    'ECDHE-ECDSA-CHACHA20-POLY1305',
    'ECDHE-RSA-CHACHA20-POLY1305',
    'ECDHE-ECDSA-AES256-GCM-SHA384',
    'ECDHE-RSA-AES256-GCM-SHA384',
]


def browser_like_ssl_context() -> ssl.SSLContext:
    '''
    creates a "browser-like" SSL context used when certificates are
    verified: TLS 1.2 and 1.3 only, modern cipher suites, hostname
    verification and a required certificate chain.

    Returns
    -------
    ssl.SSLContext
    '''
    ctx = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)

    ctx.minimum_version = ssl.TLSVersion.TLSv1_2
    ctx.maximum_version = ssl.TLSVersion.MAXIMUM_SUPPORTED

    ctx.check_hostname = True
    ctx.verify_mode = ssl.CERT_REQUIRED

    ctx.options |= ssl.OP_NO_COMPRESSION

    set_ciphersuites = getattr(ctx, 'set_ciphersuites', None)
    if callable(set_ciphersuites):
        # tls 1.3
        with contextlib.suppress(ssl.SSLError):
            set_ciphersuites(':'.join(TLS_1_3_CIPHERS))

    # tls 1.2
    ctx.set_ciphers(':'.join(TLS_1_2_CIPHERS))

    return ctx


def insecure_ssl_context() -> ssl.SSLContext:
    '''
    creates an SSL context that accepts any certificate for any host.
    Only used when a reader is explicitly configured with
    `skip_tls_verify()`.

    Returns
    -------
    ssl.SSLContext
    '''
    ctx = ssl.create_default_context(purpose=ssl.Purpose.SERVER_AUTH)
    # check_hostname has to go first, CERT_NONE is refused while it is on
    ctx.check_hostname = False
    ctx.verify_mode = ssl.CERT_NONE  # nosec
    return ctx


def build_transport(*, skip_tls_verify: bool = False) -> httpx.BaseTransport:
    '''
    Build the transport for a single read, HTTP/2 is offered during the
    TLS handshake.

    Parameters
    ----------
    skip_tls_verify : bool, optional
        Disable certificate and hostname verification, by default False

    Returns
    -------
    httpx.BaseTransport
    '''
    if skip_tls_verify:
        logger.warning('TLS certificate verification is disabled for this request')
        verify = insecure_ssl_context()
    else:
        verify = browser_like_ssl_context()

    return httpx.HTTPTransport(
        http2=True,
        verify=verify,
        socket_options=default_socket_options(),
    )


class AttemptDeadline:
    '''
    Wall-clock limit for one whole attempt: connecting, every redirect hop,
    the response headers and the body.

    httpx only limits each connect / read / write / pool step on its own,
    so every step is capped at the time left and the deadline is checked
    again once headers and each body chunk arrive.
    '''
    __slots__ = ('seconds', 'expires_at')

    def __init__(self, seconds: float) -> None:
        self.seconds: float = seconds
        self.expires_at: float = time.monotonic() + seconds

    def remaining(self) -> float:
        return self.expires_at - time.monotonic()

    def timeout_error(self, request: httpx.Request | None) -> httpx.ReadTimeout:
        return httpx.ReadTimeout(
            f'attempt exceeded its {self.seconds}s timeout',
            request=request,
        )

    def cap_request(self, request: httpx.Request) -> None:
        '''
        `request` event hook, runs before the first request and every
        redirect hop.
        '''
        remaining = self.remaining()
        if remaining <= 0:
            raise self.timeout_error(request)
        request.extensions['timeout'] = httpx.Timeout(remaining).as_dict()

    def check_response(self, response: httpx.Response) -> None:
        '''
        `response` event hook, runs once the headers of a hop are in.
        '''
        if self.remaining() <= 0:
            raise self.timeout_error(response.request)

    def cap_read(self, request: httpx.Request | None) -> None:
        remaining = self.remaining()
        if remaining <= 0:
            raise self.timeout_error(request)
        if request is None:
            return

        # the transport reads its body timeout from this same dict
        timeouts = request.extensions.get('timeout')
        if isinstance(timeouts, dict):
            read = timeouts.get('read')
            timeouts['read'] = remaining if read is None else min(read, remaining)


class ClientBoundStream(httpx.SyncByteStream):
    '''
    Response byte stream that owns the client it was read through,
    closing the response closes the client as well. With a deadline,
    iterating past it raises `httpx.ReadTimeout`.
    '''

    def __init__(
        self,
        stream: httpx.SyncByteStream,
        client: httpx.Client,
        deadline: AttemptDeadline | None = None,
        request: httpx.Request | None = None,
    ) -> None:
        self._stream = stream
        self._client = client
        self._deadline = deadline
        self._request = request

    def __iter__(self) -> Iterator[bytes]:
        if self._deadline is None:
            yield from self._stream
            return

        self._deadline.cap_read(self._request)
        for chunk in self._stream:
            if self._deadline.remaining() <= 0:
                raise self._deadline.timeout_error(self._request)
            yield chunk

    def close(self) -> None:
        try:
            self._stream.close()
        finally:
            self._client.close()


def bind_client(
    response: httpx.Response,
    client: httpx.Client,
    deadline: AttemptDeadline | None = None,
) -> httpx.Response:
    request = response.request if deadline is not None else None
    response.stream = ClientBoundStream(response.stream, client, deadline, request)  # type: ignore[arg-type]
    return response
