'''
**remote_reader.http**
---------

The HTTP plumbing behind `remote_reader.Reader`: the per-read transport
with its SSL contexts and socket options, the timeout-only retry policy and
the browser User-Agent table. Used internally by the reader, but usable on
its own as well.
'''
from remote_reader.http._retry import is_timeout_error, retry_policy
from remote_reader.http._transport import (
    AttemptDeadline,
    ClientBoundStream,
    bind_client,
    browser_like_ssl_context,
    build_transport,
    default_socket_options,
    insecure_ssl_context,
)
from remote_reader.http._user_agents import DEFAULT_USER_AGENT, UserAgent

__all__ = [
    'is_timeout_error',
    'retry_policy',
    'AttemptDeadline',
    'ClientBoundStream',
    'bind_client',
    'browser_like_ssl_context',
    'build_transport',
    'default_socket_options',
    'insecure_ssl_context',
    'DEFAULT_USER_AGENT',
    'UserAgent',
]
