'''
**remote_reader**
---------

Read remote content over HTTP with a configurable retry count, timeout,
TLS verification policy and User-Agent. See `remote_reader.reader` for the
`Reader` and its options, and `remote_reader.http` for the transport,
retry and User-Agent helpers it is built on.
'''
from remote_reader._errors import (
    BodyReadError,
    DecodeError,
    FetchError,
    NoAttemptsLeftError,
    ReaderError,
    StatusError,
)
from remote_reader._json import decode_as_json
from remote_reader.reader import (
    DEFAULT_RETRY,
    DEFAULT_TIMEOUT,
    DEFAULT_USER_AGENT,
    Option,
    Reader,
    ReaderConfig,
    random_user_agent,
    retry,
    skip_tls_verify,
    timeout,
    user_agent,
)

__all__ = [
    'BodyReadError',
    'DecodeError',
    'FetchError',
    'NoAttemptsLeftError',
    'ReaderError',
    'StatusError',
    'decode_as_json',
    'DEFAULT_RETRY',
    'DEFAULT_TIMEOUT',
    'DEFAULT_USER_AGENT',
    'Option',
    'Reader',
    'ReaderConfig',
    'random_user_agent',
    'retry',
    'skip_tls_verify',
    'timeout',
    'user_agent',
]
