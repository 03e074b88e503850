'''
Exceptions raised by the remote reader. Every failure a read can hit is a
`ReaderError`, raised from the underlying httpx / json exception when there
is one.
'''


class ReaderError(Exception):
    ...


class FetchError(ReaderError):
    '''
    Raised when a request could not be sent or answered by the remote
    end (bad URL, DNS failure, refused connection, TLS failure, ...).

    Parent: ReaderError
    '''
    reason_prefix = "can't get url"

    def __init__(self, url: str, reason: object) -> None:
        self.url = url
        super().__init__(f'{self.reason_prefix} "{url}": {reason}')


class NoAttemptsLeftError(FetchError):
    '''
    Raised when every configured attempt timed out.

    Parent: FetchError
    '''
    reason_prefix = "can't read url"

    def __init__(self, url: str, attempts: int, reason: object) -> None:
        self.attempts = attempts
        super().__init__(url, f'failed after {attempts} attempts: {reason}')


class StatusError(ReaderError):
    '''
    Raised when the remote end answered with anything but 200 OK.

    Parent: ReaderError
    '''

    def __init__(self, url: str, status_code: int, reason_phrase: str = '') -> None:
        self.url = url
        self.status_code = status_code
        self.reason_phrase = reason_phrase
        super().__init__(f'Got "{self.status}": can\'t read given url "{url}"')

    @property
    def status(self) -> str:
        return f'{self.status_code} {self.reason_phrase}'.strip()


class BodyReadError(ReaderError):
    def __init__(self, url: str, reason: object) -> None:
        self.url = url
        super().__init__(f'can\'t read body of response from "{url}": {reason}')


class DecodeError(ReaderError, ValueError):
    '''
    Raised when a body is not valid JSON or does not fit the destination
    it is decoded into.

    Parent: ReaderError, ValueError
    '''

    def __init__(self, reason: object) -> None:
        super().__init__(f"can't decode json: {reason}")
