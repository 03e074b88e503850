import dataclasses as dc
import json
import logging
from collections.abc import Iterable
from typing import IO, Any, TypeVar

from remote_reader._errors import DecodeError

logger = logging.getLogger(__name__)

T = TypeVar('T')

JSONSource = bytes | bytearray | memoryview | str | IO[bytes] | IO[str] | Iterable[bytes]

_WHITESPACE = ' \t\n\r'


def _reject_constant(name: str) -> Any:
    raise ValueError(f'invalid literal {name}')


_decoder = json.JSONDecoder(parse_constant=_reject_constant)


def _read_all(stream: JSONSource) -> bytes:
    if isinstance(stream, str):
        return stream.encode('utf-8')

    if isinstance(stream, (bytes, bytearray, memoryview)):
        return bytes(stream)

    read = getattr(stream, 'read', None)
    if callable(read):
        data = read()
        return data.encode('utf-8') if isinstance(data, str) else bytes(data)

    return b''.join(stream)  # type: ignore[arg-type]


def _fits(value: Any, annotation: Any) -> bool:
    '''
    Check a decoded value against a plain field annotation, anything that
    isn't a plain builtin (unions, generics, string annotations) is taken
    as-is.
    '''
    if annotation is bool:
        return isinstance(value, bool)
    if annotation is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if annotation is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if annotation in (str, list, dict):
        return isinstance(value, annotation)
    return True


def _json_type(value: Any) -> str:
    if isinstance(value, dict):
        return 'object'
    if isinstance(value, list):
        return 'array'
    if isinstance(value, bool):
        return 'bool'
    if isinstance(value, (int, float)):
        return 'number'
    if isinstance(value, str):
        return 'string'
    return 'null'


def _lookup_key(value: dict, key: str) -> str | None:
    '''
    Exact key first, then the first key matching case-insensitively.
    '''
    if key in value:
        return key
    folded = key.casefold()
    for candidate in value:
        if isinstance(candidate, str) and candidate.casefold() == folded:
            return candidate
    return None


def _into_dataclass(value: Any, dest: Any) -> None:
    name = type(dest).__name__
    if not isinstance(value, dict):
        raise DecodeError(f'cannot unmarshal {_json_type(value)} into {name}')

    updates = {}
    for field in dc.fields(dest):
        key = _lookup_key(value, field.metadata.get('json', field.name))
        if key is None or value[key] is None:
            continue

        item = value[key]
        if not _fits(item, field.type):
            raise DecodeError(
                f'cannot unmarshal {_json_type(item)} into field {name}.{field.name}'
                f' of type {getattr(field.type, "__name__", field.type)}'
            )
        updates[field.name] = item

    try:
        for attr, item in updates.items():
            setattr(dest, attr, item)
    except dc.FrozenInstanceError as exc:
        raise DecodeError(f'{name} is frozen') from exc


def _assign(value: Any, dest: T) -> T:
    if isinstance(dest, dict):
        if not isinstance(value, dict):
            raise DecodeError(f'cannot unmarshal {_json_type(value)} into dict')
        dest.update(value)
        return dest

    if isinstance(dest, list):
        if not isinstance(value, list):
            raise DecodeError(f'cannot unmarshal {_json_type(value)} into list')
        dest[:] = value
        return dest

    if dc.is_dataclass(dest) and not isinstance(dest, type):
        _into_dataclass(value, dest)
        return dest

    raise DecodeError(f'unsupported destination {type(dest).__name__}')


def decode_as_json(stream: JSONSource, dest: Any = None) -> Any:
    '''
    Decode one JSON value from `stream` into `dest`.

    An empty (or whitespace only) stream is not an error, `dest` comes
    back untouched. Anything after the first JSON value is ignored.

    Parameters
    ----------
    stream : JSONSource
        bytes, str, a file-like object or an iterable of byte chunks
    dest : Any, optional
        A dict, list or dataclass instance to fill. When None the
        decoded value is returned instead, by default None. Dataclass
        fields take the key in `metadata['json']` (else the field name),
        an exact match first and a case-insensitive one otherwise.

    Returns
    -------
    Any
        `dest`, or the decoded value when no destination was given.

    Raises
    ------
    DecodeError
        If the content isn't valid UTF-8 JSON or doesn't fit `dest`.
    '''
    try:
        text = _read_all(stream).decode('utf-8')
    except UnicodeDecodeError as exc:
        raise DecodeError(exc) from exc

    text = text.lstrip(_WHITESPACE)
    if not text:
        logger.debug('Empty JSON content, leaving destination untouched')
        return dest

    try:
        value, _ = _decoder.raw_decode(text)
    except ValueError as exc:
        raise DecodeError(exc) from exc

    if dest is None:
        return value

    # null decodes to nothing, like an empty body
    if value is None:
        return dest

    return _assign(value, dest)
