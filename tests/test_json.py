import dataclasses as dc
import io

import pytest

from remote_reader import DecodeError, decode_as_json


@dc.dataclass
class Item:
    name: str = ''
    count: int = 0
    price: float = 0.0
    tags: list = dc.field(default_factory=list)
    item_id: int = dc.field(default=0, metadata={'json': 'id'})


@dc.dataclass(frozen=True)
class FrozenItem:
    name: str = ''


@pytest.mark.parametrize('stream', [
    b'{"name": "pen"}',
    '{"name": "pen"}',
    io.BytesIO(b'{"name": "pen"}'),
    io.StringIO('{"name": "pen"}'),
    iter([b'{"na', b'me": ', b'"pen"}']),
])
def test_sources(stream):
    assert decode_as_json(stream) == {'name': 'pen'}


@pytest.mark.parametrize('empty', [b'', ' \n\t\r ', io.BytesIO(b''), iter([])])
def test_empty_stream_leaves_destination_alone(empty):
    dest = {'kept': True}
    assert decode_as_json(empty, dest) is dest
    assert dest == {'kept': True}


def test_empty_stream_without_destination():
    assert decode_as_json(b'') is None


def test_only_the_first_value_is_decoded():
    assert decode_as_json(b'{"a": 1} {"b": 2}') == {'a': 1}


@pytest.mark.parametrize('content', [b'boom', b'{"a": ', b'NaN', b'[Infinity]', b'\xff\xfe'])
def test_invalid_content(content):
    with pytest.raises(DecodeError) as exc_info:
        decode_as_json(content)
    assert "can't decode json" in str(exc_info.value)
    assert isinstance(exc_info.value, ValueError)


def test_into_dict_merges():
    dest = {'a': 0, 'keep': 'me'}
    decode_as_json(b'{"a": 1, "b": 2}', dest)
    assert dest == {'a': 1, 'b': 2, 'keep': 'me'}


def test_into_list_replaces():
    dest = ['old']
    decode_as_json(b'[1, 2]', dest)
    assert dest == [1, 2]


def test_into_dataclass():
    item = Item(name='old', count=9)
    result = decode_as_json(
        b'{"name": "pen", "price": 2, "tags": ["a"], "id": 7, "unknown": true}',
        item,
    )
    assert result is item
    assert item == Item(name='pen', count=9, price=2, tags=['a'], item_id=7)


def test_null_field_is_left_alone():
    item = Item(count=3)
    decode_as_json(b'{"count": null}', item)
    assert item.count == 3


def test_null_document_is_left_alone():
    dest = {'a': 1}
    assert decode_as_json(b'null', dest) == {'a': 1}


@pytest.mark.parametrize('content', [
    b'{"count": "three"}',
    b'{"count": 1.5}',
    b'{"count": true}',
    b'{"name": 5}',
    b'{"tags": {}}',
])
def test_field_type_mismatch(content):
    with pytest.raises(DecodeError):
        decode_as_json(content, Item())


@pytest.mark.parametrize('content, dest', [
    (b'[1]', Item()),
    (b'"text"', {}),
    (b'{}', []),
])
def test_shape_mismatch(content, dest):
    with pytest.raises(DecodeError):
        decode_as_json(content, dest)


def test_frozen_dataclass_is_refused():
    with pytest.raises(DecodeError):
        decode_as_json(b'{"name": "pen"}', FrozenItem())


def test_unsupported_destination():
    with pytest.raises(DecodeError):
        decode_as_json(b'{}', object())


def test_dataclass_keys_match_case_insensitively():
    item = decode_as_json(b'{"NAME": "pen", "Count": 2, "ID": 4}', Item())
    assert (item.name, item.count, item.item_id) == ('pen', 2, 4)


def test_exact_key_wins_over_case_insensitive_one():
    item = decode_as_json(b'{"Name": "loose", "name": "exact"}', Item())
    assert item.name == 'exact'
