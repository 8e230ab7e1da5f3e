"""Structured field (RFC 8941) encoding and decoding, via http_sfv.

Values are returned as Results so that callers can map codec failures to the
error they need to report.
"""

from typing import Any, Mapping, Optional, Sequence, Union

import http_sfv

from sigbase.result import Error, Result
from sigbase.status import Kind

Member = Union[http_sfv.Item, http_sfv.InnerList]
BareValue = Union[str, int, bool, bytes]


def make_item(
    value: Any, params: Optional[Mapping[str, Any]] = None
) -> http_sfv.Item:
    item = http_sfv.Item(value)
    if params:
        item.params.update(params)
    return item


def make_inner_list(
    items: Sequence[http_sfv.Item], params: Optional[Mapping[str, Any]] = None
) -> http_sfv.InnerList:
    inner_list = http_sfv.InnerList(items)
    if params:
        inner_list.params.update(params)
    return inner_list


def encode_item(member: Member) -> Result[str]:
    """Serializes a single item or inner list, including its parameters."""
    try:
        # A one member list serializes exactly like the member on its own.
        return Result.ok(str(http_sfv.List([member])))
    except (ValueError, TypeError, IndexError) as e:
        return Result.err(Error(Kind.ENCODING, "Failed to encode item", e))


def encode_dictionary(members: Mapping[str, Any]) -> Result[str]:
    # http_sfv raises IndexError for empty keys.
    try:
        return Result.ok(str(http_sfv.Dictionary(members)))
    except (ValueError, TypeError, IndexError) as e:
        return Result.err(Error(Kind.ENCODING, "Failed to encode dictionary", e))


def decode_dictionary(text: Union[str, bytes]) -> Result[http_sfv.Dictionary]:
    if isinstance(text, str):
        try:
            text = text.encode("ascii")
        except UnicodeEncodeError as e:
            return Result.err(Error(Kind.ENCODING, "Failed to decode dictionary", e))

    dictionary = http_sfv.Dictionary()
    try:
        dictionary.parse(text)
    except ValueError as e:
        return Result.err(Error(Kind.ENCODING, "Failed to decode dictionary", e))
    return Result.ok(dictionary)
