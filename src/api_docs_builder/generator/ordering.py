"""Ordering rules for groups, subgroups, endpoints and configured lists.

An order list names items explicitly and may contain a single ``"*"``
wildcard slot. Unlisted items are placed at the wildcard, alphabetically
(case-insensitive). Without a wildcard they go last, also alphabetically.
"""

import re
from typing import Any, Callable, Iterable, TypeVar

from api_docs_builder.parser.base import Endpoint, Subgroup

T = TypeVar("T")

WILDCARD = "*"

METHOD_PRIORITY = {"GET": 0, "POST": 1, "PUT": 2, "PATCH": 3, "DELETE": 4}
UNKNOWN_METHOD_PRIORITY = 99

_TRAILING_PARAM = re.compile(r"/\{[^}]+\}$")


def _index_of(order: list[str], value: str) -> int | None:
    try:
        return order.index(value)
    except ValueError:
        return None


def sort_by_order(items: Iterable[T], order: list[str], key: Callable[[T], str]) -> list[T]:
    """Sort ``items`` by their position in ``order``.

    An empty ``order`` returns the items in their original order. Only the
    first wildcard in ``order`` is honored.
    """
    items = list(items)
    if not order:
        return items

    wildcard_index = _index_of(order, WILDCARD)

    def sort_key(item: T) -> tuple[int, str]:
        name = key(item)
        index = _index_of(order, name)
        if index is not None:
            return index, ""
        if wildcard_index is not None:
            return wildcard_index, name.lower()
        return len(order), name.lower()

    return sorted(items, key=sort_key)


def sort_subgroups(subgroups: Iterable[Subgroup], order: list[str]) -> list[Subgroup]:
    """Use the explicit order when given, else ungrouped first then alphabetical."""
    if order:
        return sort_by_order(subgroups, order, key=lambda sg: sg.name)
    return sorted(subgroups, key=lambda sg: (0 if sg.name == "" else 1, sg.name.lower()))


def normalize_uri_for_sort(uri: str) -> str:
    """Strip a trailing ``/{param}`` so item routes cluster with their collection.

    ``sites/{site}/waf/rate-limits/{rule}`` -> ``sites/{site}/waf/rate-limits``
    """
    return _TRAILING_PARAM.sub("", uri or "")


def endpoint_sort_key(endpoint: Endpoint) -> tuple[str, int, int]:
    """Base URI, then collection route before item route, then method priority."""
    base_uri = normalize_uri_for_sort(endpoint.uri)
    return (
        base_uri,
        0 if base_uri == (endpoint.uri or "") else 1,
        METHOD_PRIORITY.get(endpoint.method, UNKNOWN_METHOD_PRIORITY),
    )


def sort_endpoints(endpoints: Iterable[Endpoint]) -> list[Endpoint]:
    """Cluster ``/x`` with ``/x/{id}`` and order verbs GET, POST, PUT, PATCH, DELETE.

    ``GET /x``, ``POST /x``, ``GET /x/{id}``, ``PUT /x/{id}``, ``DELETE /x/{id}``
    """
    return sorted(endpoints, key=endpoint_sort_key)


def ordered_data(data: Any, key_field: str = "name", order: list[str] | None = None) -> list:
    """Order a data mapping or list by a configured field.

    Mapping input yields ``(key, value)`` pairs, list input yields the
    entries as given, whether bare records or ``[key, record]`` pairs read
    back from YAML. Entries that are not mappings, or lack
    ``key_field``, are skipped. Names listed before the wildcard come
    first, names listed after it come last, and everything else sits in
    between alphabetically. When two entries share a listed name the later
    one wins.
    """
    if data is None:
        return []
    if order is None:
        order = [WILDCARD]

    wildcard_index = _index_of(order, WILDCARD)
    if wildcard_index is not None:
        before_wildcard = order[:wildcard_index]
        after_wildcard = order[wildcard_index + 1:]
    else:
        before_wildcard = list(order)
        after_wildcard = []

    items = list(data.items()) if isinstance(data, dict) else list(data)

    before: dict[int, Any] = {}
    after: dict[int, Any] = {}
    middle: list[tuple[str, Any]] = []

    for item in items:
        record = item[1] if isinstance(item, (tuple, list)) else item
        if not isinstance(record, dict):
            continue
        value = record.get(key_field)
        if value is None or value is False:
            continue

        item_key = str(value)
        if item_key in before_wildcard:
            before[before_wildcard.index(item_key)] = item
        elif item_key in after_wildcard:
            after[after_wildcard.index(item_key)] = item
        else:
            middle.append((item_key.lower(), item))

    middle.sort(key=lambda pair: pair[0])

    return (
        [before[i] for i in sorted(before)]
        + [item for _, item in middle]
        + [after[i] for i in sorted(after)]
    )
