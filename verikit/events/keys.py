"""Correlation-key extraction from raw bus payloads.

Producers on the platform publish either a JSON document carrying a ``key``
field or the bare key as text. Each encoding is a named strategy; an
``EventKeyExtractor`` tries them in the order it was built with and the first
strategy that applies decides the key.
"""

import json
from typing import NoReturn, Protocol, Sequence

from verikit.core.exceptions import MalformedEvent


def _reject_constant(name: str) -> NoReturn:
    raise ValueError(f"non-standard JSON constant {name}")


class KeyStrategy(Protocol):
    name: str

    def extract(self, payload: bytes) -> str | None:
        """Return the key, ``None`` if the strategy does not apply, or raise ``MalformedEvent``."""
        ...


class StructuredFieldKey:
    """JSON document with a string field holding the key."""

    def __init__(self, field: str = "key") -> None:
        self.field = field
        self.name = f"structured:{field}"

    def extract(self, payload: bytes) -> str | None:
        try:
            document = json.loads(payload, parse_constant=_reject_constant)
        except ValueError:
            return None
        key = document.get(self.field) if isinstance(document, dict) else None
        if not isinstance(key, str):
            raise MalformedEvent(f"structured payload has no string '{self.field}' field", payload)
        return key


class RawTextKey:
    """The whole payload, decoded as text, is the key."""

    def __init__(self, encoding: str = "utf-8") -> None:
        self.encoding = encoding
        self.name = f"raw:{encoding}"

    def extract(self, payload: bytes) -> str | None:
        try:
            return payload.decode(self.encoding)
        except UnicodeDecodeError:
            return None


class EventKeyExtractor:
    def __init__(self, strategies: Sequence[KeyStrategy]) -> None:
        if not strategies:
            raise ValueError("EventKeyExtractor needs at least one strategy")
        self.strategies = tuple(strategies)

    def extract(self, payload: bytes) -> str:
        for strategy in self.strategies:
            key = strategy.extract(payload)
            if key is not None:
                return key
        tried = ", ".join(s.name for s in self.strategies)
        raise MalformedEvent(f"no key strategy applies (tried {tried})", payload)

    def matches(self, payload: bytes, correlation_id: str) -> bool:
        return self.extract(payload).endswith(correlation_id)


DEFAULT_KEY_EXTRACTOR = EventKeyExtractor((StructuredFieldKey(), RawTextKey()))
