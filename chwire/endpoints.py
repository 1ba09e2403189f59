"""Choosing which server endpoint to connect to next."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .errors import ValidationError
from .options import Endpoint


class RoundRobinEndpointsIterator(Iterator[Endpoint]):
    """Endless iterator cycling through endpoints, starting with the first."""

    def __init__(self, endpoints: Iterable[Endpoint]) -> None:
        self._endpoints = tuple(endpoints)
        if not self._endpoints:
            raise ValidationError("The list of endpoints is empty")
        self._index = len(self._endpoints) - 1

    def __iter__(self) -> "RoundRobinEndpointsIterator":
        return self

    def __next__(self) -> Endpoint:
        self._index = (self._index + 1) % len(self._endpoints)
        return self._endpoints[self._index]