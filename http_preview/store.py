"""Keyed storage of exchanges awaiting preview."""

from __future__ import annotations

from collections.abc import Callable

from .config import PreviewConfig
from .document import render_document
from .models import Exchange


class ExchangeStore:
    """Exchanges addressed by a document key, such as a preview URI."""

    def __init__(self):
        self._exchanges: dict[str, Exchange] = {}

    def add(self, key: str, exchange: Exchange) -> None:
        self._exchanges[key] = exchange

    def get(self, key: str) -> Exchange | None:
        return self._exchanges.get(key)

    def remove(self, key: str) -> None:
        self._exchanges.pop(key, None)

    def clear(self) -> None:
        self._exchanges.clear()

    def __contains__(self, key: object) -> bool:
        return key in self._exchanges

    def __len__(self) -> int:
        return len(self._exchanges)


def provide_document(
    store: ExchangeStore,
    key: str,
    config: PreviewConfig | None = None,
    warn: Callable[[str], None] | None = None,
) -> str:
    """Render the exchange stored under `key`.

    Returns:
        str: The preview document, or ``""`` when nothing is stored under `key`.

    Examples:
        provide_document(store, "http-preview://response/1")
    """
    return render_document(store.get(key), config, warn)
