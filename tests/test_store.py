from __future__ import annotations

from http_preview.config import PreviewConfig
from http_preview.document import render_document
from http_preview.models import Exchange, Request, Response
from http_preview.store import ExchangeStore, provide_document


def _exchange() -> Exchange:
    return Exchange(
        request=Request(method="GET", url="https://example.com/ping"),
        response=Response(
            http_version="1.1",
            status_code=200,
            status_message="OK",
            headers={"Content-Type": "text/plain"},
            body="pong",
        ),
    )


def test_store_add_get_remove():
    store = ExchangeStore()
    exchange = _exchange()

    store.add("preview://1", exchange)

    assert "preview://1" in store
    assert len(store) == 1
    assert store.get("preview://1") is exchange

    store.remove("preview://1")
    assert store.get("preview://1") is None
    store.remove("preview://1")


def test_store_clear():
    store = ExchangeStore()
    store.add("a", _exchange())
    store.add("b", _exchange())

    store.clear()

    assert len(store) == 0


def test_provide_document_for_unknown_key_is_empty():
    assert provide_document(ExchangeStore(), "preview://missing") == ""


def test_provide_document_renders_stored_exchange():
    store = ExchangeStore()
    exchange = _exchange()
    store.add("preview://1", exchange)
    config = PreviewConfig(font_size=12)

    assert provide_document(store, "preview://1", config) == render_document(exchange, config)
