from __future__ import annotations

from lsprotocol import types

from cairos.cli.activity import EditorEvent, EditorEventKind
from cairos.cli.language_server import (
    build_language_server,
    event_from_did_change,
    event_from_did_open,
    event_from_did_save,
)


URI = "file:///work/src/main.rs"


def test_did_open_carries_language():
    event = event_from_did_open(
        types.DidOpenTextDocumentParams(
            text_document=types.TextDocumentItem(
                uri=URI,
                language_id="rust",
                version=1,
                text="fn main() {}",
            )
        )
    )

    assert event == EditorEvent(kind=EditorEventKind.OPENED, uri=URI, language="rust")
    assert event.is_write is False


def test_did_change_uses_first_range_start():
    event = event_from_did_change(
        types.DidChangeTextDocumentParams(
            text_document=types.VersionedTextDocumentIdentifier(uri=URI, version=2),
            content_changes=[
                types.TextDocumentContentChangeEvent_Type1(
                    range=types.Range(
                        start=types.Position(line=4, character=9),
                        end=types.Position(line=4, character=9),
                    ),
                    text="x",
                ),
                types.TextDocumentContentChangeEvent_Type1(
                    range=types.Range(
                        start=types.Position(line=40, character=1),
                        end=types.Position(line=40, character=1),
                    ),
                    text="y",
                ),
            ],
        )
    )

    assert event.kind is EditorEventKind.CHANGED
    assert event.line_number == 4
    assert event.cursor_pos == 9


def test_did_change_without_range_has_no_position():
    event = event_from_did_change(
        types.DidChangeTextDocumentParams(
            text_document=types.VersionedTextDocumentIdentifier(uri=URI, version=2),
            content_changes=[types.TextDocumentContentChangeEvent_Type2(text="whole file")],
        )
    )

    assert event.line_number is None
    assert event.cursor_pos is None


def test_did_save_is_a_write():
    event = event_from_did_save(
        types.DidSaveTextDocumentParams(text_document=types.TextDocumentIdentifier(uri=URI))
    )

    assert event.is_write is True
    assert event.uri == URI


def test_server_debounces_through_its_sender():
    sent: list[EditorEvent] = []
    server = build_language_server(send=sent.append, window_seconds=60)

    server.debouncer.handle(EditorEvent.opened(URI, language="rust"))
    server.debouncer.handle(EditorEvent.changed(URI, line_number=1, cursor_pos=1))
    server.debouncer.handle(EditorEvent.saved(URI))

    assert [event.kind for event in sent] == [EditorEventKind.OPENED, EditorEventKind.SAVED]
