import uuid

import pytest

from writing_assistant.domains.editing import (
    EditingSession, SaveState, SuggestionRefresher, edited_span, rebase_suggestions
)
from writing_assistant.domains.suggestions import Suggestion, SuggestionType

from tests.fakes import FakeBackend


def spelling(start, end, original, suggested):
    return Suggestion(start, end, SuggestionType.SPELLING, original, suggested, "msg")


def test_edited_span():
    assert edited_span("abc", "abXc") == (2, 2, 3)
    assert edited_span("hello world", "hello there world") == (6, 6, 12)
    assert edited_span("abc", "abc") == (3, 3, 3)
    assert edited_span("aaa", "aa") == (2, 3, 2)


def test_rebase_keeps_shifts_and_drops():
    old = "I teh best and recieve"
    suggestions = [spelling(2, 5, "teh", "the"), spelling(15, 22, "recieve", "receive")]

    # Вставка перед обеими подсказками
    inserted = "Well, " + old
    rebased = rebase_suggestions(suggestions, old, inserted)
    assert [(s.start, s.end) for s in rebased] == [(8, 11), (21, 28)]
    assert all(inserted[s.start:s.end] == s.original_text for s in rebased)

    # Правка внутри первой подсказки
    edited = "I tXh best and recieve"
    rebased = rebase_suggestions(suggestions, old, edited)
    assert [s.original_text for s in rebased] == ["recieve"]
    assert edited[rebased[0].start:rebased[0].end] == "recieve"

    # Правка после всех подсказок
    appended = old + " it"
    assert rebase_suggestions(suggestions, old, appended) == suggestions[:1]


def test_rebase_drops_suggestions_touching_the_edit():
    old = "I teh best"
    suggestions = [spelling(2, 5, "teh", "the")]

    assert rebase_suggestions(suggestions, old, "I tehx best") == []
    assert rebase_suggestions(suggestions, old, "I xteh best") == []
    assert rebase_suggestions(suggestions, old, "I teh bst") == suggestions


@pytest.mark.asyncio
async def test_refresher_debounces(clock, rules_engine):
    refresher = SuggestionRefresher(clock, engine=rules_engine, delay=1.0)
    updates = []
    refresher.on_suggestions(updates.append)

    refresher.text_changed("", "I teh")
    clock.advance(0.5)
    refresher.text_changed("I teh", "I teh best")
    clock.advance(0.9)
    assert refresher.suggestions == []

    clock.advance(0.2)
    assert [s.original_text for s in refresher.suggestions] == ["teh"]
    assert updates[-1] == refresher.suggestions
    await refresher.close()


@pytest.mark.asyncio
async def test_refresher_mirror_failure_keeps_list(clock, rules_engine):
    calls = []

    async def broken_mirror(suggestions):
        calls.append(suggestions)
        raise RuntimeError("mirror is down")

    refresher = SuggestionRefresher(clock, engine=rules_engine, text="I teh best", mirror=broken_mirror)
    refresher.refresh_now()
    await refresher.close()

    assert len(calls) == 1
    assert [s.original_text for s in refresher.suggestions] == ["teh"]


def make_session(backend, clock, engine, content="I teh best", title="Notes"):
    session = EditingSession(
        uuid.uuid4(),
        persist=backend.persist,
        snapshot=backend.snapshot,
        clock=clock,
        content=content,
        title=title,
        engine=engine,
        autosave_delay=2.0,
        suggestion_delay=1.0
    )
    session.refresher.refresh_now()
    return session


@pytest.mark.asyncio
async def test_apply_suggestion_saves_immediately(clock, rules_engine):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine)
    assert [s.id for s in session.suggestions] == ["spelling-2-5"]

    applied = session.apply_suggestion("spelling-2-5")
    await session.scheduler.wait_idle()

    assert applied.suggested_text == "the"
    assert session.content == "I the best"
    assert session.suggestions == []
    assert backend.persisted == [(0.0, "Notes", "I the best")]
    assert backend.snapshots == ["I teh best"]


@pytest.mark.asyncio
async def test_apply_stale_or_unknown_suggestion(clock, rules_engine):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine, content="Teh cat and teh dog")
    assert session.apply_suggestion("spelling-99-102") is None

    # Текст изменился в обход сессии, подсказка больше не совпадает
    session.content = "The cat and teh dog"
    assert session.apply_suggestion("spelling-0-3") is None
    assert [s.id for s in session.suggestions] == ["spelling-12-15"]
    assert backend.persisted == []


@pytest.mark.asyncio
async def test_edit_shifts_suggestions_and_autosaves(clock, rules_engine):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine)

    session.edit("So I teh best")
    assert session.state is SaveState.PENDING
    assert [s.id for s in session.suggestions] == ["spelling-5-8"]

    clock.advance(2.0)
    await session.scheduler.wait_idle()
    assert backend.persisted == [(2.0, "Notes", "So I teh best")]


@pytest.mark.asyncio
@pytest.mark.parametrize("edited", ["I tehx best", "I xteh best"])
async def test_typing_next_to_suggestion_invalidates_it(clock, rules_engine, edited):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine)

    session.edit(edited)
    assert session.suggestions == []
    assert session.apply_suggestion("spelling-2-5") is None
    assert session.content == edited

    clock.advance(2.0)
    await session.scheduler.wait_idle()
    assert backend.persisted == [(2.0, "Notes", edited)]


@pytest.mark.asyncio
async def test_dismiss_suggestion(clock, rules_engine):
    session = make_session(FakeBackend(clock), clock, rules_engine)

    assert session.dismiss_suggestion("spelling-2-5") is True
    assert session.dismiss_suggestion("spelling-2-5") is False
    assert session.suggestions == []


@pytest.mark.asyncio
async def test_title_update(clock, rules_engine):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine, title=None)
    assert session.title == "Untitled Document"

    assert session.update_title("   ") is False
    assert session.update_title("  Chapter One ") is True
    await session.scheduler.wait_idle()

    assert session.title == "Chapter One"
    assert backend.persisted == [(0.0, "Chapter One", "I teh best")]


@pytest.mark.asyncio
async def test_close_flushes_edits(clock, rules_engine):
    backend = FakeBackend(clock)
    session = make_session(backend, clock, rules_engine)

    session.edit("I teh best ever")
    await session.close()

    assert backend.persisted[-1][2] == "I teh best ever"
