"""Heading anchors and label capture over a markdown-it token stream.

The extractor is a fold: ``step(state, token)`` returns the next state and the
tokens to emit. Heading open/close tokens are replaced by raw HTML tags that
carry a sequential ``section-N`` id; the heading's own content is buffered and
replayed so inline markup still renders, while only text and inline code feed
the plain label used by the table of contents.
"""

from __future__ import annotations

import dataclasses
from typing import Iterable, List, Tuple

from markdown_it.token import Token

from .model import Extraction, ExtractState, StructuralViolation, TocEntry

_TEXT_TYPES = frozenset({"text", "code_inline"})


def anchor_id_for(counter: int) -> str:
    return f"section-{counter}"


def heading_level(token: Token) -> int:
    tag = token.tag or ""
    if len(tag) != 2 or tag[0] != "h" or tag[1] not in "123456":
        raise StructuralViolation(f"Unexpected heading tag {tag!r}")
    return int(tag[1])


def _raw_html(content: str) -> Token:
    return Token(type="html_block", tag="", nesting=0, content=content, block=True)


def _plain_text(token: Token) -> str:
    parts: List[str] = []
    if token.type in _TEXT_TYPES:
        parts.append(token.content)
    for child in token.children or ():
        parts.append(_plain_text(child))
    return "".join(parts)


def initial_state() -> ExtractState:
    return ExtractState()


def step(state: ExtractState, token: Token) -> Tuple[ExtractState, List[Token]]:
    if token.type == "heading_open":
        if state.in_heading:
            raise StructuralViolation(
                f"Nested heading start inside {anchor_id_for(state.counter)}"
            )
        counter = state.counter + 1
        level = heading_level(token)
        opened = dataclasses.replace(
            state,
            in_heading=True,
            level=level,
            buffer=(),
            text="",
            counter=counter,
        )
        return opened, [_raw_html(f'<h{level} id="{anchor_id_for(counter)}">')]

    if token.type == "heading_close":
        if not state.in_heading:
            raise StructuralViolation("Heading end without a matching heading start")
        anchor_id = anchor_id_for(state.counter)
        closed = dataclasses.replace(
            state,
            in_heading=False,
            buffer=(),
            text="",
            toc=state.toc + (TocEntry(state.level, anchor_id),),
            labels={**state.labels, anchor_id: state.text},
        )
        return closed, [*state.buffer, _raw_html(f"</h{state.level}>\n")]

    if state.in_heading:
        buffered = dataclasses.replace(
            state,
            buffer=state.buffer + (token,),
            text=state.text + _plain_text(token),
        )
        return buffered, []

    return state, [token]


def finish(state: ExtractState, tokens: List[Token]) -> Extraction:
    if state.in_heading:
        raise StructuralViolation(
            f"Token stream ended inside heading {anchor_id_for(state.counter)}"
        )
    return Extraction(tokens=tokens, toc=state.toc, labels=dict(state.labels))


def extract_headings(tokens: Iterable[Token]) -> Extraction:
    state = initial_state()
    output: List[Token] = []
    for token in tokens:
        state, emitted = step(state, token)
        output.extend(emitted)
    return finish(state, output)
