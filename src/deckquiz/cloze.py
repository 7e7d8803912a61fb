"""Reduce cloze card markup to a plain-text question and answer."""

from __future__ import annotations

import re
from dataclasses import dataclass

from bs4 import BeautifulSoup

BLANK = "_____"
CLOZE_CLASS = "cloze"
CLOZE_ANSWER_ATTR = "data-cloze"

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class ClozeContent:
    """Question with blanks and the hidden answer text."""

    question: str
    answer: str


def strip_markup(markup: str) -> str:
    """Return the visible text of a markup fragment."""
    if not markup:
        return ""
    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(["style", "script"]):
        tag.decompose()
    return _collapse(soup.get_text())


def extract_cloze(markup: str) -> ClozeContent:
    """Extract the question and answer from a card's question markup.

    Style and script blocks are dropped. Every cloze span is rendered as a
    blank whatever placeholder or hint it shows, and the answer is the
    ``data-cloze`` attribute of the first cloze element. Markup without a
    cloze span gives an empty answer and the stripped text as question.
    """
    if not markup:
        return ClozeContent(question="", answer="")

    soup = BeautifulSoup(markup, "html.parser")
    for tag in soup.find_all(["style", "script"]):
        tag.decompose()

    clozes = soup.find_all(class_=CLOZE_CLASS)
    answer = ""
    if clozes:
        raw_answer = clozes[0].get(CLOZE_ANSWER_ATTR)
        if isinstance(raw_answer, str):
            answer = strip_markup(raw_answer)

    for span in clozes:
        if span.name == "span":
            span.string = BLANK

    return ClozeContent(question=_collapse(soup.get_text()), answer=answer)


def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()
