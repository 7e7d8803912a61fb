"""Failures raised by the card service and quiz generator collaborators."""

from __future__ import annotations


class DeckQuizError(Exception):
    """Base class for handled collaborator failures."""


class CollaboratorUnavailable(DeckQuizError):
    """A collaborator could not be reached or answered with a failure."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"{service}: {message}")
        self.service = service
        self.message = message


class MalformedResponse(DeckQuizError):
    """A collaborator answered with a payload of the wrong shape."""
