"""Multiple-choice quiz generators for card question/answer pairs."""

from __future__ import annotations

import asyncio
from typing import Any, Protocol

import openai
import requests
from loguru import logger
from pydantic import BaseModel, ValidationError

from .errors import CollaboratorUnavailable, MalformedResponse
from .schemas import Quiz

QUIZ_SERVICE_NAME = "quiz service"
OPENAI_SERVICE_NAME = "OpenAI"

SYSTEM_PROMPT = (
    "You are a helpful assistant that generates multiple-choice questions based on Anki cards. "
    "Ensure there is only one correct answer."
)
USER_PROMPT_TEMPLATE = """Generate a multiple-choice question based on this Anki card:
Question: {question}
Answer: {answer}

Provide the following:
1. A short title description of the card (max 10 words)
2. The question
3. 4 options (including the correct answer)
4. The index of the correct answer (0-3)
5. An explanation for each option (why it's correct or incorrect)

Ensure there is only one correct answer."""


class QuizGenerator(Protocol):
    """Produces a validated quiz for one card."""

    async def generate(self, question: str, answer: str) -> Quiz: ...


def parse_quiz(payload: Any) -> Quiz:
    """Validate a decoded payload against the quiz schema."""
    try:
        return Quiz.model_validate(payload)
    except ValidationError as exc:
        raise MalformedResponse(f"Quiz payload failed validation: {exc}") from exc


class HttpQuizGenerator:
    """Calls a quiz service that takes `{question, answer}` and returns a quiz."""

    def __init__(self, url: str, timeout: float = 60.0, session: requests.Session | None = None) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    async def generate(self, question: str, answer: str) -> Quiz:
        return await asyncio.to_thread(self._generate, question, answer)

    def _generate(self, question: str, answer: str) -> Quiz:
        logger.debug("Requesting quiz from {}", self.url)
        try:
            response = self.session.post(
                self.url,
                json={"question": question, "answer": answer},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise CollaboratorUnavailable(QUIZ_SERVICE_NAME, f"request failed: {exc}") from exc

        if not response.ok:
            raise CollaboratorUnavailable(
                QUIZ_SERVICE_NAME,
                f"HTTP {response.status_code}: {_error_message(response)}",
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise MalformedResponse("Quiz service returned a non-JSON body") from exc
        return parse_quiz(payload)

    def close(self) -> None:
        self.session.close()


class _OptionDraft(BaseModel):
    text: str
    explanation: str


class _QuizDraft(BaseModel):
    """Unconstrained quiz shape sent to the model as its response format."""

    title: str
    question: str
    options: list[_OptionDraft]
    correctAnswerIndex: int


class OpenAIQuizGenerator:
    """Generates quizzes with an OpenAI chat model and structured output."""

    def __init__(self, client: openai.AsyncOpenAI | None = None, model: str = "gpt-4o-mini") -> None:
        """Use `client`, or build one from the environment on first use."""
        self.client = client
        self.model = model

    def _client(self) -> openai.AsyncOpenAI:
        if self.client is None:
            try:
                self.client = openai.AsyncOpenAI()
            except openai.OpenAIError as exc:
                raise CollaboratorUnavailable(OPENAI_SERVICE_NAME, str(exc)) from exc
        return self.client

    async def generate(self, question: str, answer: str) -> Quiz:
        client = self._client()
        logger.debug("Requesting quiz from {} model {}", OPENAI_SERVICE_NAME, self.model)
        try:
            completion = await client.chat.completions.parse(
                model=self.model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": USER_PROMPT_TEMPLATE.format(question=question, answer=answer)},
                ],
                response_format=_QuizDraft,
            )
        except openai.APIError as exc:
            raise CollaboratorUnavailable(OPENAI_SERVICE_NAME, str(exc)) from exc
        except (openai.LengthFinishReasonError, openai.ContentFilterFinishReasonError) as exc:
            raise MalformedResponse(f"Model output was cut off: {exc}") from exc
        except ValidationError as exc:
            raise MalformedResponse(f"Model output failed validation: {exc}") from exc

        message = completion.choices[0].message if completion.choices else None
        if message is None or message.parsed is None:
            refusal = getattr(message, "refusal", None)
            raise MalformedResponse(f"Model returned no quiz{f': {refusal}' if refusal else ''}")
        return parse_quiz(message.parsed.model_dump())


def _error_message(response: requests.Response) -> str:
    """Pull the `error` field from a failure body, if there is one."""
    try:
        payload = response.json()
    except ValueError:
        return response.reason or "request failed"
    if isinstance(payload, dict) and isinstance(payload.get("error"), str):
        return payload["error"]
    return response.reason or "request failed"
