"""Quiz payload schema shared by generators and the quiz cache."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, model_validator


class QuizOption(BaseModel):
    """One answer choice with the reason it is right or wrong."""

    model_config = ConfigDict(frozen=True)

    text: StrictStr
    explanation: StrictStr


class Quiz(BaseModel):
    """Multiple-choice question generated from one card."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    title: StrictStr
    question: StrictStr
    options: tuple[QuizOption, ...] = Field(min_length=1)
    correct_answer_index: StrictInt = Field(alias="correctAnswerIndex")

    @model_validator(mode="after")
    def check_answer_index(self) -> Quiz:
        if not 0 <= self.correct_answer_index < len(self.options):
            raise ValueError(
                f"correctAnswerIndex {self.correct_answer_index} is outside {len(self.options)} options"
            )
        return self

    @property
    def correct_option(self) -> QuizOption:
        return self.options[self.correct_answer_index]

    def to_json(self) -> str:
        """Serialize with the wire field names."""
        return self.model_dump_json(by_alias=True)
