"""
Interactive question flow.

The questions are plain data: each ``Question`` says what to ask, how to
compute its default and whether it is shown, all from the answers gathered so
far plus the persisted ``Defaults``. ``ask_all`` walks the list in order and
merges the result with the defaults into an ``AnswerSet``.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional

import click
import typer

from .config import AnswerSet, Defaults, Operation

logger = logging.getLogger(__name__)

Answers = Dict[str, Any]
Predicate = Callable[[Answers, Defaults], bool]
DefaultFn = Callable[[Answers, Defaults], Any]

EXPORT_DIR_DEFAULT = "~/Desktop/"


class ValidationError(ValueError):
    pass


class QuestionKind(str, Enum):
    TEXT = "text"
    SECRET = "secret"
    CHOICE = "choice"
    CONFIRM = "confirm"


@dataclass(frozen=True)
class Question:
    name: str
    message: str
    kind: QuestionKind = QuestionKind.TEXT
    default: Any = None
    when: Optional[Predicate] = None
    validate: Optional[Callable[[str], None]] = None
    choices: tuple = ()

    def is_shown(self, answers: Answers, defaults: Defaults) -> bool:
        return self.when is None or bool(self.when(answers, defaults))

    def default_for(self, answers: Answers, defaults: Defaults) -> Any:
        if callable(self.default):
            return self.default(answers, defaults)
        return self.default


def validate_database(value: str) -> None:
    if not value:
        raise ValidationError("Please, specify a database name")


def validate_import_path(value: str) -> None:
    if not value or not value.endswith(".sql"):
        raise ValidationError("Please, specify an SQL file to import")
    path = os.path.expanduser(value)
    if not os.path.isfile(path) or not os.access(path, os.R_OK):
        raise ValidationError(
            "Please, verify that the filename you entered is correct or select an existing file"
        )


def validate_export_path(value: str) -> None:
    # an explicit file name is accepted as is
    if ".sql" in value:
        return
    path = os.path.expanduser(value)
    if not os.path.isdir(path) or not os.access(path, os.W_OK):
        raise ValidationError("Please, enter a valid folder path")


def _type_not_given(answers: Answers, defaults: Defaults) -> bool:
    return "type" not in answers


def _ask_user(answers: Answers, defaults: Defaults) -> bool:
    return defaults.ask_for_user


def _ask_password(answers: Answers, defaults: Defaults) -> bool:
    return defaults.ask_for_password


def _is_import(answers: Answers, defaults: Defaults) -> bool:
    return answers.get("type") == "import"


def _is_export(answers: Answers, defaults: Defaults) -> bool:
    return answers.get("type") == "export"


def _username(answers: Answers, defaults: Defaults) -> str:
    return answers.get("user", defaults.user)


QUESTIONS: tuple[Question, ...] = (
    Question(
        "type", "Which operation would you like to perform?",
        kind=QuestionKind.CHOICE, choices=("export", "import"),
        default=lambda answers, defaults: defaults.type, when=_type_not_given,
    ),
    Question("user", "Username", default=lambda answers, defaults: defaults.user, when=_ask_user),
    Question(
        "password", "Password", kind=QuestionKind.SECRET,
        default=lambda answers, defaults: defaults.password, when=_ask_password,
    ),
    Question("host", "Host", default=lambda answers, defaults: defaults.host),
    Question("database", "Database name", default=_username, validate=validate_database),
    Question(
        "table", "Tables (separated by spaces - Empty for all)",
        default=lambda answers, defaults: defaults.table,
    ),
    Question(
        "path", "Where is the file you want to import?",
        when=_is_import, validate=validate_import_path,
    ),
    Question(
        "path", "Where should the file be saved?",
        default=EXPORT_DIR_DEFAULT, when=_is_export, validate=validate_export_path,
    ),
)


def confirmation(command_text: str) -> Question:
    return Question(
        "confirm",
        f"The following command will be executed:\n---------\n{command_text}\n---------\nDo you confirm?",
        kind=QuestionKind.CONFIRM,
        default=False,
    )


def _value_proc(validate: Callable[[str], None]) -> Callable[[Any], str]:
    def proc(value: Any) -> str:
        value = "" if value is None else str(value)
        try:
            validate(value)
        except ValidationError as e:
            # click re-prompts on BadParameter
            raise typer.BadParameter(str(e))
        return value
    return proc


def typer_ask(question: Question, default: Any) -> Any:
    """Ask one question on the terminal."""
    if question.kind is QuestionKind.CONFIRM:
        return typer.confirm(question.message, default=bool(default))
    if question.kind is QuestionKind.CHOICE:
        return typer.prompt(question.message, default=default, type=click.Choice(list(question.choices)))
    secret = question.kind is QuestionKind.SECRET
    return typer.prompt(
        question.message,
        default=default,
        hide_input=secret,
        show_default=not secret,
        value_proc=_value_proc(question.validate) if question.validate else None,
    )


def merge_answers(defaults: Defaults, answers: Answers) -> AnswerSet:
    data = defaults.model_dump(include={"type", "user", "password", "host", "database", "table"})
    data.update(answers)
    return AnswerSet.model_validate(data)


def ask_all(
    defaults: Defaults,
    operation: Optional[Operation] = None,
    ask: Callable[[Question, Any], Any] = typer_ask,
    questions: tuple[Question, ...] = QUESTIONS,
) -> AnswerSet:
    """Run every question that applies, in order, and return the merged answer set."""
    answers: Answers = {}
    if operation is not None:
        answers["type"] = operation
    for question in questions:
        if not question.is_shown(answers, defaults):
            logger.debug("Skipping question %s", question.name)
            continue
        answers[question.name] = ask(question, question.default_for(answers, defaults))
    return merge_answers(defaults, answers)
