"""
Build the mysqldump / mysql invocation for an answer set.

The command is kept as an argument vector plus a redirection (``<`` or ``>``)
and a file path. Nothing here touches the shell: the runner wires the file to
the child's stdin or stdout itself, and ``str(command)`` only renders a
shell-looking line for the confirmation prompt.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal, Optional

from .config import AnswerSet

EXPORT_BINARY = "mysqldump"
IMPORT_BINARY = "mysql"

_SAFE_TOKEN = re.compile(r"^[\w@%+=:,./~-]+$")


def timestamp(now: Optional[datetime] = None) -> str:
    return (now or datetime.now()).strftime("%Y%m%d-%H%M%S")


def resolve_export_path(path: str, database: str, now: Optional[datetime] = None) -> str:
    """
    Return ``path`` unchanged when it already names a .sql file, otherwise treat
    it as a directory and append ``<database>_<timestamp>.sql``.
    """
    if ".sql" in path:
        return path
    if not path.endswith("/"):
        path += "/"
    return f"{path}{database}_{timestamp(now)}.sql"


def _quote(token: str) -> str:
    if _SAFE_TOKEN.match(token):
        return token
    return "'" + token.replace("'", "'\"'\"'") + "'"


@dataclass(frozen=True)
class Command:
    argv: list[str]
    redirect: Literal["<", ">"]
    path: str
    password: Optional[str] = field(default=None, repr=False, compare=False)

    @property
    def binary(self) -> str:
        return self.argv[0]

    @property
    def is_import(self) -> bool:
        return self.redirect == "<"

    def tokens(self) -> list[str]:
        return [*self.argv, self.redirect, self.path]

    def _render(self, words: list[str]) -> str:
        # the redirection operator is shell syntax, not an argument
        return " ".join([*words, self.redirect, _quote(self.path)])

    def masked(self) -> str:
        """Display string with the password replaced, for logs."""
        if not self.password:
            return str(self)
        secret = f"-p{self.password}"
        return self._render(["-p****" if t == secret else _quote(t) for t in self.argv])

    def __str__(self) -> str:
        return self._render([_quote(t) for t in self.argv])


def build_command(answers: AnswerSet, now: Optional[datetime] = None) -> Command:
    is_import = answers.is_import
    path = answers.path if is_import else resolve_export_path(answers.path, answers.database, now)

    argv = [IMPORT_BINARY if is_import else EXPORT_BINARY, "-u", answers.user]
    if answers.password:
        argv.append(f"-p{answers.password}")
    argv += ["-h", answers.host]
    if not is_import:
        argv.append("--single-transaction")
    argv.append(answers.database)
    # mysql takes no table arguments on import
    if not is_import:
        argv += answers.tables

    return Command(
        argv=argv,
        redirect="<" if is_import else ">",
        path=path,
        password=answers.password or None,
    )
