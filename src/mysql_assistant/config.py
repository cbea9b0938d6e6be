from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

Operation = Literal["export", "import"]


class Defaults(BaseModel):
    """Persisted answers used to pre-fill (or skip) the interactive prompts."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    user: str = "root"
    password: str = ""
    host: str = "localhost"
    database: str = ""
    table: str = ""
    type: Operation = "export"
    ask_for_user: bool = Field(True, alias="askForUser")
    ask_for_password: bool = Field(True, alias="askForPassword")

    @classmethod
    def key_names(cls) -> list[str]:
        return [f.alias or name for name, f in cls.model_fields.items()]

    @classmethod
    def field_for_key(cls, key: str) -> Optional[str]:
        for name, f in cls.model_fields.items():
            if key in (name, f.alias):
                return name
        return None


class AnswerSet(BaseModel):
    type: Operation
    user: str
    password: str = ""
    host: str
    database: str = Field(..., min_length=1)
    table: str = ""
    path: str

    @property
    def is_import(self) -> bool:
        return self.type == "import"

    @property
    def tables(self) -> list[str]:
        return self.table.split()
