from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ValidationMessage(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    field_path: str = Field(default="", alias="fieldPath")
    description: str = ""
    validation_code: str = Field(default="", alias="validationCode")


class ValidationResponse(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    validation_messages: list[ValidationMessage] = Field(
        default_factory=list, alias="validationMessages"
    )

    @property
    def ok(self) -> bool:
        return not self.validation_messages
