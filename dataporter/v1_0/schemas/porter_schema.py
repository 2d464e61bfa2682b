from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from dataporter.v1_0.entities import FieldDescriptor, ImportOutcome


# ---------- backend payloads ----------

class FieldOut(BaseModel):
    """One entry of the backend's `listFields` response."""
    label: str
    api: str = Field(..., min_length=1)

    def to_descriptor(self) -> FieldDescriptor:
        return FieldDescriptor(label=self.label or self.api, api_name=self.api)


class ImportResultIn(BaseModel):
    """Backend `importCsv` response. Counts may be absent on rejection."""
    model_config = ConfigDict(extra="ignore")

    success: bool
    inserted: int = Field(0, ge=0)
    failed: int = Field(0, ge=0)
    errors: List[str] = Field(default_factory=list)

    @field_validator("errors", mode="before")
    @classmethod
    def _none_to_list(cls, v):
        return [] if v is None else v

    def to_outcome(self) -> ImportOutcome:
        return ImportOutcome(
            succeeded=self.success,
            inserted_count=self.inserted,
            failed_count=self.failed,
            errors=list(self.errors),
        )


class BackendErrorBody(BaseModel):
    model_config = ConfigDict(extra="ignore")

    message: Optional[str] = None
    errorCode: Optional[str] = None


# ---------- API input ----------

class SessionCreate(BaseModel):
    """Open a porter session from a record id or directly from an object name."""
    record_id: Optional[str] = Field(None, min_length=1, max_length=64)
    object_name: Optional[str] = Field(None, min_length=1, max_length=120)

    model_config = {
        "json_schema_extra": {
            "example": {"record_id": "001Dn00000A1b2cIAB"}
        }
    }


class SelectionUpdate(BaseModel):
    """Unordered selection as reported by a multi-select widget."""
    selected: List[str] = Field(default_factory=list)
