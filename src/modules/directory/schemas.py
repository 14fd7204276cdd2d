"""Pydantic schemas for patients and physicians."""

from datetime import date

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class PhysicianPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    physician_id: str = Field(
        validation_alias=AliasChoices("physician_id", "id"),
        serialization_alias="id",
    )
    full_name: str = Field(
        validation_alias=AliasChoices("full_name", "name"),
        serialization_alias="name",
    )
    specialty: str
    phone_number: str | None = None


class SpecialtyCount(BaseModel):
    specialty: str
    count: int


class PatientPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    patient_id: str = Field(
        validation_alias=AliasChoices("patient_id", "id"),
        serialization_alias="id",
    )
    full_name: str = Field(
        validation_alias=AliasChoices("full_name", "name"),
        serialization_alias="name",
    )
    document_number: str | None = None
    phone_number: str | None = None
    email: str | None = None
    birth_date: date | None = None
