"""Submit-time validation of the tax form.

Voice input is normalized best-effort; this schema is where formats are
actually enforced, once, on the final values snapshot.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

FIELD_MESSAGES: dict[str, str] = {
    "fullName": "Full name must be at least 2 characters",
    "email": "Please enter a valid email address",
    "ssn": "SSN must be in format XXX-XX-XXXX",
    "dateOfBirth": "Date must be in YYYY-MM-DD format",
    "annualIncome": "Please enter a valid amount",
    "occupation": "Occupation must be at least 2 characters",
    "filingStatus": "Please select a filing status",
    "dependents": "Please enter a valid number",
}


class TaxFormSubmission(BaseModel):
    """Required formats for a submitted form, keyed by field id."""

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    full_name: str = Field(alias="fullName", min_length=2)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    ssn: str = Field(pattern=r"^\d{3}-\d{2}-\d{4}$")
    date_of_birth: str = Field(alias="dateOfBirth", pattern=r"^\d{4}-\d{2}-\d{2}$")
    annual_income: str = Field(alias="annualIncome", pattern=r"^\d+(\.\d{1,2})?$")
    occupation: str = Field(min_length=2)
    filing_status: str = Field(alias="filingStatus", min_length=1)
    dependents: str = Field(pattern=r"^\d+$")


def validate_submission(values: dict[str, Any]) -> dict[str, str]:
    """Validate *values*; return field id -> message for each failure.

    An empty dict means the submission is acceptable.
    """
    try:
        TaxFormSubmission.model_validate(values)
    except ValidationError as exc:
        errors: dict[str, str] = {}
        for err in exc.errors():
            field_id = str(err["loc"][0]) if err["loc"] else "__root__"
            errors.setdefault(field_id, FIELD_MESSAGES.get(field_id, err["msg"]))
        return errors
    return {}
