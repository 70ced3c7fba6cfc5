"""Pydantic models for the transactional email API."""

from pydantic import BaseModel, ConfigDict, Field


class EmailContact(BaseModel):
    """A sender or recipient of an email."""

    name: str
    email: str


class SendEmailRequest(BaseModel):
    """Request body for the send email endpoint."""

    model_config = ConfigDict(populate_by_name=True)

    sender: EmailContact
    to: list[EmailContact]
    subject: str
    html_content: str = Field(..., alias="htmlContent")
