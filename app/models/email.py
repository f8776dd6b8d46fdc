"""Email message value object."""

from pydantic import BaseModel, ConfigDict, Field


class EmailMessage(BaseModel):
    """An outbound email.

    Construction does not validate addresses; ``EmailSender.send_email``
    does, so a malformed message fails at send time before delivery.
    """

    model_config = ConfigDict(populate_by_name=True)

    to: str
    subject: str
    body: str
    sender: str | None = Field(default=None, alias="from")
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    text_body: str | None = None
    is_html: bool = False
