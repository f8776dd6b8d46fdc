"""Email rendering for notification events.

Templates live next to this module and are rendered with Jinja2.
HTML templates are autoescaped, so event fields such as task titles
cannot inject markup into the message.
"""

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from pathlib import Path
from zoneinfo import ZoneInfo

from jinja2 import Environment, FileSystemLoader, StrictUndefined, select_autoescape

TEMPLATE_DIR = Path(__file__).parent / "templates"
APP_NAME = "TaskApp"

WELCOME_SUBJECT = f"Welcome to {APP_NAME}!"
TASK_CREATED_SUBJECT = "New Task Created"
TASK_COMPLETED_SUBJECT = "Task Completed"


@dataclass(frozen=True)
class RenderedEmail:
    """Subject plus HTML and plain-text bodies."""

    subject: str
    html: str
    text: str


def resolve_timezone(name: str) -> tzinfo:
    """Resolve an IANA zone name, using the built-in UTC for "UTC"."""
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    return ZoneInfo(name)


class EmailRenderer:
    """Renders notification emails.

    Timestamps are converted to ``timezone`` and formatted with
    ``date_format`` so output does not depend on host locale settings.
    """

    def __init__(
        self,
        timezone_name: str = "UTC",
        date_format: str = "%B %d, %Y %H:%M %Z",
        template_dir: Path = TEMPLATE_DIR,
    ) -> None:
        self.timezone = resolve_timezone(timezone_name)
        self.date_format = date_format
        self.env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(enabled_extensions=("html",)),
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def render_welcome(self, username: str) -> RenderedEmail:
        return self._render(WELCOME_SUBJECT, "welcome", username=username)

    def render_task_created(self, title: str, description: str | None, task_id: str) -> RenderedEmail:
        return self._render(
            TASK_CREATED_SUBJECT,
            "task_created",
            title=title,
            description=description,
            task_id=task_id,
        )

    def render_task_completed(
        self, title: str, task_id: str, completed_at: datetime
    ) -> RenderedEmail:
        return self._render(
            TASK_COMPLETED_SUBJECT,
            "task_completed",
            title=title,
            task_id=task_id,
            completed_at=self.format_timestamp(completed_at),
        )

    def format_timestamp(self, value: datetime) -> str:
        """Format a timestamp in the configured zone. Naive values are UTC."""
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value.astimezone(self.timezone).strftime(self.date_format)

    def _render(self, subject: str, name: str, **fields: object) -> RenderedEmail:
        context = {"app_name": APP_NAME, **fields}
        html = self.env.get_template(f"{name}.html").render(**context)
        text = self.env.get_template(f"{name}.txt").render(**context)
        return RenderedEmail(subject=subject, html=html, text=text)
