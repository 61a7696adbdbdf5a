"""Data models and exceptions for change message composition."""

from dataclasses import dataclass
from typing import Optional


class MessageError(Exception):
    """Base exception for change message errors."""

    pass


class MessageRenderError(MessageError):
    """Raised when a document cannot be turned into well-formed XML.

    Typical causes are attribute names that are not valid element names and
    field content containing characters XML cannot represent.
    """

    pass


class NotificationTemplateError(MessageRenderError):
    """Raised when the comment body template fails to render."""

    pass


@dataclass(frozen=True)
class ChangeDelta:
    """One changed field, as shown to Zendesk users.

    Attributes:
        display_name: Tracker field name
        new_value: Value after the change
        old_value: Value before the change, None when there was none
    """

    display_name: str
    new_value: str
    old_value: Optional[str] = None

    def format_line(self) -> str:
        """Render as `Name: new (was: old)`.

        Only the first character of the field name is upper-cased; the rest
        is lower-cased, so "FIX Version" becomes "Fix version".
        """
        name = self.display_name[:1].upper() + self.display_name[1:].lower()
        line = f"{name}: {self.new_value}"
        if self.old_value is not None:
            line += f" (was: {self.old_value})"
        return line
