"""Comment body rendering using Jinja2."""

import logging

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)


class TemplateRenderer:
    """Renders the text of Zendesk comments.

    The template output is plain text; XML escaping happens when the
    comment document is serialized, so autoescape stays off here.
    """

    def __init__(
        self,
        template_dir: str = "templates",
        comment_template: str = "comment_body.txt.j2",
    ):
        self.comment_template_name = comment_template
        self.env = Environment(
            loader=PackageLoader("zendesk_notifier.messages", template_dir),
            autoescape=False,
            undefined=StrictUndefined,
        )

    def render_comment(self, author: str, tracker: str, issue_key: str, details: str) -> str:
        """Render the comment body for one change message.

        Raises:
            NotificationTemplateError: If the template fails to render
        """
        try:
            template = self.env.get_template(self.comment_template_name)
            return template.render(
                author=author,
                tracker=tracker,
                issue_key=issue_key,
                details=details,
            )
        except TemplateError as e:
            error_msg = f"Comment template rendering failed: {e}"
            logger.error(error_msg, exc_info=True)
            raise NotificationTemplateError(error_msg) from e
