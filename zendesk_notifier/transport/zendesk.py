"""Zendesk ticket and upload endpoints."""

from typing import Optional
from urllib.parse import quote

from lxml import etree

from zendesk_notifier.config.models import ServerConfiguration
from zendesk_notifier.events.models import IssueAttachment
from zendesk_notifier.logging import get_logger
from zendesk_notifier.messages.documents import DocumentKind

from .base import AttachmentHandler, HTTPClient, Transport
from .exceptions import AttachmentUploadError, TransportConfigurationError, TransportError

logger = get_logger(__name__, component="transport")

XML_CONTENT_TYPE = "application/xml; charset=utf-8"


def _base_url(server: ServerConfiguration) -> str:
    if not server.url:
        raise TransportConfigurationError("No Zendesk URL configured")
    return server.url


class ZendeskTransport(HTTPClient, Transport):
    """Sends ticket and comment documents to Zendesk.

    Both document kinds are PUT to the ticket resource:
        PUT {url}/tickets/{ticket_id}.xml
    """

    def send(
        self,
        kind: DocumentKind,
        document: str,
        ticket_id: str,
        server: ServerConfiguration,
    ) -> None:
        url = f"{_base_url(server)}/tickets/{quote(str(ticket_id), safe='')}.xml"

        logger.info(
            f"Sending {kind.value} update to Zendesk ticket {ticket_id}",
            extra={"event": "transport.send", "document_kind": kind.value, "url": url},
        )
        self._request(
            "PUT",
            url,
            auth=server.auth(),
            headers={"Content-Type": XML_CONTENT_TYPE},
            data=document.encode("utf-8"),
        )


class ZendeskAttachmentUploader(HTTPClient, AttachmentHandler):
    """Copies issue attachments from the tracker to Zendesk uploads.

    Fetches the attachment bytes from the tracker, then posts them to
        POST {url}/uploads.xml?filename=...&token=...
    and reads the upload token from the response. Passing the token of an
    earlier upload adds the file to the same upload batch.
    """

    def __init__(
        self,
        tracker_auth: Optional[tuple[str, str]] = None,
        **kwargs,
    ) -> None:
        """
        Args:
            tracker_auth: Basic auth for downloading attachments from the tracker
            **kwargs: HTTPClient settings (timeout, user_agent, session)
        """
        super().__init__(**kwargs)
        self.tracker_auth = tracker_auth

    def upload(
        self,
        attachment: IssueAttachment,
        server: ServerConfiguration,
        token: Optional[str] = None,
    ) -> str:
        try:
            content = self._request("GET", attachment.content_url, auth=self.tracker_auth).content

            params = {"filename": attachment.filename}
            if token:
                params["token"] = token
            response = self._request(
                "POST",
                f"{_base_url(server)}/uploads.xml",
                auth=server.auth(),
                headers={"Content-Type": attachment.mime_type},
                params=params,
                data=content,
            )
        except TransportError as e:
            raise AttachmentUploadError(
                f"Failed to upload {attachment.filename}: {e}",
                filename=attachment.filename,
            ) from e

        upload_token = parse_upload_token(response.content)
        if not upload_token:
            raise AttachmentUploadError(
                f"Zendesk returned no upload token for {attachment.filename}",
                filename=attachment.filename,
            )

        logger.info(
            f"Uploaded attachment {attachment.filename}",
            extra={
                "event": "transport.upload.succeeded",
                "attachment_name": attachment.filename,
                "size": len(content),
            },
        )
        return upload_token


def parse_upload_token(body: bytes) -> Optional[str]:
    """Extract the token from an uploads response.

    Accepts both `<uploads token="...">` and `<upload><token>...</token></upload>`.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    try:
        root = etree.fromstring(body, parser)
    except etree.XMLSyntaxError:
        return None
    if root.get("token"):
        return root.get("token")
    return root.findtext("token") or None
