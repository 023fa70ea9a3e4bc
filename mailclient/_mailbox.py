"""Mailbox sub-client for the mail store API (/emails/*).

Implements the ``mailstate.MailStore`` protocol over HTTP.

This is an internal module. Import from `mailclient` instead.
"""

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from mailclient._base import AsyncBaseClient
from mailclient.exceptions import InvalidResponseError
from mailstate.email import Email, Folder, FolderPage

ModelT = TypeVar("ModelT", bound=BaseModel)


def _parse(model: type[ModelT], data: Any) -> ModelT:
    """Validate a response payload, reporting a mismatch as a remote failure.

    Args:
        model: The expected payload model.
        data: Parsed JSON body.

    Returns:
        The validated model.

    Raises:
        InvalidResponseError: If the payload does not match the model.
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        raise InvalidResponseError(
            f"Mail store returned a malformed {model.__name__}: {e.error_count()} invalid field(s)",
            response_body=data,
        ) from e


class AsyncMailboxClient(AsyncBaseClient):
    """Asynchronous client for the mailbox endpoints (/emails/*).

    Example:
        async with AsyncWebmailClient(token=token) as client:
            page = await client.mailbox.fetch_page(Folder.STARRED, page=1, page_size=10)
            print(f"{page.total_count} starred emails")

            await client.mailbox.toggle_star(page.emails[0].id)
    """

    _BASE_PATH = "/emails"

    async def fetch_page(self, folder: Folder | str, page: int, page_size: int) -> FolderPage:
        """Fetch one page of a folder.

        Args:
            folder: Folder to read.
            page: 1-based page number.
            page_size: Emails per page.

        Returns:
            The page's emails in server order and the folder total.

        Raises:
            RemoteError: If the request fails or the page is malformed.
        """
        folder = Folder(folder)
        data = await self._get(
            f"{self._BASE_PATH}/{folder.value}",
            params={"page": page, "limit": page_size},
        )
        return _parse(FolderPage, data or {})

    async def send(self, email: Email) -> Email:
        """Send an email.

        Args:
            email: The message to send, including its client-generated id.

        Returns:
            The email as stored by the mail store (the sent email itself if
            the response has no body).

        Raises:
            RemoteError: If the request fails or the stored email is malformed.
        """
        data = await self._post(f"{self._BASE_PATH}/send", json=email.to_wire())
        if not data:
            return email
        return _parse(Email, data)

    async def save_draft(self, email: Email) -> None:
        """Create or overwrite the draft keyed by the email's id.

        Raises:
            RemoteError: If the request fails.
        """
        await self._post(f"{self._BASE_PATH}/drafts", json=email.to_wire())

    async def toggle_star(self, email_id: str) -> None:
        """Flip the starred flag of an email.

        Raises:
            RemoteError: If the request fails.
        """
        await self._post(f"{self._BASE_PATH}/{quote(email_id, safe='')}/star")
