"""
Payment Receipt Uploads.

A receipt is read asynchronously and stored as a data URL on the payment
form. Every upload takes a new token; when a read finishes after a newer
upload has started, its result is dropped instead of overwriting the newer
file. Boat photos reuse the same slot with a narrower set of types.
"""

import base64
import itertools
import logging
import math
from dataclasses import dataclass
from typing import Awaitable, Callable

from selal.config import settings

logger = logging.getLogger(__name__)

ALLOWED_RECEIPT_TYPES = frozenset({
    "image/jpeg",
    "image/jpg",
    "image/png",
    "application/pdf",
})

SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


class ReceiptRejectedError(ValueError):
    """Unsupported file type or file too large."""


@dataclass
class Receipt:
    filename: str
    content_type: str
    size: int
    data_url: str

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")


def format_file_size(size: int) -> str:
    """Human readable size: 0 -> '0 Bytes', 1536 -> '1.5 KB'."""
    if size == 0:
        return "0 Bytes"
    k = 1024
    i = min(int(math.floor(math.log(size) / math.log(k))), len(SIZE_UNITS) - 1)
    value = round(size / math.pow(k, i), 2)
    return f"{value:g} {SIZE_UNITS[i]}"


RECEIPT_TYPE_MESSAGE = "Please select a valid file type (PNG, JPG, or PDF)"


def check_receipt(
    content_type: str,
    size: int,
    max_bytes: int | None = None,
    allowed_types: frozenset[str] = ALLOWED_RECEIPT_TYPES,
    type_message: str = RECEIPT_TYPE_MESSAGE,
) -> None:
    """Raise ReceiptRejectedError if the file may not be attached."""
    limit = settings.receipt_max_bytes if max_bytes is None else max_bytes
    if content_type not in allowed_types:
        raise ReceiptRejectedError(type_message)
    if size > limit:
        raise ReceiptRejectedError(f"File size must be less than {format_file_size(limit)}")


def to_data_url(content_type: str, content: bytes) -> str:
    encoded = base64.b64encode(content).decode("ascii")
    return f"data:{content_type};base64,{encoded}"


class ReceiptSlot:
    """
    The single receipt attached to a payment form.

    `attach()` awaits the file read and only stores the result if no newer
    upload (or removal) happened in the meantime. A newer upload that is
    rejected still counts: the latest user action wins.

    Subclasses change `allowed_types` and `type_message` to accept other
    attachments through the same guard.
    """

    allowed_types: frozenset[str] = ALLOWED_RECEIPT_TYPES
    type_message: str = RECEIPT_TYPE_MESSAGE

    def __init__(self, max_bytes: int | None = None) -> None:
        self.max_bytes = max_bytes
        self.receipt: Receipt | None = None
        self._tokens = itertools.count(1)
        self._latest = 0

    def _next_token(self) -> int:
        self._latest = next(self._tokens)
        return self._latest

    async def attach(
        self,
        filename: str,
        content_type: str,
        size: int,
        read: Callable[[], Awaitable[bytes]],
    ) -> Receipt | None:
        """
        Validate and read a receipt.

        Returns the stored Receipt, or None when the read was superseded.
        Raises ReceiptRejectedError before reading if the file is not allowed;
        the rejected upload still supersedes any read in flight.
        """
        token = self._next_token()
        check_receipt(content_type, size, self.max_bytes, self.allowed_types, self.type_message)

        content = await read()

        if token != self._latest:
            logger.warning(f"Discarding stale read for {filename} (token {token} < {self._latest})")
            return None

        self.receipt = Receipt(
            filename=filename,
            content_type=content_type,
            size=size,
            data_url=to_data_url(content_type, content),
        )
        logger.info(f"Attached: {filename} ({format_file_size(size)})")
        return self.receipt

    def remove(self) -> None:
        """Detach the receipt and invalidate any read still in flight."""
        self._next_token()
        self.receipt = None

    @property
    def data_url(self) -> str | None:
        return self.receipt.data_url if self.receipt else None
