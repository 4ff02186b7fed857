"""Tests for ReplyBuilder."""

import base64

import pytest
from factories import make_message

from feedback.content import ReplyBuilder
from feedback.content.builder import EMPTY_REPLY_TEXT
from feedback.errors import TransportError
from feedback.models import Document, ImageItem, PhotoSize, ReplySource, TextItem


class TestReplyBuilderText:
    """Tests for text content."""

    @pytest.mark.asyncio
    async def test_text_only(self, transport):
        """Test that message text becomes one trimmed text item."""
        builder = ReplyBuilder(transport)

        reply = await builder.build(make_message(1, 101, text="  looks good  "), 100)

        assert reply.question_id == 100
        assert reply.message_id == 101
        assert reply.source is ReplySource.MESSAGE
        assert reply.content == (TextItem(text="looks good"),)

    @pytest.mark.asyncio
    async def test_text_and_caption_joined(self, transport):
        """Test that text and caption are separated by a blank line."""
        builder = ReplyBuilder(transport)

        reply = await builder.build(make_message(1, 101, text="a", caption="b"), 100)

        assert reply.content == (TextItem(text="a\n\nb"),)

    @pytest.mark.asyncio
    async def test_empty_reply_placeholder(self, transport):
        """Test the placeholder when nothing usable was sent."""
        builder = ReplyBuilder(transport, include_images=False)
        message = make_message(1, 101, text=None, photos=(PhotoSize(file_id="p1"),))

        reply = await builder.build(message, 100)

        assert reply.content == (TextItem(text=EMPTY_REPLY_TEXT),)


class TestReplyBuilderImages:
    """Tests for image content."""

    @pytest.mark.asyncio
    async def test_largest_photo_is_downloaded(self, transport):
        """Test that only the largest photo resolution is used."""
        transport.files = {"small": b"s", "large": b"LARGE"}
        builder = ReplyBuilder(transport)
        photos = (
            PhotoSize(file_id="small", width=90, height=90, file_size=1),
            PhotoSize(file_id="large", width=1280, height=1280, file_size=5),
        )

        reply = await builder.build(make_message(1, 101, text="see", photos=photos), 100)

        assert reply.content == (
            TextItem(text="see"),
            ImageItem(data=base64.b64encode(b"LARGE").decode("ascii"), mime_type="image/jpeg"),
        )

    @pytest.mark.asyncio
    async def test_largest_photo_without_file_size(self, transport):
        """Test that resolution picks the photo when sizes are not reported."""
        transport.files = {"thumb": b"small", "full": b"large"}
        builder = ReplyBuilder(transport)
        photos = (
            PhotoSize(file_id="thumb", width=90, height=90),
            PhotoSize(file_id="full", width=1280, height=1280),
        )

        reply = await builder.build(make_message(1, 101, text=None, photos=photos), 100)

        assert reply.content == (ImageItem(data=base64.b64encode(b"large").decode("ascii")),)

    @pytest.mark.asyncio
    async def test_photo_tie_takes_last_size(self, transport):
        """Test that the last listed size wins when nothing tells them apart."""
        transport.files = {"a": b"first", "b": b"last"}
        builder = ReplyBuilder(transport)
        photos = (PhotoSize(file_id="a"), PhotoSize(file_id="b"))

        reply = await builder.build(make_message(1, 101, text=None, photos=photos), 100)

        assert reply.content == (ImageItem(data=base64.b64encode(b"last").decode("ascii")),)

    @pytest.mark.asyncio
    async def test_image_document(self, transport):
        """Test that an image document keeps its MIME type."""
        transport.files = {"doc": b"png-bytes"}
        builder = ReplyBuilder(transport)
        document = Document(file_id="doc", file_name="shot.png", mime_type="image/png")

        reply = await builder.build(make_message(1, 101, text=None, document=document), 100)

        assert reply.content == (
            ImageItem(data=base64.b64encode(b"png-bytes").decode("ascii"), mime_type="image/png"),
        )

    @pytest.mark.asyncio
    async def test_unsupported_document_notice(self, transport):
        """Test the notice for non-image files."""
        builder = ReplyBuilder(transport)
        document = Document(file_id="doc", file_name="log.txt", mime_type="text/plain")

        reply = await builder.build(make_message(1, 101, text="here", document=document), 100)

        assert reply.content[0] == TextItem(text="here")
        notice = reply.content[1].text
        assert notice.startswith("\n\n[Received a file that is not supported] log.txt (text/plain)")
        assert notice.endswith("Please send text or images instead.")

    @pytest.mark.asyncio
    async def test_download_failure_notice(self, transport):
        """Test that a failed download becomes a notice instead of an error."""
        builder = ReplyBuilder(transport)
        photos = (PhotoSize(file_id="missing", file_size=1),)

        reply = await builder.build(make_message(1, 101, text="pic", photos=photos), 100)

        assert reply.content == (
            TextItem(text="pic"),
            TextItem(text="[An image was sent but could not be downloaded]"),
        )

    @pytest.mark.asyncio
    async def test_images_disabled(self, transport):
        """Test that images are skipped when disabled."""
        transport.files = {"p": b"x"}
        builder = ReplyBuilder(transport, include_images=False)
        photos = (PhotoSize(file_id="p", file_size=1),)

        reply = await builder.build(make_message(1, 101, text="t", photos=photos), 100)

        assert reply.content == (TextItem(text="t"),)

    @pytest.mark.asyncio
    async def test_max_images_zero(self, transport):
        """Test that the image limit is honoured."""
        transport.files = {"p": b"x"}
        builder = ReplyBuilder(transport, max_images=0)
        photos = (PhotoSize(file_id="p", file_size=1),)

        reply = await builder.build(make_message(1, 101, text="t", photos=photos), 100)

        assert reply.content == (TextItem(text="t"),)


class TestReadReceipt:
    """Tests for read receipts."""

    @pytest.mark.asyncio
    async def test_receipt_replies_to_message(self, transport):
        """Test the receipt payload."""
        builder = ReplyBuilder(transport, read_receipt_text=" Got it ", read_receipt_silent=False)

        await builder.send_read_receipt(make_message(1, 101))

        assert transport.sent == [
            {
                "text": "Got it",
                "message_id": 100,
                "reply_to_message_id": 101,
                "allow_sending_without_reply": True,
                "disable_notification": False,
            }
        ]

    @pytest.mark.asyncio
    async def test_receipt_disabled(self, transport):
        """Test that no receipt is sent when disabled or blank."""
        await ReplyBuilder(transport, read_receipt_enabled=False).send_read_receipt(
            make_message(1, 101)
        )
        await ReplyBuilder(transport, read_receipt_text="  ").send_read_receipt(
            make_message(1, 101)
        )
        assert transport.sent == []

    @pytest.mark.asyncio
    async def test_receipt_failure_is_swallowed(self, transport):
        """Test that a failed receipt does not raise."""

        async def fail(text, **kwargs):
            raise TransportError("sendMessage", "Forbidden")

        transport.send_message = fail

        await ReplyBuilder(transport).send_read_receipt(make_message(1, 101))
