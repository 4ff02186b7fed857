"""Tests for Telegram update parsing."""

from feedback.models import ButtonClick, TextOrMediaMessage
from feedback.transport import parse_update, parse_updates


def raw_message(update_id: int, message_id: int, **fields) -> dict:
    message = {
        "message_id": message_id,
        "date": 1700000000,
        "chat": {"id": 42, "type": "private"},
        "from": {"id": 7, "is_bot": False, "first_name": "Ada"},
    }
    message.update(fields)
    return {"update_id": update_id, "message": message}


class TestParseUpdate:
    """Tests for single update conversion."""

    def test_text_message(self):
        """Test that a text reply becomes a message update."""
        update = parse_update(
            raw_message(5, 101, text="hi", reply_to_message={"message_id": 100})
        )

        assert isinstance(update, TextOrMediaMessage)
        assert update.update_id == 5
        assert update.chat_id == "42"
        assert update.chat_type == "private"
        assert update.sender_id == "7"
        assert update.sender_is_bot is False
        assert update.reply_to_message_id == 100
        assert update.text == "hi"

    def test_photo_and_document(self):
        """Test media fields."""
        update = parse_update(
            raw_message(
                5,
                101,
                caption="see",
                photo=[{"file_id": "a", "width": 90, "height": 90, "file_size": 10}],
                document={"file_id": "d", "file_name": "x.png", "mime_type": "image/png"},
            )
        )

        assert update.photos[0].file_id == "a"
        assert update.photos[0].file_size == 10
        assert update.document.is_image
        assert update.caption == "see"

    def test_callback_query(self):
        """Test that a button click references the question message."""
        update = parse_update(
            {
                "update_id": 6,
                "callback_query": {
                    "id": "cb-1",
                    "from": {"id": 7, "is_bot": False},
                    "message": {"message_id": 100, "chat": {"id": 42, "type": "private"}},
                    "chat_instance": "x",
                    "data": "approve",
                },
            }
        )

        assert update == ButtonClick(
            update_id=6, click_id="cb-1", message_id=100, data="approve", sender_id="7"
        )

    def test_unmodelled_kind(self):
        """Test that other update kinds are ignored."""
        assert parse_update({"update_id": 9, "edited_message": {"message_id": 1}}) is None


class TestParseUpdates:
    """Tests for batch conversion."""

    def test_highest_id_includes_skipped_updates(self):
        """Test that ignored and malformed updates still count for the cursor."""
        result = parse_updates(
            [
                raw_message(3, 101, text="a"),
                {"update_id": 4, "message": {"message_id": "bad"}},
                {"update_id": 8, "channel_post": {}},
            ]
        )

        assert [u.update_id for u in result.updates] == [3]
        assert result.highest_update_id == 8

    def test_empty(self):
        """Test an empty result."""
        result = parse_updates([])
        assert result.updates == []
        assert result.highest_update_id is None
