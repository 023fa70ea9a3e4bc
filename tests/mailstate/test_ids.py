"""Unit tests for message id generation."""

import pytest

from mailstate.ids import ID_ALPHABET, generate_message_id


class TestGenerateMessageId:
    """Tests for generate_message_id()."""

    def test_default_length_and_alphabet(self):
        message_id = generate_message_id()

        assert len(message_id) == 10
        assert set(message_id) <= set(ID_ALPHABET)

    def test_longer_ids(self):
        assert len(generate_message_id(16)) == 16

    def test_too_short_rejected(self):
        with pytest.raises(ValueError):
            generate_message_id(8)

    def test_ids_distinct(self):
        ids = {generate_message_id() for _ in range(1000)}

        assert len(ids) == 1000
