"""Tests for result text rendering."""

from zep_mcp import formatting
from zep_mcp.models import All, Episode, GraphNode, Message, Paged, Recent


class TestNumbered:

    def test_empty_uses_sentinel(self):
        assert formatting.numbered([], "nothing") == "nothing"

    def test_one_based_blank_line_separated(self):
        assert formatting.numbered(["a", "b"], "nothing") == "1. a\n\n2. b"


class TestMessages:

    def test_message_without_role(self):
        """A missing role leaves an empty prefix before the content."""
        assert formatting.format_message(Message(content="hi")) == " hi"

    def test_message_without_content(self):
        assert formatting.format_message(Message(role="user")) == "[user] No content"

    def test_metadata_suffix_is_compact_json(self):
        message = Message(role="assistant", content="x", metadata={"a": 1, "b": "ü"})
        assert formatting.format_message(message) == '[assistant] x\n   {"a":1,"b":"ü"}'

    def test_empty_metadata_omitted(self):
        assert formatting.format_metadata({}) == ""

    def test_banners(self):
        messages = [Message(role="user", content="q")]
        assert formatting.format_messages(messages, Recent(3)).startswith(
            "Showing last 3 messages:\n\n1. [user] q"
        )
        assert formatting.format_messages(messages, Paged(3)).startswith(
            "Showing up to 3 messages:\n\n"
        )
        assert formatting.format_messages(messages, Paged(3, 6)).startswith(
            "Showing up to 3 messages (cursor: 6):\n\n"
        )
        assert formatting.format_messages(messages, All()) == "1. [user] q"


class TestNodeDetails:

    def test_missing_fields_use_placeholders(self):
        text = formatting.format_node_details(GraphNode(), [], [])

        assert text == (
            "# Node: Unnamed\n\n"
            "**Labels:** Unknown\n"
            "**UUID:** N/A\n"
            "**Summary:** No summary\n\n"
        )

    def test_short_and_empty_episodes(self):
        text = formatting.format_node_details(
            GraphNode(name="Bob"),
            [],
            [Episode(content="short"), Episode()],
        )

        assert "## Mentioned In (2 episodes)\n\n1. short...\n2. No content...\n" in text

    def test_at_most_five_episodes(self):
        episodes = [Episode(content="e" * 250) for _ in range(12)]

        text = formatting.format_node_details(GraphNode(), [], episodes)

        assert "## Mentioned In (12 episodes)" in text
        assert "5. " + "e" * 100 + "...\n" in text
        assert "6. " not in text
        assert "e" * 101 not in text


def test_thread_context_and_store():
    assert formatting.format_thread_context("t", "ctx") == "# Relevant Context for Thread: t\n\nctx"
    assert formatting.format_stored("global") == '✓ Stored in thread "global"'
