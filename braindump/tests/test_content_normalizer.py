import unittest

from braindump.models import CustomBlock, TextBlock, ToolResultBlock, ToolUseBlock
from braindump.parsers.content import (
    block_text,
    normalize_block,
    normalize_content,
    tool_result_text,
)
from braindump.parsers.fields import get_int


class FieldAccessorTests(unittest.TestCase):
    def test_get_int_non_finite_floats_are_zero(self) -> None:
        for value in (float("inf"), float("-inf"), float("nan")):
            self.assertEqual(get_int({"n": value}, "n"), 0)

    def test_get_int_truncates_finite_floats(self) -> None:
        self.assertEqual(get_int({"n": 12.9}, "n"), 12)
        self.assertEqual(get_int({"n": True}, "n"), 0)
        self.assertEqual(get_int({"n": "7"}, "n"), 0)


class NormalizeBlockTests(unittest.TestCase):
    def test_text_block(self) -> None:
        block = normalize_block({"type": "text", "text": "Hello"})
        self.assertEqual(block, TextBlock(text="Hello"))

    def test_text_block_without_payload_is_empty(self) -> None:
        self.assertEqual(normalize_block({"type": "text"}), TextBlock(text=""))
        self.assertEqual(normalize_block({"type": "text", "text": 42}), TextBlock(text=""))

    def test_tool_use_block(self) -> None:
        block = normalize_block(
            {
                "type": "tool_use",
                "name": "Read",
                "id": "toolu_1",
                "input": {"file_path": "/tmp/a.py", "limits": {"lines": [1, 2]}},
            }
        )
        self.assertIsInstance(block, ToolUseBlock)
        assert isinstance(block, ToolUseBlock)
        self.assertEqual(block.tool_name, "Read")
        self.assertEqual(block.tool_use_id, "toolu_1")
        self.assertEqual(block.tool_input, {"file_path": "/tmp/a.py", "limits": {"lines": [1, 2]}})

    def test_tool_use_block_without_fields(self) -> None:
        block = normalize_block({"type": "tool_use", "input": "not-a-mapping"})
        self.assertEqual(block, ToolUseBlock())

    def test_tool_result_string_content(self) -> None:
        block = normalize_block({"type": "tool_result", "tool_use_id": "toolu_1", "content": "File contents"})
        self.assertEqual(block, ToolResultBlock(tool_use_id="toolu_1", tool_content="File contents"))

    def test_tool_result_array_content_is_newline_joined(self) -> None:
        block = normalize_block(
            {
                "type": "tool_result",
                "tool_use_id": "toolu_2",
                "content": [{"type": "text", "text": "a"}, {"type": "text", "text": "b"}],
            }
        )
        assert isinstance(block, ToolResultBlock)
        self.assertEqual(block.tool_content, "a\nb")

    def test_tool_result_unrecognized_shape_is_empty(self) -> None:
        block = normalize_block({"type": "tool_result", "tool_use_id": "t", "content": 17})
        self.assertEqual(block, ToolResultBlock(tool_use_id="t", tool_content=""))

    def test_missing_type_with_text_keeps_empty_tag(self) -> None:
        block = normalize_block({"text": "orphan"})
        self.assertEqual(block, CustomBlock(type="", text="orphan"))

    def test_missing_type_without_text_is_dropped(self) -> None:
        self.assertIsNone(normalize_block({"content": "nothing readable"}))
        self.assertIsNone(normalize_block({}))

    def test_unknown_type_with_text_is_preserved(self) -> None:
        block = normalize_block({"type": "thinking", "text": "pondering"})
        self.assertEqual(block, CustomBlock(type="thinking", text="pondering"))

    def test_unknown_type_without_text_is_dropped(self) -> None:
        self.assertIsNone(normalize_block({"type": "image", "source": {"data": "..."}}))

    def test_non_mapping_input_is_dropped(self) -> None:
        for raw in (None, "text", 3, ["type", "text"]):
            self.assertIsNone(normalize_block(raw))


class ToolResultTextTests(unittest.TestCase):
    def test_mixed_array_items(self) -> None:
        self.assertEqual(tool_result_text(["x", {"text": "y"}]), "x\ny")

    def test_non_conforming_items_contribute_nothing(self) -> None:
        self.assertEqual(tool_result_text(["x", 5, {"type": "image"}, {"text": "y"}]), "x\n\n\ny")

    def test_nested_object_only_when_enabled(self) -> None:
        nested = {"type": "text", "text": "inner"}
        self.assertEqual(tool_result_text(nested), "")
        self.assertEqual(tool_result_text(nested, allow_nested=True), "inner")

    def test_nested_tool_result_collapses_recursively(self) -> None:
        nested = {"type": "tool_result", "content": {"type": "tool_result", "content": ["deep"]}}
        self.assertEqual(tool_result_text(nested, allow_nested=True), "deep")

    def test_self_nesting_beyond_limit_is_empty(self) -> None:
        payload: dict = {"type": "text", "text": "bottom"}
        for _ in range(100):
            payload = {"type": "tool_result", "content": payload}
        self.assertEqual(tool_result_text(payload, allow_nested=True), "")

    def test_block_text(self) -> None:
        self.assertEqual(block_text(TextBlock(text="t")), "t")
        self.assertEqual(block_text(ToolResultBlock(tool_content="r")), "r")
        self.assertEqual(block_text(ToolUseBlock(tool_name="Bash")), "")
        self.assertEqual(block_text(None), "")


class NormalizeContentTests(unittest.TestCase):
    def test_string_payload_becomes_single_text_block(self) -> None:
        self.assertEqual(normalize_content("Hello"), [TextBlock(text="Hello")])

    def test_array_payload_keeps_order_and_drops_unknown(self) -> None:
        blocks = normalize_content(
            [
                {"type": "text", "text": "one"},
                {"type": "image"},
                {"type": "tool_use", "name": "Bash", "id": "t1"},
                "bare",
                7,
            ]
        )
        self.assertEqual([block.type for block in blocks], ["text", "tool_use"])

    def test_bare_strings_when_enabled(self) -> None:
        blocks = normalize_content(["bare", {"type": "text", "text": "block"}], allow_bare_strings=True)
        self.assertEqual(blocks, [TextBlock(text="bare"), TextBlock(text="block")])

    def test_single_block_when_enabled(self) -> None:
        payload = {"type": "text", "text": "solo"}
        self.assertEqual(normalize_content(payload), [])
        self.assertEqual(normalize_content(payload, allow_single_block=True), [TextBlock(text="solo")])

    def test_unrecognized_payload_yields_no_blocks(self) -> None:
        for payload in (None, 12, True):
            self.assertEqual(normalize_content(payload), [])


if __name__ == "__main__":
    unittest.main()
