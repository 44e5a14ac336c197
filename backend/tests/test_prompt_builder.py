from quillmind.core import StoredFile
from quillmind.prompt_builder import PromptBuilder, PromptConfig, format_history
from quillmind.prompt_builder.builder import TRUNCATION_MARKER, truncate_to_tokens


def _chars(text):
    return len(text)


def test_format_history():
    assert format_history(None) == ""
    assert format_history([{"author": "user", "text": "hi"}]) == (
        "Here is the conversation history:\n---\nuser: hi\n---\n\n"
    )


def test_truncate_to_tokens_marks_the_cut():
    assert truncate_to_tokens("short", 100, _chars) == "short"

    cut = truncate_to_tokens("x" * 500, 100, _chars)
    assert cut.endswith(TRUNCATION_MARKER)
    assert len(cut) <= 100


class TestPromptBuilder:

    def test_edit_system_prompt_names_request_and_file(self):
        prompt = PromptBuilder().build_edit_system_prompt("rename foo", "app.js")
        assert 'Analyze the user\'s request: "rename foo"' in prompt
        assert "`app.js`" in prompt
        assert '{ "changes": [] }' in prompt

    def test_edit_file_message_wraps_content(self):
        message = PromptBuilder().build_edit_file_message("app.js", "let a = {b: 1};")
        assert message.startswith("Here is the file `app.js`:")
        assert "let a = {b: 1};" in message

    def test_chat_prompt_without_context(self):
        prompt = PromptBuilder().build_chat_prompt("hello", None, None)
        assert prompt == "Now, answer the user's question:\nUser: hello\n---\nAI:"

    def test_rag_prompt_lists_files(self):
        files = [StoredFile(file_id=1, project_id=1, name="a.md", content="alpha")]
        prompt = PromptBuilder().build_rag_prompt("what is alpha?", files)
        assert prompt.startswith("Here is the context from relevant files in the project:")
        assert 'File: "a.md"\n---\nalpha\n---' in prompt
        assert prompt.endswith("User: what is alpha?\n---\nAI:")

    def test_context_budget_drops_extra_files(self):
        builder = PromptBuilder(PromptConfig(max_tokens=60, max_file_tokens=40))
        builder.count_tokens = _chars
        files = [StoredFile(file_id=i, project_id=1, name=f"f{i}.md", content="y" * 30) for i in range(3)]

        prompt = builder.build_rag_prompt("q", files)

        assert 'File: "f0.md"' in prompt
        assert 'File: "f2.md"' not in prompt

    def test_oversized_file_is_truncated(self):
        builder = PromptBuilder(PromptConfig(max_tokens=1000, max_file_tokens=50))
        builder.count_tokens = _chars

        prompt = builder.build_chat_prompt("q", [{"fileName": "big.md", "fileContent": "z" * 400}])

        assert TRUNCATION_MARKER in prompt
        assert "z" * 60 not in prompt

    def test_title_prompt(self):
        prompt = PromptBuilder().build_title_prompt("plan the launch")
        assert "3-5 words" in prompt
        assert '"plan the launch"' in prompt
