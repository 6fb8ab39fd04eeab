"""
Unit tests for prompt building and response decoding helpers
"""
import pytest
from langchain_core.messages import AIMessage, HumanMessage

from models import Challenge, InlineImage, Message, Part, ProjectList
from utils import (
    PromptTooLongError,
    build_history,
    build_user_turn,
    chunk_text,
    code_fence,
    decode_structured,
    ensure_request_length,
    extract_json_from_llm_response,
    get_job_search_links,
    render_prompt,
)

PNG = InlineImage(mime_type="image/png", data="iVBORw0KGgo=")


class TestBuildHistory:
    """Conversation history to LangChain messages"""

    def test_roles_and_order_preserved(self):
        history = [
            Message(role="user", parts=[Part(text="hi")]),
            Message(role="model", parts=[Part(text="hello!")]),
            Message(role="user", parts=[Part(text="help me")]),
        ]

        messages = build_history(history)

        assert [type(m) for m in messages] == [HumanMessage, AIMessage, HumanMessage]
        assert [m.content[0]["text"] for m in messages] == ["hi", "hello!", "help me"]

    def test_image_only_turns_have_one_image_block_each(self):
        history = [Message(role="user", parts=[Part(image=PNG)]) for _ in range(3)]

        messages = build_history(history)

        assert len(messages) == 3
        for message in messages:
            assert len(message.content) == 1
            assert message.content[0]["type"] == "image_url"
            assert message.content[0]["image_url"]["url"] == "data:image/png;base64,iVBORw0KGgo="

    def test_empty_part_contributes_nothing(self):
        history = [Message(role="user", parts=[Part(), Part(text="")])]

        messages = build_history(history)

        assert len(messages) == 1
        assert messages[0].content == []

    def test_text_and_image_in_one_part(self):
        history = [Message(role="user", parts=[Part(text="what is this?", image=PNG)])]

        blocks = build_history(history)[0].content

        assert [b["type"] for b in blocks] == ["text", "image_url"]

    def test_images_can_be_excluded(self):
        history = [Message(role="user", parts=[Part(text="look", image=PNG)])]

        blocks = build_history(history, include_images=False)[0].content

        assert blocks == [{"type": "text", "text": "look"}]

    def test_none_history(self):
        assert build_history(None) == []

    def test_accepts_front_end_aliases(self):
        message = Message.model_validate({
            "role": "user",
            "parts": [{"image": {"mimeType": "image/jpeg", "data": "abc"}}],
        })

        blocks = build_history([message])[0].content

        assert blocks[0]["image_url"]["url"] == "data:image/jpeg;base64,abc"


class TestUserTurn:
    def test_absent_image_leaves_text_block_alone(self):
        with_image = build_user_turn("describe", PNG)
        without_image = build_user_turn("describe")

        assert with_image.content[0] == without_image.content[0]
        assert len(with_image.content) == 2
        assert len(without_image.content) == 1


class TestRenderPrompt:
    def test_fills_template(self):
        assert render_prompt("Write {language} code", language="Go") == "Write Go code"

    def test_braces_in_values_are_kept(self):
        prompt = render_prompt("Code: {user_code}", user_code="int main() { return 0; }")
        assert prompt == "Code: int main() { return 0; }"

    def test_rejects_oversized_prompt(self):
        with pytest.raises(PromptTooLongError):
            render_prompt("{text}", limit=10, text="x" * 11)

    def test_too_long_is_a_value_error(self):
        assert issubclass(PromptTooLongError, ValueError)

    def test_request_length_counts_history_and_instruction(self):
        history = [
            Message(role="user", parts=[Part(text="abcd"), Part(image=PNG)]),
            Message(role="model", parts=[Part(text="ef")]),
        ]

        assert ensure_request_length(history, "gh", "ij", limit=10) == 10
        assert ensure_request_length(None, None, "abc", limit=10) == 3

    def test_request_length_rejects_oversized_history(self):
        history = [Message(role="user", parts=[Part(text="x" * 11)])]

        with pytest.raises(PromptTooLongError):
            ensure_request_length(history, "", limit=10)

    def test_code_fence(self):
        assert code_fence("Python") == "python"
        assert code_fence("C++") == "c++"


class TestJsonDecoding:
    def test_plain_json(self):
        assert extract_json_from_llm_response('{"prompts": []}') == {"prompts": []}

    def test_fenced_json(self):
        response = 'Here you go:\n```json\n{"prompts": ["Name: "]}\n```'
        assert extract_json_from_llm_response(response) == {"prompts": ["Name: "]}

    def test_json_surrounded_by_text(self):
        response = 'Sure! {"title": "x"} Hope that helps.'
        assert extract_json_from_llm_response(response) == {"title": "x"}

    def test_no_json(self):
        with pytest.raises(ValueError):
            extract_json_from_llm_response("no structured data here")

    def test_broken_json(self):
        with pytest.raises(ValueError):
            extract_json_from_llm_response('{"title": "x",,}')

    def test_decode_reads_camel_case_fields(self):
        challenge = decode_structured(
            '{"title": "t", "description": "d", "exampleInput": "1", "exampleOutput": "2"}',
            Challenge,
        )
        assert challenge.example_input == "1"
        assert challenge.example_output == "2"

    def test_missing_required_field_fails(self):
        with pytest.raises(ValueError):
            decode_structured('{"title": "t", "description": "d", "exampleInput": "1"}', Challenge)

    def test_one_incomplete_item_fails_whole_list(self):
        response = """{"projects": [
            {"title": "a", "description": "b", "skills": ["x"], "difficulty": "Beginner"},
            {"title": "c", "description": "d", "skills": ["y"]}
        ]}"""
        with pytest.raises(ValueError):
            decode_structured(response, ProjectList)

    def test_unknown_difficulty_fails(self):
        response = '{"projects": [{"title": "a", "description": "b", "skills": [], "difficulty": "Expert"}]}'
        with pytest.raises(ValueError):
            decode_structured(response, ProjectList)


class TestChunkText:
    @pytest.mark.parametrize("text", [
        "Hello world",
        "  leading and trailing  ",
        "line one\nline two\n\n  indented",
        "tabs\tand\t\tspaces",
        "single",
        "",
        "   ",
    ])
    def test_chunks_rebuild_text(self, text):
        assert "".join(chunk_text(text)) == text

    def test_chunks_are_word_sized(self):
        assert chunk_text("a bc  d") == ["a ", "bc  ", "d"]


class TestJobSearchLinks:
    def test_grouped_by_category(self):
        links = get_job_search_links("Python")

        assert set(links) == {"General", "Remote"}
        names = [link.name for group in links.values() for link in group]
        assert names == ["LinkedIn Jobs", "Indeed", "Dice", "SimplyHired", "RemoteOK", "We Work Remotely"]

    def test_deterministic(self):
        assert get_job_search_links("Python") == get_job_search_links("Python")

    def test_urls(self):
        general = {link.name: link.url for link in get_job_search_links("Python")["General"]}
        assert general["LinkedIn Jobs"] == "https://www.linkedin.com/jobs/search/?keywords=Python%20Developer"
        assert general["Indeed"] == "https://www.indeed.com/jobs?q=Python+Developer"

    def test_language_is_url_encoded(self):
        remote = {link.name: link.url for link in get_job_search_links("C++")["Remote"]}
        assert remote["RemoteOK"] == "https://remoteok.com/remote-C%2B%2B-jobs"

        general = {link.name: link.url for link in get_job_search_links("C#")["General"]}
        assert general["Dice"] == "https://www.dice.com/jobs?q=C%23"
