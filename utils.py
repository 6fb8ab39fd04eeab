import json
import re
from typing import Dict, List, Optional
from urllib.parse import quote

from langchain_core.messages import AIMessage, HumanMessage

from config import MAX_PROMPT_CHARS
from models import InlineImage, JobSearchLink, Message, Part


class PromptTooLongError(ValueError):
    """Raised when a rendered prompt exceeds the configured size limit."""


# ---------------------- PROMPT BUILDING ----------------------

def ensure_prompt_length(prompt: str, limit: int = MAX_PROMPT_CHARS) -> str:
    if len(prompt) > limit:
        raise PromptTooLongError(f"Prompt is {len(prompt)} characters long, the limit is {limit}")
    return prompt


def history_text_length(history: Optional[List[Message]]) -> int:
    return sum(len(part.text or "") for message in history or [] for part in message.parts)


def ensure_request_length(history: Optional[List[Message]], *texts: Optional[str], limit: int = MAX_PROMPT_CHARS) -> int:
    """Reject a request whose history, current turn and system instruction together exceed ``limit`` characters."""
    total = history_text_length(history) + sum(len(text or "") for text in texts)
    if total > limit:
        raise PromptTooLongError(f"Request text is {total} characters long, the limit is {limit}")
    return total


def render_prompt(template: str, limit: int = MAX_PROMPT_CHARS, **fields) -> str:
    """Fill a prompt template, rejecting results longer than ``limit`` characters."""
    return ensure_prompt_length(template.format(**fields).strip(), limit)


def code_fence(language: str) -> str:
    """Markdown fence tag for a language name, e.g. 'C++' -> 'c++'."""
    return language.lower().replace(" ", "")


def image_block(image: InlineImage) -> dict:
    return {
        "type": "image_url",
        "image_url": {"url": f"data:{image.mime_type};base64,{image.data}"},
    }


def part_blocks(part: Part, include_images: bool = True) -> List[dict]:
    """Content blocks for one part: a text block and/or an image block, or nothing."""
    blocks = []
    if part.text:
        blocks.append({"type": "text", "text": part.text})
    if include_images and part.image is not None:
        blocks.append(image_block(part.image))
    return blocks


def to_langchain_message(role: str, blocks: List[dict]):
    if role == "model":
        return AIMessage(content=blocks)
    return HumanMessage(content=blocks)


def build_history(history: Optional[List[Message]], include_images: bool = True) -> list:
    """Map conversation turns to LangChain messages, preserving order and role."""
    messages = []
    for message in history or []:
        blocks = []
        for part in message.parts:
            blocks.extend(part_blocks(part, include_images))
        messages.append(to_langchain_message(message.role, blocks))
    return messages


def build_user_turn(text: Optional[str], image: Optional[InlineImage] = None) -> HumanMessage:
    """Build the current user turn from its text and optional image."""
    return HumanMessage(content=part_blocks(Part(text=text, image=image)))


# ---------------------- RESPONSE DECODING ----------------------

def extract_json_from_llm_response(response: str):
    """
    Extracts and parses JSON from an LLM response that may contain markdown code blocks.
    Raises ValueError when no valid JSON document can be found.
    """
    text = response.strip()
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        pass

    # Look for JSON in code blocks
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fenced:
        text = fenced.group(1).strip()
    else:
        starts = [idx for idx in (text.find("{"), text.find("[")) if idx != -1]
        if not starts:
            raise ValueError("No JSON content found in response")
        start = min(starts)
        end = max(text.rfind("}"), text.rfind("]"))
        if end < start:
            raise ValueError("No closing JSON structure found")
        text = text[start:end + 1]

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        preview = response[:200] + "..." if len(response) > 200 else response
        raise ValueError(f"Failed to extract valid JSON from response: {str(e)}\nResponse preview: {preview}")


def decode_structured(response: str, model_cls):
    """Parse a JSON response and validate it against ``model_cls``.

    Raises ValueError (pydantic's ValidationError included) when the document is
    not JSON or misses a required field.
    """
    data = extract_json_from_llm_response(response)
    return model_cls.model_validate(data)


def chunk_text(text: str) -> List[str]:
    """Split text into whitespace-delimited chunks that concatenate back to ``text``."""
    return re.findall(r"\S+\s*|\s+", text)


# ---------------------- JOB SEARCH LINKS ----------------------

def encode_uri_component(value: str) -> str:
    """Percent-encode like JavaScript's encodeURIComponent."""
    return quote(value, safe="-_.!~*'()")


JOB_SEARCH_TEMPLATES = {
    "General": [
        ("LinkedIn Jobs", "https://www.linkedin.com/jobs/search/?keywords={lang}%20Developer"),
        ("Indeed", "https://www.indeed.com/jobs?q={lang}+Developer"),
        ("Dice", "https://www.dice.com/jobs?q={lang}"),
        ("SimplyHired", "https://www.simplyhired.com/search?q={lang}+Developer"),
    ],
    "Remote": [
        ("RemoteOK", "https://remoteok.com/remote-{lang}-jobs"),
        ("We Work Remotely", "https://weworkremotely.com/remote-jobs/search?term={lang}"),
    ],
}


def get_job_search_links(language: str) -> Dict[str, List[JobSearchLink]]:
    """Job-board search URLs for a language, grouped by category. No network access."""
    encoded = encode_uri_component(language)
    return {
        category: [JobSearchLink(name=name, url=url.format(lang=encoded)) for name, url in links]
        for category, links in JOB_SEARCH_TEMPLATES.items()
    }
