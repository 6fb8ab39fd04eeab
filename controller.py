from typing import AsyncIterator, List, Optional

from llm_client import GeminiClient, GeminiServiceError, get_client
from log_utils import log_api_call, logger
from models import (
    Challenge,
    CompletionList,
    EvaluationResult,
    InlineImage,
    InputPrompts,
    Job,
    JobList,
    Message,
    Project,
    ProjectList,
)
from prompt import (
    PROJECT_IDEAS_PROMPT_TEMPLATE,
    JOB_LISTINGS_PROMPT_TEMPLATE,
    CODING_CHALLENGE_PROMPT_TEMPLATE,
    EVALUATION_PROMPT_TEMPLATE,
    INPUT_SCAN_PROMPT_TEMPLATE,
    RUN_CODE_PROMPT_TEMPLATE,
    COMPLETION_PROMPT_TEMPLATE,
    CURSOR_MARKER,
    PROJECTS_RESPONSE_SCHEMA,
    JOBS_RESPONSE_SCHEMA,
    CHALLENGE_RESPONSE_SCHEMA,
    EVALUATION_RESPONSE_SCHEMA,
    INPUT_PROMPTS_RESPONSE_SCHEMA,
    COMPLETIONS_RESPONSE_SCHEMA,
)
from utils import (
    build_history,
    build_user_turn,
    chunk_text,
    code_fence,
    decode_structured,
    ensure_request_length,
    render_prompt,
)

# ---------------- FALLBACK VALUES ----------------

CHAT_FALLBACK_TEXT = (
    "Sorry, I ran into a problem reaching my brain in the cloud. "
    "Please try again in a moment."
)

FALLBACK_CHALLENGE = Challenge(
    title="The Case of the Missing Semicolon",
    description=(
        "Oh no! It seems I couldn't fetch a challenge. My internal code must be on a "
        "coffee break. Try refreshing to wake it up!"
    ),
    example_input="N/A",
    example_output="N/A",
)

FALLBACK_EVALUATION = EvaluationResult(
    is_correct=False,
    simulated_output="Error: My crystal ball is cloudy...",
    feedback=(
        "I seem to have run into a little snag trying to evaluate your code. Could you "
        "try submitting it again? Let's give it another go!"
    ),
)

RUN_CODE_FALLBACK_TEXT = "Error: The code runner is taking a nap. Please try running your code again."

NO_OUTPUT_TEXT = "[No output]"

MAX_COMPLETIONS = 5

# Per-call failures that degrade to a fallback value. ValueError covers JSON
# decoding, schema validation and oversized prompts.
RECOVERABLE_ERRORS = (GeminiServiceError, ValueError)


def _resolve(client: Optional[GeminiClient]) -> GeminiClient:
    # ConfigurationError propagates from here, outside any recovery block
    return client if client is not None else get_client()


def _chat_contents(prompt, history, image, system_instruction):
    ensure_request_length(history, prompt, system_instruction)
    return build_history(history) + [build_user_turn(prompt, image)]


# ---------------- CHAT ----------------

@log_api_call
async def get_chat_response(
    prompt: str,
    history: List[Message],
    system_instruction: str,
    image: Optional[InlineImage] = None,
    thinking_mode: bool = False,
    client: Optional[GeminiClient] = None,
) -> str:
    """Send the conversation plus the current turn and return the model's reply."""
    client = _resolve(client)
    try:
        contents = _chat_contents(prompt, history, image, system_instruction)
        return await client.generate_text(
            contents,
            system_instruction=system_instruction,
            thinking_mode=thinking_mode,
        )
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in get_chat_response: {str(e)}")
        return CHAT_FALLBACK_TEXT


async def stream_chat_response(
    prompt: str,
    history: List[Message],
    system_instruction: str,
    image: Optional[InlineImage] = None,
    thinking_mode: bool = False,
    client: Optional[GeminiClient] = None,
) -> AsyncIterator[str]:
    """
    Yield the reply in whitespace-delimited chunks.

    The reply is fetched with a single call and then split, so joining the
    chunks gives back the full text. On failure one fallback chunk is yielded.
    """
    client = _resolve(client)
    logger.info("Starting stream_chat_response")
    try:
        contents = _chat_contents(prompt, history, image, system_instruction)
        text = await client.generate_text(
            contents,
            system_instruction=system_instruction,
            thinking_mode=thinking_mode,
        )
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in stream_chat_response: {str(e)}")
        yield CHAT_FALLBACK_TEXT
        return

    chunks = chunk_text(text)
    logger.info(f"Streaming {len(chunks)} chunks")
    for chunk in chunks:
        yield chunk


# ---------------- PROJECTS & JOBS ----------------

@log_api_call
async def find_projects(
    history: List[Message],
    system_instruction: str,
    language: str,
    client: Optional[GeminiClient] = None,
) -> List[Project]:
    """Generate project ideas from the conversation so far."""
    client = _resolve(client)
    try:
        request = render_prompt(PROJECT_IDEAS_PROMPT_TEMPLATE, language=language)
        ensure_request_length(history, request, system_instruction)
        contents = build_history(history, include_images=False) + [build_user_turn(request)]
        response = await client.generate_json(
            contents,
            PROJECTS_RESPONSE_SCHEMA,
            system_instruction=system_instruction,
        )
        return decode_structured(response, ProjectList).projects
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in find_projects: {str(e)}")
        return []


@log_api_call
async def parse_job_listings(
    pasted_text: str,
    language: str,
    client: Optional[GeminiClient] = None,
) -> List[Job]:
    """Extract job postings from text the user pasted from a job board."""
    client = _resolve(client)
    try:
        request = render_prompt(JOB_LISTINGS_PROMPT_TEMPLATE, language=language, pasted_text=pasted_text)
        response = await client.generate_json([build_user_turn(request)], JOBS_RESPONSE_SCHEMA)
        return decode_structured(response, JobList).jobs
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in parse_job_listings: {str(e)}")
        return []


# ---------------- CHALLENGES ----------------

@log_api_call
async def get_coding_challenge(language: str, client: Optional[GeminiClient] = None) -> Challenge:
    client = _resolve(client)
    try:
        request = render_prompt(CODING_CHALLENGE_PROMPT_TEMPLATE, language=language)
        response = await client.generate_json([build_user_turn(request)], CHALLENGE_RESPONSE_SCHEMA)
        return decode_structured(response, Challenge)
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in get_coding_challenge: {str(e)}")
        return FALLBACK_CHALLENGE.model_copy()


@log_api_call
async def evaluate_code_solution(
    challenge: Challenge,
    user_code: str,
    language: str,
    client: Optional[GeminiClient] = None,
) -> EvaluationResult:
    """Ask the model whether ``user_code`` solves ``challenge`` and for friendly feedback."""
    client = _resolve(client)
    try:
        request = render_prompt(
            EVALUATION_PROMPT_TEMPLATE,
            language=language,
            title=challenge.title,
            description=challenge.description,
            fence=code_fence(language),
            user_code=user_code,
        )
        response = await client.generate_json([build_user_turn(request)], EVALUATION_RESPONSE_SCHEMA)
        return decode_structured(response, EvaluationResult)
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in evaluate_code_solution: {str(e)}")
        return FALLBACK_EVALUATION.model_copy()


# ---------------- CODE RUNNER ----------------

@log_api_call
async def scan_for_input_requirements(
    user_code: str,
    language: str,
    client: Optional[GeminiClient] = None,
) -> List[str]:
    """Return the prompts the code shows before reading stdin, in order."""
    client = _resolve(client)
    try:
        request = render_prompt(
            INPUT_SCAN_PROMPT_TEMPLATE,
            language=language,
            fence=code_fence(language),
            user_code=user_code,
        )
        # Thinking disabled: this runs before every execution and must be quick
        response = await client.generate_json(
            [build_user_turn(request)],
            INPUT_PROMPTS_RESPONSE_SCHEMA,
            thinking_budget=0,
        )
        return decode_structured(response, InputPrompts).prompts
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error scanning for inputs: {str(e)}")
        return []


@log_api_call
async def run_code(
    user_code: str,
    language: str,
    user_input: str = "",
    client: Optional[GeminiClient] = None,
) -> str:
    """Simulate running the code with the model acting as interpreter; returns stdout."""
    client = _resolve(client)
    try:
        request = render_prompt(
            RUN_CODE_PROMPT_TEMPLATE,
            language=language,
            user_input=user_input or "",
            fence=code_fence(language),
            user_code=user_code,
        )
        output = await client.generate_text([build_user_turn(request)])
        return output or NO_OUTPUT_TEXT
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in run_code: {str(e)}")
        return RUN_CODE_FALLBACK_TEXT


@log_api_call
async def get_code_completions(
    user_code: str,
    language: str,
    cursor: int,
    client: Optional[GeminiClient] = None,
) -> List[str]:
    """Autocomplete suggestions for the text at ``cursor`` (a character offset)."""
    client = _resolve(client)
    cursor = max(0, min(cursor, len(user_code)))
    try:
        request = render_prompt(
            COMPLETION_PROMPT_TEMPLATE,
            language=language,
            cursor_marker=CURSOR_MARKER,
            max_suggestions=MAX_COMPLETIONS,
            fence=code_fence(language),
            code_with_cursor=user_code[:cursor] + CURSOR_MARKER + user_code[cursor:],
        )
        response = await client.generate_json(
            [build_user_turn(request)],
            COMPLETIONS_RESPONSE_SCHEMA,
            thinking_budget=0,
        )
        suggestions = decode_structured(response, CompletionList).suggestions
        return [s for s in suggestions if s.strip()][:MAX_COMPLETIONS]
    except RECOVERABLE_ERRORS as e:
        logger.error(f"Error in get_code_completions: {str(e)}")
        return []
