from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from pydantic import BaseModel, Field
from typing import Dict, List, Optional

from controller import (
    get_chat_response,
    stream_chat_response,
    find_projects,
    parse_job_listings,
    get_coding_challenge,
    evaluate_code_solution,
    scan_for_input_requirements,
    run_code,
    get_code_completions,
)
from llm_client import GeminiClient, get_client
from models import (
    CamelModel,
    Challenge,
    EvaluationResult,
    InlineImage,
    Job,
    JobSearchLink,
    Message,
    Project,
)
from utils import get_job_search_links

router = APIRouter()


class ChatRequest(CamelModel):
    """Request model for a chat turn."""
    prompt: str
    history: List[Message] = []
    system_instruction: str = Field("", alias="systemInstruction")
    image: Optional[InlineImage] = None
    thinking_mode: bool = Field(False, alias="thinkingMode")


class ChatResponse(BaseModel):
    text: str


class ProjectsRequest(CamelModel):
    """Request model for project idea generation."""
    history: List[Message] = []
    system_instruction: str = Field("", alias="systemInstruction")
    language: str = Field(..., min_length=1)


class JobListingsRequest(CamelModel):
    """Request model for extracting jobs from pasted search results."""
    pasted_text: str = Field(..., alias="pastedText")
    language: str = Field(..., min_length=1)


class EvaluationRequest(CamelModel):
    """Request model for evaluating a challenge solution."""
    challenge: Challenge
    user_code: str = Field(..., alias="userCode")
    language: str = Field(..., min_length=1)


class CodeRequest(CamelModel):
    """Request model for code scanning."""
    user_code: str = Field(..., alias="userCode")
    language: str = Field(..., min_length=1)


class RunCodeRequest(CodeRequest):
    user_input: str = Field("", alias="userInput")


class CompletionRequest(CodeRequest):
    cursor: int = Field(..., ge=0)


@router.post("/chat", response_model=ChatResponse)
async def chat_endpoint(request: ChatRequest, client: GeminiClient = Depends(get_client)):
    """Reply to the latest chat turn, optionally with an attached image."""
    text = await get_chat_response(
        request.prompt,
        request.history,
        request.system_instruction,
        image=request.image,
        thinking_mode=request.thinking_mode,
        client=client,
    )
    return {"text": text}


@router.post("/chat/stream")
async def chat_stream_endpoint(request: ChatRequest, client: GeminiClient = Depends(get_client)):
    """Same as /chat but the reply is streamed chunk by chunk as plain text."""
    chunks = stream_chat_response(
        request.prompt,
        request.history,
        request.system_instruction,
        image=request.image,
        thinking_mode=request.thinking_mode,
        client=client,
    )
    return StreamingResponse(chunks, media_type="text/plain")


@router.post("/projects", response_model=List[Project], response_model_by_alias=True)
async def projects_endpoint(request: ProjectsRequest, client: GeminiClient = Depends(get_client)):
    """
    Generate project ideas for the given language based on the conversation so far.

    Returns an empty list when the ideas could not be generated.
    """
    return await find_projects(request.history, request.system_instruction, request.language, client=client)


@router.get("/jobs/links", response_model=Dict[str, List[JobSearchLink]])
async def job_links_endpoint(language: str = Query(..., min_length=1)):
    """Job board search links for a language, grouped by category."""
    return get_job_search_links(language)


@router.post("/jobs/parse", response_model=List[Job])
async def parse_jobs_endpoint(request: JobListingsRequest, client: GeminiClient = Depends(get_client)):
    """Extract job postings from pasted job board results. Empty list when nothing could be extracted."""
    return await parse_job_listings(request.pasted_text, request.language, client=client)


@router.get("/challenge", response_model=Challenge, response_model_by_alias=True)
async def challenge_endpoint(language: str = Query(..., min_length=1), client: GeminiClient = Depends(get_client)):
    """Generate a coding challenge for the language, or a placeholder challenge on failure."""
    return await get_coding_challenge(language, client=client)


@router.post("/challenge/evaluate", response_model=EvaluationResult, response_model_by_alias=True)
async def evaluate_endpoint(request: EvaluationRequest, client: GeminiClient = Depends(get_client)):
    """Evaluate a submitted solution and return a simulated output with feedback."""
    return await evaluate_code_solution(request.challenge, request.user_code, request.language, client=client)


@router.post("/code/input-prompts", response_model=List[str])
async def input_prompts_endpoint(request: CodeRequest, client: GeminiClient = Depends(get_client)):
    """Prompts the code will show before reading from stdin."""
    return await scan_for_input_requirements(request.user_code, request.language, client=client)


@router.post("/code/run")
async def run_code_endpoint(request: RunCodeRequest, client: GeminiClient = Depends(get_client)):
    """Simulate running the code with the given stdin and return its output."""
    output = await run_code(request.user_code, request.language, request.user_input, client=client)
    return {"output": output}


@router.post("/code/completions", response_model=List[str])
async def completions_endpoint(request: CompletionRequest, client: GeminiClient = Depends(get_client)):
    """Autocomplete suggestions for the cursor position in the code."""
    return await get_code_completions(request.user_code, request.language, request.cursor, client=client)


@router.get("/health")
async def health_check():
    """
    Simple health check endpoint to verify the API is running.
    Does not contact Gemini.
    """
    return {
        "status": "healthy",
        "message": "Code coach API is operational",
        "features": {
            "chat": "active",
            "projects": "active",
            "jobs": "active",
            "challenges": "active",
            "code_runner": "active",
            "completions": "active",
        },
    }
