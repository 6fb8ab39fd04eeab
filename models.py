from pydantic import BaseModel, ConfigDict, Field
from typing import List, Literal, Optional


class CamelModel(BaseModel):
    """Base model accepting both snake_case names and the front-end's camelCase aliases."""
    model_config = ConfigDict(populate_by_name=True)


# ---------------------- CONVERSATION ----------------------

class InlineImage(CamelModel):
    """Inline image bytes, base64 encoded."""
    mime_type: str = Field(alias="mimeType")
    data: str


class Part(CamelModel):
    """One fragment of a conversation turn."""
    text: Optional[str] = None
    image: Optional[InlineImage] = None


class Message(CamelModel):
    """One turn of the conversation, owned by the calling UI."""
    role: Literal["user", "model"]
    parts: List[Part] = []


# ---------------------- STRUCTURED RESULTS ----------------------

class Project(CamelModel):
    """A suggested portfolio project."""
    title: str
    description: str
    skills: List[str]
    difficulty: Literal["Beginner", "Intermediate", "Advanced"]


class Challenge(CamelModel):
    """A small coding challenge with one worked example."""
    title: str
    description: str
    example_input: str = Field(alias="exampleInput")
    example_output: str = Field(alias="exampleOutput")


class EvaluationResult(CamelModel):
    """Verdict on a submitted challenge solution."""
    is_correct: bool = Field(alias="isCorrect")
    simulated_output: str = Field(alias="simulatedOutput")
    feedback: str


class Job(CamelModel):
    """A job posting extracted from pasted search results."""
    title: str
    company: str
    location: str
    type: Literal["Remote", "On-site", "Hybrid"]
    description: str
    url: str = ""
    salary: Optional[str] = None


class JobSearchLink(CamelModel):
    """A job board search URL."""
    name: str
    url: str


# ---------------------- RESPONSE ENVELOPES ----------------------
# Shapes of the JSON documents the model is asked to return.

class ProjectList(CamelModel):
    projects: List[Project]


class JobList(CamelModel):
    jobs: List[Job]


class InputPrompts(CamelModel):
    prompts: List[str]


class CompletionList(CamelModel):
    suggestions: List[str]
