PROJECT_IDEAS_PROMPT_TEMPLATE = """Based on our conversation about my {language} skills and interests, please generate 12 relevant project ideas, covering a mix of Beginner, Intermediate, and Advanced difficulty levels."""

JOB_LISTINGS_PROMPT_TEMPLATE = """
You are JobFinderAI.
Your goal is to extract real job postings from the raw text provided by the user.
The user has searched for "{language}" jobs and pasted the results below.

CRITICAL RULES:
1. Extract ONLY real jobs mentioned in the pasted text.
2. Do NOT invent or hallucinate job posts. If there is not enough info, skip it.
3. For 'url', try to find a link in the text. If none is found, leave it empty.
4. For 'type', infer if it is 'Remote', 'On-site', or 'Hybrid'. Default to 'On-site' if unclear.
5. Extract salary if mentioned (e.g., "$100k - $120k").

PASTED TEXT:
---
{pasted_text}
---
"""

CODING_CHALLENGE_PROMPT_TEMPLATE = """Generate a funny and interesting {language} coding challenge of intermediate difficulty. The challenge should be solvable in a few lines of code. Provide a title, a description, an example input, and the corresponding example output."""

EVALUATION_PROMPT_TEMPLATE = """
You are a friendly and funny AI code evaluator for the {language} programming language.
A user was given this challenge:
Title: "{title}"
Description: "{description}"

The user submitted this {language} code:
```{fence}
{user_code}
```

Your task is to:
1. Analyze the user's code. Does it correctly solve the challenge?
2. Simulate the output of their code as if it were run. If it has an error, describe the error in a simple way.
3. Provide funny, friendly, and constructive feedback. Be encouraging, even if the code is wrong! Explain what's right and what could be improved.
4. Return your evaluation in the specified JSON format.
"""

INPUT_SCAN_PROMPT_TEMPLATE = """
Analyze the following {language} code snippet.
Determine if the code requests user input (e.g., using input(), Scanner, std::cin, etc.).

CRITICAL RULES:
1. Return a JSON object with a "prompts" key containing an array of prompt strings.
2. For languages like Python where the prompt is part of the function (e.g. input("Name: ")), extract that string.
3. For languages like C++, Java, C, or C# where input and output are separate (e.g. cout << "Enter name:"; cin >> name;), identify the PRINT statement immediately preceding the input call and use that text as the prompt.
4. If there is no specific prompt text found, use an empty string "".
5. If there is a loop requesting input, only return the prompts for the first iteration.

Code:
```{fence}
{user_code}
```
"""

RUN_CODE_PROMPT_TEMPLATE = """
You are a {language} code interpreter.
Your task is to execute the following code snippet and return ONLY the standard output it produces.

CRITICAL RULES:
1. Use the provided "Standard Input" (stdin) below as the input for the program.
2. If the code requests input (e.g. input("PromptText"), Scanner, std::cin) and "Standard Input" is provided, read from it sequentially.
3. IMPORTANT: When executing input functions (like input("PromptText")), DO NOT include the prompt text ("PromptText") in the final stdout. The UI handles the prompting. Only include explicit print statements or the result of the program.
4. If the code runs successfully, return ONLY its direct output (stdout).
5. If the code results in an error (like a compilation or runtime error), return ONLY the error message.
6. Do NOT add any explanations, commentary, apologies, or markdown formatting like ```.
7. If the code has no output (e.g., it only defines functions or assigns variables), return a specific message: "[No output]".

Standard Input (stdin):
---
{user_input}
---

Code to execute:
```{fence}
{user_code}
```
"""

COMPLETION_PROMPT_TEMPLATE = """
You are an autocomplete engine for a {language} code editor.
The marker {cursor_marker} shows where the user's cursor is.

CRITICAL RULES:
1. Suggest up to {max_suggestions} short completions that could be inserted at the cursor.
2. Each suggestion is the exact text to insert, without the code that is already there.
3. Prefer completions that make the code syntactically valid {language}.
4. Return a JSON object with a "suggestions" key containing an array of strings.

Code:
```{fence}
{code_with_cursor}
```
"""

CURSOR_MARKER = "<|cursor|>"


# ---------------------- RESPONSE SCHEMAS ----------------------
# OpenAPI-subset schemas understood by the Gemini structured output mode.

PROJECTS_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "projects": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "description": {"type": "string"},
                    "skills": {"type": "array", "items": {"type": "string"}},
                    "difficulty": {
                        "type": "string",
                        "enum": ["Beginner", "Intermediate", "Advanced"],
                    },
                },
                "required": ["title", "description", "skills", "difficulty"],
            },
        },
    },
    "required": ["projects"],
}

JOBS_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "jobs": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "title": {"type": "string"},
                    "company": {"type": "string"},
                    "location": {"type": "string"},
                    "type": {"type": "string", "enum": ["Remote", "On-site", "Hybrid"]},
                    "description": {"type": "string"},
                    "url": {"type": "string"},
                    "salary": {"type": "string"},
                },
                "required": ["title", "company", "location", "type", "description"],
            },
        },
    },
    "required": ["jobs"],
}

CHALLENGE_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "title": {"type": "string"},
        "description": {"type": "string"},
        "exampleInput": {"type": "string"},
        "exampleOutput": {"type": "string"},
    },
    "required": ["title", "description", "exampleInput", "exampleOutput"],
}

EVALUATION_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "isCorrect": {"type": "boolean"},
        "simulatedOutput": {"type": "string"},
        "feedback": {"type": "string"},
    },
    "required": ["isCorrect", "simulatedOutput", "feedback"],
}

INPUT_PROMPTS_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "prompts": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["prompts"],
}

COMPLETIONS_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "suggestions": {"type": "array", "items": {"type": "string"}},
    },
    "required": ["suggestions"],
}
