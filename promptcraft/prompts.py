"""
Meta-prompts sent to the generation model.

User input is embedded verbatim. Nothing is escaped, so text that looks like
an instruction is passed through as-is.
"""

from __future__ import annotations

from promptcraft.models import PromptParts

# =============================================================================
# Builder
# =============================================================================

SUPER_PROMPT_TEMPLATE = """Act as a world-class Prompt Engineer. Your goal is to construct a highly effective "Super Prompt" based on the following user inputs.

User Inputs:
- Persona/Role: {role}
- Task/Objective: {task}
- Context/Background: {context}
- Desired Output Format: {format}

Instructions:
1. Combine these elements into a cohesive, structured prompt.
2. Use best practices like defining a clear persona, using delimiters, and specifying constraints.
3. The output should be ready to copy and paste into an LLM (like Gemini, GPT, Claude).
4. Do NOT include preamble text like "Here is your prompt". Just provide the prompt itself inside a markdown code block or plain text."""


# =============================================================================
# Optimizer
# =============================================================================

ANALYSIS_HEADER = "[Analysis]"
OPTIMIZED_HEADER = "[Optimized Prompt]"

OPTIMIZER_TEMPLATE = """Act as an expert Prompt Optimizer. I have a draft prompt that needs improvement.

Draft Prompt:
"{raw_prompt}"

Your Task:
1. Analyze the draft for weaknesses (ambiguity, lack of context, etc.).
2. Rewrite it into a professional, high-efficacy prompt using techniques like Chain of Thought, Few-Shot Prompting, or Role prompting where appropriate.
3. Explain briefly what you changed before providing the final optimized prompt.

Structure your response as:
{analysis_header}
...
{optimized_header}
..."""


def render_super_prompt_request(parts: PromptParts) -> str:
    return SUPER_PROMPT_TEMPLATE.format(
        role=parts.role,
        task=parts.task,
        context=parts.context,
        format=parts.format,
    )


def render_optimizer_request(raw_prompt: str) -> str:
    return OPTIMIZER_TEMPLATE.format(
        raw_prompt=raw_prompt,
        analysis_header=ANALYSIS_HEADER,
        optimized_header=OPTIMIZED_HEADER,
    )
