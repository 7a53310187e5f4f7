"""Canned responses used when a live provider call fails."""

from __future__ import annotations

from collections.abc import Mapping


DEFAULT_PLACEHOLDER = "No response available"

# Only gpt, claude and gemini match registry ids; every other model gets
# DEFAULT_PLACEHOLDER on failure.
MOCK_RESPONSES: dict[str, str] = {
    "gpt": (
        "As an advanced language model, I analyze this prompt from multiple perspectives. "
        "First, I consider the factual aspects, then the conceptual implications, and finally "
        "the practical applications. My response is structured to provide a comprehensive "
        "understanding while maintaining clarity and precision."
    ),
    "claude": (
        "I'd like to explore this topic thoroughly. There are several dimensions to consider:\n\n"
        "1. Historical context\n"
        "2. Current understanding\n"
        "3. Future implications\n\n"
        "Let me address each of these in turn, while being mindful of nuance and avoiding "
        "oversimplification."
    ),
    "gemini": (
        "This is a fascinating question! Let me think about this systematically:\n\n"
        "- First, let's establish what we know\n"
        "- Then, I'll explore some possibilities\n"
        "- Finally, I'll suggest some practical applications\n\n"
        "My analysis is based on current understanding, though this is an evolving field."
    ),
    "gemini-ultra": (
        "I appreciate this thought-provoking question. Let me provide a comprehensive response "
        "that balances depth with accessibility. I'll incorporate relevant examples and "
        "analogies to illustrate complex concepts."
    ),
    "deepseek-coder": (
        "From a technical perspective, this question involves several interconnected systems. "
        "Let me break down the architecture and explain how each component functions, with "
        "particular attention to efficiency and scalability considerations."
    ),
    "llama-3-70b": (
        "I'll approach this question by considering multiple perspectives. There are valid "
        "arguments on different sides of this issue, and I'll try to represent them fairly "
        "while providing useful context and information."
    ),
    "mistral-large": (
        "Let me address this question directly. Based on current understanding, the key factors "
        "to consider are [relevant factors]. I'll explain each one and how they interact, "
        "focusing on practical implications."
    ),
}


class FallbackResponder:
    """Maps a model id to a fixed mock response."""

    def __init__(
        self,
        responses: Mapping[str, str] | None = None,
        placeholder: str = DEFAULT_PLACEHOLDER,
    ):
        self._responses = dict(MOCK_RESPONSES if responses is None else responses)
        self.placeholder = placeholder

    def respond(self, model_id: str) -> str:
        """Return the canned text for ``model_id``, or the generic placeholder."""
        return self._responses.get(model_id, self.placeholder)

    def __contains__(self, model_id: object) -> bool:
        return model_id in self._responses
