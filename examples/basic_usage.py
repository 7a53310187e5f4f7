#!/usr/bin/env python3
"""
Basic usage examples for CompareAI.

Sends one prompt to several models at once and prints the answers side by
side. Models whose API key is not configured are skipped; models whose call
fails show their canned mock response.
"""

import asyncio

from compareai import InvalidRequest, Orchestrator
from compareai.history import InMemoryStore, PromptHistory


async def compare_models():
    """Compare responses from every configured model."""
    print("\n=== Model Comparison ===\n")

    orch = Orchestrator()
    model_ids = orch.available_models or ["gpt", "claude"]

    aggregate = await orch.generate(
        "Write a one-paragraph explanation of blockchain technology.",
        model_ids,
    )

    print(f"Prompt: {aggregate.prompt}\n")

    for model_id, result in aggregate.results.items():
        if result.is_fallback:
            print(f"--- {model_id} (mock response: {result.error}) ---")
        else:
            print(f"--- {model_id} ({result.latency_ms:.0f}ms) ---")
        print(f"{result.text[:200]}...\n")

    if aggregate.skipped:
        print(f"Skipped: {', '.join(aggregate.skipped)}")
    print(f"Fell back: {aggregate.errored_count} of {len(aggregate.results)}")

    await orch.aclose()


async def invalid_request():
    """Unknown ids are rejected before any provider is called."""
    print("\n=== Invalid Request ===\n")

    orch = Orchestrator()
    try:
        await orch.generate("Hello", ["not-a-model"])
    except InvalidRequest as e:
        print(f"Rejected: {e.message}")


def prompt_history():
    """Keep a bounded, newest-first list of submitted prompts."""
    print("\n=== Prompt History ===\n")

    history = PromptHistory(InMemoryStore(), max_items=3)
    for prompt in ["first", "second", "third", "fourth"]:
        history.save(prompt, ["gpt", "claude"])

    for item in history.list():
        print(f"{item.id}: {item.prompt} -> {', '.join(item.model_ids)}")


async def main():
    """Run all examples."""
    try:
        await compare_models()
    except Exception as e:
        print(f"Comparison failed: {e}")

    await invalid_request()
    prompt_history()


if __name__ == "__main__":
    asyncio.run(main())
