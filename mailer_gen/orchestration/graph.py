"""
LangGraph construction for a single HTML generation run.

The run is a fixed, ordered pipeline executed by one worker: one
describe_image step per image (strictly in upload order), then prompt
composition, then exactly one generation call, then response classification.
"""

from typing import Any, Dict, Literal, Optional

from langgraph.graph import END, START, StateGraph

from mailer_gen.models import GENERATION_SAMPLING
from mailer_gen.orchestration.state import GenerationRunState
from mailer_gen.pipeline.classifier import ResponseParser
from mailer_gen.pipeline.composer import PromptComposer
from mailer_gen.pipeline.llm import RemoteGenerator, TextPart
from mailer_gen.pipeline.prompts import SYSTEM_INSTRUCTION, VISION_INSTRUCTION
from mailer_gen.pipeline.vision import VisionDescriber

# Graph steps besides the per-image ones, plus headroom
_FIXED_STEPS = 10


def route_images(state: GenerationRunState) -> Literal["describe_image", "compose_prompt"]:
    """Describe the next image while any remain, then compose the prompt."""
    described = len(state.get("image_descriptions") or [])
    if described < len(state.get("image_artifacts") or []):
        return "describe_image"
    return "compose_prompt"


def create_generation_graph(
    remote: RemoteGenerator,
    composer: Optional[PromptComposer] = None,
):
    """
    Create and compile the generation pipeline graph.

    Args:
        remote: Remote generation capability used for vision and generation calls.
        composer: Prompt composer (default budget if not provided).

    Returns:
        Compiled LangGraph application
    """
    describer = VisionDescriber(remote)
    composer = composer or PromptComposer()

    async def describe_image(state: GenerationRunState) -> Dict[str, Any]:
        descriptions = list(state.get("image_descriptions") or [])
        image = state["image_artifacts"][len(descriptions)]
        descriptions.append(await describer.describe(image, VISION_INSTRUCTION))
        return {"image_descriptions": descriptions}

    def compose(state: GenerationRunState) -> Dict[str, Any]:
        prompt = composer.compose(
            state.get("user_text", ""),
            state.get("structured_artifacts") or [],
            state.get("image_descriptions") or [],
        )
        return {"prompt": prompt}

    async def generate_document(state: GenerationRunState) -> Dict[str, Any]:
        raw = await remote.generate(
            [TextPart(text=state["prompt"])],
            GENERATION_SAMPLING,
            system_instruction=SYSTEM_INSTRUCTION,
            component="generator",
        )
        return {"raw_response": raw}

    def classify_response(state: GenerationRunState) -> Dict[str, Any]:
        cleaned = ResponseParser.clean(state["raw_response"])
        return {
            "cleaned_response": cleaned,
            "is_document": ResponseParser.is_document(cleaned),
        }

    graph = StateGraph(GenerationRunState)

    graph.add_node("describe_image", describe_image)
    graph.add_node("compose_prompt", compose)
    graph.add_node("generate_document", generate_document)
    graph.add_node("classify_response", classify_response)

    routes = {"describe_image": "describe_image", "compose_prompt": "compose_prompt"}
    graph.add_conditional_edges(START, route_images, routes)
    graph.add_conditional_edges("describe_image", route_images, routes)

    graph.add_edge("compose_prompt", "generate_document")
    graph.add_edge("generate_document", "classify_response")
    graph.add_edge("classify_response", END)

    return graph.compile()


def run_config(image_count: int) -> Dict[str, Any]:
    """LangGraph run configuration allowing one step per image."""
    return {"recursion_limit": image_count + _FIXED_STEPS}
