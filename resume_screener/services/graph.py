import asyncio
from typing import Any, List, TypedDict

from langgraph.graph import StateGraph, END

from resume_screener.helpers.parsing import extract_document
from resume_screener.helpers.prompts import build_screening_prompt
from resume_screener.models.ai_settings import LLMSettings
from resume_screener.models.models import ResumeDocument, ResumeUpload, ScreeningResult
from resume_screener.services.completion import CompletionClient
from resume_screener.services.validation import validate_screening_result
from resume_screener.utils.exceptions import CompletionTimeoutError
from resume_screener.utils.logging_config import get_logger, PerformanceMonitor
from resume_screener.utils.utils import extract_json_payload

logger = get_logger(__name__)


# LangGraph state; node names must not collide with these keys
class ScreeningState(TypedDict, total=False):
    job_description: str
    uploads: List[ResumeUpload]
    documents: List[ResumeDocument]
    prompt: str
    completion: str
    payload: Any
    result: ScreeningResult


async def node_extract(state: ScreeningState):
    uploads = state.get("uploads", [])
    # gather() keeps upload order regardless of completion order
    documents = await asyncio.gather(*[asyncio.to_thread(extract_document, u) for u in uploads])
    logger.info(f"Extracted text from {len(documents)} resume(s)")
    return {"documents": list(documents)}  # DELTA


def node_prompt(state: ScreeningState):
    prompt = build_screening_prompt(state["job_description"], state.get("documents", []))
    return {"prompt": prompt}


def make_node_complete(client: CompletionClient, settings: LLMSettings):
    options = settings.completion_options()

    async def node_complete(state: ScreeningState):
        with PerformanceMonitor(f"completion call ({options.model})", logger, threshold_ms=settings.timeout * 500):
            try:
                text = await asyncio.wait_for(
                    asyncio.to_thread(client.complete, state["prompt"], options),
                    timeout=settings.timeout,
                )
            except asyncio.TimeoutError as e:
                cancel_in_flight(client)
                raise CompletionTimeoutError(
                    f"Completion exceeded {settings.timeout}s budget",
                    timeout=settings.timeout, model_name=options.model, cause=e,
                ) from e
            except asyncio.CancelledError:
                cancel_in_flight(client)
                raise
        return {"completion": text}

    return node_complete


def cancel_in_flight(client: CompletionClient) -> None:
    # wait_for only abandons the worker thread; the client owns the connection
    cancel = getattr(client, "cancel", None)
    if cancel is not None:
        cancel()


def node_parse(state: ScreeningState):
    return {"payload": extract_json_payload(state.get("completion", ""))}


def node_validate(state: ScreeningState):
    result = validate_screening_result(state.get("payload"))
    logger.info(f"Screening result validated: {len(result.matches)} match(es)")
    return {"result": result}


def build_graph(client: CompletionClient, settings: LLMSettings):
    g = StateGraph(ScreeningState)
    g.add_node("extract", node_extract)
    g.add_node("build_prompt", node_prompt)
    g.add_node("complete", make_node_complete(client, settings))
    g.add_node("parse", node_parse)
    g.add_node("validate", node_validate)
    g.set_entry_point("extract")
    g.add_edge("extract", "build_prompt")
    g.add_edge("build_prompt", "complete")
    g.add_edge("complete", "parse")
    g.add_edge("parse", "validate")
    g.add_edge("validate", END)
    return g.compile()


async def run_screening(
    job_description: str,
    uploads: List[ResumeUpload],
    client: CompletionClient,
    settings: LLMSettings,
) -> ScreeningResult:
    graph = build_graph(client, settings)
    final = await graph.ainvoke({"job_description": job_description, "uploads": uploads})
    return final["result"]
