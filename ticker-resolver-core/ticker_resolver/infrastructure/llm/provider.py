from langchain_openai import ChatOpenAI

from ...config.llm_config import (
    DEFAULT_MODEL,
    LLM_MAX_RETRIES,
    LLM_TEMPERATURE,
    LLM_TIMEOUT,
    OPENAI_API_KEY,
    OPENAI_BASE_URL,
    OPENROUTER_API_KEY,
    OPENROUTER_BASE_URL,
)
from ...shared.kernel.tools.logger import get_logger

logger = get_logger(__name__)


def _provider_endpoint() -> tuple[str, str | None]:
    if OPENROUTER_API_KEY:
        return OPENROUTER_BASE_URL, OPENROUTER_API_KEY
    return OPENAI_BASE_URL, OPENAI_API_KEY


def get_llm(
    model: str = DEFAULT_MODEL,
    temperature: float = LLM_TEMPERATURE,
    timeout: float = LLM_TIMEOUT,
) -> ChatOpenAI:
    """
    Chat model used for extraction, grading and query rewriting.
    Routed through OpenRouter when OPENROUTER_API_KEY is set, OpenAI otherwise.
    """
    base_url, api_key = _provider_endpoint()
    logger.debug("Building chat model %s via %s", model, base_url)
    return ChatOpenAI(
        model=model,
        temperature=temperature,
        base_url=base_url,
        api_key=api_key,
        timeout=timeout,
        max_retries=LLM_MAX_RETRIES,
    )
