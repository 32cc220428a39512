"""
LLM client - Provider-agnostic LLM integration using LiteLLM
"""

import asyncio
import os
import logging
from typing import Any

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Configure logging
logger = logging.getLogger(__name__)


# Providers and the environment variable holding their credential
API_KEY_VARS: dict[str, str] = {
    "ai21": "AI21_API_KEY",
    "openai": "OPENAI_API_KEY",
    "anthropic": "ANTHROPIC_API_KEY",
    "gemini": "GEMINI_API_KEY",
}


class LLMError(RuntimeError):
    """Raised when the LLM provider cannot be reached or returns an error."""


class ConfigurationError(RuntimeError):
    """Raised when the LLM backend is not configured (e.g. missing API key)."""


def get_provider() -> str:
    """Get configured LLM provider"""
    return os.getenv("LLM_PROVIDER", "ai21")


def get_model() -> str:
    """Get configured model name"""
    return os.getenv("LLM_MODEL", "jamba-large")


def get_timeout() -> float:
    """Get the upper bound in seconds for a single completion call"""
    return float(os.getenv("LLM_TIMEOUT_SECONDS", "60"))


def get_temperature() -> float:
    return float(os.getenv("LLM_TEMPERATURE", "0.8"))


def get_max_tokens() -> int:
    return int(os.getenv("LLM_MAX_TOKENS", "1024"))


def get_model_string() -> str:
    """Get the full model string for LiteLLM"""
    provider = get_provider()
    model = get_model()

    # LiteLLM uses prefixed model names for some providers
    if provider == "ai21":
        return f"ai21_chat/{model}"
    elif provider == "gemini":
        return f"gemini/{model}"
    elif provider == "anthropic":
        return f"anthropic/{model}"
    elif provider == "ollama":
        return f"ollama/{model}"
    else:
        # OpenAI doesn't need a prefix
        return model


def get_api_key() -> str | None:
    """
    Get the credential for the configured provider.

    Raises:
        ConfigurationError: If the provider needs a key and none is set
    """
    provider = get_provider()
    if provider == "ollama":
        return None

    var = API_KEY_VARS.get(provider)
    if var is None:
        raise ConfigurationError(f"Unsupported LLM provider: {provider}")

    api_key = os.getenv(var)
    if not api_key:
        raise ConfigurationError(f"{var} is not set")
    logger.debug(f"{var} configured (length: {len(api_key)})")
    return api_key


async def get_completion(
    messages: list[dict[str, str]],
    model: str | None = None,
    temperature: float | None = None,
    max_tokens: int | None = None,
    timeout: float | None = None,
) -> str:
    """
    Get completion from configured LLM provider.

    Args:
        messages: List of message dicts with 'role' and 'content'
        model: Optional model override
        temperature: Creativity (0-1)
        max_tokens: Maximum response length
        timeout: Seconds before the call is abandoned

    Returns:
        The generated text response

    Raises:
        ConfigurationError: If the provider credential is missing
        LLMError: If the provider fails, times out or returns no text
    """
    import litellm

    api_key = get_api_key()

    model_string = model or get_model_string()
    timeout = timeout if timeout is not None else get_timeout()
    temperature = temperature if temperature is not None else get_temperature()
    max_tokens = max_tokens if max_tokens is not None else get_max_tokens()

    logger.info(
        f"LLM Request: model={model_string}, temperature={temperature}, max_tokens={max_tokens}"
    )
    logger.debug(f"Messages: {len(messages)} messages, timeout={timeout}s")

    # Build completion kwargs
    kwargs: dict[str, Any] = {
        "model": model_string,
        "messages": messages,
        "temperature": temperature,
        "max_tokens": max_tokens,
        "timeout": timeout,
    }
    if api_key:
        kwargs["api_key"] = api_key
    if get_provider() == "ollama":
        kwargs["api_base"] = os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")

    try:
        # litellm's own timeout is not honoured by every provider
        response = await asyncio.wait_for(litellm.acompletion(**kwargs), timeout=timeout)
    except asyncio.TimeoutError as e:
        logger.error(f"LLM Error: timed out after {timeout}s")
        raise LLMError(f"LLM provider timed out after {timeout}s") from e
    except Exception as e:
        logger.error(f"LLM Error: {type(e).__name__}: {e}")
        raise LLMError(f"LLM provider error: {e}") from e

    try:
        choice = response.choices[0]
        content = choice.message.content
    except (IndexError, AttributeError, TypeError) as e:
        logger.error(f"LLM Error: malformed response: {type(e).__name__}: {e}")
        raise LLMError("LLM provider returned a malformed response") from e
    finish_reason = getattr(choice, "finish_reason", "unknown")

    if content is not None and not isinstance(content, str):
        raise LLMError("LLM provider returned a malformed response")

    logger.info(
        f"LLM Response: finish_reason={finish_reason}, content_length={len(content) if content else 0}"
    )

    if finish_reason == "length":
        logger.warning(
            f"Response TRUNCATED due to max_tokens limit ({max_tokens}). Consider increasing LLM_MAX_TOKENS."
        )

    if not content or not content.strip():
        raise LLMError("LLM provider returned an empty response")

    # Log first 200 chars of response for debugging
    preview = content[:200] + "..." if len(content) > 200 else content
    logger.debug(f"Response preview: {preview}")

    return content
