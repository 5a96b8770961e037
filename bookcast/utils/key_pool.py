"""
API key pool with round-robin selection and failover.

Users paste one or more keys per provider (one per line, or separated by
commas / semicolons). Every request picks a random starting key and walks the
pool once, moving to the next key whenever a call fails.
"""

import random
import re
from typing import Awaitable, Callable, List, Optional, TypeVar

from loguru import logger

from bookcast.config import get_settings
from bookcast.utils.errors import AllCandidatesFailedError, MissingCredentialError
from bookcast.utils.llm_client import ClientFactory, LLMClient, create_client

T = TypeVar("T")

_KEY_SEPARATORS = re.compile(r"[\n,;]+")

_log = logger.bind(name="KeyPool")


def redact_key(api_key: str) -> str:
    """Return a log-safe identifier for a key: only its last four characters."""
    return f"...{api_key[-4:]}" if api_key else "<empty>"


def _sanitize_key(candidate: str) -> str:
    """Trim whitespace and drop invisible characters pasted along with a key."""
    return "".join(ch for ch in candidate.strip() if ch.isprintable())


def parse_api_keys(raw_key_input: Optional[str]) -> List[str]:
    """
    Split raw user input into candidate keys, preserving input order.

    Entries are separated by newlines, commas or semicolons. Empty entries are
    dropped, as are entries that still contain whitespace after trimming,
    since such a value can never be a valid key. A repeated key is kept once,
    at its first position.
    """
    if not raw_key_input:
        return []

    keys = []
    for part in _KEY_SEPARATORS.split(raw_key_input):
        key = _sanitize_key(part)
        if not key:
            continue
        if any(ch.isspace() for ch in key):
            _log.warning(f"Ignoring malformed API key ending in {redact_key(key)}")
            continue
        keys.append(key)
    return list(dict.fromkeys(keys))


def resolve_candidates(
    raw_key_input: Optional[str],
    provider: str = "gemini",
    env_key: Optional[str] = None
) -> List[str]:
    """User keys win; the environment key is only used when none were given."""
    candidates = parse_api_keys(raw_key_input)
    if candidates:
        return candidates

    if env_key is None:
        env_key = get_settings().env_key_for(provider)
    return parse_api_keys(env_key)


def has_credentials(raw_key_input: Optional[str], provider: str = "gemini") -> bool:
    """Tell whether a request for ``provider`` would have at least one key to try."""
    return bool(resolve_candidates(raw_key_input, provider))


async def execute_request(
    raw_key_input: Optional[str],
    operation: Callable[[LLMClient], Awaitable[T]],
    provider: str = "gemini",
    client_factory: Optional[ClientFactory] = None,
    env_key: Optional[str] = None
) -> T:
    """
    Run ``operation`` against the provider, failing over across keys.

    Args:
        raw_key_input: Raw multi-key text as typed or stored by the user
        operation: Coroutine function receiving a client bound to one key
        provider: Provider family the keys belong to
        client_factory: Builds a client from ``(provider, api_key)``
        env_key: Fallback key; read from settings when omitted

    Returns:
        The first successful result of ``operation``

    Raises:
        MissingCredentialError: no candidate key is available
        Exception: the last error raised by ``operation`` when every key failed
    """
    candidates = resolve_candidates(raw_key_input, provider, env_key)
    if not candidates:
        raise MissingCredentialError(provider)

    factory = client_factory or create_client
    last_error: Optional[Exception] = None

    # Random start, then one sweep over the pool
    start_index = random.randrange(len(candidates))

    for attempt in range(len(candidates)):
        api_key = candidates[(start_index + attempt) % len(candidates)]
        try:
            client = factory(provider, api_key)
            return await operation(client)
        except Exception as e:
            _log.warning(
                f"API key ending in {redact_key(api_key)} failed: {e}. "
                f"Attempting switch ({attempt + 1}/{len(candidates)})..."
            )
            last_error = e

    if last_error is not None:
        raise last_error
    raise AllCandidatesFailedError()
