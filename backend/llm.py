"""Build the LLM client from app config."""

from typing import Any

from textventure.llm import PROVIDER_FORMATS, HttpLLM


def build_llm(config: dict[str, Any]) -> HttpLLM:
    """Construct an HttpLLM from config["llm_connection"].

    Raises ValueError when no provider URL is configured or the wire format
    is unknown.
    """
    conn = config.get("llm_connection") or {}
    provider_url = conn.get("provider_url", "")
    if not provider_url:
        raise ValueError("LLM connection is not configured — set a provider URL in Settings")
    provider_format = conn.get("provider_format") or "koboldcpp"
    if provider_format not in PROVIDER_FORMATS:
        raise ValueError(f"Unknown provider format {provider_format!r}")
    return HttpLLM(
        provider_url=provider_url,
        api_key=conn.get("api_key", ""),
        provider_format=provider_format,
        model=conn.get("model", ""),
        timeout=float(conn.get("timeout") or 120),
    )
