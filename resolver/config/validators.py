"""Non-fatal configuration checks."""

import warnings
from typing import Any, Dict, List

_TIER_KEYS = ("primary_models", "secondary_models", "reasoning_models", "web_processing_models")


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """Inspect a raw configuration dictionary for suspicious settings.

    Returns:
        List of warning messages (empty when nothing looks off)
    """
    warning_messages = []

    chain = config_dict.get("fallback_chain")
    if isinstance(chain, dict):
        for key in _TIER_KEYS:
            models = chain.get(key)
            if key in chain and not models:
                warning_messages.append(f"Tier '{key}' has no models and will be skipped")
                continue
            if isinstance(models, list):
                ids = [m.get("id") for m in models if isinstance(m, dict) and m.get("id")]
                duplicates = sorted({model_id for model_id in ids if ids.count(model_id) > 1})
                if duplicates:
                    warning_messages.append(
                        f"Tier '{key}' lists the same model more than once: {', '.join(duplicates)}"
                    )

    rate_limit = config_dict.get("rate_limit")
    if isinstance(rate_limit, dict):
        max_requests = rate_limit.get("max_requests")
        if isinstance(max_requests, int) and max_requests < 5:
            warning_messages.append(
                f"Very low rate_limit.max_requests ({max_requests}) will reject most searches"
            )

    web_search = config_dict.get("web_search")
    if isinstance(web_search, dict) and web_search.get("enabled") is False:
        warning_messages.append("Web search tier is disabled; unresolved queries return no results")

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit each message as a UserWarning."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
