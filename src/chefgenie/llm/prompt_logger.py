"""
ChefGenie - Prompt Logger.

Logs model prompts and responses to markdown files for debugging.
Enabled via CHEFGENIE_LOG_PROMPTS=1 or the --log-prompts CLI flag.
"""

import json
import os
from datetime import datetime
from pathlib import Path
from typing import Any

LOG_PROMPTS = os.getenv("CHEFGENIE_LOG_PROMPTS", "0") == "1"
LOG_DIR = Path("prompt_logs")

# Session tracking
_session_id: str | None = None
_call_counter: int = 0


def enable_prompt_logging(enabled: bool = True) -> None:
    """Enable or disable prompt logging."""
    global LOG_PROMPTS
    LOG_PROMPTS = enabled
    if enabled:
        _ensure_log_dir()


def is_enabled() -> bool:
    return LOG_PROMPTS


def _ensure_log_dir() -> None:
    LOG_DIR.mkdir(exist_ok=True)


def _get_session_id() -> str:
    global _session_id
    if _session_id is None:
        _session_id = datetime.now().strftime("%Y%m%d_%H%M%S")
    return _session_id


def _get_session_dir() -> Path:
    session_dir = LOG_DIR / _get_session_id()
    session_dir.mkdir(parents=True, exist_ok=True)
    return session_dir


def _format_response(response: Any) -> str:
    if isinstance(response, str):
        return f"```\n{response}\n```\n"
    try:
        if hasattr(response, "model_dump"):
            response = response.model_dump(mode="json", by_alias=True)
        return f"```json\n{json.dumps(response, indent=2, default=str)}\n```\n"
    except Exception as e:
        return f"```\n{response}\n```\n\n(Serialization error: {e})\n"


def log_prompt(
    *,
    operation: str,
    model: str,
    prompt: str,
    response_model: str | None = None,
    response: Any = None,
    error: str | None = None,
    config: dict | None = None,
) -> Path | None:
    """
    Log a prompt and its response to a file.

    Args:
        operation: Which call this was (recipe, tweak, chat, image)
        model: The model used
        prompt: The prompt text sent
        response_model: Name of the expected Pydantic model, if structured
        response: The parsed response (optional)
        error: Any error that occurred (optional)
        config: Model config (temperature etc.)

    Returns:
        Path to the log file, or None if logging is disabled
    """
    if not LOG_PROMPTS:
        return None

    global _call_counter
    _call_counter += 1

    _ensure_log_dir()
    filepath = _get_session_dir() / f"{_call_counter:02d}_{operation}.md"

    config_str = ""
    if config:
        parts = [f"{k}={v}" for k, v in config.items() if k != "model"]
        if parts:
            config_str = f"\n**Config:** {', '.join(parts)}"

    content = f"""# Model Call: {operation}

**Time:** {datetime.now().isoformat()}
**Model:** {model}
**Response Model:** {response_model or "text"}{config_str}

---

## Prompt

```
{prompt}
```

---

## Response

"""

    if error:
        content += f"**ERROR:** {error}\n"
    elif response is not None:
        content += _format_response(response)
    else:
        content += "(No response)\n"

    filepath.write_text(content, encoding="utf-8")
    return filepath


def get_session_log_dir() -> Path | None:
    """Get the current session's log directory, if logging is enabled."""
    if not LOG_PROMPTS:
        return None
    return _get_session_dir()


def reset_session() -> None:
    """Reset the session (for testing or a new run)."""
    global _session_id, _call_counter
    _session_id = None
    _call_counter = 0
