import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


def _int_env(name: str, default: int) -> int:
    value = os.getenv(name)
    try:
        return int(value) if value else default
    except (TypeError, ValueError):
        return default


def _float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    try:
        return float(value) if value else default
    except (TypeError, ValueError):
        return default


def _bool_env(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class GenerationConfig:
    temperature: float
    top_k: int = 40
    top_p: float = 0.95
    max_output_tokens: int = 1024


PROVIDERS = ("gemini", "mistral")


def _default_state_path() -> Path:
    return Path.home() / ".idealab" / "state.json"


@dataclass(frozen=True)
class Settings:
    provider: str = "gemini"
    gemini_model: str = "gemini-1.5-flash"
    mistral_model: str = "mistral-large-latest"
    state_path: Path = field(default_factory=_default_state_path)
    precheck_connection: bool = False
    idea_config: GenerationConfig = GenerationConfig(temperature=0.9, max_output_tokens=1024)
    evaluation_config: GenerationConfig = GenerationConfig(temperature=0.7, max_output_tokens=2048)
    log_level: str = "INFO"


def load_settings() -> Settings:
    """
    Read the settings from the environment (and a .env file, if present).
    Raises ValueError on an unknown provider so a bad value fails at startup.
    """
    provider = os.getenv("IDEA_LAB_PROVIDER", "gemini").strip().lower()
    if provider not in PROVIDERS:
        raise ValueError(f"IDEA_LAB_PROVIDER must be one of {PROVIDERS}, got {provider!r}")
    state_path = os.getenv("IDEA_LAB_STATE_PATH")
    return Settings(
        provider=provider,
        gemini_model=os.getenv("IDEA_LAB_GEMINI_MODEL", "gemini-1.5-flash"),
        mistral_model=os.getenv("MISTRAL_CHAT_MODEL", "mistral-large-latest"),
        state_path=Path(state_path).expanduser() if state_path else _default_state_path(),
        precheck_connection=_bool_env("IDEA_LAB_PRECHECK_CONNECTION", False),
        idea_config=GenerationConfig(
            temperature=_float_env("IDEA_LAB_IDEA_TEMPERATURE", 0.9),
            max_output_tokens=_int_env("IDEA_LAB_IDEA_MAX_TOKENS", 1024),
        ),
        evaluation_config=GenerationConfig(
            temperature=_float_env("IDEA_LAB_EVAL_TEMPERATURE", 0.7),
            max_output_tokens=_int_env("IDEA_LAB_EVAL_MAX_TOKENS", 2048),
        ),
        log_level=os.getenv("IDEA_LAB_LOG_LEVEL", "INFO").upper(),
    )
