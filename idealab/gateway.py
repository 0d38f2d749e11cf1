"""
Model gateways: the only place that talks to a vendor SDK.

A gateway takes a prompt and a GenerationConfig and returns the raw reply
text. Whatever goes wrong on the way is re-raised as a GatewayError with one
of the auth / quota / network / unknown categories.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Protocol

import httpx
from google import genai
from mistralai import Mistral

from idealab.config import GenerationConfig, Settings
from idealab.errors import AUTH, NETWORK, QUOTA, UNKNOWN, GatewayError
from idealab.prompts import SYSTEM_PROMPT

logger = logging.getLogger(__name__)

PROBE_PROMPT = "Say 'API connection successful'"
PROBE_CONFIG = GenerationConfig(temperature=0.0, max_output_tokens=32)

_AUTH_MARKERS = ("API_KEY_INVALID", "PERMISSION_DENIED", "UNAUTHENTICATED")
_QUOTA_MARKERS = ("QUOTA_EXCEEDED", "RESOURCE_EXHAUSTED")
_NETWORK_MARKERS = ("Failed to fetch",)


class ModelGateway(Protocol):
    name: str

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        ...


def _status_of(exc: Exception) -> Optional[int]:
    for attr in ("code", "status_code"):
        value = getattr(exc, attr, None)
        if isinstance(value, int):
            return value
    return None


def classify_exception(exc: Exception) -> GatewayError:
    """
    Map a vendor / transport exception onto the gateway taxonomy.
    """
    if isinstance(exc, GatewayError):
        return exc

    status = _status_of(exc)
    message = str(exc) or type(exc).__name__

    if isinstance(exc, (httpx.TransportError, ConnectionError, TimeoutError)):
        category = NETWORK
    elif any(marker in message for marker in _NETWORK_MARKERS):
        category = NETWORK
    elif status in (401, 403) or any(marker in message for marker in _AUTH_MARKERS):
        category = AUTH
    elif status == 429 or any(marker in message for marker in _QUOTA_MARKERS):
        category = QUOTA
    else:
        category = UNKNOWN

    return GatewayError(category, message, status=status)


def _require_text(text: Optional[str]) -> str:
    text = (text or "").strip()
    if not text:
        raise GatewayError(UNKNOWN, "Empty response from model.")
    return text


class GeminiGateway:
    name = "Gemini"

    def __init__(self, api_key: str, model: str = "gemini-1.5-flash", system_prompt: str = SYSTEM_PROMPT):
        self.model = model
        self.system_prompt = system_prompt
        self.client = genai.Client(api_key=api_key.strip())

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        try:
            response = await self.client.aio.models.generate_content(
                model=self.model,
                contents=prompt,
                config={
                    "system_instruction": self.system_prompt,
                    "temperature": config.temperature,
                    "top_k": config.top_k,
                    "top_p": config.top_p,
                    "max_output_tokens": config.max_output_tokens,
                },
            )
        except Exception as err:
            raise classify_exception(err) from err
        return _require_text(response.text)


class MistralGateway:
    name = "Mistral"

    def __init__(self, api_key: str, model: str = "mistral-large-latest", system_prompt: str = SYSTEM_PROMPT):
        self.model = model
        self.system_prompt = system_prompt
        self.client = Mistral(api_key=api_key.strip())

    async def generate(self, prompt: str, config: GenerationConfig) -> str:
        # Mistral has no top-k sampling; it is ignored here.
        try:
            response = await self.client.chat.complete_async(
                model=self.model,
                response_format={"type": "json_object"},
                temperature=config.temperature,
                top_p=config.top_p,
                max_tokens=config.max_output_tokens,
                messages=[
                    {"role": "system", "content": self.system_prompt},
                    {"role": "user", "content": prompt},
                ],
            )
        except Exception as err:
            raise classify_exception(err) from err
        if not response or not response.choices:
            raise GatewayError(UNKNOWN, "Empty response from model.")
        return _require_text(response.choices[0].message.content)


def build_gateway(api_key: str, settings: Settings) -> ModelGateway:
    """
    Gateway for the configured provider, bound to ``api_key``.
    """
    if settings.provider == "mistral":
        return MistralGateway(api_key, model=settings.mistral_model)
    if settings.provider == "gemini":
        return GeminiGateway(api_key, model=settings.gemini_model)
    raise ValueError(f"Unknown model provider: {settings.provider!r}")


@dataclass
class ConnectionCheck:
    success: bool
    message: str
    details: Dict[str, Optional[str]] = field(default_factory=dict)
    error: Optional[GatewayError] = None


async def check_connection(gateway: ModelGateway) -> ConnectionCheck:
    """
    Send a trivial prompt to confirm the credential and the network path work.
    """
    try:
        text = await gateway.generate(PROBE_PROMPT, PROBE_CONFIG)
    except GatewayError as err:
        logger.warning("Connection check against %s failed: %s", gateway.name, err.category)
        return ConnectionCheck(success=False, message=str(err), details=err.details(), error=err)
    return ConnectionCheck(success=True, message=text)
