"""
Backend adapters: request construction, API call execution, and response
interpretation for each classification provider.

Each adapter owns one provider's model list and talks to that provider's
credential pool and the shared rate limiter.  ``classify`` never raises:
every failure inside a model attempt is reported and the next model is
tried; ``None`` means the provider is exhausted for this request.

Error handling per model attempt:
- quota signal (HTTP 402/429) → evict the key, next model
- transport / HTTP / shape error → report, next model
- unparseable classification → report, next model
"""

from __future__ import annotations

import requests

from .config import (
    API_CONFIG,
    FIXED_TEMPERATURE_PREFIXES,
    PROVIDER_LABELS,
    PROVIDER_ORDER,
    QUOTA_STATUS_CODES,
    REQUEST_PARAMS,
    REQUEST_TIMEOUT_SECONDS,
    render_prompt,
)
from .credentials import CredentialPool, mask_key
from .models import ClassificationRequest, ClassificationResult
from .parser import extract_message_text, parse_classification_response
from .rate_limit import RateLimiter
from .taxonomy import ORG_TYPES


# ---------------------------------------------------------------------------
# Error classification
# ---------------------------------------------------------------------------

class APIError:
    """
    Error category constants and classification logic for backend failures.

    Only ``QUOTA_EXCEEDED`` changes behaviour (the key is evicted); every
    other category just moves on to the next model.
    """

    QUOTA_EXCEEDED = "quota_exceeded"
    TIMEOUT = "timeout"
    SERVICE_UNAVAILABLE = "service_unavailable"
    INVALID_RESPONSE = "invalid_response"
    API_ERROR = "api_error"
    OTHER = "other"

    @staticmethod
    def categorize(
        error: Exception | None = None,
        status_code: int | None = None,
    ) -> str:
        """
        Classify a failed call by HTTP status and/or exception type.

        Args:
            error: Exception raised during the call, if any.
            status_code: HTTP status of the response, if one was received.

        Returns:
            One of the category constants.
        """
        if status_code is not None:
            if status_code in QUOTA_STATUS_CODES:
                return APIError.QUOTA_EXCEEDED
            if status_code >= 500:
                return APIError.SERVICE_UNAVAILABLE
            if status_code >= 400:
                return APIError.API_ERROR

        if isinstance(error, requests.Timeout):
            return APIError.TIMEOUT
        if isinstance(error, requests.ConnectionError):
            return APIError.SERVICE_UNAVAILABLE
        if isinstance(error, (ValueError, KeyError, IndexError, TypeError)):
            return APIError.INVALID_RESPONSE
        if isinstance(error, requests.RequestException):
            return APIError.API_ERROR
        return APIError.OTHER


# ---------------------------------------------------------------------------
# Result construction
# ---------------------------------------------------------------------------

def normalize_org_type(raw) -> str:
    """Map the model's ``type`` field onto ``ORG_TYPES``; unknown → ``'other'``."""
    if isinstance(raw, str):
        value = raw.strip().lower()
        if value in ORG_TYPES:
            return value
    return "other"


def build_result(payload: dict, provider: str, model: str) -> ClassificationResult:
    """
    Turn a validated payload into a result tagged with provider and model.

    Review flags are left for the orchestrator to set.
    """
    return ClassificationResult(
        is_ecosystem_org=payload["isEcosystemOrg"],
        org_type=normalize_org_type(payload.get("type")),
        category=payload["category"],
        subcategory=payload["subcategory"],
        role_summary=payload["role_summary"],
        confidence=payload["confidence"],
        provider=provider,
        model=model,
        needs_review=True,
        degraded=False,
    )


# ---------------------------------------------------------------------------
# Adapters
# ---------------------------------------------------------------------------

class ProviderAdapter:
    """
    Base adapter for an OpenAI-compatible chat completions provider.

    Subclasses set ``name`` and override the hooks that differ per provider
    (:meth:`build_payload`, :meth:`extract_text`).
    """

    name: str = ""

    def __init__(
        self,
        pool: CredentialPool,
        rate_limiter: RateLimiter,
        timeout: int = REQUEST_TIMEOUT_SECONDS,
    ):
        if self.name not in API_CONFIG:
            raise ValueError(f"Unknown provider '{self.name}'")
        if pool.provider != self.name:
            raise ValueError(
                f"Credential pool for '{pool.provider}' cannot back the "
                f"'{self.name}' adapter"
            )
        config = API_CONFIG[self.name]
        self.endpoint: str = config["endpoint"]
        self.models: list[str] = list(config["models"])
        self.extra_headers: dict = dict(config.get("extra_headers", {}))
        self.params: dict = dict(REQUEST_PARAMS[self.name])
        self.pool = pool
        self.rate_limiter = rate_limiter
        self.timeout = timeout

    @property
    def label(self) -> str:
        return PROVIDER_LABELS.get(self.name, self.name)

    # ── Request construction ───────────────────────────────────────────────

    def build_headers(self, api_key: str) -> dict:
        headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        headers.update(self.extra_headers)
        return headers

    def build_payload(self, prompt: str, model: str) -> dict:
        payload = {
            "model": model,
            "messages": [{"role": "user", "content": prompt}],
        }
        payload.update(self.params)
        return payload

    def extract_text(self, response_json: dict) -> str:
        return extract_message_text(response_json, self.name)

    # ── Execution ──────────────────────────────────────────────────────────

    def classify(self, request: ClassificationRequest) -> ClassificationResult | None:
        """
        Try each configured model in order until one yields a valid result.

        Args:
            request: Organisation to classify.

        Returns:
            Result tagged with this provider and the model that produced it,
            or ``None`` once every model has been tried.
        """
        if not self.pool:
            print(f"  No {self.label} API keys available", flush=True)
            return None

        prompt = render_prompt(request.name, request.description, request.website)

        for model in self.models:
            try:
                result = self._attempt(prompt, model)
            except Exception as exc:  # noqa: BLE001  (an adapter never raises)
                category = APIError.categorize(exc)
                print(
                    f"  {self.label} model {model} failed [{category}]: {str(exc)[:120]}",
                    flush=True,
                )
                continue
            if result is not None:
                return result
        return None

    def _attempt(self, prompt: str, model: str) -> ClassificationResult | None:
        """One call to one model with the next key; ``None`` on any failure."""
        api_key = self.pool.next()
        if api_key is None:
            print(f"  {self.label} key pool is empty, skipping model {model}", flush=True)
            return None

        self.rate_limiter.await_turn(self.name)

        try:
            response = requests.post(
                self.endpoint,
                headers=self.build_headers(api_key),
                json=self.build_payload(prompt, model),
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            category = APIError.categorize(exc)
            print(f"  {self.label} API call failed [{category}]: {str(exc)[:120]}", flush=True)
            return None

        status = response.status_code
        category = APIError.categorize(status_code=status)

        if category == APIError.QUOTA_EXCEEDED:
            self.pool.evict(api_key)
            print(
                f"  {self.label} rate limit hit for key {mask_key(api_key)} "
                f"(HTTP {status}), evicted; {len(self.pool)} keys left",
                flush=True,
            )
            return None

        if not 200 <= status < 300:
            print(
                f"  {self.label} API error [{category}]: {status} "
                f"{getattr(response, 'reason', '')}",
                flush=True,
            )
            return None

        try:
            text = self.extract_text(response.json())
        except (ValueError, KeyError, IndexError, TypeError) as exc:
            print(f"  Invalid {self.label} response format: {str(exc)[:120]}", flush=True)
            return None

        payload = parse_classification_response(text)
        if payload is None:
            print(
                f"  {self.label} model {model} returned invalid response, trying next model...",
                flush=True,
            )
            return None

        return build_result(payload, self.name, model)


class CerebrasAdapter(ProviderAdapter):
    name = "cerebras"


class OpenRouterAdapter(ProviderAdapter):
    name = "openrouter"

    def extract_text(self, response_json: dict) -> str:
        # Free reasoning models may answer only in message.reasoning
        return extract_message_text(response_json, self.name, allow_reasoning=True)


class MoonshotAdapter(ProviderAdapter):
    name = "moonshot"

    def build_payload(self, prompt: str, model: str) -> dict:
        payload = super().build_payload(prompt, model)
        for prefix, temperature in FIXED_TEMPERATURE_PREFIXES.items():
            if model.startswith(prefix):
                payload["temperature"] = temperature
        return payload


ADAPTER_CLASSES: dict[str, type[ProviderAdapter]] = {
    "cerebras": CerebrasAdapter,
    "openrouter": OpenRouterAdapter,
    "moonshot": MoonshotAdapter,
}


def build_adapters(
    pools: dict[str, CredentialPool],
    rate_limiter: RateLimiter,
    timeout: int = REQUEST_TIMEOUT_SECONDS,
) -> dict[str, ProviderAdapter]:
    """
    Instantiate one adapter per provider, in ``PROVIDER_ORDER``.

    Args:
        pools: Provider identifier → credential pool.
        rate_limiter: Limiter shared by all adapters.
        timeout: HTTP timeout per call.

    Returns:
        Ordered dict of provider identifier → adapter.
    """
    return {
        name: ADAPTER_CLASSES[name](pools[name], rate_limiter, timeout=timeout)
        for name in PROVIDER_ORDER
    }
