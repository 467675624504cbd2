"""
Provider client for chat-completions style LLM endpoints.

One client wraps one configured endpoint and performs a single analysis
request: build the prompt, POST it, pull the reply text out of the envelope
and decode it into a candidate.
"""

import asyncio
import hashlib
import json
from typing import Any, Awaitable, Callable, Dict, List, Optional

import httpx

from shared.logging import get_logger
from shared.retry import retry_with_backoff

from .errors import (
    ProviderProtocolError,
    ProviderRateLimitError,
    ProviderRejectedError,
    ProviderResponseError,
    ProviderTransportError,
)
from .models import AURA_COLORS, SECONDARY_COLORS, AnalysisCandidate, AnalysisResult, ProviderSpec
from .normalizer import clean_candidate, normalize

logger = get_logger("aura_analyzer")

RATE_LIMIT_STATUS = 429
RATE_LIMIT_ATTEMPTS = 2


def build_system_prompt() -> str:
    return (
        "You are an aura analysis engine. You look at a photo of a person and describe "
        "the energy it conveys.\n"
        "Return ONLY a valid JSON object. Do not include explanations or markdown.\n"
        "Use exactly these keys:\n"
        f"- aura_color: one of {', '.join(AURA_COLORS)}\n"
        f"- secondary_color: one of {', '.join(SECONDARY_COLORS)}, or null; "
        "never the same as aura_color\n"
        "- energy_level: integer from 1 to 100\n"
        "- mood_score: integer from 1 to 10\n"
        "- personality: one or two sentences\n"
        "- strengths: array of exactly 3 short strings\n"
        "- challenges: array of exactly 3 short strings\n"
        "- daily_advice: one or two sentences\n"
        "Keep results realistic."
    )


def _describe_image_ref(image_ref: str) -> str:
    # Inline payloads are far too large to paste into a text prompt
    if image_ref.startswith("data:"):
        digest = hashlib.sha256(image_ref.encode("utf-8")).hexdigest()[:16]
        return f"inline image upload (sha256 prefix {digest})"
    return image_ref


def build_user_message(spec: ProviderSpec, image_ref: str, baseline: Optional[AnalysisResult]) -> Dict[str, Any]:
    """
    Build the user message for one request.

    Vision-capable providers get the image as an image part; the rest get the
    reference as text. The baseline goes along as an anchor value.
    """
    hint = ""
    if baseline is not None:
        anchor = baseline.model_dump(include={"aura_color", "secondary_color", "energy_level", "mood_score"})
        hint = f" If the image gives you little to go on, stay close to this fallback: {json.dumps(anchor)}."

    if spec.supports_vision:
        return {
            "role": "user",
            "content": [
                {"type": "text", "text": "Analyze the aura of the person in this image and output JSON." + hint},
                {"type": "image_url", "image_url": {"url": image_ref}},
            ],
        }
    return {
        "role": "user",
        "content": f"Analyze the aura for this image and output JSON. image_url={_describe_image_ref(image_ref)!r}." + hint,
    }


def build_request_payload(spec: ProviderSpec, image_ref: str, baseline: Optional[AnalysisResult]) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "model": spec.model,
        "messages": [
            {"role": "system", "content": build_system_prompt()},
            build_user_message(spec, image_ref, baseline),
        ],
        "temperature": 0.2,
    }
    if spec.supports_json_mode:
        payload["response_format"] = {"type": "json_object"}
    return payload


def _decode_object(raw: str) -> Optional[Dict[str, Any]]:
    try:
        decoded = json.loads(raw)
    except (json.JSONDecodeError, ValueError):
        return None
    return decoded if isinstance(decoded, dict) else None


def parse_content(content: str, provider: str = "unknown") -> AnalysisCandidate:
    """
    Decode a model reply into a candidate.

    Tries the whole text first, then the span from the first "{" to the last
    "}" to get past prose or markdown fences around the JSON.

    Raises:
        ProviderResponseError: If neither attempt yields a JSON object
    """
    content = (content or "").strip()
    if not content:
        raise ProviderResponseError("empty model content", provider=provider)

    decoded = _decode_object(content)
    if decoded is None:
        start = content.find("{")
        end = content.rfind("}")
        if start >= 0 and end > start:
            decoded = _decode_object(content[start:end + 1])
    if decoded is None:
        raise ProviderResponseError("could not parse model content as a JSON object", provider=provider)

    return AnalysisCandidate.model_validate(decoded)


def extract_content(body: Any, provider: str) -> str:
    """
    Pull the reply text out of a chat-completions envelope.

    Raises:
        ProviderProtocolError: On a provider error payload or an empty choice list
    """
    if not isinstance(body, dict):
        raise ProviderProtocolError("response body is not a JSON object", provider=provider)

    choices = body.get("choices")
    if not choices:
        error = body.get("error")
        if error:
            message = error.get("message") if isinstance(error, dict) else str(error)
            raise ProviderProtocolError(f"provider reported error: {message}", provider=provider)
        raise ProviderProtocolError("provider returned no choices", provider=provider)

    first = choices[0] if isinstance(choices, list) else None
    message = first.get("message") if isinstance(first, dict) else None
    content = message.get("content") if isinstance(message, dict) else None

    # Multi-part replies arrive as a list of {"type": "text", "text": ...}
    if isinstance(content, list):
        parts: List[str] = []
        for part in content:
            if isinstance(part, dict) and isinstance(part.get("text"), str):
                parts.append(part["text"])
            elif isinstance(part, str):
                parts.append(part)
        content = "".join(parts)

    return content if isinstance(content, str) else ""


class ProviderClient:
    """Executes analysis requests against one configured provider."""

    def __init__(
        self,
        spec: ProviderSpec,
        timeout: float = 20.0,
        rate_limit_backoff: float = 2.0,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.spec = spec
        self.timeout = timeout
        self.rate_limit_backoff = rate_limit_backoff
        self._http_client = http_client
        self._sleep = sleep

    @property
    def name(self) -> str:
        return self.spec.name

    def __repr__(self) -> str:
        return f"ProviderClient(name={self.spec.name!r}, model={self.spec.model!r})"

    async def _post(self, payload: Dict[str, Any]) -> Any:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.spec.credential}",
        }
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    self.spec.endpoint_url, json=payload, headers=headers, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.spec.endpoint_url, json=payload, headers=headers)
        except httpx.TimeoutException as e:
            raise ProviderTransportError(f"request timed out: {e}", provider=self.name) from e
        except httpx.HTTPError as e:
            raise ProviderTransportError(f"request failed: {e}", provider=self.name) from e

        if response.status_code == RATE_LIMIT_STATUS:
            raise ProviderRateLimitError(
                "rate limited", provider=self.name, status_code=response.status_code
            )
        if not response.is_success:
            raise ProviderProtocolError(
                f"request failed: status={response.status_code}",
                provider=self.name,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise ProviderProtocolError(
                "response body is not valid JSON", provider=self.name, status_code=response.status_code
            ) from e

    async def call(self, image_ref: str, baseline: Optional[AnalysisResult] = None) -> AnalysisCandidate:
        """
        Run one analysis request.

        Returns the normalized candidate; fields the model did not usably
        supply are None.

        Raises:
            ProviderError: Any transport, protocol, parse or normalization failure
        """
        payload = build_request_payload(self.spec, image_ref, baseline)

        # Rate limits get one retry after a fixed delay; everything else fails fast
        request = retry_with_backoff(
            max_attempts=RATE_LIMIT_ATTEMPTS,
            base_delay=self.rate_limit_backoff,
            retryable_exceptions=(ProviderRateLimitError,),
            exponential=False,
            sleep=self._sleep,
        )(self._post)

        logger.debug("Calling aura provider", extra={"provider": self.name, "model": self.spec.model})
        body = await request(payload)

        content = extract_content(body, self.name)
        candidate = parse_content(content, provider=self.name)

        _, ok = normalize(candidate)
        if not ok:
            raise ProviderRejectedError(
                f"unrecognized aura color: {candidate.aura_color!r}", provider=self.name
            )
        return clean_candidate(candidate)
