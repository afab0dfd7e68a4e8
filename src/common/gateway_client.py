import base64
import json
import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

import aiohttp

from common.logger import logger


DATA_URI_PATTERN = re.compile(r"^data:(?P<media_type>[^;,]+)(?:;[^,]*)?,(?P<data>.*)$", re.DOTALL)


class GatewayRequestError(Exception):
    """The AI gateway could not be reached or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None, response_data: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


@dataclass
class GeneratedFile:
    media_type: str
    base64: str = ""
    data: bytes | None = None

    def to_data_uri(self) -> str:
        encoded = self.base64 or (base64.b64encode(self.data).decode("ascii") if self.data else "")
        if not encoded:
            return ""
        return f"data:{self.media_type};base64,{encoded}"


@dataclass
class GatewayResult:
    text: str = ""
    files: list[GeneratedFile] = field(default_factory=list)


def build_messages(prompt: str, images: Sequence[str] | None = None) -> list[dict[str, Any]]:
    content: list[dict[str, Any]] = [{"type": "text", "text": prompt}]
    for image in images or []:
        content.append({"type": "image_url", "image_url": {"url": image}})
    return [{"role": "user", "content": content}]


async def make_gateway_request(
    prompt: str,
    api_key: str,
    model: str,
    base_url: str,
    images: Sequence[str] | None = None,
    modalities: Sequence[str] = ("text", "image"),
    timeout_seconds: float = 180.0,
) -> dict[str, Any]:
    """POST one chat completion to an OpenAI-compatible gateway and return the decoded JSON body."""
    validate_gateway_config(api_key)

    payload = {
        "model": model,
        "messages": build_messages(prompt, images),
        "modalities": list(modalities),
    }

    headers = {
        "Content-Type": "application/json",
        "Authorization": f"Bearer {api_key.strip()}",
    }

    url = f"{base_url.rstrip('/')}/chat/completions"
    timeout = aiohttp.ClientTimeout(total=timeout_seconds)

    try:
        async with aiohttp.ClientSession() as session, session.post(url, headers=headers, json=payload, timeout=timeout) as response:
            text = await response.text()
            try:
                response_data = json.loads(text) if text else {}
            except json.JSONDecodeError:
                response_data = {"message": text}

            if response.status == 200:
                return response_data

            logger.debug(f"Gateway error response: {str(response_data)[:500]}")
            raise GatewayRequestError(f"AI gateway request failed: {response.status}", response.status, response_data)

    except aiohttp.ClientError as e:
        raise GatewayRequestError(f"AI gateway network error: {e!s}") from e


def _split_data_uri(uri: str) -> GeneratedFile | None:
    match = DATA_URI_PATTERN.match(uri or "")
    if not match:
        return None
    return GeneratedFile(media_type=match.group("media_type"), base64=match.group("data"))


def parse_gateway_response(response_data: dict[str, Any]) -> GatewayResult:
    """Collect the text and any returned media files from a chat completion response."""
    choices = response_data.get("choices") or []
    if not choices:
        raise GatewayRequestError("No choices in AI gateway response", response_data=response_data)

    message = choices[0].get("message") or {}
    content = message.get("content")
    result = GatewayResult()

    if isinstance(content, str):
        result.text = content
    elif isinstance(content, list):
        texts = []
        for part in content:
            if part.get("type") == "text":
                texts.append(part.get("text", ""))
            elif part.get("type") == "image_url":
                file = _split_data_uri((part.get("image_url") or {}).get("url", ""))
                if file:
                    result.files.append(file)
        result.text = "\n".join(texts)

    for image in message.get("images") or []:
        file = _split_data_uri((image.get("image_url") or {}).get("url", ""))
        if file:
            result.files.append(file)

    return result


def extract_json_object(text: str) -> str | None:
    """Return the first balanced {...} block in text, ignoring braces inside JSON strings."""
    start = text.find("{")
    if start == -1:
        return None

    depth = 0
    in_string = False
    escape_next = False

    for i in range(start, len(text)):
        char = text[i]

        if escape_next:
            escape_next = False
            continue

        if char == "\\":
            escape_next = True
            continue

        if char == '"':
            in_string = not in_string
            continue

        if in_string:
            continue

        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
            if depth == 0:
                return text[start : i + 1]

    return None


def validate_gateway_config(api_key: str | None = None) -> None:
    if not api_key or not api_key.strip():
        raise GatewayRequestError("AI_GATEWAY_API_KEY is required. Please set it in your environment or .env file.")
