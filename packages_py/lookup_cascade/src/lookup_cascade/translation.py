"""
Translation service backed by the public Google Translate endpoint.

The endpoint needs no key and is best-effort: the response is a nested
array that is parsed loosely.
"""
import json
import logging
from typing import List

from .errors import TransportError, TranslationError
from .types import Transport, TransportRequest, TranslationService

logger = logging.getLogger("lookup_cascade.translation")

GOOGLE_TRANSLATE_URL = "https://translate.googleapis.com/translate_a/single"


class GoogleTranslateService(TranslationService):
    """Translates through translate_a/single?client=gtx."""

    def __init__(self, transport: Transport, endpoint: str = GOOGLE_TRANSLATE_URL) -> None:
        self._transport = transport
        self._endpoint = endpoint

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        trimmed = text.strip()
        if not trimmed:
            return ""

        request = TransportRequest(
            url=self._endpoint,
            method="GET",
            params={
                "client": "gtx",
                "sl": source_lang,
                "tl": target_lang,
                "dt": "t",
                "q": trimmed,
            },
            headers={"Accept": "application/json"},
        )

        try:
            response = await self._transport.send(request)
        except TransportError as error:
            raise TranslationError(f"translation request failed: {error}") from error

        if not response.ok:
            raise TranslationError(f"translation responded with status {response.status_code}")

        try:
            payload = json.loads(response.body)
        except ValueError as error:
            raise TranslationError("translation payload is not JSON") from error

        if not isinstance(payload, list) or not payload or not isinstance(payload[0], list):
            return trimmed

        pieces: List[str] = []
        for item in payload[0]:
            if isinstance(item, list) and item and isinstance(item[0], str):
                pieces.append(item[0])

        joined = "".join(pieces)
        logger.debug(f"GoogleTranslateService.translate: {source_lang}->{target_lang} {trimmed!r} -> {joined!r}")
        return joined or trimmed
