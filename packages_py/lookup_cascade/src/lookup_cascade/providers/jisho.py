"""
Jisho dictionary provider.

Free public API: https://jisho.org/api/v1/search/words?keyword=...
It returns English definitions and readings; it has no example sentences.
"""
import logging
from typing import List, Optional

from pydantic import BaseModel, ValidationError

from ..errors import DecodeError, TransportError
from ..types import CanonicalEntry, NetworkDictionaryProvider, Transport, TransportRequest

logger = logging.getLogger("lookup_cascade.providers.jisho")

JISHO_SEARCH_URL = "https://jisho.org/api/v1/search/words"


class JishoJapanese(BaseModel):
    reading: Optional[str] = None
    word: Optional[str] = None


class JishoSense(BaseModel):
    english_definitions: List[str] = []
    parts_of_speech: Optional[List[str]] = None


class JishoEntry(BaseModel):
    japanese: List[JishoJapanese] = []
    senses: List[JishoSense] = []


class JishoResponse(BaseModel):
    data: List[JishoEntry]


class JishoDictionaryProvider(NetworkDictionaryProvider):
    """Looks terms up on jisho.org and returns the first matching entry."""

    name = "jisho"

    def __init__(self, transport: Transport, search_url: str = JISHO_SEARCH_URL) -> None:
        self._transport = transport
        self._search_url = search_url

    async def lookup(self, term: str) -> Optional[CanonicalEntry]:
        request = TransportRequest(
            url=self._search_url,
            method="GET",
            params={"keyword": term},
            headers={"Accept": "application/json"},
        )
        response = await self._transport.send(request)
        if not response.ok:
            raise TransportError(
                f"jisho responded with status {response.status_code}",
                status_code=response.status_code,
            )

        try:
            decoded = JishoResponse.model_validate_json(response.body)
        except ValidationError as error:
            raise DecodeError(f"unexpected jisho payload: {error.error_count()} error(s)") from error

        if not decoded.data:
            logger.debug(f"JishoDictionaryProvider.lookup: no entries for term={term!r}")
            return None

        first = decoded.data[0]
        return CanonicalEntry(
            readings=[j.reading for j in first.japanese if j.reading],
            meaning_groups=[list(sense.english_definitions) for sense in first.senses],
        )
