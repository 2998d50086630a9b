"""
Tests for the HTTP transport, the Jisho provider, the translation service
and the offline fallback provider.
"""
import json
import pytest

import httpx

from cache_ttl import TtlCache
from lookup_cascade import (
    DecodeError,
    GoogleTranslateService,
    HttpxTransport,
    JishoDictionaryProvider,
    LookupResult,
    MockOfflineProvider,
    OFFLINE_CONFIDENCE,
    TranslationError,
    TransportError,
    TransportRequest,
    build_placeholder,
    estimate_reading,
)


def json_response(payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=json.dumps(payload).encode("utf-8"))


JISHO_CAT = {
    "meta": {"status": 200},
    "data": [
        {
            "slug": "猫",
            "japanese": [{"word": "猫", "reading": "ねこ"}],
            "senses": [
                {"english_definitions": ["cat"], "parts_of_speech": ["Noun"]},
                {"english_definitions": ["shamisen"], "parts_of_speech": ["Noun"]},
            ],
        },
        {
            "slug": "猫舌",
            "japanese": [{"word": "猫舌", "reading": "ねこじた"}],
            "senses": [{"english_definitions": ["being unable to eat hot food"]}],
        },
    ],
}


class TestHttpxTransport:
    """Tests for HttpxTransport."""

    @pytest.mark.asyncio
    async def test_returns_body_and_status(self, mock_transport_factory) -> None:
        """Should pass through body bytes and status code."""
        transport = mock_transport_factory(lambda request: httpx.Response(418, content=b"teapot"))

        response = await transport.send(TransportRequest(url="https://example.test/x"))

        assert response.status_code == 418
        assert response.body == b"teapot"
        assert response.ok is False

    @pytest.mark.asyncio
    async def test_sends_params_and_headers(self, mock_transport_factory) -> None:
        """Should encode query params and forward headers."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["keyword"] = request.url.params["keyword"]
            seen["accept"] = request.headers["accept"]
            return httpx.Response(200, content=b"{}")

        transport = mock_transport_factory(handler)
        await transport.send(
            TransportRequest(
                url="https://example.test/search",
                params={"keyword": "猫"},
                headers={"Accept": "application/json"},
            )
        )

        assert seen == {"keyword": "猫", "accept": "application/json"}

    @pytest.mark.asyncio
    async def test_wraps_httpx_errors(self, mock_transport_factory) -> None:
        """Should raise TransportError on connection failure."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        transport = mock_transport_factory(handler)

        with pytest.raises(TransportError) as exc_info:
            await transport.send(TransportRequest(url="https://example.test/"))
        assert "ConnectError" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_closed_transport_rejects_requests(self) -> None:
        """Should refuse to send after close()."""
        transport = HttpxTransport(
            httpx_client=httpx.AsyncClient(
                transport=httpx.MockTransport(lambda r: httpx.Response(200))
            )
        )
        await transport.close()

        with pytest.raises(RuntimeError):
            await transport.send(TransportRequest(url="https://example.test/"))


class TestJishoDictionaryProvider:
    """Tests for JishoDictionaryProvider."""

    @pytest.mark.asyncio
    async def test_decodes_first_entry(self, mock_transport_factory) -> None:
        """Should map only the first entry into a canonical entry."""
        transport = mock_transport_factory(lambda request: json_response(JISHO_CAT))
        provider = JishoDictionaryProvider(transport)

        entry = await provider.lookup("猫")

        assert entry.readings == ["ねこ"]
        assert entry.meaning_groups == [["cat"], ["shamisen"]]
        assert entry.first_reading() == "ねこ"

    @pytest.mark.asyncio
    async def test_queries_keyword(self, mock_transport_factory) -> None:
        """Should send the term as the keyword parameter."""
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(f"{request.url.scheme}://{request.url.host}{request.url.path}")
            seen.append(request.url.params["keyword"])
            return json_response({"data": []})

        provider = JishoDictionaryProvider(mock_transport_factory(handler))
        await provider.lookup("犬")

        assert seen == ["https://jisho.org/api/v1/search/words", "犬"]

    @pytest.mark.asyncio
    async def test_no_entries_is_none(self, mock_transport_factory) -> None:
        """Should return None for an empty data list."""
        provider = JishoDictionaryProvider(
            mock_transport_factory(lambda request: json_response({"data": []}))
        )
        assert await provider.lookup("zzz") is None

    @pytest.mark.asyncio
    async def test_missing_readings_are_skipped(self, mock_transport_factory) -> None:
        """Should ignore japanese forms without a reading."""
        payload = {
            "data": [
                {
                    "japanese": [{"word": "猫"}, {"reading": "ねこ"}],
                    "senses": [{"english_definitions": ["cat"]}],
                }
            ]
        }
        provider = JishoDictionaryProvider(mock_transport_factory(lambda r: json_response(payload)))

        entry = await provider.lookup("猫")

        assert entry.readings == ["ねこ"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [301, 404, 429, 500, 503])
    async def test_non_success_status_raises(self, status, mock_transport_factory) -> None:
        """Should raise TransportError outside the 2xx range."""
        provider = JishoDictionaryProvider(
            mock_transport_factory(lambda request: json_response({"data": []}, status))
        )

        with pytest.raises(TransportError) as exc_info:
            await provider.lookup("猫")
        assert exc_info.value.status_code == status

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [b"<html>maintenance</html>", b'{"meta": {}}', b'{"data": "nope"}'],
    )
    async def test_malformed_payload_raises_decode_error(self, body, mock_transport_factory) -> None:
        """Should raise DecodeError for bodies that do not match the schema."""
        provider = JishoDictionaryProvider(
            mock_transport_factory(lambda request: httpx.Response(200, content=body))
        )

        with pytest.raises(DecodeError):
            await provider.lookup("猫")


class TestGoogleTranslateService:
    """Tests for GoogleTranslateService."""

    @pytest.mark.asyncio
    async def test_joins_translated_pieces(self, mock_transport_factory) -> None:
        """Should concatenate the first element of each segment."""
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen.update(dict(request.url.params))
            return json_response([[["고양이", "cat", None, None, 1]], None, "en"])

        service = GoogleTranslateService(mock_transport_factory(handler))

        assert await service.translate(" cat ", "en", "ko") == "고양이"
        assert seen == {"client": "gtx", "sl": "en", "tl": "ko", "dt": "t", "q": "cat"}

    @pytest.mark.asyncio
    async def test_blank_text_skips_request(self, mock_transport_factory) -> None:
        """Should return an empty string without a request."""
        calls = []
        service = GoogleTranslateService(
            mock_transport_factory(lambda request: calls.append(request) or json_response([]))
        )

        assert await service.translate("   ", "en", "ko") == ""
        assert calls == []

    @pytest.mark.asyncio
    async def test_unexpected_shape_returns_input(self, mock_transport_factory) -> None:
        """Should fall back to the input text for an unrecognised payload."""
        service = GoogleTranslateService(
            mock_transport_factory(lambda request: json_response({"unexpected": True}))
        )
        assert await service.translate("cat", "en", "ko") == "cat"

    @pytest.mark.asyncio
    async def test_bad_status_raises(self, mock_transport_factory) -> None:
        """Should raise TranslationError on a non-2xx status."""
        service = GoogleTranslateService(
            mock_transport_factory(lambda request: httpx.Response(429))
        )
        with pytest.raises(TranslationError):
            await service.translate("cat", "en", "ko")

    @pytest.mark.asyncio
    async def test_transport_failure_raises_translation_error(self, mock_transport_factory) -> None:
        """Should convert transport failures into TranslationError."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        service = GoogleTranslateService(mock_transport_factory(handler))
        with pytest.raises(TranslationError):
            await service.translate("cat", "en", "ko")

    @pytest.mark.asyncio
    async def test_translate_many_is_sequential_and_stops_on_error(
        self, mock_transport_factory
    ) -> None:
        """Should translate in order and stop at the first failure."""
        asked = []

        def handler(request: httpx.Request) -> httpx.Response:
            text = request.url.params["q"]
            asked.append(text)
            if text == "boom":
                return httpx.Response(500)
            return json_response([[[text.upper(), text]]])

        service = GoogleTranslateService(mock_transport_factory(handler))

        assert await service.translate_many(["a", "b"], "en", "ko") == ["A", "B"]
        with pytest.raises(TranslationError):
            await service.translate_many(["c", "boom", "d"], "en", "ko")
        assert asked == ["a", "b", "c", "boom"]


class TestOfflineProvider:
    """Tests for MockOfflineProvider."""

    def test_estimate_reading(self) -> None:
        """Should treat all-kana terms as their own reading."""
        assert estimate_reading("ねこ") == "ねこ"
        assert estimate_reading("ネコ") == "ネコ"
        assert estimate_reading("猫") is None
        assert estimate_reading("ねこ猫") is None
        assert estimate_reading("") is None

    def test_placeholder_is_deterministic(self) -> None:
        """Should build the same placeholder for the same term."""
        first = build_placeholder("猫")
        assert first == build_placeholder("猫")
        assert first.confidence == OFFLINE_CONFIDENCE
        assert len(first.meanings) == 2
        assert first.examples[0].source == "猫の例文です。"
        assert first.examples[0].target == "猫의 예문입니다."

    @pytest.mark.asyncio
    async def test_returns_cached_value_first(self, cache: TtlCache) -> None:
        """Should prefer a value another lookup already cached."""
        cached = LookupResult(reading="ねこ", meanings=("cat",), confidence=0.9)
        await cache.set("猫", cached)

        assert await MockOfflineProvider(cache).search("猫") is cached

    @pytest.mark.asyncio
    async def test_caches_placeholder(self, cache: TtlCache) -> None:
        """Should store the synthesized placeholder."""
        result = await MockOfflineProvider(cache).search("犬")
        assert await cache.get("犬") == result
