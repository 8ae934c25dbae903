import httpx
import pytest

from taskmanager.services.gemini import (
    API_BASE,
    GeminiClient,
    GeminiError,
    load_json_array,
    load_json_object,
)


def text_payload(text: str) -> dict:
    return {"candidates": [{"content": {"parts": [{"text": text}]}}]}


class FakeResponse:
    def __init__(self, payload: dict, status_code: int = 200) -> None:
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            request = httpx.Request("POST", API_BASE)
            raise httpx.HTTPStatusError(
                "server error",
                request=request,
                response=httpx.Response(self.status_code, request=request),
            )

    def json(self) -> dict:
        return self._payload


class FakeClient:
    def __init__(self, payload: dict, status_code: int = 200, error: Exception | None = None) -> None:
        self.payload = payload
        self.status_code = status_code
        self.error = error
        self.requests: list[tuple[str, dict, dict]] = []

    def post(self, url: str, params: dict, json: dict) -> FakeResponse:
        self.requests.append((url, params, json))
        if self.error:
            raise self.error
        return FakeResponse(self.payload, self.status_code)


def make_client(fake: FakeClient, api_key: str = "test-key") -> GeminiClient:
    return GeminiClient(api_key=api_key, model="gemini-test", client=fake, timeout=5.0)


def test_generate_returns_first_text_part():
    fake = FakeClient(text_payload("hello"))
    assert make_client(fake).generate("Say hello") == "hello"


def test_generate_request_shape():
    fake = FakeClient(text_payload("ok"))
    make_client(fake).generate("Split these tasks", temperature=0.7, max_output_tokens=200)

    url, params, body = fake.requests[0]
    assert url == f"{API_BASE}/gemini-test:generateContent"
    assert params == {"key": "test-key"}
    assert body["contents"] == [{"role": "user", "parts": [{"text": "Split these tasks"}]}]
    assert body["generationConfig"] == {"temperature": 0.7, "maxOutputTokens": 200}


def test_json_mode_sets_mime_type():
    fake = FakeClient(text_payload("[]"))
    make_client(fake).generate("prompt", json_mode=True)

    _, _, body = fake.requests[0]
    assert body["generationConfig"]["response_mime_type"] == "application/json"


def test_generate_without_key_raises():
    fake = FakeClient(text_payload("unused"))
    client = make_client(fake, api_key="")

    assert client.is_configured is False
    with pytest.raises(GeminiError):
        client.generate("prompt")
    assert fake.requests == []


def test_no_candidates_raises():
    with pytest.raises(GeminiError, match="candidates"):
        make_client(FakeClient({"candidates": []})).generate("prompt")


def test_empty_parts_raise():
    payload = {"candidates": [{"content": {"parts": [{"text": ""}]}}]}
    with pytest.raises(GeminiError, match="No text"):
        make_client(FakeClient(payload)).generate("prompt")


def test_http_status_error_is_wrapped():
    fake = FakeClient({}, status_code=503)
    with pytest.raises(GeminiError) as excinfo:
        make_client(fake).generate("prompt")
    assert isinstance(excinfo.value.__cause__, httpx.HTTPStatusError)


def test_connection_error_is_wrapped():
    fake = FakeClient({}, error=httpx.ConnectError("refused"))
    with pytest.raises(GeminiError, match="request failed"):
        make_client(fake).generate("prompt")


def test_borrowed_client_is_not_closed():
    fake = FakeClient(text_payload("ok"))
    client = make_client(fake)
    client.close()
    assert client.generate("still open") == "ok"


class TestLoadJsonArray:
    def test_plain_array(self):
        assert load_json_array('[{"name": "a"}]') == [{"name": "a"}]

    def test_array_inside_code_fence(self):
        text = '```json\n[{"name": "a"}, {"name": "b"}]\n```'
        assert load_json_array(text) == [{"name": "a"}, {"name": "b"}]

    def test_empty_array(self):
        assert load_json_array("[]") == []

    def test_no_array_raises(self):
        with pytest.raises(GeminiError):
            load_json_array("nothing to see here")

    def test_object_is_not_an_array(self):
        with pytest.raises(GeminiError):
            load_json_array('{"name": "a"}')

    def test_malformed_array_raises(self):
        with pytest.raises(GeminiError, match="Malformed"):
            load_json_array('Result: [{"name": "a",}]')


class TestLoadJsonObject:
    def test_plain_object(self):
        assert load_json_object('{"enhancedTitle": "x"}') == {"enhancedTitle": "x"}

    def test_object_inside_prose(self):
        assert load_json_object('Sure: {"description": "y"} done') == {"description": "y"}

    def test_missing_object(self):
        assert load_json_object("no braces") is None

    def test_array_is_not_an_object(self):
        assert load_json_object("[1, 2]") is None
