import httpx
import pytest

from verikit.core.exceptions import MalformedBody, StatusMismatch, TimedOut
from verikit.services.auth import NoTokenProvider, ProviderContext, StaticTokenProvider
from verikit.services.http_assert import NO_BODY_STATUSES, AuthenticatedHttpAsserter, get_response

pytestmark = pytest.mark.unit

URL = "http://spog.test/api/v1/sbom?id=create-1"


class _Recorder:
    def __init__(self, status: int, **response_kwargs: object) -> None:
        self.status = status
        self.response_kwargs = response_kwargs
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, **self.response_kwargs)  # type: ignore[arg-type]

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)


def _asserter(recorder: _Recorder, token: str | None = "tok-123") -> AuthenticatedHttpAsserter:
    provider = StaticTokenProvider(token) if token is not None else NoTokenProvider()
    return AuthenticatedHttpAsserter(provider, transport=recorder.transport)


@pytest.mark.asyncio
async def test_returns_parsed_json_and_injects_bearer_token() -> None:
    recorder = _Recorder(200, json={"id": "create-1", "packages": [1, 2]})

    body = await _asserter(recorder).get(URL, 200)

    assert body == {"id": "create-1", "packages": [1, 2]}
    request = recorder.requests[0]
    assert request.method == "GET"
    assert str(request.url) == URL
    assert request.headers["Authorization"] == "Bearer tok-123"


@pytest.mark.asyncio
async def test_no_token_sends_no_authorization_header() -> None:
    recorder = _Recorder(200, json=[])

    assert await _asserter(recorder, token=None).get(URL, 200) == []
    assert "Authorization" not in recorder.requests[0].headers


@pytest.mark.asyncio
@pytest.mark.parametrize("status", [400, 404])
async def test_no_body_statuses_return_none_even_with_json(status: int) -> None:
    recorder = _Recorder(status, json={"error": "details the server sent anyway"})

    assert await _asserter(recorder).get(URL, status) is None


@pytest.mark.asyncio
async def test_non_json_body_is_malformed() -> None:
    recorder = _Recorder(200, text="<html>gateway error</html>")

    with pytest.raises(MalformedBody) as exc_info:
        await _asserter(recorder).get(URL, 200)

    assert exc_info.value.url == URL
    assert isinstance(exc_info.value, AssertionError)


@pytest.mark.asyncio
async def test_empty_body_with_expected_success_is_malformed() -> None:
    recorder = _Recorder(201)

    with pytest.raises(MalformedBody):
        await _asserter(recorder).get(URL, 201)


@pytest.mark.asyncio
async def test_status_mismatch_reports_both_codes() -> None:
    recorder = _Recorder(404, json={"error": "not found"})

    with pytest.raises(StatusMismatch) as exc_info:
        await _asserter(recorder).get(URL, 200)

    err = exc_info.value
    assert (err.expected, err.actual) == (200, 404)
    assert "expected 200, got 404" in str(err)


@pytest.mark.asyncio
async def test_mismatch_is_checked_before_body() -> None:
    recorder = _Recorder(500, text="not json")

    with pytest.raises(StatusMismatch):
        await _asserter(recorder).get(URL, 404)


@pytest.mark.asyncio
async def test_each_call_is_a_fresh_request() -> None:
    recorder = _Recorder(200, json={"ok": True})
    asserter = _asserter(recorder)

    await asserter.get(URL, 200)
    await asserter.get(URL, 200)

    assert len(recorder.requests) == 2


@pytest.mark.asyncio
async def test_accepts_httpx_url_and_status_codes() -> None:
    recorder = _Recorder(200, json={"ok": True})

    body = await _asserter(recorder).get(httpx.URL(URL), httpx.codes.OK)

    assert body == {"ok": True}


@pytest.mark.asyncio
async def test_get_response_authenticates_as_manager() -> None:
    recorder = _Recorder(200, json={"ok": True})
    context = ProviderContext(
        provider_user=StaticTokenProvider("user-token"),
        provider_manager=StaticTokenProvider("manager-token"),
    )

    body = await get_response(URL, 200, context, transport=recorder.transport)

    assert body == {"ok": True}
    assert recorder.requests[0].headers["Authorization"] == "Bearer manager-token"


def test_no_body_family() -> None:
    assert NO_BODY_STATUSES == {400, 404}


@pytest.mark.asyncio
async def test_slow_server_is_reported_as_timed_out() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("slow", request=request)

    asserter = AuthenticatedHttpAsserter(NoTokenProvider(), timeout=0.5, transport=httpx.MockTransport(handler))

    with pytest.raises(TimedOut) as exc_info:
        await asserter.get(URL, 200)

    assert exc_info.value.timeout == 0.5
    assert isinstance(exc_info.value, AssertionError)
    assert isinstance(exc_info.value.__cause__, httpx.ReadTimeout)
