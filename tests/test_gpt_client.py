import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai

from generation import gpt_client
from generation.errors import CompletionError

MESSAGES = [{"role": "user", "content": "hi"}]


def _completion(content):
    return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])


def _status_error(status, body):
    request = httpx.Request("POST", "https://openrouter.ai/api/v1/chat/completions")
    response = httpx.Response(status, request=request)
    return openai.APIStatusError("provider said no", response=response, body=body)


class TestGptClient(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        self.client = MagicMock()
        self.client.chat.completions.create = AsyncMock(return_value=_completion('{"questions": []}'))
        patcher = patch.object(gpt_client, "_get_client", return_value=self.client)
        patcher.start()
        self.addCleanup(patcher.stop)

    async def test_json_mode_requests_json_object(self):
        raw = await gpt_client.call_gpt_json(MESSAGES, model="m", temperature=0.3)
        self.assertEqual(raw, '{"questions": []}')
        self.client.chat.completions.create.assert_awaited_once_with(
            model="m",
            messages=MESSAGES,
            temperature=0.3,
            response_format={"type": "json_object"},
        )

    async def test_text_mode_has_no_response_format(self):
        await gpt_client.call_gpt_text(MESSAGES)
        kwargs = self.client.chat.completions.create.await_args.kwargs
        self.assertNotIn("response_format", kwargs)
        self.assertEqual(kwargs["model"], gpt_client.GPT_MODEL)
        self.assertEqual(kwargs["temperature"], 0.2)

    async def test_empty_content_returns_empty_string(self):
        self.client.chat.completions.create.return_value = _completion(None)
        self.assertEqual(await gpt_client.call_gpt_text(MESSAGES), "")
        self.client.chat.completions.create.return_value = SimpleNamespace(choices=[])
        self.assertEqual(await gpt_client.call_gpt_json(MESSAGES), "")

    async def test_json_mode_error_carries_code_and_message(self):
        self.client.chat.completions.create.side_effect = _status_error(
            402, {"message": "Insufficient credits", "code": 402}
        )
        with self.assertRaises(CompletionError) as ctx:
            await gpt_client.call_gpt_json(MESSAGES)
        self.assertEqual(str(ctx.exception), "OpenRouter failed (402): Insufficient credits")

    async def test_json_mode_error_falls_back_to_http_status(self):
        self.client.chat.completions.create.side_effect = _status_error(503, {"message": "Overloaded"})
        with self.assertRaises(CompletionError) as ctx:
            await gpt_client.call_gpt_json(MESSAGES)
        self.assertEqual(str(ctx.exception), "OpenRouter failed (503): Overloaded")

    async def test_text_mode_error_carries_provider_message(self):
        self.client.chat.completions.create.side_effect = _status_error(401, {"message": "No auth credentials found"})
        with self.assertRaises(CompletionError) as ctx:
            await gpt_client.call_gpt_text(MESSAGES)
        self.assertEqual(str(ctx.exception), "No auth credentials found")


class TestClientSetup(unittest.TestCase):
    def tearDown(self):
        gpt_client._client = None

    def test_missing_api_key_fails_at_call_time(self):
        gpt_client._client = None
        with patch.dict("os.environ", {}, clear=True):
            with self.assertRaises(CompletionError):
                gpt_client._get_client()

    def test_client_points_at_openrouter(self):
        gpt_client._client = None
        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "sk-test"}):
            client = gpt_client._get_client()
        self.assertIsInstance(client, openai.AsyncOpenAI)
        self.assertEqual(str(client.base_url).rstrip("/"), gpt_client.OPENROUTER_BASE_URL.rstrip("/"))
        self.assertIs(gpt_client._get_client(), client)


class TestProviderFailures(unittest.IsolatedAsyncioTestCase):
    def setUp(self):
        gpt_client._client = None
        self.addCleanup(setattr, gpt_client, "_client", None)

    async def test_server_error_is_not_retried(self):
        requests = []

        def handler(request):
            requests.append(request)
            return httpx.Response(500, json={"error": {"message": "upstream down"}})

        with patch.dict("os.environ", {"OPENROUTER_API_KEY": "sk-test"}):
            client = gpt_client._get_client()
        self.assertEqual(client.max_retries, 0)

        http_client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        self.addAsyncCleanup(http_client.aclose)
        gpt_client._client = client.with_options(http_client=http_client)

        with self.assertRaises(CompletionError) as ctx:
            await gpt_client.call_gpt_json(MESSAGES)
        self.assertEqual(str(ctx.exception), "OpenRouter failed (500): upstream down")
        self.assertEqual(len(requests), 1)
        self.assertTrue(str(requests[0].url).endswith("/chat/completions"))


if __name__ == "__main__":
    unittest.main()
