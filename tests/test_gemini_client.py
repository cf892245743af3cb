import unittest
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import gemini_client
from errors import ConfigurationError, GatewayError
from gemini_client import GeminiGateway, to_gemini_turns
from models import Message, Role


def _mock_genai(result=None, side_effect=None):
    genai = MagicMock()
    model = genai.GenerativeModel.return_value
    model.generate_content_async = AsyncMock(return_value=result, side_effect=side_effect)
    return genai, model


class TestHistoryMapping(unittest.TestCase):
    def test_error_messages_are_dropped_and_roles_mapped(self):
        history = [
            Message(role=Role.ASSISTANT, content="Benvenuto"),
            Message(role=Role.USER, content="domanda"),
            Message(role=Role.ASSISTANT, content="Mi dispiace...", is_error=True),
        ]
        self.assertEqual(
            to_gemini_turns(history),
            [
                {"role": "model", "parts": ["Benvenuto"]},
                {"role": "user", "parts": ["domanda"]},
            ],
        )


class TestGeminiGateway(unittest.IsolatedAsyncioTestCase):
    def test_missing_api_key_fails_at_construction(self):
        genai, _ = _mock_genai()
        with patch.object(gemini_client, "genai", genai), patch.object(gemini_client.Config, "GEMINI_API_KEY", ""):
            with self.assertRaises(ConfigurationError):
                GeminiGateway()
        genai.configure.assert_not_called()

    async def test_reply_uses_grounding_instruction_and_zero_temperature(self):
        genai, model = _mock_genai(result=SimpleNamespace(text="Ferie: 20 giorni [Fonte: policy.txt]"))
        with patch.object(gemini_client, "genai", genai):
            gateway = GeminiGateway(api_key="k", model_name="gemini-test")
            history = [
                Message(role=Role.USER, content="prima"),
                Message(role=Role.ASSISTANT, content="errore", is_error=True),
            ]
            reply = await gateway.generate_reply("Quanti giorni di ferie?", "CONTESTO-XYZ", history)

        self.assertEqual(reply, "Ferie: 20 giorni [Fonte: policy.txt]")
        genai.configure.assert_called_once_with(api_key="k")
        args, kwargs = genai.GenerativeModel.call_args
        self.assertEqual(args[0], "gemini-test")
        self.assertIn("CONTESTO-XYZ", kwargs["system_instruction"])
        genai.types.GenerationConfig.assert_called_once_with(temperature=0.0)
        contents = model.generate_content_async.call_args.args[0]
        self.assertEqual(
            contents,
            [
                {"role": "user", "parts": ["prima"]},
                {"role": "user", "parts": ["Quanti giorni di ferie?"]},
            ],
        )

    async def test_backend_failure_becomes_gateway_error(self):
        genai, _ = _mock_genai(side_effect=RuntimeError("403 permission denied"))
        with patch.object(gemini_client, "genai", genai):
            gateway = GeminiGateway(api_key="k")
            with self.assertRaises(GatewayError):
                await gateway.generate_reply("ciao", "ctx", [])

    async def test_empty_text_becomes_gateway_error(self):
        genai, _ = _mock_genai(result=SimpleNamespace(text="   "))
        with patch.object(gemini_client, "genai", genai):
            gateway = GeminiGateway(api_key="k")
            with self.assertRaises(GatewayError):
                await gateway.generate_reply("ciao", "ctx", [])


if __name__ == "__main__":
    unittest.main()
