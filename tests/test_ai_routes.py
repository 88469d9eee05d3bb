"""Route tests for the legacy /api/ai/* endpoints."""

from __future__ import annotations

import json
from unittest.mock import patch
from xml.etree.ElementTree import ParseError

import pytest

from ai_resilience import ProviderAuthError, ProviderError
from llm_client import AllProvidersFailedError
from tts import TTSError


def _post(client, url, payload):
    return client.post(url, data=json.dumps(payload), content_type="application/json")


class TestGroqPassThrough:
    def test_openai_shaped_reply(self, client, fake_llm):
        fake_llm.reply("Hello!", provider="groq", model="llama-3.3-70b-versatile")
        resp = _post(client, "/api/ai/groq", {
            "messages": [{"role": "user", "content": "Hi"}],
            "temperature": 0.2,
        })
        assert resp.status_code == 200
        data = resp.get_json()
        assert data["choices"][0]["message"]["content"] == "Hello!"
        assert data["provider"] == "groq"
        assert data["model"] == "llama-3.3-70b-versatile"
        assert fake_llm.chat.call_args.kwargs["temperature"] == 0.2

    def test_validation_error(self, client, fake_llm):
        resp = _post(client, "/api/ai/groq", {"messages": [{"role": "robot", "content": "Hi"}]})
        assert resp.status_code == 400
        data = resp.get_json()
        assert data["error"] == "Validation Error"
        assert data["details"][0]["path"] == "messages.0.role"
        fake_llm.chat.assert_not_called()

    def test_both_providers_fail(self, client, fake_llm):
        fake_llm.fail(AllProvidersFailedError(ProviderError("g"), ProviderError("m")))
        resp = _post(client, "/api/ai/groq", {"messages": [{"role": "user", "content": "Hi"}]})
        assert resp.status_code == 500
        data = resp.get_json()
        assert data["error"] == "AI Service Error"
        assert "Both Groq and Gemini" in data["details"]


class TestGeminiPassThrough:
    def test_gemini_shaped_reply(self, client, fake_llm):
        fake_llm.reply("Bonjour", provider="gemini", model="gemini-2.0-flash")
        resp = _post(client, "/api/ai/gemini", {"messages": [
            {"role": "system", "content": "Be kind"},
            {"role": "user", "content": "Hi"},
        ]})
        assert resp.status_code == 200
        assert resp.get_json()["candidates"][0]["content"]["parts"][0]["text"] == "Bonjour"
        sent = fake_llm.gemini.call_args.args[0]
        assert sent == [{"role": "user", "content": "system: Be kind\nuser: Hi"}]

    def test_missing_key(self, client, fake_llm):
        fake_llm.fail(ProviderAuthError("GEMINI_API_KEY is not configured"))
        resp = _post(client, "/api/ai/gemini", {"messages": [{"role": "user", "content": "Hi"}]})
        assert resp.status_code == 500
        assert "GEMINI_API_KEY" in resp.get_json()["error"]


class TestLegacyPodcast:
    def test_object_script(self, client, fake_llm):
        fake_llm.reply('{"script": [{"speaker": "Alex", "text": "Hi"}]}')
        resp = _post(client, "/api/ai/podcast", {"mode": "syllabus", "syllabus": {"topic": "Atoms"}})
        data = resp.get_json()
        assert data == {"script": [{"speaker": "Alex", "text": "Hi"}], "provider": "atlas-hybrid"}
        assert "Topic: Atoms." in fake_llm.complete.call_args.args[0]

    def test_array_inside_prose(self, client, fake_llm):
        fake_llm.reply('Here it is:\n[{"speaker": "Sam", "text": "Yo"}]\nEnjoy')
        resp = _post(client, "/api/ai/podcast", {"content": "Cells"})
        assert resp.get_json()["script"] == [{"speaker": "Sam", "text": "Yo"}]
        assert "Topic: Cells." in fake_llm.complete.call_args.args[0]

    def test_raw_text_becomes_single_line(self, client, fake_llm):
        fake_llm.reply("Just talking.")
        resp = _post(client, "/api/ai/podcast", {"content": "Cells"})
        assert resp.get_json()["script"] == [{"speaker": "Sam", "text": "Just talking."}]


class TestYouTubeTranscript:
    @patch("blueprints.ai.fetch_transcript")
    def test_transcript_found(self, mock_fetch, client):
        mock_fetch.return_value = "a long enough transcript " * 5
        resp = _post(client, "/api/ai/youtube-transcript", {"videoUrl": "https://youtu.be/dQw4w9WgXcQ"})
        data = resp.get_json()
        assert data["videoId"] == "dQw4w9WgXcQ"
        assert data["noTranscript"] is False
        mock_fetch.assert_called_once_with("dQw4w9WgXcQ")

    @patch("blueprints.ai.fetch_transcript")
    def test_placeholder_body(self, mock_fetch, client):
        mock_fetch.return_value = ""
        resp = _post(client, "/api/ai/youtube-transcript", {"videoId": "dQw4w9WgXcQ"})
        data = resp.get_json()
        assert data["noTranscript"] is True
        assert data["transcript"] is None
        assert data["title"] == "YouTube Video"

    @patch("youtube.YouTubeTranscriptApi")
    def test_malformed_captions_give_placeholder(self, mock_api, client):
        listing = mock_api.return_value.list.return_value
        listing.find_transcript.return_value.fetch.side_effect = ParseError("no element found")
        resp = _post(client, "/api/ai/youtube-transcript", {"videoId": "dQw4w9WgXcQ"})
        assert resp.status_code == 200
        assert resp.get_json()["noTranscript"] is True

    def test_missing_video(self, client):
        resp = _post(client, "/api/ai/youtube-transcript", {})
        assert resp.status_code == 400


class TestGeneratePaper:
    def test_requires_content(self, client, fake_llm):
        resp = _post(client, "/api/ai/generate-paper", {"images": []})
        assert resp.status_code == 400

    def test_uses_vision_model(self, client, fake_llm):
        fake_llm.reply("# Physics Paper")
        images = [f"data:image/jpeg;base64,{i}" for i in range(8)]
        resp = _post(client, "/api/ai/generate-paper", {"extractedText": "Q1", "images": images})
        assert resp.get_json() == {"success": True, "paper": "# Physics Paper"}
        content = fake_llm.vision.call_args.args[0][0]["content"]
        assert sum(1 for part in content if part["type"] == "image_url") == 5

    def test_failure(self, client, fake_llm):
        fake_llm.fail(ProviderError("vision down"))
        resp = _post(client, "/api/ai/generate-paper", {"extractedText": "Q1"})
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "Failed to generate paper"


class TestTTSRoute:
    def test_requires_text(self, client):
        resp = _post(client, "/api/ai/tts", {"speaker": "Alex"})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Text is required"

    def test_text_too_long(self, app, client):
        app.config["TTS_MAX_CHARS"] = 10
        resp = _post(client, "/api/ai/tts", {"text": "x" * 11})
        assert resp.status_code == 400
        assert resp.get_json()["error"] == "Text too long for TTS chunk"

    @patch("blueprints.ai.synthesize")
    def test_audio_returned(self, mock_synth, client):
        mock_synth.return_value = "data:audio/mp3;base64,AAAA"
        resp = _post(client, "/api/ai/tts", {"text": "Hello", "speaker": "Sam"})
        assert resp.get_json() == {"audioData": "data:audio/mp3;base64,AAAA", "speaker": "Sam"}
        mock_synth.assert_called_once_with("Hello", "Sam")

    @patch("blueprints.ai.synthesize")
    def test_failure(self, mock_synth, client):
        mock_synth.side_effect = TTSError("blocked")
        resp = _post(client, "/api/ai/tts", {"text": "Hello"})
        assert resp.status_code == 500
        assert resp.get_json()["error"] == "TTS Generation Failed"


class TestRetrievalRoutes:
    def test_concept_gate_parsed(self, client, fake_llm):
        reply = {"conceptArea": "Optics", "hint": "Look at angles", "microQuiz": "?", "confidenceScore": 0.9, "citations": []}
        fake_llm.reply(json.dumps(reply))
        resp = _post(client, "/api/ai/concept-gate", {
            "question": "Why does light bend in water?",
            "documentContent": "Refraction: light bends when entering water.",
        })
        assert resp.get_json() == reply
        assert "Refraction" in fake_llm.complete.call_args.args[0]

    def test_concept_gate_raw_hint(self, client, fake_llm):
        fake_llm.reply("Think about speed changes.")
        resp = _post(client, "/api/ai/concept-gate", {"question": "Why?"})
        assert resp.get_json()["hint"] == "Think about speed changes."

    def test_concept_gate_requires_question(self, client, fake_llm):
        assert _post(client, "/api/ai/concept-gate", {}).status_code == 400

    def test_rag_quiz(self, client, fake_llm):
        fake_llm.reply('Quiz:\n{"quiz_metadata": {"topic": "Cells"}, "questions": [{"id": 1}]}')
        resp = _post(client, "/api/ai/rag-quiz", {"documentContent": "Cells are units of life.", "count": 3})
        data = resp.get_json()
        assert data["quiz_metadata"]["topic"] == "Cells"
        prompt = fake_llm.complete.call_args.args[0]
        assert "- Questions: 3" in prompt
        assert "- Difficulty: medium" in prompt

    def test_rag_quiz_requires_document(self, client, fake_llm):
        assert _post(client, "/api/ai/rag-quiz", {"topic": "x"}).status_code == 400

    def test_remedial_report(self, client, fake_llm):
        fake_llm.reply("## Performance\nNeeds work")
        resp = _post(client, "/api/ai/remedial", {"results": {"score_percentage": 40, "wrong_answers": []}})
        assert resp.get_json() == {"report": "## Performance\nNeeds work"}

    @pytest.mark.parametrize("url, payload, field", [
        ("/api/ai/concept-gate", {"question": "Why?", "documentContent": {"page": 1}}, "documentContent"),
        ("/api/ai/rag-quiz", {"documentContent": ["Cells"]}, "documentContent"),
        ("/api/ai/rag-quiz", {"documentContent": "Cells", "topic": 7}, "topic"),
        ("/api/ai/remedial", {"results": {"score_percentage": 40}, "documentContent": 5}, "documentContent"),
        ("/api/ai/podcast", {"content": {"topic": "Waves"}}, "content"),
        ("/api/ai/generate-paper", {"extractedText": ["page one"]}, "extractedText"),
        ("/api/ai/youtube-transcript", {"videoUrl": {"url": "x"}}, "videoUrl"),
    ])
    def test_wrong_field_type_is_400(self, client, fake_llm, url, payload, field):
        resp = _post(client, url, payload)
        assert resp.status_code == 400
        assert resp.get_json()["error"] == f"{field} must be a string"
        fake_llm.complete.assert_not_called()
        fake_llm.vision.assert_not_called()
