"""Text-to-speech for podcast lines, via gTTS."""

from __future__ import annotations

import base64
import io

from gtts import gTTS, gTTSError

# Distinct accents so the two podcast hosts are easy to tell apart
SPEAKER_VOICES = {
    "Alex": ("en", "co.uk"),
}
DEFAULT_VOICE = ("en", "com")


class TTSError(Exception):
    pass


def voice_for(speaker: str | None) -> tuple[str, str]:
    """(lang, tld) pair for gTTS."""
    return SPEAKER_VOICES.get(speaker or "", DEFAULT_VOICE)


def synthesize(text: str, speaker: str | None = None) -> str:
    """Return the spoken text as a playable `data:audio/mp3;base64,...` URI."""
    lang, tld = voice_for(speaker)
    buf = io.BytesIO()
    try:
        gTTS(text=text, lang=lang, tld=tld, slow=False).write_to_fp(buf)
    except (gTTSError, AssertionError, ValueError) as exc:
        raise TTSError(str(exc)) from exc
    audio = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:audio/mp3;base64,{audio}"
