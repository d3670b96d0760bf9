"""
Speech playback

The gateway returns raw 16-bit little-endian mono PCM at 24kHz (or None).
PCM is decoded to float32 samples in [-1.0, 1.0] and played through the host
sound card; None means the fallback voice speaks the full text instead.

Only one playback may be in flight. A request that arrives while speaking is
dropped, not queued.
"""
import asyncio
import io
import logging
from typing import Optional

import numpy as np

from agrinexus.config import SPEECH_SAMPLE_RATE, FALLBACK_VOICE

logger = logging.getLogger(__name__)

SPEAK_TASK_LABEL = "Generating Audio Synthesis..."


def decode_pcm16(data: bytes) -> np.ndarray:
    """Little-endian int16 PCM -> float32 samples (int16 / 32768.0, clamped to [-1, 1])"""
    usable = len(data) - (len(data) % 2)
    if usable != len(data):
        logger.debug("Dropping trailing odd byte from PCM buffer")
    samples = np.frombuffer(data[:usable], dtype="<i2").astype(np.float32) / 32768.0
    return np.clip(samples, -1.0, 1.0)


# ============================================================================
# Output devices
# ============================================================================


class SoundDevicePlayer:
    """Plays float32 mono samples on the default output device"""

    async def play(self, samples: np.ndarray, sample_rate: int):
        await asyncio.to_thread(self._play_blocking, samples, sample_rate)

    @staticmethod
    def _play_blocking(samples: np.ndarray, sample_rate: int):
        import sounddevice
        sounddevice.play(samples, samplerate=sample_rate, blocking=True)


class EdgeTTSVoice:
    """Fallback voice: Edge-TTS MP3 decoded with pydub and played on the player"""

    def __init__(self, player, voice: str = FALLBACK_VOICE):
        self.player = player
        self.voice = voice

    async def speak(self, text: str):
        import edge_tts
        from pydub import AudioSegment

        communicate = edge_tts.Communicate(text, voice=self.voice)
        audio_data = io.BytesIO()
        async for chunk in communicate.stream():
            if chunk["type"] == "audio":
                audio_data.write(chunk["data"])

        audio = AudioSegment.from_mp3(io.BytesIO(audio_data.getvalue()))
        samples = np.array(audio.get_array_of_samples())
        if audio.channels == 2:
            samples = samples.reshape((-1, 2)).mean(axis=1)
        samples = samples.astype(np.float32) / 32768.0
        await self.player.play(samples, audio.frame_rate)


# ============================================================================
# Speaker
# ============================================================================


class Speaker:
    def __init__(self, gateway, player=None, fallback_voice=None, tracker=None,
                 sample_rate: int = SPEECH_SAMPLE_RATE):
        self.gateway = gateway
        self.player = player or SoundDevicePlayer()
        self.fallback_voice = fallback_voice or EdgeTTSVoice(self.player)
        self.tracker = tracker
        self.sample_rate = sample_rate
        self._speaking = False
        self._task: Optional[asyncio.Task] = None

    @property
    def is_speaking(self) -> bool:
        return self._speaking

    def request(self, text: str) -> bool:
        """
        Start speaking text in the background.

        Returns False (and does nothing) if a playback is already in flight.
        Must be called from the running event loop.
        """
        if self._speaking:
            logger.info("Playback already in progress, dropping speech request")
            return False

        self._speaking = True
        try:
            self._task = asyncio.get_running_loop().create_task(self._play(text))
        except Exception:
            self._speaking = False
            raise
        self._task.add_done_callback(self._release)
        return True

    async def speak(self, text: str) -> bool:
        """Speak text and wait for playback to finish; False if the request was dropped"""
        if not self.request(text):
            return False
        await asyncio.shield(self._task)
        return True

    def _release(self, task: asyncio.Task):
        # Runs once per task, on completion, error and cancellation alike
        self._speaking = False
        if task is self._task:
            self._task = None

    async def _play(self, text: str):
        if self.tracker:
            self.tracker.begin(SPEAK_TASK_LABEL)
        try:
            audio = await self.gateway.synthesize_speech(text)
            if audio:
                samples = decode_pcm16(audio)
                logger.info(f"Playing {len(samples) / self.sample_rate:.2f}s of synthesized speech")
                await self.player.play(samples, self.sample_rate)
            else:
                await self.fallback_voice.speak(text)
        except Exception as e:
            logger.error(f"Audio error: {e}", exc_info=True)
        finally:
            if self.tracker:
                self.tracker.end()
