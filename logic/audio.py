"""logic/audio.py — Named-sound sink.

The simulation only ever asks for a sound by name (via ``SoundRequest``
on the event bus).  Each name is a short synthesized retro blip built
once at start-up; a ``data/sounds/<name>.wav`` file, when present,
replaces the built-in one.  No mixer or no audio device means silence,
never an exception.

    name       voice
    currency   square 800 Hz, 0.1 s
    heart      sine 600 Hz, 0.2 s
    key        three sine notes 800/1000/1200 Hz, 50 ms apart
    slash      white noise, 0.1 s, quiet
    hit        sawtooth 200 Hz, 0.15 s
    hurt       triangle 150 Hz, 0.3 s
    death      sawtooth sweep 400 → 100 Hz, 0.4 s
"""

from __future__ import annotations
import math
import random
from array import array
from dataclasses import dataclass
from pathlib import Path

import pygame

from core.events import EventBus, SoundRequest

_DEFAULT_DIR = Path(__file__).resolve().parent.parent / "data" / "sounds"


# ── Synthesis ───────────────────────────────────────────────────────

@dataclass(frozen=True)
class Voice:
    wave: str                  # sine | square | saw | triangle | noise
    freq: float = 440.0        # Hz at the start
    end_freq: float | None = None   # Hz at the end (exponential sweep)
    duration: float = 0.1      # s
    volume: float = 0.5
    delay: float = 0.0         # s from the start of the sound


VOICES: dict[str, tuple[Voice, ...]] = {
    "currency": (Voice("square", 800.0, duration=0.1),),
    "heart":    (Voice("sine", 600.0, duration=0.2),),
    "key":      tuple(Voice("sine", f, duration=0.16, delay=i * 0.05)
                      for i, f in enumerate((800.0, 1000.0, 1200.0))),
    "slash":    (Voice("noise", duration=0.1, volume=0.15),),
    "hit":      (Voice("saw", 200.0, duration=0.15),),
    "hurt":     (Voice("triangle", 150.0, duration=0.3),),
    "death":    (Voice("saw", 400.0, end_freq=100.0, duration=0.4),),
}

SOUND_NAMES = tuple(VOICES)


def _oscillator(wave: str, phase: float, rng) -> float:
    frac = phase % 1.0
    if wave == "sine":
        return math.sin(2.0 * math.pi * phase)
    if wave == "square":
        return 1.0 if frac < 0.5 else -1.0
    if wave == "saw":
        return 2.0 * frac - 1.0
    if wave == "triangle":
        return 4.0 * abs(frac - 0.5) - 1.0
    if wave == "noise":
        return rng.uniform(-1.0, 1.0)
    raise ValueError(f"unknown wave {wave!r}")


def synth_samples(voices: tuple[Voice, ...], rate: int,
                  rng=random) -> list[float]:
    """Mix *voices* into mono samples in -1..1 at *rate* Hz.

    Every voice decays exponentially from its volume to 1% of full
    scale over its duration.
    """
    total = max(v.delay + v.duration for v in voices)
    out = [0.0] * int(total * rate)
    for v in voices:
        start = int(v.delay * rate)
        n = min(int(v.duration * rate), len(out) - start)
        f1 = v.end_freq or v.freq
        phase = 0.0
        for i in range(n):
            t = i / (n - 1) if n > 1 else 0.0
            freq = v.freq * (f1 / v.freq) ** t if v.freq > 0 else 0.0
            gain = v.volume * (0.01 / v.volume) ** t
            out[start + i] += gain * _oscillator(v.wave, phase, rng)
            phase += freq / rate
    return [max(-1.0, min(1.0, s)) for s in out]


def pcm16(samples: list[float], channels: int = 1) -> bytes:
    """Signed 16-bit native-endian PCM, each sample repeated per channel."""
    return array("h", (int(s * 32767) for s in samples
                       for _ in range(channels))).tobytes()


# ── Sink ────────────────────────────────────────────────────────────

class AudioSink:
    def __init__(self, sound_dir: str | Path | None = None,
                 enabled: bool = True, rng=random):
        self.enabled = False
        self._sounds: dict[str, pygame.mixer.Sound] = {}
        # name → "file" or "synth"
        self.sources: dict[str, str] = {}
        # Most recent requested names, played or not (newest last)
        self.requests: list[str] = []
        if not enabled:
            return
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
        except pygame.error as exc:
            print(f"[AUDIO] mixer unavailable ({exc}), sound disabled")
            return
        self.enabled = True
        self._load(Path(sound_dir) if sound_dir else _DEFAULT_DIR, rng)

    def _load(self, sound_dir: Path, rng):
        rate, fmt, channels = pygame.mixer.get_init()
        for name in SOUND_NAMES:
            path = sound_dir / f"{name}.wav"
            if path.exists():
                try:
                    self._sounds[name] = pygame.mixer.Sound(str(path))
                    self.sources[name] = "file"
                    continue
                except pygame.error as exc:
                    print(f"[AUDIO] could not load {path.name}: {exc}")
            if fmt != -16:
                continue
            pcm = pcm16(synth_samples(VOICES[name], rate, rng), channels)
            self._sounds[name] = pygame.mixer.Sound(buffer=pcm)
            self.sources[name] = "synth"
        if fmt != -16:
            print(f"[AUDIO] mixer format {fmt} is not 16-bit, "
                  f"only file sounds are available")
        files = sum(1 for s in self.sources.values() if s == "file")
        print(f"[AUDIO] {len(self._sounds)}/{len(SOUND_NAMES)} sounds ready "
              f"({files} from {sound_dir.name}/)")

    def loaded(self) -> list[str]:
        return list(self._sounds)

    def attach(self, bus: EventBus):
        bus.subscribe("SoundRequest", self.on_request)

    def on_request(self, req: SoundRequest):
        self.play(req.name)

    def play(self, name: str):
        self.requests.append(name)
        if len(self.requests) > 32:
            del self.requests[:-32]
        if not self.enabled:
            return
        snd = self._sounds.get(name)
        if snd is None:
            return
        try:
            snd.play()
        except pygame.error as exc:
            print(f"[AUDIO] play {name} failed: {exc}")
