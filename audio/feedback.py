"""
feedback.py — Audio Feedback Events
=====================================
The engine never makes sound.  It calls an AudioSink; the sink decides
what a cue means.

    AudioSink   – the interface the Run Controller talks to
    ToneEvent   – one oscillator note, in a shape the browser's Web
                  Audio code can play directly
    ToneQueue   – an AudioSink that turns cues into ToneEvents and
                  buffers them until the web layer drains them

Tone rules:
    frequency   = 220 + (value / max_value) * 660  Hz
    comparison  : sine,     100 ms, volume 0.10, one tone per index, 150 ms apart
    swap        : triangle, 150 ms, volume 0.15, one tone per index, 200 ms apart
    completion  : C4 E4 G4 C5 arpeggio, sine, 200 ms, volume 0.20, 150 ms apart

A cue touching fewer than two indices is ignored.
"""

from dataclasses import dataclass, asdict
from typing import Dict, List, Sequence


MIN_FREQUENCY   = 220.0
FREQUENCY_RANGE = 660.0
COMPLETION_NOTES = (261.63, 329.63, 392.00, 523.25)


# ---------------------------------------------------------------------------
# Sink interface
# ---------------------------------------------------------------------------
class AudioSink:
    """Fire-and-forget receiver of engine cues.  Default does nothing."""

    def on_comparison(self, values: Sequence[float], indices: Sequence[int], max_value: float) -> None:
        pass

    def on_swap(self, values: Sequence[float], indices: Sequence[int], max_value: float) -> None:
        pass

    def on_completion(self) -> None:
        pass


# ---------------------------------------------------------------------------
# ToneEvent
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class ToneEvent:
    frequency:   float          # Hz
    duration_ms: int
    volume:      float
    waveform:    str            # "sine" | "triangle"
    offset_ms:   int = 0        # delay from the moment the batch is played
    cue:         str = ""       # "comparison" | "swap" | "completion"

    def to_dict(self) -> Dict[str, object]:
        return asdict(self)


def tone_frequency(value: float, max_value: float) -> float:
    """Map a bar value onto 220–880 Hz."""
    if max_value <= 0:
        return MIN_FREQUENCY
    return MIN_FREQUENCY + (value / max_value) * FREQUENCY_RANGE


# ---------------------------------------------------------------------------
# ToneQueue
# ---------------------------------------------------------------------------
class ToneQueue(AudioSink):
    """
    Buffers ToneEvents between web-layer polls.

    Attributes:
        events : Pending events, oldest first.
        panel  : Which panel the queue belongs to ("left" / "right").
    """

    def __init__(self, panel: str = ""):
        self.events: List[ToneEvent] = []
        self.panel = panel

    def __repr__(self) -> str:
        return f"ToneQueue(panel={self.panel!r}, pending={len(self.events)})"

    def __len__(self) -> int:
        return len(self.events)

    # -- AudioSink --
    def on_comparison(self, values, indices, max_value) -> None:
        self._cue(values, indices, max_value,
                  cue="comparison", waveform="sine", duration_ms=100, volume=0.1, spacing_ms=150)

    def on_swap(self, values, indices, max_value) -> None:
        self._cue(values, indices, max_value,
                  cue="swap", waveform="triangle", duration_ms=150, volume=0.15, spacing_ms=200)

    def on_completion(self) -> None:
        for n, freq in enumerate(COMPLETION_NOTES):
            self.events.append(ToneEvent(
                frequency=freq, duration_ms=200, volume=0.2,
                waveform="sine", offset_ms=n * 150, cue="completion",
            ))

    # -- web layer --
    def drain(self) -> List[ToneEvent]:
        """Return and clear everything queued so far."""
        out, self.events = self.events, []
        return out

    def clear(self) -> None:
        self.events = []

    # -- internal --
    def _cue(self, values, indices, max_value, *, cue, waveform, duration_ms, volume, spacing_ms) -> None:
        if len(indices) < 2:
            return
        for n, idx in enumerate(indices):
            if not 0 <= idx < len(values):
                continue
            self.events.append(ToneEvent(
                frequency=round(tone_frequency(values[idx], max_value), 2),
                duration_ms=duration_ms,
                volume=volume,
                waveform=waveform,
                offset_ms=n * spacing_ms,
                cue=cue,
            ))
