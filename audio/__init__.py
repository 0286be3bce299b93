"""
audio/
------
Sound cue layer.  The engine emits cues, the browser synthesizes tones.

    from audio import AudioSink, ToneQueue
"""

from audio.feedback import AudioSink, ToneEvent, ToneQueue, tone_frequency

__all__ = [
    "AudioSink",
    "ToneEvent",
    "ToneQueue",
    "tone_frequency",
]
