"""
Tone synthesis with numpy.

A ToneSpec describes one oscillator: waveform, start frequency, optional
exponential frequency ramp or stepped frequency changes, and an exponential
gain decay from `volume` to `end_gain` over the tone's duration.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np

SAMPLE_RATE = 22050


class Wave(str, Enum):
    sine = "sine"
    square = "square"
    sawtooth = "sawtooth"
    triangle = "triangle"


@dataclass(frozen=True)
class ToneSpec:
    frequency: float
    duration: float
    volume: float
    wave: Wave = Wave.square
    end_frequency: Optional[float] = None
    ramp_time: Optional[float] = None
    # (offset in seconds, frequency) pairs applied as hard steps
    steps: Tuple[Tuple[float, float], ...] = ()
    end_gain: float = 0.01


def _frequency_curve(spec: ToneSpec, t: np.ndarray) -> np.ndarray:
    freq = np.full_like(t, spec.frequency)
    if spec.end_frequency is not None and spec.frequency > 0:
        ramp = spec.ramp_time or spec.duration
        progress = np.clip(t / ramp, 0.0, 1.0)
        freq = spec.frequency * (spec.end_frequency / spec.frequency) ** progress
    for offset, value in spec.steps:
        freq[t >= offset] = value
    return freq


def _oscillate(wave: Wave, phase: np.ndarray) -> np.ndarray:
    if wave is Wave.sine:
        return np.sin(phase)
    if wave is Wave.square:
        return np.where(np.sin(phase) >= 0, 1.0, -1.0)
    saw = 2.0 * ((phase / (2 * np.pi)) % 1.0) - 1.0
    if wave is Wave.sawtooth:
        return saw
    return 2.0 * np.abs(saw) - 1.0


def render(spec: ToneSpec, sample_rate: int = SAMPLE_RATE) -> np.ndarray:
    """Render `spec` to float samples in [-1, 1]."""
    count = max(int(spec.duration * sample_rate), 1)
    t = np.arange(count) / sample_rate
    freq = _frequency_curve(spec, t)
    phase = 2 * np.pi * np.cumsum(freq) / sample_rate
    samples = _oscillate(spec.wave, phase)

    if spec.volume <= 0:
        return np.zeros(count)
    ratio = min(spec.end_gain / spec.volume, 1.0)
    gain = spec.volume * ratio ** (t / spec.duration)
    return samples * gain


def to_pcm(samples: np.ndarray, channels: int = 2) -> np.ndarray:
    """Convert float samples to a C-contiguous int16 array with one column per channel."""
    data = (np.clip(samples, -1.0, 1.0) * (2**15 - 1)).astype(np.int16)
    if channels == 1:
        return np.ascontiguousarray(data)
    return np.ascontiguousarray(np.column_stack([data] * channels))
