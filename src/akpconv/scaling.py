# Copyright (c) 2025 bakajikara
#
# This file is licensed under the MIT License (MIT).
# See the LICENSE file in the project root for the full license text.

"""
Parameter scaling - raw AKP parameter values to musical units.

Both generators convert through these functions and print through
format_value(), which is what keeps the SFZ and Decent Sampler outputs
numerically identical for the same program.

Every function is total: raw values outside their legal domain are clamped
to it. Pass a list as `warnings` to be told about it.
"""

import numpy as np

from .constants import (
    CUTOFF_MAX_HZ,
    CUTOFF_MIN_HZ,
    ENVELOPE_CURVES,
    ENVELOPE_TIME_BASE,
    LFO_DELAY_MAX_SECONDS,
    LFO_FADE_MAX_SECONDS,
    LFO_RATE_MAX_HZ,
    LFO_RATE_MIN_HZ,
    MOD_DESTINATION_SCALES,
    RAW_MAX,
    RAW_MIN,
    RESONANCE_MAX_DB,
    VALUE_PRECISION,
    VOLUME_MAX_DB,
    VOLUME_MIN_DB,
)
from .errors import ParameterClamped
from .model import EnvelopeKind, FilterType, ModDestination


def clamp_raw(value: int, name: str, low: int = RAW_MIN, high: int = RAW_MAX, warnings=None) -> int:
    """
    Clamps a raw parameter to [low, high], recording a ParameterClamped
    warning when the value had to move.
    """
    clamped = int(np.clip(value, low, high))
    if clamped != value and warnings is not None:
        warnings.append(ParameterClamped(name, value, low, high))
    return clamped


def _unit(raw: int, name: str, warnings) -> float:
    """
    Raw 0-100 value as a fraction in [0, 1].
    """
    return clamp_raw(raw, name, warnings=warnings) / RAW_MAX


def _log_curve(position, low, high):
    """
    Geometric interpolation: low at position 0, high at position 1.
    """
    # Clip away the rounding error at the ends of the range
    return np.clip(low * np.power(high / low, position), low, high)


def envelope_time(raw: int, stage: str, kind: EnvelopeKind = EnvelopeKind.AMP, warnings=None) -> float:
    """
    Envelope stage time in seconds.

    An exponential curve: short times get most of the raw range. Attack and
    decay at 0 are instantaneous; release never goes below the curve base.

    Args:
        raw: Raw stage value (0-100).
        stage: "attack", "decay" or "release".
        kind: Which envelope the stage belongs to; the filter envelope uses
            slightly longer curves.
    """
    k = ENVELOPE_CURVES[(kind.value, stage)]
    raw = clamp_raw(raw, f"{kind.value}_env_{stage}", warnings=warnings)
    if raw == 0 and stage != "release":
        return 0.0
    return float(ENVELOPE_TIME_BASE * np.exp(raw / RAW_MAX * k))


def sustain_level(raw: int, warnings=None) -> float:
    """
    Sustain level normalized to 0.0-1.0.
    """
    return float(_unit(raw, "sustain", warnings))


def velocity_tracking(raw: int, warnings=None) -> int:
    """
    Velocity-to-level amount in percent (0-100).
    """
    return clamp_raw(raw, "velocity_to_level", warnings=warnings)


def cutoff_hz(raw: int, warnings=None) -> float:
    """
    Filter cutoff, logarithmic from 20 Hz (raw 0) to 20 kHz (raw 100).
    """
    return float(_log_curve(_unit(raw, "cutoff", warnings), CUTOFF_MIN_HZ, CUTOFF_MAX_HZ))


def resonance_db(raw: int, filter_type: FilterType = FilterType.LOWPASS, warnings=None) -> float:
    """
    Filter resonance in dB.

    Rises quickly at the low end and flattens towards the ceiling, which
    depends on the filter type (band-pass filters get a lower one).
    """
    position = _unit(raw, "resonance", warnings)
    return float(RESONANCE_MAX_DB[filter_type.value] * np.log10(1.0 + 9.0 * position))


def lfo_rate_hz(raw: int, warnings=None) -> float:
    """
    LFO rate, logarithmic from 0.1 Hz to 30 Hz.
    """
    return float(_log_curve(_unit(raw, "lfo_rate", warnings), LFO_RATE_MIN_HZ, LFO_RATE_MAX_HZ))


def lfo_delay_seconds(raw: int, warnings=None) -> float:
    return _unit(raw, "lfo_delay", warnings) * LFO_DELAY_MAX_SECONDS


def lfo_fade_seconds(raw: int, warnings=None) -> float:
    return _unit(raw, "lfo_fade", warnings) * LFO_FADE_MAX_SECONDS


def lfo_depth(raw: int, warnings=None) -> float:
    return _unit(raw, "lfo_depth", warnings)


def volume_db(level: int, warnings=None) -> float:
    """
    Keygroup level (0-100) to gain in dB, -60 dB to +6 dB.
    """
    return VOLUME_MIN_DB + _unit(level, "level", warnings) * (VOLUME_MAX_DB - VOLUME_MIN_DB)


def tuning_semitones(semitone: int, fine: int) -> float:
    """
    Coarse and fine tuning folded into fractional semitones.
    """
    return semitone + fine / 100.0


def modulation_depth(amount: int, warnings=None) -> float:
    """
    Signed routing amount (-100..100) as a fraction in [-1, 1].
    """
    return clamp_raw(amount, "modulation_amount", -RAW_MAX, RAW_MAX, warnings) / RAW_MAX


def modulation_amount(amount: int, destination: ModDestination, warnings=None) -> float:
    """
    Routing amount in the destination's own unit (semitones for pitch, cents
    for cutoff, dB for volume...).

    Raises:
        KeyError: For ModDestination.UNMAPPED, which has no unit; callers
            decide how to render unmapped routes before scaling.
    """
    return modulation_depth(amount, warnings) * MOD_DESTINATION_SCALES[destination.value]


def format_value(value: float, quantity: str) -> str:
    """
    Formats a scaled value with the precision used for its quantity.
    """
    text = f"{value:.{VALUE_PRECISION[quantity]}f}"
    # Avoid printing "-0.0"
    if float(text) == 0.0:
        text = text.lstrip("-")
    return text
