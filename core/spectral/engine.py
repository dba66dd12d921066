"""
core/spectral/engine.py — Fixed-size FFT engine with derived spectral features.

A SpectralEngine owns one FFT size and sample rate. Window coefficients and
the FFT plan are computed once at construction (and again on reconfigure);
analyze() itself mutates nothing, so repeated calls on the same buffer are
bit-identical.

Pipeline per window:
    1. pad-or-truncate the input to N samples
    2. multiply by the cached Hann window
    3. radix-2 FFT → magnitude / phase for bins 0..N/2
    4. scalar features: fundamental (peak bin), centroid, 85% rolloff
    5. time-domain features on the ORIGINAL buffer: ZCR, tempo, RMS volume

Thread safety: one lock per engine guards configuration and analysis.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator, Sequence
from dataclasses import replace

import numpy as np

from core.config import SpectralConfig
from core.spectral.fft import FFTPlan, hann_window
from core.spectral.types import SpectralFeatures, readonly

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

ROLLOFF_THRESHOLD: float = 0.85
TEMPO_MIN_BPM: float = 60.0
TEMPO_MAX_BPM: float = 200.0
_ZCR_TO_BPM: float = 120.0  # zcr * 60 * 2, a rough conversion kept as-is


# ---------------------------------------------------------------------------
# Feature helpers: pure, operate on plain arrays
# ---------------------------------------------------------------------------


def to_signal(samples: Sequence[float] | np.ndarray) -> np.ndarray:
    """Coerce a sample sequence to a 1-D float64 array."""
    return np.asarray(samples, dtype=np.float64).reshape(-1)


def fit_to_length(signal: np.ndarray, n: int) -> np.ndarray:
    """Zero-pad or truncate signal to exactly n samples (always a new array)."""
    if signal.size >= n:
        return signal[:n].copy()
    out = np.zeros(n, dtype=np.float64)
    out[: signal.size] = signal
    return out


def zero_crossing_rate(signal: np.ndarray) -> float:
    """Fraction of adjacent pairs whose (x >= 0) predicate differs.

    Returns 0.0 for fewer than two samples.
    """
    if signal.size < 2:
        return 0.0
    non_negative = signal >= 0.0
    crossings = int(np.count_nonzero(non_negative[1:] != non_negative[:-1]))
    return crossings / float(signal.size - 1)


def estimate_tempo(zcr: float) -> float:
    """Heuristic tempo from zero-crossing rate, clamped to [60, 200] BPM."""
    return float(np.clip(zcr * _ZCR_TO_BPM, TEMPO_MIN_BPM, TEMPO_MAX_BPM))


def volume_level(signal: np.ndarray) -> float:
    """min(1, RMS). 0.0 for an empty buffer."""
    if signal.size == 0:
        return 0.0
    return min(1.0, float(np.sqrt(np.mean(signal**2))))


def spectral_centroid(magnitudes: np.ndarray, frequencies: np.ndarray) -> float:
    """Magnitude-weighted mean frequency; 0.0 when the spectrum is all zero."""
    total = float(np.sum(magnitudes))
    if total <= 0.0:
        return 0.0
    return float(np.sum(frequencies * magnitudes) / total)


def spectral_rolloff(
    magnitudes: np.ndarray,
    frequencies: np.ndarray,
    threshold: float = ROLLOFF_THRESHOLD,
) -> float:
    """Frequency of the first bin where cumulative magnitude >= threshold * total."""
    if magnitudes.size == 0:
        return 0.0
    cumulative = np.cumsum(magnitudes)
    target = cumulative[-1] * threshold
    idx = int(np.argmax(cumulative >= target))
    return float(frequencies[idx])


def fundamental_frequency(magnitudes: np.ndarray, frequencies: np.ndarray) -> float:
    """Frequency of the first largest-magnitude bin (naive peak pick)."""
    if magnitudes.size == 0:
        return 0.0
    return float(frequencies[int(np.argmax(magnitudes))])


# ---------------------------------------------------------------------------
# Overlapped analysis
# ---------------------------------------------------------------------------


class OverlapAnalysis:
    """Lazy, finite, restartable sequence of per-window SpectralFeatures.

    Every iteration starts again from the beginning of the buffer. Windows
    advance by ``hop_size`` and stop once a full window no longer fits; a
    buffer shorter than the window yields exactly one padded result.
    """

    def __init__(self, engine: SpectralEngine, signal: np.ndarray, hop_size: int) -> None:
        self._engine = engine
        self._signal = signal
        self._hop = hop_size

    def __iter__(self) -> Iterator[SpectralFeatures]:
        n = self._engine.fft_size
        if self._signal.size < n:
            yield self._engine.analyze(self._signal)
            return
        for start in range(0, self._signal.size - n + 1, self._hop):
            yield self._engine.analyze(self._signal[start : start + n])

    def __len__(self) -> int:
        n = self._engine.fft_size
        if self._signal.size < n:
            return 1
        return (self._signal.size - n) // self._hop + 1


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------


class SpectralEngine:
    """Windowed radix-2 FFT analyser with cached coefficients.

    Args:
        config: Validated SpectralConfig. Construction cannot fail after the
            config exists — invalid FFT sizes / sample rates are rejected
            by SpectralConfig itself with ValueError.

    Example::

        engine = SpectralEngine(SpectralConfig(fft_size=2048, sample_rate=48000))
        features = engine.analyze(samples)
        print(features.fundamental_frequency, features.spectral_centroid)
    """

    def __init__(self, config: SpectralConfig | None = None) -> None:
        """Build window and FFT plan for the configured size."""
        self._lock = threading.Lock()
        self._config = config or SpectralConfig()
        self._min_frequency, self._max_frequency = self._config.frequency_range
        self._hop_size = self._config.effective_hop_size
        self._build_caches()
        logger.info(
            "SpectralEngine initialized (fft_size=%d, sample_rate=%d, hop=%d)",
            self._config.fft_size,
            self._config.sample_rate,
            self._hop_size,
        )

    def _build_caches(self) -> None:
        """Recompute window, plan and frequency axis. Must be called with lock held
        (or from __init__)."""
        n = self._config.fft_size
        self._window = readonly(hann_window(n))
        self._plan = FFTPlan.for_size(n)
        self._frequencies = readonly(np.arange(n // 2 + 1) * (self._config.sample_rate / n))

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def fft_size(self) -> int:
        return self._config.fft_size

    @property
    def sample_rate(self) -> int:
        return self._config.sample_rate

    @property
    def hop_size(self) -> int:
        with self._lock:
            return self._hop_size

    @property
    def frequency_range(self) -> tuple[float, float]:
        """(min, max) analysis range in Hz."""
        with self._lock:
            return self._min_frequency, self._max_frequency

    @property
    def window(self) -> np.ndarray:
        """Cached Hann coefficients (read-only)."""
        return self._window

    def reconfigure(self, fft_size: int | None = None, sample_rate: int | None = None) -> None:
        """Change FFT size and/or sample rate, rebuilding cached coefficients.

        Hop size and frequency range are re-derived from the new size/rate.

        Raises:
            ValueError: If the new size is not a power of two >= 2 or the
                sample rate is not positive. The engine is left unchanged.
        """
        with self._lock:
            new_config = replace(
                self._config,
                fft_size=self._config.fft_size if fft_size is None else fft_size,
                sample_rate=self._config.sample_rate if sample_rate is None else sample_rate,
                hop_size=None,
            )
            self._config = new_config
            self._hop_size = new_config.effective_hop_size
            self._min_frequency, self._max_frequency = new_config.frequency_range
            self._build_caches()
        logger.info(
            "SpectralEngine reconfigured (fft_size=%d, sample_rate=%d)",
            new_config.fft_size,
            new_config.sample_rate,
        )

    def set_frequency_range(self, min_frequency: float, max_frequency: float) -> None:
        """Record the analysis range, clamped to [0, Nyquist].

        The range is reported alongside results; peak picking still scans
        the whole spectrum.
        """
        with self._lock:
            lo = max(0.0, float(min_frequency))
            hi = min(self._config.nyquist, float(max_frequency))
            if (lo, hi) != (min_frequency, max_frequency):
                logger.warning(
                    "Frequency range (%.3f, %.3f) clamped to (%.3f, %.3f)",
                    min_frequency,
                    max_frequency,
                    lo,
                    hi,
                )
            self._min_frequency, self._max_frequency = lo, hi

    def set_hop_size(self, hop_size: int) -> None:
        """Set the default overlap hop, clamped to [1, fft_size]."""
        with self._lock:
            self._hop_size = max(1, min(self._config.fft_size, int(hop_size)))

    def frequency_for_bin(self, bin_index: int) -> float:
        """Centre frequency of an FFT bin in Hz."""
        return bin_index * self._config.sample_rate / float(self._config.fft_size)

    def bin_for_frequency(self, frequency: float) -> int:
        """FFT bin containing a frequency (floor of f * N / sr)."""
        return int(frequency * self._config.fft_size / self._config.sample_rate)

    # ------------------------------------------------------------------
    # Analysis
    # ------------------------------------------------------------------

    def analyze(self, samples: Sequence[float] | np.ndarray) -> SpectralFeatures:
        """Analyse one window of samples.

        Input of any length is accepted: shorter buffers are zero-padded to
        fft_size, longer ones are truncated to their first fft_size samples
        for the spectrum. ZCR, tempo and volume always use the full,
        unwindowed input.

        Args:
            samples: Mono sample sequence (amplitude nominally in [-1, 1]).

        Returns:
            Fully populated SpectralFeatures. An empty or silent buffer
            gives an all-zero spectrum with fundamental 0.0.
        """
        signal = to_signal(samples)
        with self._lock:
            n = self._config.fft_size
            sr = self._config.sample_rate
            windowed = fit_to_length(signal, n) * self._window
            spectrum = self._plan.execute(windowed)[: n // 2 + 1]
            frequencies = self._frequencies

        magnitudes = readonly(np.abs(spectrum))
        phases = readonly(np.angle(spectrum))
        zcr = zero_crossing_rate(signal)

        return SpectralFeatures(
            magnitudes=magnitudes,
            phases=phases,
            frequencies=frequencies,
            fundamental_frequency=fundamental_frequency(magnitudes, frequencies),
            spectral_centroid=spectral_centroid(magnitudes, frequencies),
            spectral_rolloff=spectral_rolloff(magnitudes, frequencies),
            zero_crossing_rate=zcr,
            tempo=estimate_tempo(zcr),
            volume_level=volume_level(signal),
            fft_size=n,
            sample_rate=sr,
        )

    def analyze_with_overlap(
        self,
        samples: Sequence[float] | np.ndarray,
        hop_size: int | None = None,
    ) -> OverlapAnalysis:
        """Overlapped analysis of a long buffer.

        Args:
            samples: Mono sample sequence.
            hop_size: Advance between windows. None uses the engine's hop
                size; values are clamped to [1, fft_size].

        Returns:
            Restartable iterable of SpectralFeatures, computed lazily.
        """
        hop = self.hop_size if hop_size is None else max(1, min(self.fft_size, int(hop_size)))
        signal = to_signal(samples).copy()
        return OverlapAnalysis(self, readonly(signal), hop)
