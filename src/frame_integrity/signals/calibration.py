"""
Noise Floor Calibration
=======================

Estimates how much consecutive frames differ when nothing moves.

The calibrator scans a short prefix of the stream, measures every
consecutive pair and keeps only pairs whose difference mean stays under
a sanity bound; pairs above it contain real scene motion and would
inflate the baseline.

Formulas:
    mu    = mean(pair.mean    for accepted pairs)
    sigma = mean(pair.std_dev for accepted pairs)

Falls back to fixed defaults when no pair qualifies.
"""

import itertools
import logging
from typing import Iterable, List, Optional

import numpy as np

from frame_integrity.config import CalibrationConfig
from frame_integrity.metrics.pairwise import compute_frame_stats
from frame_integrity.models.stats import NoiseBaseline
from frame_integrity.signals.preprocess import prepare_gray
from frame_integrity.stream.source import FrameSource, iter_frames


logger = logging.getLogger(__name__)


class NoiseFloorCalibrator:
    """
    Noise baseline estimator over a bounded stream prefix.

    Attributes:
        sample_frames: Number of leading frames scanned
        sanity_bound: Upper bound on an accepted pair's difference mean
        default_mu: Baseline mean used when nothing qualifies
        default_sigma: Baseline std-dev used when nothing qualifies
    """

    def __init__(
        self,
        sample_frames: int = 15,
        sanity_bound: float = 1.0,
        default_mu: float = 0.05,
        default_sigma: float = 0.02,
    ) -> None:
        errors = []
        if sample_frames < 2:
            errors.append(f"sample_frames must be >= 2, got {sample_frames}")
        if sanity_bound <= 0:
            errors.append(f"sanity_bound must be > 0, got {sanity_bound}")
        if default_mu < 0 or default_sigma < 0:
            errors.append(
                f"default baseline must be non-negative, got "
                f"mu={default_mu}, sigma={default_sigma}"
            )
        if errors:
            raise ValueError("Calibration parameter validation failed:\n" + "\n".join(errors))

        self.sample_frames = sample_frames
        self.sanity_bound = sanity_bound
        self.default_mu = default_mu
        self.default_sigma = default_sigma

    @classmethod
    def from_config(cls, config: CalibrationConfig) -> "NoiseFloorCalibrator":
        return cls(
            sample_frames=config.sample_frames,
            sanity_bound=config.sanity_bound,
            default_mu=config.default_mu,
            default_sigma=config.default_sigma,
        )

    @property
    def default_baseline(self) -> NoiseBaseline:
        return NoiseBaseline(mu=self.default_mu, sigma=self.default_sigma, samples_used=0)

    def calibrate(self, gray_frames: Iterable[np.ndarray]) -> NoiseBaseline:
        """
        Estimate the noise baseline from preprocessed frames.

        Only the first ``sample_frames`` items are consumed; no frame is
        kept beyond its pair.

        Args:
            gray_frames: Blurred grayscale frames in stream order

        Returns:
            NoiseBaseline (defaults when no pair qualifies)
        """
        mu_samples: List[float] = []
        sigma_samples: List[float] = []
        rejected = 0
        prev: Optional[np.ndarray] = None

        for gray in itertools.islice(gray_frames, self.sample_frames):
            if prev is not None:
                stats = compute_frame_stats(prev, gray)
                if stats.mean < self.sanity_bound:
                    mu_samples.append(stats.mean)
                    sigma_samples.append(stats.std_dev)
                else:
                    rejected += 1
            prev = gray

        if not mu_samples:
            logger.warning(
                f"No calibration pair under sanity bound {self.sanity_bound} "
                f"({rejected} rejected), using default baseline"
            )
            return self.default_baseline

        baseline = NoiseBaseline(
            mu=float(np.mean(mu_samples)),
            sigma=float(np.mean(sigma_samples)),
            samples_used=len(mu_samples),
        )
        logger.info(
            f"Noise floor calibrated: mu={baseline.mu:.4f}, "
            f"sigma={baseline.sigma:.4f}, pairs={baseline.samples_used}, "
            f"rejected={rejected}"
        )
        return baseline

    def calibrate_source(
        self,
        source: FrameSource,
        path: str,
        kernel_size: int = 3,
    ) -> NoiseBaseline:
        """
        Run a calibration pass on its own stream from ``source``.

        Raises:
            StreamOpenError: If the stream cannot be opened
        """
        stream = source.open_stream(path)
        try:
            grays = (prepare_gray(frame.image, kernel_size) for frame in iter_frames(stream))
            return self.calibrate(grays)
        finally:
            stream.close()
