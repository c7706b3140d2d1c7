"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings

from barrel.domains.stress.domain_logic.stress_models import StressParams


class Settings(BaseSettings):
    """Nervous System Barrel configuration.

    Every field can be set through a ``BARREL_``-prefixed environment
    variable (e.g. ``BARREL_ETA_UP=0.5``) or a ``.env`` file.
    """

    model_config = {"env_prefix": "BARREL_", "env_file": ".env", "env_file_encoding": "utf-8"}

    # Engine parameters (read once, immutable afterwards)
    w_trauma: float = 0.25
    w_daily: float = 0.35
    base_min: float = 0.10
    base_max: float = 0.30
    sensitivity_gain: float = 0.30
    alpha_cap: float = 0.60
    beta_amp: float = 0.30
    eta_up: float = 0.40
    eta_down_base: float = 0.18
    overflow_slowdown: float = 0.60

    # Drivers
    frame_rate_hz: float = 60.0
    tick_period_s: float = 1.0
    jitter_amplitude: float = 0.2

    # Runner
    log_level: str = "info"
    run_seconds: float = 30.0
    # Empty means the documented default inputs.
    scenario_path: str = ""
    random_seed: int | None = None

    def to_params(self) -> StressParams:
        """Build the immutable engine parameter bundle."""
        return StressParams(
            w_trauma=self.w_trauma,
            w_daily=self.w_daily,
            base_min=self.base_min,
            base_max=self.base_max,
            sensitivity_gain=self.sensitivity_gain,
            alpha_cap=self.alpha_cap,
            beta_amp=self.beta_amp,
            eta_up=self.eta_up,
            eta_down_base=self.eta_down_base,
            overflow_slowdown=self.overflow_slowdown,
        )


def get_settings() -> Settings:
    """Create and return a Settings instance."""
    return Settings()
