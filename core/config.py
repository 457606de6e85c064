"""Engine-wide defaults and thresholds."""

from dataclasses import dataclass

@dataclass(frozen=True)
class EngineConfig:
    """Tunable constants that are not part of any published table."""

    calculation_version: str = "1.0.0"
    default_power_factor: float = 0.8
    low_power_factor_threshold: float = 0.7
    significant_derating_threshold: float = 0.7

    # Voltage drop bands, percent of nominal voltage
    vd_acceptable_limit: float = 1.0
    vd_branch_limit: float = 3.0    # NEC 210.19(A) Informational Note No. 4
    vd_combined_limit: float = 5.0  # feeder + branch

    long_circuit_m: float = 300.0
    long_circuit_ft: float = 1000.0
    extreme_high_temp_c: float = 60.0
    extreme_low_temp_c: float = -20.0

    history_limit: int = 50

DEFAULT_CONFIG = EngineConfig()
