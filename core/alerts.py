from typing import Iterable, Optional, Tuple

from core.components import CalculationAlert
from core.models import AlertType, PipelineStage, Severity

SEVERITY_RANK = {
    Severity.CRITICAL: 0,
    Severity.MAJOR: 1,
    Severity.MINOR: 2,
}

def make_alert(alert_type: AlertType, code: str, message: str, severity: Severity,
               stage: PipelineStage, field: Optional[str] = None,
               code_reference: Optional[str] = None,
               remediation: Optional[str] = None) -> CalculationAlert:
    return CalculationAlert(
        type=alert_type,
        code=code,
        message=message,
        severity=severity,
        stage=stage,
        field=field,
        code_reference=code_reference,
        remediation=remediation,
    )

def info(code: str, message: str, stage: PipelineStage, **kwargs) -> CalculationAlert:
    return make_alert(AlertType.INFO, code, message, Severity.MINOR, stage, **kwargs)

def warning(code: str, message: str, stage: PipelineStage, severity: Severity = Severity.MINOR, **kwargs) -> CalculationAlert:
    return make_alert(AlertType.WARNING, code, message, severity, stage, **kwargs)

def critical(code: str, message: str, stage: PipelineStage, **kwargs) -> CalculationAlert:
    return make_alert(AlertType.ERROR, code, message, Severity.CRITICAL, stage, **kwargs)

def aggregate_alerts(alerts: Iterable[CalculationAlert]) -> Tuple[CalculationAlert, ...]:
    """Severity first (critical > major > minor), then pipeline stage. Stable for ties."""
    return tuple(sorted(alerts, key=lambda a: (SEVERITY_RANK[a.severity], a.stage)))
