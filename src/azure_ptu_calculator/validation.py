"""Offline check of the PTU rule table against an authoritative reference.

The reference lists, per model and deployment type, any of ``minimum``,
``increment`` and ``throughput``. Only the fields present are compared.
Nothing here runs during a calculation; the runtime trusts whatever table
it is given.
"""

from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Optional

from .config_paths import get_ptu_reference_path
from .deployment import DeploymentType
from .errors import InvalidConfigFormatError
from .logging import LogEvent, log_info, log_warning
from .tables import PricingTables, load_table

REFERENCE_FIELDS = ("minimum", "increment", "throughput")


@dataclass(frozen=True)
class FieldCheck:
    field: str
    expected: float
    actual: Optional[float]

    @property
    def matches(self) -> bool:
        return self.actual is not None and float(self.actual) == float(self.expected)


@dataclass(frozen=True)
class RuleCheck:
    """Comparison of one (model, deployment type) pair."""

    model: str
    deployment_type: str
    checks: List[FieldCheck]
    missing: bool = False

    @property
    def passed(self) -> bool:
        return not self.missing and all(check.matches for check in self.checks)

    def check_for(self, name: str) -> Optional[FieldCheck]:
        for check in self.checks:
            if check.field == name:
                return check
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "model": self.model,
            "deployment_type": self.deployment_type,
            "missing": self.missing,
            "passed": self.passed,
            "fields": {c.field: {**asdict(c), "matches": c.matches} for c in self.checks},
        }


@dataclass
class ValidationReport:
    """Result of validating the PTU rule table."""

    results: List[RuleCheck] = field(default_factory=list)
    reference_path: Optional[str] = None

    @property
    def passed(self) -> bool:
        return all(result.passed for result in self.results)

    @property
    def failures(self) -> List[RuleCheck]:
        return [result for result in self.results if not result.passed]

    def by_model(self) -> Dict[str, List[RuleCheck]]:
        grouped: Dict[str, List[RuleCheck]] = {}
        for result in self.results:
            grouped.setdefault(result.model, []).append(result)
        return grouped

    def to_dict(self) -> Dict[str, Any]:
        return {
            "passed": self.passed,
            "reference_path": self.reference_path,
            "total": len(self.results),
            "failed": len(self.failures),
            "results": [result.to_dict() for result in self.results],
        }


def load_reference(path: Optional[str] = None) -> Dict[str, Dict[DeploymentType, Dict[str, float]]]:
    """Load the authoritative PTU reference.

    Args:
        path: Reference YAML path; resolved default if None

    Returns:
        Mapping of model -> deployment type -> field -> expected value

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = path or get_ptu_reference_path()
    result = load_table(path, "PTU reference")
    models = (result.data or {}).get("models")
    if not isinstance(models, dict):
        raise InvalidConfigFormatError("PTU reference needs a 'models' mapping", path=path)

    reference: Dict[str, Dict[DeploymentType, Dict[str, float]]] = {}
    for model, deployments in models.items():
        if not isinstance(deployments, dict):
            raise InvalidConfigFormatError(f"Invalid reference entry for '{model}'", path=path)
        for key, values in deployments.items():
            try:
                deployment = DeploymentType.parse(str(key))
            except ValueError as e:
                raise InvalidConfigFormatError(str(e), path=path) from e
            if not isinstance(values, dict):
                raise InvalidConfigFormatError(f"Invalid reference values for '{model}/{key}'", path=path)
            reference.setdefault(str(model), {})[deployment] = {
                name: float(values[name]) for name in REFERENCE_FIELDS if name in values
            }
    return reference


def validate_ptu_rules(
    tables: PricingTables,
    reference: Optional[Dict[str, Dict[DeploymentType, Dict[str, float]]]] = None,
    reference_path: Optional[str] = None,
) -> ValidationReport:
    """Compare the tables' PTU rules with the reference, field by field.

    Args:
        tables: Tables to check
        reference: Parsed reference; loaded from ``reference_path`` if None
        reference_path: Reference file used when ``reference`` is None

    Returns:
        ValidationReport with one RuleCheck per reference entry
    """
    if reference is None:
        reference_path = reference_path or get_ptu_reference_path()
        reference = load_reference(reference_path)

    report = ValidationReport(reference_path=reference_path)
    for model in sorted(reference):
        for deployment, expected in reference[model].items():
            rule = tables.find_ptu_rule(model, deployment)
            if rule is None:
                report.results.append(
                    RuleCheck(
                        model=model,
                        deployment_type=deployment.value,
                        checks=[FieldCheck(name, value, None) for name, value in expected.items()],
                        missing=True,
                    )
                )
                continue

            actual = {
                "minimum": rule.minimum_ptu,
                "increment": rule.increment_ptu,
                "throughput": rule.throughput_per_ptu,
            }
            report.results.append(
                RuleCheck(
                    model=model,
                    deployment_type=deployment.value,
                    checks=[FieldCheck(name, value, actual[name]) for name, value in expected.items()],
                )
            )

    for failure in report.failures:
        log_warning(
            LogEvent.VALIDATION,
            "PTU rule does not match reference",
            model=failure.model,
            deployment=failure.deployment_type,
            missing=failure.missing,
            mismatched=",".join(c.field for c in failure.checks if not c.matches) or None,
        )
    log_info(
        LogEvent.VALIDATION,
        "PTU rule validation finished",
        total=len(report.results),
        failed=len(report.failures),
    )
    return report
