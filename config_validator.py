"""
Configuration validation module for the Aarogya triage & recovery service.

This module provides validation functions for:
- Environment variables (required vs optional)
- CORS configuration
- Recovery threshold configuration
"""

import os
from dataclasses import asdict, dataclass
from typing import Dict, List, Optional, Tuple

from recovery.thresholds import RecoveryThresholds


@dataclass
class ValidationResult:
    """Result of a validation check"""
    is_valid: bool
    errors: List[str]
    warnings: List[str] = None

    def __post_init__(self):
        if self.warnings is None:
            self.warnings = []


# Required environment variables for the application
REQUIRED_ENV_VARS = [
    "AWS_REGION",
]

# Required unless STORAGE_BACKEND=memory
TABLE_ENV_VARS = [
    "PROFILE_TABLE_NAME",
    "DELIVERY_TABLE_NAME",
    "METRICS_TABLE_NAME",
    "CHECKIN_TABLE_NAME",
]

# Either of these selects the model for AI insights
BEDROCK_ENV_VARS = [
    "BEDROCK_MODEL",
    "BEDROCK_INFERENCE_PROFILE_ARN",
]

# Optional environment variables
OPTIONAL_ENV_VARS = [
    "BEDROCK_REGION",
    "EMERGENCY_ALERT_LAMBDA_ARN",
    "ALLOWED_ORIGINS",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "ENABLE_AI_INSIGHTS",
    "STORAGE_BACKEND",
    "BACKGROUND_WORKERS",
]

STORAGE_BACKENDS = ["dynamodb", "memory"]
LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _is_set(env_vars: Dict[str, str], var: str) -> bool:
    return bool(env_vars.get(var))


def validate_environment_variables(env_vars: Optional[Dict[str, str]] = None) -> ValidationResult:
    """
    Validate that all required environment variables are present and that
    the optional ones hold usable values.

    Args:
        env_vars: Dictionary of environment variables. If None, uses os.environ

    Returns:
        ValidationResult with validation status and any errors
    """
    if env_vars is None:
        env_vars = dict(os.environ)

    errors = []
    warnings = []

    for var in REQUIRED_ENV_VARS:
        if not _is_set(env_vars, var):
            errors.append(f"Required environment variable '{var}' is missing or empty")

    backend = env_vars.get("STORAGE_BACKEND", "dynamodb").lower()
    if backend not in STORAGE_BACKENDS:
        errors.append(f"Invalid STORAGE_BACKEND '{backend}'. Must be one of {STORAGE_BACKENDS}")
    elif backend == "dynamodb":
        for var in TABLE_ENV_VARS:
            if not _is_set(env_vars, var):
                errors.append(f"Required environment variable '{var}' is missing or empty")

    ai_enabled = env_vars.get("ENABLE_AI_INSIGHTS", "true").lower() in ("1", "true", "yes")
    if ai_enabled and not any(_is_set(env_vars, var) for var in BEDROCK_ENV_VARS):
        warnings.append(
            f"None of {BEDROCK_ENV_VARS} set, AI insights will use the default Bedrock model"
        )

    if "BEDROCK_REGION" not in env_vars and "AWS_REGION" in env_vars:
        warnings.append(
            "BEDROCK_REGION not set, will default to AWS_REGION"
        )

    if not _is_set(env_vars, "EMERGENCY_ALERT_LAMBDA_ARN"):
        warnings.append(
            "EMERGENCY_ALERT_LAMBDA_ARN not set, emergency contacts will not be notified on red alerts"
        )

    log_level = env_vars.get("LOG_LEVEL")
    if log_level and log_level.upper() not in LOG_LEVELS:
        errors.append(f"Invalid LOG_LEVEL '{log_level}'. Must be one of {LOG_LEVELS}")

    workers = env_vars.get("BACKGROUND_WORKERS")
    if workers is not None:
        if not workers.isdigit() or int(workers) < 1:
            errors.append(f"BACKGROUND_WORKERS must be a positive integer, got '{workers}'")

    if "ENVIRONMENT" not in env_vars:
        warnings.append(
            "ENVIRONMENT not set, will default to 'development'"
        )

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )


def parse_cors_origins(allowed_origins_env: str, environment: str = "development") -> List[str]:
    """
    Comma-separated ALLOWED_ORIGINS to a list. Without a value, development
    gets a wildcard. Production must list origins explicitly and may not use
    the wildcard; both cases raise ValueError.
    """
    environment = (environment or "development").lower()

    if allowed_origins_env:
        origins = [origin.strip() for origin in allowed_origins_env.split(",") if origin.strip()]
        if environment == "production" and "*" in origins:
            raise ValueError("Wildcard '*' is not allowed in ALLOWED_ORIGINS for production environment")
        return origins

    if environment == "production":
        raise ValueError("ALLOWED_ORIGINS must be explicitly set in production environment")
    return ["*"]


def validate_cors_configuration(env_vars: Optional[Dict[str, str]] = None) -> ValidationResult:
    """
    Same rules as parse_cors_origins, reported instead of raised.
    """
    if env_vars is None:
        env_vars = dict(os.environ)

    errors = []
    warnings = []

    environment = env_vars.get("ENVIRONMENT", "development").lower()
    try:
        origins = parse_cors_origins(env_vars.get("ALLOWED_ORIGINS", ""), environment)
    except ValueError as e:
        errors.append(str(e))
        origins = []

    if origins == ["*"]:
        warnings.append("CORS allows any origin (development mode)")

    for origin in origins:
        if origin != "*" and not origin.startswith(("http://", "https://")):
            errors.append(f"CORS origin '{origin}' must start with http:// or https://")

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )


def validate_recovery_thresholds(thresholds: RecoveryThresholds) -> ValidationResult:
    """
    Validate recovery heuristic thresholds.

    Scores are on a 1-10 scale and sleep is in hours (0-24). Each "high"
    bound must sit above its "low" bound or the prediction rules would
    contradict each other.
    """
    errors = []
    warnings = []

    score_fields = [
        "high_energy", "low_energy", "high_mood", "low_mood",
        "faster_recovery_min_energy", "tip_low_energy", "tip_low_mood",
        "focus_low_energy", "focus_low_mood",
    ]
    sleep_fields = [
        "good_sleep_hours", "poor_sleep_hours", "tip_sleep_hours", "focus_low_sleep_hours",
    ]
    values = asdict(thresholds)

    for name in score_fields:
        if not 1 <= values[name] <= 10:
            errors.append(f"Threshold '{name}' must be between 1 and 10, got {values[name]}")

    for name in sleep_fields:
        if not 0 <= values[name] <= 24:
            errors.append(f"Threshold '{name}' must be between 0 and 24 hours, got {values[name]}")

    for high, low in (
        ("high_energy", "low_energy"),
        ("high_mood", "low_mood"),
        ("good_sleep_hours", "poor_sleep_hours"),
    ):
        if values[high] <= values[low]:
            errors.append(
                f"Threshold '{high}' ({values[high]}) must be greater than '{low}' ({values[low]})"
            )

    if not 0 < thresholds.faster_recovery_max_progress <= 100:
        errors.append(
            f"faster_recovery_max_progress must be in (0, 100], got {thresholds.faster_recovery_max_progress}"
        )

    if thresholds.focus_low_energy > thresholds.low_energy:
        warnings.append(
            "focus_low_energy is above low_energy, today's focus will flag energy before the trend does"
        )

    return ValidationResult(
        is_valid=len(errors) == 0,
        errors=errors,
        warnings=warnings
    )


def validate_all_configurations(
    env_vars: Optional[Dict[str, str]] = None,
    thresholds: Optional[RecoveryThresholds] = None
) -> Tuple[bool, Dict[str, ValidationResult]]:
    """
    Validate all configuration aspects.

    Args:
        env_vars: Environment variables to validate (None = use os.environ)
        thresholds: Recovery thresholds (None = read from env_vars)

    Returns:
        Tuple of (all_valid, results_dict) where results_dict contains
        ValidationResult for each configuration aspect
    """
    if env_vars is None:
        env_vars = dict(os.environ)

    results = {}

    results["environment"] = validate_environment_variables(env_vars)
    results["cors"] = validate_cors_configuration(env_vars)

    if thresholds is None:
        thresholds = RecoveryThresholds.from_env(env_vars)
    results["recovery_thresholds"] = validate_recovery_thresholds(thresholds)

    all_valid = all(result.is_valid for result in results.values())

    return all_valid, results


def print_validation_results(results: Dict[str, ValidationResult]) -> None:
    """
    Print validation results in a human-readable format.

    Args:
        results: Dictionary of validation results from validate_all_configurations
    """
    print("\n" + "="*60)
    print("Configuration Validation Results")
    print("="*60)

    for category, result in results.items():
        print(f"\n{category.upper().replace('_', ' ')}:")

        if result.is_valid:
            print("  ✓ Valid")
        else:
            print("  ✗ Invalid")

        if result.errors:
            print("\n  Errors:")
            for error in result.errors:
                print(f"    - {error}")

        if result.warnings:
            print("\n  Warnings:")
            for warning in result.warnings:
                print(f"    - {warning}")

    print("\n" + "="*60)


if __name__ == "__main__":
    all_valid, results = validate_all_configurations()
    print_validation_results(results)
    raise SystemExit(0 if all_valid else 1)
