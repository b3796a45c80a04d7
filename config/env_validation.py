# ============================================================================
# ENVIRONMENT VARIABLE VALIDATION
# ============================================================================
# STATUS: Configuration - Startup validation with regex patterns
# PURPOSE: Validate env vars at startup to fail fast with clear error messages
# CREATED: 17 OCT 2026
# ============================================================================
"""
Environment Variable Validation Module.

Validates environment variables at startup using regex patterns to catch
configuration errors EARLY with clear, actionable error messages, before
any routine touches an emulator or account.

Design Philosophy:
    - FAIL FAST: Catch config errors at startup, not mid-import
    - CLEAR ERRORS: Show exactly what's wrong and how to fix it
    - REGEX VALIDATION: Format validation, not just presence checks
    - ZERO DEPENDENCIES: Only standard library imports

Usage:
    from config.env_validation import validate_environment

    for error in validate_environment():
        print(f"{error.var_name}: {error.message}")

Example Validations:
    - COSMOS_PARTITION_KEY_PATH must look like '/field'
    - STORAGE_QUEUE must be a valid queue name (lowercase, 3-63 chars)
    - COSMOS_CONNECTION_STRING is required once COSMOS_EMULATOR=false

Exports:
    ENV_VAR_RULES: Dict of all validation rules
    EnvValidationError: Dataclass for validation errors
    validate_environment: Main validation function
    validate_single_var: Validate one variable
"""

import os
import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Pattern, Any


# ============================================================================
# VALIDATION ERROR
# ============================================================================

@dataclass
class EnvValidationError:
    """Result of a failed environment variable validation."""
    var_name: str
    message: str
    current_value: Optional[str]
    expected_pattern: str
    fix_suggestion: str
    severity: str = "error"  # error, warning

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for JSON serialization."""
        return {
            "var_name": self.var_name,
            "message": self.message,
            "current_value": self._mask_sensitive(self.current_value),
            "expected_pattern": self.expected_pattern,
            "fix_suggestion": self.fix_suggestion,
            "severity": self.severity,
        }

    def _mask_sensitive(self, value: Optional[str]) -> Optional[str]:
        """Mask potentially sensitive values."""
        if value is None:
            return None
        sensitive_keywords = ["password", "secret", "key", "token", "connection"]
        var_lower = self.var_name.lower()
        if any(kw in var_lower for kw in sensitive_keywords):
            return "***MASKED***"
        # Show first 20 chars for long values
        if len(value) > 30:
            return f"{value[:20]}...({len(value)} chars)"
        return value


# ============================================================================
# VALIDATION RULE DEFINITION
# ============================================================================

@dataclass
class EnvVarRule:
    """
    Validation rule for an environment variable.

    Attributes:
        pattern: Compiled regex pattern for validation
        pattern_description: Human-readable description of expected format
        required: Whether this variable must be set
        fix_suggestion: How to fix if validation fails
        example: Example valid value
        default_value: Default value used if not set (for warning messages)
        warn_on_default: Emit warning when using default value
        required_unless: Boolean env var (default true) that waives `required`
    """
    pattern: Pattern
    pattern_description: str
    required: bool
    fix_suggestion: str
    example: str
    default_value: Optional[str] = None
    warn_on_default: bool = False
    required_unless: Optional[str] = None


# ============================================================================
# VALIDATION RULES - Single source of truth for env var formats
# ============================================================================

# Common regex patterns (reusable)
_BOOLEAN = re.compile(r"^(true|false|1|0|yes|no)$", re.IGNORECASE)
_POSITIVE_INT = re.compile(r"^[1-9][0-9]*$")
_NON_NEGATIVE_INT = re.compile(r"^[0-9]+$")
_INT = re.compile(r"^-?[0-9]+$")
_POSITIVE_NUMBER = re.compile(r"^[0-9]+(\.[0-9]+)?$")
_HTTP_URL = re.compile(r"^https?://[^\s/]+(/.*)?$", re.IGNORECASE)
_STORAGE_NAME = re.compile(r"^[a-z0-9](?!.*--)[a-z0-9-]{1,61}[a-z0-9]$")
_COSMOS_NAME = re.compile(r"^[^/\\#?\s][^/\\#?]{0,254}$")
_PARTITION_KEY_PATH = re.compile(r"^/[A-Za-z_][A-Za-z0-9_]*$")
_RESOURCE_NAME = re.compile(r"^[a-zA-Z][a-zA-Z0-9_-]{0,62}$")
_COSMOS_CONNECTION = re.compile(r"(^|;)\s*AccountEndpoint=https?://.+;\s*AccountKey=.+", re.IGNORECASE)
_STORAGE_CONNECTION = re.compile(r"(^|;)\s*(AccountKey|SharedAccessSignature)=.+", re.IGNORECASE)


ENV_VAR_RULES: Dict[str, EnvVarRule] = {
    # =========================================================================
    # HOST
    # =========================================================================
    "ENVIRONMENT": EnvVarRule(
        pattern=re.compile(r"^(dev|development|local|test|qa|uat|staging)$", re.IGNORECASE),
        pattern_description="Non-production environment name",
        required=False,
        fix_suggestion="Seeding writes synthetic data; use dev, local, test, qa, uat or staging",
        example="dev",
        default_value="dev",
        warn_on_default=True,
    ),

    "LOG_LEVEL": EnvVarRule(
        pattern=re.compile(r"^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$", re.IGNORECASE),
        pattern_description="Python log level name",
        required=False,
        fix_suggestion="Use DEBUG, INFO, WARNING, ERROR or CRITICAL",
        example="INFO",
        default_value="INFO",
    ),

    "DEBUG_MODE": EnvVarRule(
        pattern=_BOOLEAN,
        pattern_description="Boolean value (true/false)",
        required=False,
        fix_suggestion="Set to 'true' for verbose diagnostics",
        example="false",
        default_value="false",
    ),

    # =========================================================================
    # COSMOS DB
    # =========================================================================
    "COSMOS_EMULATOR": EnvVarRule(
        pattern=_BOOLEAN,
        pattern_description="Boolean value (true/false)",
        required=False,
        fix_suggestion="Set to 'false' to seed a live account",
        example="true",
        default_value="true",
    ),

    "COSMOS_CONNECTION_STRING": EnvVarRule(
        pattern=_COSMOS_CONNECTION,
        pattern_description="AccountEndpoint=https://...;AccountKey=...",
        required=True,
        required_unless="COSMOS_EMULATOR",
        fix_suggestion="Copy the primary connection string from the account's Keys blade",
        example="AccountEndpoint=https://myacct.documents.azure.com:443/;AccountKey=<key>",
    ),

    "COSMOS_ACCOUNT_NAME": EnvVarRule(
        pattern=_RESOURCE_NAME,
        pattern_description="Logical account name (letters, numbers, underscore, hyphen)",
        required=False,
        fix_suggestion="Use a short logical name",
        example="azcosmos",
        default_value="azcosmos",
    ),

    "COSMOS_EMULATOR_ENDPOINT": EnvVarRule(
        pattern=_HTTP_URL,
        pattern_description="Absolute http(s) URL of the local emulator",
        required=False,
        fix_suggestion="Point at the emulator gateway",
        example="https://localhost:8081/",
        default_value="https://localhost:8081/",
    ),

    "COSMOS_DATABASE": EnvVarRule(
        pattern=_COSMOS_NAME,
        pattern_description="1-255 chars, no '/', '\\', '#' or '?'",
        required=False,
        fix_suggestion="Use a plain database id",
        example="appimport",
        default_value="appimport",
    ),

    "COSMOS_CONTAINER": EnvVarRule(
        pattern=_COSMOS_NAME,
        pattern_description="1-255 chars, no '/', '\\', '#' or '?'",
        required=False,
        fix_suggestion="Use a plain container id",
        example="cdbimport",
        default_value="cdbimport",
    ),

    "COSMOS_PARTITION_KEY_PATH": EnvVarRule(
        pattern=_PARTITION_KEY_PATH,
        pattern_description="Top-level property path like '/filePath'",
        required=False,
        fix_suggestion="Start with '/' and name a single top-level property",
        example="/filePath",
        default_value="/filePath",
    ),

    # =========================================================================
    # STORAGE
    # =========================================================================
    "STORAGE_EMULATOR": EnvVarRule(
        pattern=_BOOLEAN,
        pattern_description="Boolean value (true/false)",
        required=False,
        fix_suggestion="Set to 'false' to seed a live storage account",
        example="true",
        default_value="true",
    ),

    "STORAGE_CONNECTION_STRING": EnvVarRule(
        pattern=_STORAGE_CONNECTION,
        pattern_description="Storage connection string with AccountKey or SharedAccessSignature",
        required=True,
        required_unless="STORAGE_EMULATOR",
        fix_suggestion="Copy a connection string from the storage account's Access keys blade",
        example="DefaultEndpointsProtocol=https;AccountName=mysa;AccountKey=<key>;EndpointSuffix=core.windows.net",
    ),

    "STORAGE_ACCOUNT_NAME": EnvVarRule(
        pattern=_RESOURCE_NAME,
        pattern_description="Logical account name (letters, numbers, underscore, hyphen)",
        required=False,
        fix_suggestion="Use a short logical name",
        example="azstorage",
        default_value="azstorage",
    ),

    "STORAGE_BLOB_CONTAINER": EnvVarRule(
        pattern=_STORAGE_NAME,
        pattern_description="3-63 chars, lowercase letters, numbers and single hyphens",
        required=False,
        fix_suggestion="Use a valid blob container name",
        example="sabimport",
        default_value="sabimport",
    ),

    "STORAGE_QUEUE": EnvVarRule(
        pattern=_STORAGE_NAME,
        pattern_description="3-63 chars, lowercase letters, numbers and single hyphens",
        required=False,
        fix_suggestion="Use a valid queue name",
        example="saqimport",
        default_value="saqimport",
    ),

    "AZURITE_BLOB_ENDPOINT": EnvVarRule(
        pattern=_HTTP_URL,
        pattern_description="Absolute http(s) URL of the Azurite blob service",
        required=False,
        fix_suggestion="Include the account path segment",
        example="http://127.0.0.1:10000/devstoreaccount1",
    ),

    "AZURITE_QUEUE_ENDPOINT": EnvVarRule(
        pattern=_HTTP_URL,
        pattern_description="Absolute http(s) URL of the Azurite queue service",
        required=False,
        fix_suggestion="Include the account path segment",
        example="http://127.0.0.1:10001/devstoreaccount1",
    ),

    # =========================================================================
    # SEEDING
    # =========================================================================
    "SEED_RECORD_COUNT": EnvVarRule(
        pattern=_POSITIVE_INT,
        pattern_description="Positive integer",
        required=False,
        fix_suggestion="Number of records per namespace",
        example="10",
        default_value="10",
    ),

    "SEED_ROUTINE_RETRIES": EnvVarRule(
        pattern=_NON_NEGATIVE_INT,
        pattern_description="Non-negative integer",
        required=False,
        fix_suggestion="Extra attempts for routines failing before any write",
        example="0",
        default_value="0",
    ),

    "SEED_RETRY_DELAY_SECONDS": EnvVarRule(
        pattern=_POSITIVE_NUMBER,
        pattern_description="Non-negative number of seconds",
        required=False,
        fix_suggestion="Delay before the first retry",
        example="1.0",
    ),

    "READINESS_TIMEOUT_SECONDS": EnvVarRule(
        pattern=_POSITIVE_NUMBER,
        pattern_description="Number of seconds",
        required=False,
        fix_suggestion="Raise when emulators need longer to start",
        example="120",
    ),

    "READINESS_POLL_INTERVAL_SECONDS": EnvVarRule(
        pattern=_POSITIVE_NUMBER,
        pattern_description="Number of seconds",
        required=False,
        fix_suggestion="Delay between readiness probes",
        example="2",
    ),

    "SEED_FAKER_SEED": EnvVarRule(
        pattern=_INT,
        pattern_description="Integer",
        required=False,
        fix_suggestion="Fixed seed for reproducible records",
        example="42",
    ),
}


# ============================================================================
# VALIDATION FUNCTIONS
# ============================================================================

def _flag(var_name: str, default: bool = True) -> bool:
    value = os.environ.get(var_name)
    if value is None or value == "":
        return default
    return value.lower() in ("true", "1", "yes")


def validate_single_var(
    var_name: str,
    rule: EnvVarRule,
    include_warnings: bool = True
) -> Optional[EnvValidationError]:
    """
    Validate a single environment variable against its rule.

    Args:
        var_name: Environment variable name
        rule: Validation rule to apply
        include_warnings: Whether to return warnings for vars using defaults

    Returns:
        EnvValidationError if validation fails or warning if using default, None if passes
    """
    value = os.environ.get(var_name)
    required = rule.required and not (rule.required_unless and _flag(rule.required_unless))

    # Check required
    if required and (value is None or value == ""):
        return EnvValidationError(
            var_name=var_name,
            message="Required environment variable not set",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    # Not set: emit warning if warn_on_default is True
    if value is None or value == "":
        if include_warnings and not required and rule.warn_on_default and rule.default_value is not None:
            return EnvValidationError(
                var_name=var_name,
                message="Not set, using default value",
                current_value=None,
                expected_pattern=f"Default: {rule.default_value}",
                fix_suggestion=f"Set explicitly or accept default. {rule.fix_suggestion}",
                severity="warning",
            )
        return None

    # Validate pattern
    if not rule.pattern.search(value):
        return EnvValidationError(
            var_name=var_name,
            message="Invalid format",
            current_value=value,
            expected_pattern=rule.pattern_description,
            fix_suggestion=f"{rule.fix_suggestion}. Example: {rule.example}",
            severity="error",
        )

    return None


def validate_environment(
    rules: Optional[Dict[str, EnvVarRule]] = None,
    include_warnings: bool = True
) -> List[EnvValidationError]:
    """
    Validate all environment variables against their rules.

    Args:
        rules: Optional custom rules dict (defaults to ENV_VAR_RULES)
        include_warnings: Whether to include warnings for vars using defaults

    Returns:
        List of EnvValidationError objects (errors and optionally warnings)
    """
    if rules is None:
        rules = ENV_VAR_RULES

    results = []
    for var_name, rule in rules.items():
        result = validate_single_var(var_name, rule, include_warnings=include_warnings)
        if result:
            results.append(result)

    return results


def log_validation_results(logger) -> bool:
    """
    Log validation results at appropriate levels.

    Logs errors at ERROR level, warnings at WARNING level. Values of
    secret variables are never logged.

    Returns:
        True if no errors (warnings are OK)
    """
    all_results = validate_environment(include_warnings=True)

    errors = [r for r in all_results if r.severity == "error"]
    warnings = [r for r in all_results if r.severity == "warning"]

    for error in errors:
        logger.error(f"ENV VAR ERROR: {error.var_name} - {error.message}")
        logger.error(f"  Expected: {error.expected_pattern}")
        logger.error(f"  Fix: {error.fix_suggestion}")

    for warning in warnings:
        default_val = warning.expected_pattern.replace("Default: ", "")
        logger.warning(f"ENV VAR: {warning.var_name} not set, using {default_val}")

    if errors:
        logger.error(f"STARTUP_FAILED: {len(errors)} environment variable errors")
        return False
    logger.info(f"Environment validation passed ({len(warnings)} vars using defaults)")
    return True


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ENV_VAR_RULES",
    "EnvVarRule",
    "EnvValidationError",
    "validate_environment",
    "validate_single_var",
    "log_validation_results",
]
