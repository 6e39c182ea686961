"""Centralized exit codes for the zf CLI."""


class ExitCodes:
    """Standard exit codes for zf CLI commands."""

    SUCCESS = 0

    FRICTION_FOUND = 1
    ELIMINATION_FAILED = 2

    @classmethod
    def get_description(cls, code: int) -> str:
        """Get human-readable description for an exit code."""
        descriptions = {
            cls.SUCCESS: "Success - No friction found",
            cls.FRICTION_FOUND: "Dependency friction detected",
            cls.ELIMINATION_FAILED: "One or more friction points need a manual fix",
        }
        return descriptions.get(code, f"Unknown exit code: {code}")

    @classmethod
    def should_fail_pipeline(cls, code: int) -> bool:
        """Determine if an exit code should fail a CI/CD pipeline."""

        return code >= cls.ELIMINATION_FAILED
