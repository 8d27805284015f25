"""Plain build report for callers that drive the janitor directly."""

from dataclasses import dataclass, field


@dataclass
class StaticBuildReport:
    """A build report built from known values.

    Attributes:
        assets: Output files relative to the output directory
        errors: Build error messages; any entry marks the build as failed
    """

    assets: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    def has_errors(self) -> bool:
        return bool(self.errors)

    def list_output_assets(self) -> list[str]:
        return list(self.assets)
