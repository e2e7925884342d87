"""Step configuration model."""

from pathlib import Path

from pydantic import Field, field_validator

from xamarin_uitest_action.models.base import Model

LATEST_OS_VERSION = "latest"


class StepConfig(Model):
    """Inputs of the UITest step, validated once at start."""

    solution: Path = Field(..., description="Path to the Xamarin solution file")
    configuration: str = Field(..., description="Solution configuration to build")
    platform: str = Field(..., description="Solution platform to build")
    test_to_run: str = Field(
        default="", description="Test name filter (empty means run all tests)"
    )
    simulator_device: str = Field(..., description="Simulator device name")
    simulator_os_version: str = Field(
        default=LATEST_OS_VERSION,
        description="Simulator OS version (e.g. 'iOS 12.1') or 'latest'",
    )
    deploy_dir: Path = Field(..., description="Directory for the test result log")

    @field_validator("solution", mode="before")
    @classmethod
    def _solution_specified(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            raise ValueError("no solution specified")
        return value

    @field_validator("solution")
    @classmethod
    def _solution_exists(cls, value: Path) -> Path:
        if not value.exists():
            raise ValueError(f"solution does not exist at: {value}")
        return value

    @field_validator("configuration", "platform", "simulator_device")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be empty")
        return value

    @field_validator("simulator_os_version")
    @classmethod
    def _default_to_latest(cls, value: str) -> str:
        return value.strip() or LATEST_OS_VERSION
