"""Validation of plugin options from configuration sections."""

from typing import TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from ispmonitor.core.config import ConfigurationError, Section


class PluginOptions(BaseModel):
    """Base model for the ``options`` mapping of a section.

    Unknown keys are ignored so that configs written for newer versions
    still load.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)


OptionsT = TypeVar("OptionsT", bound=PluginOptions)


def parse_options(model: type[OptionsT], section: Section) -> OptionsT:
    """Validate a section's options against a model.

    Raises:
        ConfigurationError: If the options do not satisfy the model.
    """
    try:
        return model.model_validate(dict(section.options))
    except ValidationError as exc:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in error['loc']) or 'options'}: {error['msg']}"
            for error in exc.errors()
        )
        raise ConfigurationError(
            f"invalid options for {section.type} {section.name!r}: {errors}"
        ) from exc
