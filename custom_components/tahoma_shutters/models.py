"""Payload models for the Tahoma local gateway API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _GatewayModel(BaseModel):
    """Base model tolerant to the loosely specified gateway schema."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class StateEntry(_GatewayModel):
    """A single ``name``/``value`` pair from a device state list."""

    name: str = ""
    type: int | None = None
    value: Any = None

    @field_validator("name", mode="before")
    @classmethod
    def _default_name(cls, value: Any) -> Any:
        return "" if value is None else value


class Execution(_GatewayModel):
    """An execution record attached to a device."""

    exec_id: str | None = Field(default=None, alias="execId")
    status: str | None = None


class DeviceDefinition(_GatewayModel):
    """Static device definition published by the gateway."""

    label: str | None = None
    widget_name: str | None = Field(default=None, alias="widgetName")


class Device(_GatewayModel):
    """A device as listed by ``/setup/devices``."""

    device_url: str = Field(alias="deviceURL")
    label: str | None = None
    widget: str | None = None
    definition: DeviceDefinition = Field(default_factory=DeviceDefinition)
    states: list[StateEntry] = Field(default_factory=list)
    executions: list[Execution] = Field(default_factory=list)

    @field_validator("definition", mode="before")
    @classmethod
    def _default_definition(cls, value: Any) -> Any:
        return {} if value is None else value

    @field_validator("states", "executions", mode="before")
    @classmethod
    def _default_list(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def widget_name(self) -> str | None:
        """Return the widget name, preferring the definition."""

        return self.definition.widget_name or self.widget

    @property
    def definition_label(self) -> str | None:
        """Return the label used for classification."""

        return self.definition.label or self.label

    def find_execution(self, exec_id: str) -> Execution | None:
        """Return the execution identified by ``exec_id`` if listed."""

        return next(
            (execution for execution in self.executions if execution.exec_id == exec_id),
            None,
        )
