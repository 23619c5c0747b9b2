"""Availability sets."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from azure_armrest.configuration import ArmrestConfiguration
from azure_armrest.resource_group_based import ResourceGroupBasedService


class AvailabilitySetService(ResourceGroupBasedService):
    """Manage ``Microsoft.Compute/availabilitySets``."""

    def __init__(
        self,
        armrest_configuration: ArmrestConfiguration,
        options: Mapping[str, Any] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            armrest_configuration, "availabilitySets", "Microsoft.Compute", options, **kwargs
        )
