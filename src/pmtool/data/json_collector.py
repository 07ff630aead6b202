# Author: PB & Claude
# Maintainer: PB
# Original date: 2025.06.07
# License: (c) HRDAG, 2025, GPL-2 or newer
#
# ------
# src/pmtool/data/json_collector.py

import dataclasses
import json
from datetime import datetime
from enum import Enum
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel


class JSONCollector:
    """Collects structured data from CLI commands for scripting and tests.

    When enabled, captures operation results and metadata as JSON.
    When disabled, all methods are no-ops.
    """

    def __init__(self, enabled: bool = False) -> None:
        self.enabled = enabled
        self.data = {} if enabled else None

    def capture_success(self, result: Any = None) -> None:
        """Capture successful operation data.

        Args:
            result: Mapping of result fields, or any object to record under "result"
        """
        if not self.enabled:
            return

        self.data["status"] = "success"
        self.data["timestamp"] = datetime.now().isoformat()

        if isinstance(result, dict):
            for key, value in result.items():
                self.data[key] = self._extract(value)
        elif result is not None:
            self.data["result"] = self._extract(result)

    def capture_error(self, error: Exception, partial_result: Any = None) -> None:
        """Capture error operation data."""
        if not self.enabled:
            return

        self.data["status"] = "error"
        self.data["timestamp"] = datetime.now().isoformat()
        self.data["error"] = str(error)
        self.data["error_type"] = type(error).__name__

        if partial_result:
            self.data["partial_result"] = self._extract(partial_result)

    def output(self) -> None:
        """Output collected JSON data to stdout if enabled."""
        if not self.enabled:
            return

        json_str = json.dumps(self.data, indent=2, default=str)
        print(f"<JSON-STDOUT>{json_str}</JSON-STDOUT>")

    def _extract(self, value: Any) -> Any:
        """Convert results into JSON-friendly structures."""
        if isinstance(value, BaseModel):
            return value.model_dump(mode="json")
        if dataclasses.is_dataclass(value) and not isinstance(value, type):
            data = {f.name: self._extract(getattr(value, f.name)) for f in dataclasses.fields(value)}
            # expose the computed success flag of outcome types
            if hasattr(type(value), "success"):
                data["success"] = value.success
            return data
        if isinstance(value, Enum):
            return value.value
        if isinstance(value, PurePath):
            return str(value)
        if isinstance(value, dict):
            return {str(k): self._extract(v) for k, v in value.items()}
        if isinstance(value, (list, tuple, set)):
            return [self._extract(v) for v in value]
        return value
