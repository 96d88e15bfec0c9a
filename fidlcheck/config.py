# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Validator configuration.

Every switch the validators honour is an explicit field here; nothing is
probed from the environment at validation time.

On disk the configuration is a JSON object (pinned format, v0):
{
  "format": "fidlcheck-config",
  "version": 0,
  "enabled": true,
  "whole_project": false,
  "package_collision_check": true,
  "same_name_check": true,
  "message_prefix": "",
  "skip_dirs": ["bin"]
}
All keys except `format`/`version` are optional; unknown keys are ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping, Tuple

CONFIG_FORMAT = "fidlcheck-config"
CONFIG_VERSION = 0
DEFAULT_CONFIG_NAME = "fidlcheck.json"


class ConfigError(ValueError):
	"""Malformed or unsupported configuration file."""


@dataclass(frozen=True)
class ValidatorConfig:
	"""
	- `enabled`: a disabled validator reports nothing.
	- `whole_project`: index every project file, not just the import closure;
	  collisions with files outside the closure become warnings.
	- `package_collision_check`: element name vs. package collisions.
	- `same_name_check`: same element name declared twice in one package.
	- `message_prefix`: prepended to every diagnostic message.
	- `skip_dirs`: directory names ignored when enumerating project files.
	"""

	enabled: bool = True
	whole_project: bool = False
	package_collision_check: bool = True
	same_name_check: bool = True
	message_prefix: str = ""
	skip_dirs: Tuple[str, ...] = ("bin",)

	def with_overrides(self, **overrides: Any) -> "ValidatorConfig":
		"""Copy with the non-None overrides applied (CLI flags)."""
		return replace(self, **{k: v for k, v in overrides.items() if v is not None})


_BOOL_KEYS = ("enabled", "whole_project", "package_collision_check", "same_name_check")


def config_from_mapping(obj: Mapping[str, Any]) -> ValidatorConfig:
	if obj.get("format") != CONFIG_FORMAT or obj.get("version") != CONFIG_VERSION:
		raise ConfigError("unsupported config format/version")
	values: dict[str, Any] = {}
	for key in _BOOL_KEYS:
		if key in obj:
			if not isinstance(obj[key], bool):
				raise ConfigError(f"config key '{key}' must be a boolean")
			values[key] = obj[key]
	if "message_prefix" in obj:
		if not isinstance(obj["message_prefix"], str):
			raise ConfigError("config key 'message_prefix' must be a string")
		values["message_prefix"] = obj["message_prefix"]
	if "skip_dirs" in obj:
		skip = obj["skip_dirs"]
		if not isinstance(skip, list) or not all(isinstance(s, str) for s in skip):
			raise ConfigError("config key 'skip_dirs' must be a list of strings")
		values["skip_dirs"] = tuple(skip)
	return ValidatorConfig(**values)


def load_config_json(path: Path) -> ValidatorConfig:
	"""Load a config file; raises ConfigError on any problem with it."""
	try:
		text = path.read_text(encoding="utf-8")
	except OSError as err:
		raise ConfigError(f"cannot read config {path}: {err.strerror or err}") from err
	try:
		obj = json.loads(text)
	except json.JSONDecodeError as err:
		raise ConfigError(f"config {path} is not valid JSON: {err.msg} (line {err.lineno})") from err
	if not isinstance(obj, dict):
		raise ConfigError("config must be a JSON object")
	return config_from_mapping(obj)


__all__ = [
	"CONFIG_FORMAT",
	"CONFIG_VERSION",
	"DEFAULT_CONFIG_NAME",
	"ConfigError",
	"ValidatorConfig",
	"config_from_mapping",
	"load_config_json",
]
