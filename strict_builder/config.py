# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
Generator configuration.

Defaults reproduce the conventional surface: `#[builder(each = "...")]`,
`Option<T>` as the optional wrapper, `Vec<T>` as the sequence wrapper, and a
`<Name>Builder` class reached through `<Name>.builder()` and finished with
`build()`.
"""

from __future__ import annotations

import json
import keyword
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Mapping

# Host type name -> Python annotation name. Generic wrappers keep their
# arguments (`Vec<T>` -> `list[T]`); names missing here pass through as-is.
DEFAULT_TYPE_MAP: Mapping[str, str] = {
	"String": "str",
	"str": "str",
	"char": "str",
	"bool": "bool",
	"u8": "int",
	"u16": "int",
	"u32": "int",
	"u64": "int",
	"u128": "int",
	"usize": "int",
	"i8": "int",
	"i16": "int",
	"i32": "int",
	"i64": "int",
	"i128": "int",
	"isize": "int",
	"f32": "float",
	"f64": "float",
	"Vec": "list",
	"VecDeque": "list",
	"Option": "Optional",
	"HashMap": "dict",
	"BTreeMap": "dict",
	"HashSet": "set",
	"BTreeSet": "set",
	"Box": "",
	"Rc": "",
	"Arc": "",
}

_CONFIG_FORMAT = "strict-builder-config"
_CONFIG_VERSION = 0


@dataclass(frozen=True)
class GeneratorConfig:
	"""
	Names the generator recognizes and emits.

	A type_map entry mapped to "" marks a transparent wrapper: `Box<T>` renders
	as `T`.
	"""

	attribute_name: str = "builder"
	each_key: str = "each"
	optional_wrapper: str = "Option"
	sequence_wrapper: str = "Vec"
	builder_suffix: str = "Builder"
	factory_name: str = "builder"
	build_method: str = "build"
	type_map: Mapping[str, str] = field(default_factory=lambda: dict(DEFAULT_TYPE_MAP))

	def __post_init__(self) -> None:
		# These names are emitted as Python identifiers.
		for key, name in (
			("factory_name", self.factory_name),
			("build_method", self.build_method),
			("builder_suffix", "X" + self.builder_suffix),
		):
			if not name.isidentifier() or keyword.iskeyword(name) or name.startswith("__"):
				raise ValueError(f"generator config key '{key}' must be a usable Python identifier")

	def builder_name(self, record_name: str) -> str:
		return f"{record_name}{self.builder_suffix}"


def load_config_json(path: Path) -> GeneratorConfig:
	"""
	Load a generator config file.

	Format (pinned for v0, JSON):
	{
	  "format": "strict-builder-config",
	  "version": 0,
	  "attribute_name": "builder",        // optional, any GeneratorConfig str field
	  "type_map": { "Uuid": "uuid.UUID" } // optional, merged over the defaults
	}
	"""
	obj = json.loads(path.read_text(encoding="utf-8"))
	if not isinstance(obj, dict):
		raise ValueError("generator config must be a JSON object")
	if obj.get("format") != _CONFIG_FORMAT or obj.get("version") != _CONFIG_VERSION:
		raise ValueError("unsupported generator config format/version")

	known = {f.name for f in fields(GeneratorConfig)}
	kwargs: dict[str, object] = {}
	for key, value in obj.items():
		if key in ("format", "version"):
			continue
		if key not in known:
			raise ValueError(f"unknown generator config key '{key}'")
		if key == "type_map":
			if not isinstance(value, dict) or not all(
				isinstance(k, str) and isinstance(v, str) for k, v in value.items()
			):
				raise ValueError("generator config type_map must map strings to strings")
			merged = dict(DEFAULT_TYPE_MAP)
			merged.update(value)
			kwargs[key] = merged
			continue
		if not isinstance(value, str) or not value:
			raise ValueError(f"generator config key '{key}' must be a non-empty string")
		kwargs[key] = value
	return GeneratorConfig(**kwargs)  # type: ignore[arg-type]


__all__ = ["DEFAULT_TYPE_MAP", "GeneratorConfig", "load_config_json"]
