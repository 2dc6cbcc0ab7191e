# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
"""
strict_builder: builder generator for record declarations.

Pipeline: parse declarations (`strict_builder.parser`), classify fields and
emit Python builder source (`strict_builder.derive`). The CLI entrypoint is
`strict_builder.cli:main`.
"""

from strict_builder.config import GeneratorConfig
from strict_builder.derive import derive_builder, generate_module
from strict_builder.errors import GenerationError
from strict_builder.runtime import MissingFieldError

__all__ = [
	"GeneratorConfig",
	"GenerationError",
	"MissingFieldError",
	"derive_builder",
	"generate_module",
]
