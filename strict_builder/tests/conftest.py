# vim: set noexpandtab: -*- indent-tabs-mode: t -*-
from __future__ import annotations

import itertools
import sys
import types

import pytest

_counter = itertools.count()


@pytest.fixture
def load_generated(monkeypatch):
	"""
	Execute generated builder source as a real module and return it.

	The module is registered in sys.modules for the duration of the test:
	dataclasses resolves string annotations through the class's module.
	"""

	def _load(source: str) -> types.ModuleType:
		name = f"_strict_builder_generated_{next(_counter)}"
		module = types.ModuleType(name)
		monkeypatch.setitem(sys.modules, name, module)
		exec(compile(source, f"<{name}>", "exec"), module.__dict__)
		return module

	return _load
