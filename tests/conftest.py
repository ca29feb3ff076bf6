from __future__ import annotations

import ast
import importlib
import itertools
import textwrap

import pytest

from cstr_enum.codegen import generate_from_source
from cstr_enum.codegen.core.schema import find_derive_targets


CONSTANTS_SOURCE = '''
from enum import Enum
from typing import Annotated

from cstr_enum import AsCStr, FromCStr, cstr, derive


@derive(AsCStr, FromCStr)
class Constants(Enum):
    Apple = 1
    Bacon: Annotated[int, cstr(name="pork")] = 2
    Cat = 1337
'''

_module_ids = itertools.count()


def make_tree(source: str) -> ast.Module:
    return ast.parse(textwrap.dedent(source))


def make_target(source: str, name: str | None = None):
    tree = make_tree(source)
    targets = find_derive_targets(tree, "decl.py")
    if name is None:
        return targets[0], tree
    return next(t for t in targets if t.name == name), tree


@pytest.fixture
def build_module(tmp_path, monkeypatch):
    """Write a declaration module, generate its companion and import both."""
    monkeypatch.syspath_prepend(str(tmp_path))

    def build(source: str, **config):
        source = textwrap.dedent(source)
        module = f"cstr_decl_{next(_module_ids)}"
        (tmp_path / f"{module}.py").write_text(source, encoding="utf-8")

        result = generate_from_source(
            source, f"{module}.py", "python", config or None, source_module=module
        )
        assert result.success, result.error_message

        (tmp_path / f"{module}_cstr.py").write_text(result.code, encoding="utf-8")
        importlib.invalidate_caches()
        declarations = importlib.import_module(module)
        generated = importlib.import_module(f"{module}_cstr")
        return declarations, generated, result

    return build
