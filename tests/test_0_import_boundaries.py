"""Guards on how src/logconsole imports things.

1. No function-level `import logconsole.*`: it shadows the module-level
   `logconsole` binding for the whole enclosing function.
2. logconsole.core stays toolkit-free: no textual or rich imports.

This file is named with `test_0_` so it runs first.
"""

import ast
import os


_SRC_ROOT = os.path.join(os.path.dirname(__file__), "..", "src", "logconsole")

_UI_PACKAGES = ("textual", "rich")


def _parsed_sources():
    for dirpath, _dirs, files in os.walk(_SRC_ROOT):
        for fname in files:
            if not fname.endswith(".py"):
                continue
            path = os.path.join(dirpath, fname)
            with open(path) as f:
                tree = ast.parse(f.read(), filename=path)
            yield os.path.relpath(path, _SRC_ROOT), tree


def _imported_names(node):
    if isinstance(node, ast.Import):
        return [alias.name for alias in node.names]
    if isinstance(node, ast.ImportFrom) and node.module:
        return [node.module]
    return []


def test_no_function_level_logconsole_imports():
    violations = []
    for rel, tree in _parsed_sources():
        for node in ast.walk(tree):
            if not isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
                continue
            for child in ast.walk(node):
                if isinstance(child, ast.Import):
                    for alias in child.names:
                        if alias.name.startswith("logconsole"):
                            violations.append(f"{rel}:{child.lineno} function-level `import {alias.name}`")
    assert violations == [], (
        "Function-level `import logconsole.*` shadows the module binding and "
        "causes UnboundLocalError. Move these to module level:\n"
        + "\n".join(f"  {v}" for v in violations)
    )


def test_core_does_not_import_ui_toolkits():
    violations = []
    for rel, tree in _parsed_sources():
        if not rel.startswith("core" + os.sep):
            continue
        for node in ast.walk(tree):
            for name in _imported_names(node):
                if name.split(".")[0] in _UI_PACKAGES:
                    violations.append(f"{rel}:{node.lineno} imports {name}")
    assert violations == []
