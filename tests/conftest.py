"""Shared test fixtures for layerlint."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from layerlint.policy import PolicyTable, default_policy
from layerlint.syntax import ImportReference, ParsedFile, ThrowSite

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from layerlint.syntax import SyntaxVisitor

BASE = "com.wakita181009.cleanarchitecture"


class FakeTree:
    """Syntax tree that replays prepared nodes in order."""

    def __init__(self, *nodes: ImportReference | ThrowSite) -> None:
        self.nodes = nodes

    def accept(self, visitor: SyntaxVisitor) -> None:
        for node in self.nodes:
            if isinstance(node, ImportReference):
                visitor.visit_import(node)
            else:
                visitor.visit_throw(node)


@pytest.fixture()
def policy() -> PolicyTable:
    return default_policy(BASE)


@pytest.fixture()
def make_file() -> Callable[..., ParsedFile]:
    """Build a ParsedFile backed by a FakeTree."""

    def _make(
        package: str,
        *nodes: ImportReference | ThrowSite,
        path: str = "/repo/domain/src/main/kotlin/Foo.kt",
    ) -> ParsedFile:
        return ParsedFile(path=path, package_name=package, tree=FakeTree(*nodes))

    return _make


@pytest.fixture()
def kotlin_project(tmp_path: Path) -> Path:
    """Create a small layered Kotlin project.

    Layout:
    - domain/src/main/.../domain/Foo.kt: java.util.List + Spring import
    - application/src/main/.../application/Bar.kt: imports a domain type
    - domain/src/main/.../domain/Baz.kt: throws IllegalStateException
    - presentation/src/main/.../presentation/Qux.kt: throws ResponseStatusException
    - domain/src/test/.../domain/FooTest.kt: forbidden import and throw
    """
    pkg_dir = "com/wakita181009/cleanarchitecture"

    def _write(module: str, source_set: str, layer: str, name: str, body: str) -> None:
        directory = tmp_path / module / "src" / source_set / "kotlin" / pkg_dir / layer
        directory.mkdir(parents=True, exist_ok=True)
        (directory / name).write_text(body)

    _write(
        "domain",
        "main",
        "domain",
        "Foo.kt",
        f"package {BASE}.domain\n"
        "\n"
        "import java.util.List\n"
        "import org.springframework.stereotype.Component\n"
        "\n"
        "class Foo\n",
    )
    _write(
        "application",
        "main",
        "application",
        "Bar.kt",
        f"package {BASE}.application\n"
        "\n"
        f"import {BASE}.domain.SomeType\n"
        "\n"
        "class Bar(val value: SomeType)\n",
    )
    _write(
        "domain",
        "main",
        "domain",
        "Baz.kt",
        f"package {BASE}.domain\n"
        "\n"
        "fun check(value: Int): Int {\n"
        "    if (value < 0) {\n"
        '        throw IllegalStateException("negative")\n'
        "    }\n"
        "    return value\n"
        "}\n",
    )
    _write(
        "presentation",
        "main",
        "presentation",
        "Qux.kt",
        f"package {BASE}.presentation\n"
        "\n"
        "import org.springframework.web.server.ResponseStatusException\n"
        "\n"
        "fun fail(): Nothing {\n"
        "    throw ResponseStatusException(null)\n"
        "}\n",
    )
    _write(
        "domain",
        "test",
        "domain",
        "FooTest.kt",
        f"package {BASE}.domain\n"
        "\n"
        "import org.junit.jupiter.api.Test\n"
        "\n"
        "fun boom() {\n"
        '    throw IllegalStateException("test")\n'
        "}\n",
    )
    return tmp_path
