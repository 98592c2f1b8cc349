"""Layer classifier: map a declared Kotlin package to a logical architecture layer."""

from __future__ import annotations

import enum
from pathlib import PurePath

DEFAULT_PROJECT_BASE = "com.wakita181009.cleanarchitecture"

# Files whose path contains this segment are test sources.
DEFAULT_TEST_MARKER = "/test/"


class LayerId(enum.Enum):
    """Logical layers, ordered from the innermost to the outermost ring."""

    DOMAIN = "domain"
    APPLICATION = "application"
    INFRASTRUCTURE = "infrastructure"
    PRESENTATION = "presentation"
    FRAMEWORK = "framework"
    UNCLASSIFIED = "unclassified"


_LAYERS_BY_TOKEN: dict[str, LayerId] = {
    layer.value: layer for layer in LayerId if layer is not LayerId.UNCLASSIFIED
}


def classify(package_path: str, project_base: str = DEFAULT_PROJECT_BASE) -> LayerId:
    """Return the layer a package belongs to.

    The project base is stripped and the first remaining segment is matched
    exactly against the known layers.  Packages outside the project base, the
    base package itself and unknown tokens all yield ``UNCLASSIFIED``.
    """
    prefix = f"{project_base}."
    if not package_path.startswith(prefix):
        return LayerId.UNCLASSIFIED

    token = package_path[len(prefix) :].split(".", 1)[0]
    return _LAYERS_BY_TOKEN.get(token, LayerId.UNCLASSIFIED)


def is_test_source(file_path: str | PurePath, marker: str = DEFAULT_TEST_MARKER) -> bool:
    """Return True if *file_path* lives under a test-source directory."""
    if isinstance(file_path, PurePath):
        file_path = file_path.as_posix()
    else:
        file_path = file_path.replace("\\", "/")
    return marker in file_path
