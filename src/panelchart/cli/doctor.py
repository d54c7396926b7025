from __future__ import annotations

import sys

from panelchart.core.render_record import (
    RenderRecord,
    ensure_record_dir,
    generate_record_id,
    write_render_record,
)
from panelchart.core.settings import get_settings
from panelchart.viz.backend import RenderBackend


def _package_version() -> str:
    # Prefer importlib.metadata so it works when installed
    try:
        from importlib.metadata import PackageNotFoundError, version

        return version("panelchart")
    except PackageNotFoundError:
        return "unknown"


def main(argv: list[str] | None = None) -> int:
    settings = get_settings()

    record_id = generate_record_id(prefix="doctor")
    record_dir = ensure_record_dir(settings.outputs_dir, record_id)

    backend = RenderBackend.detect()

    print("panelchart doctor")
    print(f"python: {sys.version.split()[0]}")
    print(f"package_version: {_package_version()}")
    print(f"backend: {backend.name}")
    print(f"animation: {backend.supports_animation}")
    print(f"options_file: {settings.options_file or '-'}")

    record = RenderRecord(record_id=record_id, variant="doctor", animated=backend.supports_animation)
    path = write_render_record(record_dir, record)
    print(f"render_record: {path}")

    return 0
