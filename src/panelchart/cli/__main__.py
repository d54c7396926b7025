from __future__ import annotations

import sys

from panelchart.cli.doctor import main as doctor_main
from panelchart.cli.render_chart import main as render_main


def main(argv: list[str] | None = None) -> int:
    argv = sys.argv[1:] if argv is None else argv

    if not argv or argv[0] in {"-h", "--help"}:
        print("Usage: python -m panelchart.cli <command>\n")
        print("Commands:")
        print("  doctor   Check the plotting backend and write a render_record.json")
        print("  render   Render a chart from a JSON data file to an image\n")
        return 0

    cmd = argv[0]
    if cmd == "doctor":
        return doctor_main(argv[1:])
    if cmd == "render":
        return render_main(argv[1:])

    print(f"Unknown command: {cmd}", file=sys.stderr)
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
