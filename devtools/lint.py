import subprocess
import sys
from pathlib import Path

from funlog import log_calls
from rich import get_console, reconfigure
from rich import print as rprint

PROJECT_ROOT = Path.cwd().resolve()
SRC_PATHS = [
    str(PROJECT_ROOT / "src"),
    str(PROJECT_ROOT / "tests"),
    str(PROJECT_ROOT / "devtools"),
]
DOC_PATHS = [str(PROJECT_ROOT / "SPEC_FULL.md"), str(PROJECT_ROOT / "DESIGN.md")]

# No emojis on legacy windows.
reconfigure(emoji=not get_console().options.legacy_windows)


def main():
    rprint()

    steps = [
        ["codespell", "--write-changes", *SRC_PATHS, *DOC_PATHS],
        ["ruff", "check", "--fix", *SRC_PATHS],
        ["ruff", "format", *SRC_PATHS],
        [sys.executable, str(PROJECT_ROOT / "devtools" / "semantic_lint.py")],
        ["ty", "check", "--project", str(PROJECT_ROOT), *SRC_PATHS],
    ]
    errcount = sum(run(cmd) for cmd in steps)

    rprint()
    if errcount != 0:
        rprint(f"[bold red]:x: Lint failed with {errcount} errors.[/bold red]")
    else:
        rprint("[bold green]:white_check_mark: Lint passed![/bold green]")
    rprint()

    return errcount


@log_calls(level="warning", show_timing_only=True)
def run(cmd: list[str]) -> int:
    rprint()
    rprint(f"[bold green]:arrow_forward: {' '.join(cmd)}[/bold green]")

    try:
        subprocess.run(cmd, text=True, check=True)
    except subprocess.CalledProcessError as e:
        rprint(f"[bold red]Error: {e}[/bold red]")
        return 1
    except FileNotFoundError as e:
        rprint(f"[bold red]Executable not found: {e}[/bold red]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
