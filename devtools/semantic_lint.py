from __future__ import annotations

import ast
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
DSL_FILE = PROJECT_ROOT / "src" / "pytraverse" / "process" / "graph_traversal.py"

_RESERVED = {
    "and", "as", "from", "id", "in", "is", "max", "min", "not", "or", "range", "sum", "with"
}


def _recorded_step_name(func: ast.FunctionDef) -> str | None:
    """Return the Gremlin name a ``GraphTraversal`` step method records, if any."""
    for node in ast.walk(func):
        if (
            isinstance(node, ast.Call)
            and isinstance(node.func, ast.Attribute)
            and node.func.attr == "_add"
            and node.args
            and isinstance(node.args[0], ast.Constant)
            and isinstance(node.args[0].value, str)
        ):
            return node.args[0].value
    return None


def _expected_method_name(step_name: str) -> str:
    """snake_case a Gremlin step name; keywords and builtins take a trailing underscore."""
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in step_name)
    if step_name in {"V", "E"}:
        return step_name
    if snake in _RESERVED:
        return f"{snake}_"
    return snake


class StepMethodVisitor(ast.NodeVisitor):
    def __init__(self) -> None:
        self.violations: list[tuple[int, str]] = []
        self._seen: dict[str, str] = {}

    def visit_ClassDef(self, node: ast.ClassDef) -> None:
        if node.name != "GraphTraversal":
            return
        for item in node.body:
            if not isinstance(item, ast.FunctionDef) or item.name.startswith("_"):
                continue
            step_name = _recorded_step_name(item)
            if step_name is None:
                continue
            expected = _expected_method_name(step_name)
            if item.name != expected:
                self.violations.append(
                    (item.lineno, f"{item.name}() records '{step_name}'; expected {expected}()")
                )
            if step_name in self._seen:
                self.violations.append(
                    (
                        item.lineno,
                        f"'{step_name}' recorded by both "
                        f"{self._seen[step_name]}() and {item.name}()",
                    )
                )
            self._seen[step_name] = item.name


def main() -> int:
    tree = ast.parse(DSL_FILE.read_text(encoding="utf-8"), filename=str(DSL_FILE))
    visitor = StepMethodVisitor()
    visitor.visit(tree)

    if not visitor.violations:
        print("semantic-lint: no step naming issues found.")
        return 0

    for lineno, message in visitor.violations:
        print(f"{DSL_FILE}:{lineno}: {message}")
    print(f"semantic-lint: {len(visitor.violations)} violation(s).")
    return 1


if __name__ == "__main__":
    sys.exit(main())
