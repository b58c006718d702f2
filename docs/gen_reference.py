"""Generate curated MkDocs API reference pages for pytraverse public exports."""

from __future__ import annotations

from collections import Counter, defaultdict
from dataclasses import dataclass
from importlib import import_module
from pathlib import Path

import mkdocs_gen_files

PACKAGE = "pytraverse"
ROOT = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT / "src" / PACKAGE
PUBLIC_MODULES = ("pytraverse.process", "pytraverse.driver", "pytraverse.structure")
SKIP_PACKAGE_PAGES = set(PUBLIC_MODULES)


@dataclass(frozen=True)
class ReferencePage:
    slug: str
    title: str
    tier: str
    summary: str
    symbols: tuple[str, ...]


PAGES: tuple[ReferencePage, ...] = (
    ReferencePage(
        slug="bytecode",
        title="Bytecode API",
        tier="Core",
        summary="Instruction lists, argument binding, and enumerated step arguments.",
        symbols=(
            "pytraverse.process.Bytecode",
            "pytraverse.process.bind_argument",
            "pytraverse.process.EnumToken",
            "pytraverse.process.GraphEnum",
            "pytraverse.process.Order",
            "pytraverse.process.Scope",
            "pytraverse.process.T",
            "pytraverse.process.Column",
            "pytraverse.process.Direction",
            "pytraverse.process.Cardinality",
            "pytraverse.process.Pop",
            "pytraverse.process.Barrier",
            "pytraverse.process.Operator",
            "pytraverse.process.Pick",
        ),
    ),
    ReferencePage(
        slug="engine",
        title="Iteration Engine API",
        tier="Core",
        summary="Traversals, traversers, the strategy pipeline, and engine errors.",
        symbols=(
            "pytraverse.process.Traversal",
            "pytraverse.process.TraversalItem",
            "pytraverse.process.TraversalIterator",
            "pytraverse.process.AppliedState",
            "pytraverse.process.Traverser",
            "pytraverse.process.TraversalStrategy",
            "pytraverse.process.TraversalStrategies",
            "pytraverse.process.TraversalError",
            "pytraverse.process.AnonymousTraversalError",
            "pytraverse.process.BytecodeFrozenError",
            "pytraverse.process.TraversalStateError",
            "pytraverse.process.MalformedTraverserError",
        ),
    ),
    ReferencePage(
        slug="dsl",
        title="Step DSL API",
        tier="Core",
        summary="Traversal sources, chained steps, and the anonymous traversal factory.",
        symbols=(
            "pytraverse.process.traversal",
            "pytraverse.process.AnonymousTraversalSource",
            "pytraverse.process.GraphTraversalSource",
            "pytraverse.process.GraphTraversal",
            "pytraverse.process.__",
            "pytraverse.structure.Graph",
        ),
    ),
    ReferencePage(
        slug="driver",
        title="Remote Driver API",
        tier="Integration Surface",
        summary="Remote connection protocol, the remote strategy, and the in-memory connection.",
        symbols=(
            "pytraverse.driver.RemoteConnection",
            "pytraverse.driver.RemoteStrategy",
            "pytraverse.driver.RemoteTraversal",
            "pytraverse.driver.StaticRemoteConnection",
        ),
    ),
)


def _validate_manifest() -> None:
    exported = {module: set(import_module(module).__all__) for module in PUBLIC_MODULES}
    assigned: dict[str, list[str]] = defaultdict(list)
    unknown_modules: set[str] = set()

    for page in PAGES:
        for symbol in page.symbols:
            module_name, sep, export_name = symbol.rpartition(".")
            if not sep:
                raise RuntimeError(f"Invalid symbol reference '{symbol}'.")
            if module_name not in exported:
                unknown_modules.add(module_name)
                continue
            assigned[module_name].append(export_name)

    problems: list[str] = []
    if unknown_modules:
        modules = ", ".join(sorted(unknown_modules))
        problems.append(f"Symbols reference unmanaged modules: {modules}")

    for module_name, exported_names in exported.items():
        counts = Counter(assigned[module_name])
        duplicates = sorted(name for name, count in counts.items() if count > 1)
        missing = sorted(exported_names - set(counts))
        extra = sorted(set(counts) - exported_names)

        if duplicates:
            problems.append(f"{module_name}: duplicate symbols: {', '.join(duplicates)}")
        if missing:
            problems.append(f"{module_name}: missing exports: {', '.join(missing)}")
        if extra:
            problems.append(f"{module_name}: unknown symbols: {', '.join(extra)}")

    if problems:
        message = "API reference manifest does not match module __all__. " + " ".join(problems)
        raise RuntimeError(message)


def _write_curated_page(page: ReferencePage) -> None:
    doc_rel_path = Path("reference/api") / f"{page.slug}.md"
    lines = [f"# {page.title}", "", f"**Tier:** {page.tier}", "", page.summary, ""]
    for symbol in page.symbols:
        lines.append(f"::: {symbol}")
        lines.append("")

    with mkdocs_gen_files.open(doc_rel_path, "w") as fd:
        fd.write("\n".join(lines).rstrip() + "\n")
    mkdocs_gen_files.set_edit_path(doc_rel_path, Path("docs/gen_reference.py"))


def _write_index() -> None:
    lines = ["# API Reference", ""]
    for tier in dict.fromkeys(page.tier for page in PAGES):
        lines.extend([f"## {tier} Pages", ""])
        lines.extend(f"- [{p.title}](api/{p.slug}.md)" for p in PAGES if p.tier == tier)
        lines.append("")

    with mkdocs_gen_files.open("reference/index.md", "w") as fd:
        fd.write("\n".join(lines).rstrip() + "\n")
    mkdocs_gen_files.set_edit_path("reference/index.md", Path("docs/gen_reference.py"))


def _write_module_pages() -> None:
    for module_path in sorted(SRC_DIR.rglob("*.py")):
        rel = module_path.relative_to(SRC_DIR)
        if rel.name == "__init__.py":
            module_parts = [PACKAGE, *rel.parent.parts]
            doc_rel_path = Path("reference/api").joinpath(*rel.parent.parts).with_suffix(".md")
        else:
            module_parts = [PACKAGE, *rel.with_suffix("").parts]
            doc_rel_path = (
                Path("reference/api").joinpath(*rel.with_suffix("").parts).with_suffix(".md")
            )

        identifier = ".".join(module_parts)
        if identifier in SKIP_PACKAGE_PAGES:
            continue
        with mkdocs_gen_files.open(doc_rel_path, "w") as fd:
            fd.write(f"::: {identifier}\n")

        mkdocs_gen_files.set_edit_path(doc_rel_path, module_path.relative_to(ROOT))


_validate_manifest()
for reference_page in PAGES:
    _write_curated_page(reference_page)
_write_index()
_write_module_pages()
