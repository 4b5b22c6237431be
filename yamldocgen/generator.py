"""Pipeline orchestration: load, discover, synthesize, render, write."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .config import GeneratorConfig, load_config
from .errors import ConfigError, TypeNotFoundError
from .golang.loader import ModuleLoader
from .golang.source import ModuleSet
from .logging import get_logger
from .models import DocumentSet, ResolvedSet
from .rendering.renderer import Renderer
from .resolver.classifier import FieldClassifier
from .resolver.resolver import TypeGraphResolver
from .resolver.synthesizer import synthesize
from .source_scanner import SourceScanner

DEFAULT_PACKAGE = "main"
DEFAULT_FORMAT = "go"


@dataclass
class GenerateRequest:
    """Inputs of one generation run; unset values fall back to the config file."""

    path: Path
    structure: str
    output: Optional[Path] = None
    package: Optional[str] = None
    format: Optional[str] = None


@dataclass
class GenerationResult:
    path: Path
    document: DocumentSet
    resolved: ResolvedSet


class Generator:
    """Coordinates one documentation generation pass."""

    def __init__(
        self,
        loader: ModuleLoader | None = None,
        resolver: TypeGraphResolver | None = None,
        renderer: Renderer | None = None,
    ) -> None:
        self._loader = loader
        self._resolver = resolver
        self._renderer = renderer
        self.logger = get_logger("generator")

    def run(self, request: GenerateRequest) -> GenerationResult:
        root = Path(request.path).expanduser().resolve()
        config = load_config(root)

        output = request.output or config.output
        if output is None:
            raise ConfigError("No output file given; pass --output or set `output` in .yamldocgen.yml")
        package = request.package or config.package or DEFAULT_PACKAGE
        fmt = request.format or config.format or DEFAULT_FORMAT

        self.logger.info("Generating documentation for %s from %s", request.structure, root)
        modules = self.load(root, config)
        resolved = self.resolver_for(config).discover(modules.root_modules, request.structure)
        self.logger.debug("Discovered %d types: %s", len(resolved), ", ".join(resolved.names()))

        document = synthesize(
            resolved,
            name=resolved.root.name,
            package=package,
            output=str(output),
            header=config.header,
        )
        renderer = self._renderer or Renderer(config.templates_dir)
        text = renderer.render(document, fmt)
        written = renderer.write(text, Path(output))
        self.logger.info("Documentation written to %s", written)
        return GenerationResult(path=written, document=document, resolved=resolved)

    def list_types(self, path: Path) -> List[str]:
        """Return the documentable struct types declared in the root package."""
        root = Path(path).expanduser().resolve()
        config = load_config(root)
        modules = self.load(root, config)
        names: List[str] = []
        for module in modules.root_modules:
            for decl in module.declarations():
                if decl.is_struct and decl.exported and decl.name not in names:
                    names.append(decl.name)
        if not names:
            raise TypeNotFoundError(f"failed to find types that could be documented in {root}")
        return names

    def load(self, root: Path, config: GeneratorConfig) -> ModuleSet:
        loader = self._loader or ModuleLoader(scanner=SourceScanner(config.exclude_paths))
        return loader.load(root)

    def resolver_for(self, config: GeneratorConfig) -> TypeGraphResolver:
        if self._resolver is not None:
            return self._resolver
        return TypeGraphResolver(
            classifier=FieldClassifier(tags=config.tags, nodoc_marker=config.nodoc_marker)
        )


__all__ = ["GenerateRequest", "GenerationResult", "Generator"]
