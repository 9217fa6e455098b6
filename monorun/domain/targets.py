"""Target registry: which external command checks and fixes each target.

A target is one independently formattable/lintable unit of the monorepo.
The set of targets is closed (the Target enum); each tool category maps the
targets it supports to a TargetSpec holding the check (verify-only) and fix
(mutate-in-place) CommandDescriptors. The sentinel "all" selects every
target the category maps.

Dispatch from target to descriptor is an exhaustive match with an explicit
fallthrough, so a target without a mapping fails with UnmappedTargetError
when its spec is requested, before any process is spawned.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from monorun.core.errors import (
    InvalidTargetError,
    ToolConfigNotFoundError,
    UnmappedTargetError,
)
from monorun.core.models import CommandDescriptor

ALL_TARGETS = "all"


class Target(Enum):
    """Known monorepo targets."""

    PACKAGES = "packages"
    WEBSITE = "website"
    CV = "cv"
    API = "api"


class ToolCategory(Enum):
    """Tool categories with their own target mappings."""

    FORMAT = "format"
    LINT = "lint"


@dataclass(frozen=True)
class TargetSpec:
    """Check and fix commands for one target in one tool category.

    Attributes:
        target: The target these commands apply to.
        selector: Working-directory glob or path the tool is pointed at.
        check: Verify-only invocation (non-zero exit = needs fixing).
        fix: Mutate-in-place invocation.
    """

    target: Target
    selector: str
    check: CommandDescriptor
    fix: CommandDescriptor


SpecBuilder = Callable[[Target, bool], TargetSpec]


class TargetRegistry:
    """Maps target names to TargetSpecs for one tool category."""

    def __init__(
        self,
        category: ToolCategory,
        targets: tuple[Target, ...],
        builder: SpecBuilder,
    ):
        """Initialize the registry.

        Args:
            category: Tool category this registry serves.
            targets: Targets selected by "all", in display order.
            builder: Builds the spec for a target; receives whether output
                will be captured (tools pick a quieter verbosity then).
        """
        self.category = category
        self.targets = targets
        self._builder = builder

    @property
    def valid_names(self) -> list[str]:
        return [ALL_TARGETS, *(target.value for target in self.targets)]

    def resolve(self, name: str) -> Target:
        """Resolve a target name.

        Raises:
            InvalidTargetError: If the name is not a known target.
        """
        try:
            return Target(name)
        except ValueError:
            raise InvalidTargetError(name, self.valid_names) from None

    def spec_for(self, target: Target, *, capture_output: bool = True) -> TargetSpec:
        """Build the check/fix commands for a target.

        Raises:
            UnmappedTargetError: If this category has no commands for target.
            ToolConfigNotFoundError: If the tool's config file is missing.
        """
        return self._builder(target, capture_output)


# =============================================================================
# Formatting: prettier for the TypeScript workspaces, dotnet format for the API
# =============================================================================

PRETTIER_BIN = "node_modules/prettier/bin/prettier.cjs"
DOTNET_SOLUTION = "arolariu.slnx"

# Searched in order, relative to the repository root
PRETTIER_CONFIG_CANDIDATES = (
    "prettier.config.ts",
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.js",
    ".prettierrc.cjs",
    "prettier.config.js",
    "prettier.config.cjs",
)

FORMAT_SELECTORS: dict[Target, str] = {
    Target.PACKAGES: "packages/components/**",
    Target.WEBSITE: "sites/arolariu.ro/**",
    Target.CV: "sites/cv.arolariu.ro/**",
}


def find_prettier_config(repo_root: Path) -> str:
    """Return the first prettier config file present under repo_root.

    Raises:
        ToolConfigNotFoundError: If none of the candidates exist.
    """
    for candidate in PRETTIER_CONFIG_CANDIDATES:
        if (repo_root / candidate).exists():
            return candidate
    raise ToolConfigNotFoundError("prettier", PRETTIER_CONFIG_CANDIDATES)


def _prettier_descriptor(
    mode: str, selector: str, config: str, label: str
) -> CommandDescriptor:
    return CommandDescriptor(
        program="node",
        args=(
            PRETTIER_BIN,
            mode,
            selector,
            "--cache",
            "--config",
            config,
            "--config-precedence",
            "prefer-file",
            "--check-ignore-pragma",
        ),
        label=label,
    )


def _dotnet_spec(capture_output: bool) -> TargetSpec:
    verbosity = "quiet" if capture_output else "detailed"
    return TargetSpec(
        target=Target.API,
        selector=DOTNET_SOLUTION,
        check=CommandDescriptor(
            program="dotnet",
            args=(
                "format",
                DOTNET_SOLUTION,
                "--verify-no-changes",
                "--verbosity",
                verbosity,
            ),
            label="Checking .NET API",
        ),
        fix=CommandDescriptor(
            program="dotnet",
            args=("format", DOTNET_SOLUTION, "--verbosity", verbosity),
            label="Formatting .NET API",
        ),
    )


def build_format_registry(repo_root: Path) -> TargetRegistry:
    """Registry for the `format` command."""

    def build(target: Target, capture_output: bool) -> TargetSpec:
        match target:
            case Target.API:
                return _dotnet_spec(capture_output)
            case Target.PACKAGES | Target.WEBSITE | Target.CV:
                selector = FORMAT_SELECTORS[target]
                config = find_prettier_config(repo_root)
                return TargetSpec(
                    target=target,
                    selector=selector,
                    check=_prettier_descriptor(
                        "--check", selector, config, f"Checking {target.value}"
                    ),
                    fix=_prettier_descriptor(
                        "--write", selector, config, f"Formatting {target.value}"
                    ),
                )
            case _:
                raise UnmappedTargetError(target.value, ToolCategory.FORMAT.value)

    return TargetRegistry(
        ToolCategory.FORMAT,
        (Target.PACKAGES, Target.WEBSITE, Target.CV, Target.API),
        build,
    )


# =============================================================================
# Linting: ESLint per workspace; the .NET API has no lint mapping
# =============================================================================

ESLINT_BIN = "node_modules/eslint/bin/eslint.js"

LINT_SELECTORS: dict[Target, str] = {
    Target.PACKAGES: "packages/components",
    Target.WEBSITE: "sites/arolariu.ro",
    Target.CV: "sites/cv.arolariu.ro",
}


def build_lint_registry() -> TargetRegistry:
    """Registry for the `lint` command."""

    def build(target: Target, capture_output: bool) -> TargetSpec:
        match target:
            case Target.PACKAGES | Target.WEBSITE | Target.CV:
                selector = LINT_SELECTORS[target]
                base = (ESLINT_BIN, selector)
                return TargetSpec(
                    target=target,
                    selector=selector,
                    check=CommandDescriptor(
                        program="node", args=base, label=f"Linting {target.value}"
                    ),
                    fix=CommandDescriptor(
                        program="node",
                        args=(*base, "--fix"),
                        label=f"Fixing lint in {target.value}",
                    ),
                )
            case _:
                raise UnmappedTargetError(target.value, ToolCategory.LINT.value)

    return TargetRegistry(
        ToolCategory.LINT,
        (Target.PACKAGES, Target.WEBSITE, Target.CV),
        build,
    )
