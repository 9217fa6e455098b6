"""Code generation tasks.

Each task is a TypeScript script under scripts/ executed through tsx.
Tasks always run in enum order.
"""

from __future__ import annotations

from enum import Enum

from monorun.core.models import CommandDescriptor


class GeneratorTask(Enum):
    """Generation tasks, in execution order."""

    ENV = "env"
    ACKS = "acks"
    I18N = "i18n"
    GQL = "gql"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    def descriptor(self, verbose: bool = False) -> CommandDescriptor:
        args: tuple[str, ...] = ("tsx", f"scripts/generate.{self.value}.ts")
        if verbose:
            args = (*args, "--verbose")
        return CommandDescriptor(program="npx", args=args, label=self.description)


_DESCRIPTIONS = {
    GeneratorTask.ENV: "environment configuration generator",
    GeneratorTask.ACKS: "acknowledgements (licenses) generator",
    GeneratorTask.I18N: "internationalization (i18n) generator",
    GeneratorTask.GQL: "GraphQL types generator",
}


def ordered_tasks(selected: set[GeneratorTask]) -> list[GeneratorTask]:
    """Selected tasks in fixed execution order."""
    return [task for task in GeneratorTask if task in selected]
