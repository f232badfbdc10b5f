"""Template resolution for {{ root.path }} references in node configuration.

Grammar, applied in a single left-to-right scan:

    template  := pure | mixed
    pure      := "{{" reference "}}"            (whole trimmed string)
    mixed     := (text | "{{" reference "}}")*
    reference := root ("." segment)*

A pure template resolves to the referenced value at its own type. References
embedded in mixed text are coerced to text and substituted in place.
"""

import re
from typing import Any, List, NamedTuple, Union
from shared.exceptions import ReferenceResolutionError, TriggerReferenceError
from shared.types import Workflow
from shared.utils import compact_json

TEMPLATE_REF_PATTERN = re.compile(r"\{\{([^{}]+)\}\}")

TRIGGER_ROOT = "trigger"
CONFIG_ROOT = "config"


class Reference(NamedTuple):
    root: str
    segments: List[str]
    text: str


class ParsedTemplate(NamedTuple):
    pure: bool
    parts: List[Union[str, Reference]]


def parse_reference(raw: str) -> Reference:
    text = raw.strip()
    root, *rest = text.split(".")
    return Reference(root=root.strip(), segments=[s for s in rest if s], text=text)


def parse_template(text: str) -> ParsedTemplate:
    parts: List[Union[str, Reference]] = []
    position = 0
    for match in TEMPLATE_REF_PATTERN.finditer(text):
        if match.start() > position:
            parts.append(text[position:match.start()])
        parts.append(parse_reference(match.group(1)))
        position = match.end()
    if position < len(text):
        parts.append(text[position:])

    references = [part for part in parts if isinstance(part, Reference)]
    pure = len(references) == 1 and all(
        isinstance(part, Reference) or not part.strip() for part in parts
    )
    return ParsedTemplate(pure=pure, parts=parts)


def stringify_segment(value: Any) -> str:
    """Text form of a value substituted into mixed text"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, float)):
        return str(value)
    return compact_json(value)


class TemplateResolver:

    def __init__(self, workflow: Workflow):
        self.workflow = workflow

    def resolve(self, config: Any) -> Any:
        """Recursively resolves every template string inside a config value"""
        if isinstance(config, str):
            return self.resolve_value(config)
        if isinstance(config, dict):
            return {k: self.resolve(v) for k, v in config.items()}
        if isinstance(config, list):
            return [self.resolve(item) for item in config]
        return config

    def resolve_value(self, text: str) -> Any:
        template = parse_template(text)
        if template.pure:
            reference = next(part for part in template.parts if isinstance(part, Reference))
            return self.resolve_reference(reference)

        return "".join(
            stringify_segment(self.resolve_reference(part)) if isinstance(part, Reference) else part
            for part in template.parts
        )

    def resolve_reference(self, reference: Reference) -> Any:
        if reference.root == TRIGGER_ROOT:
            raise TriggerReferenceError(
                f"Cannot resolve trigger reference '{{{{{reference.text}}}}}' during node execution preview."
            )

        if reference.root == CONFIG_ROOT:
            config = self.workflow.global_config.model_dump(mode="json", by_alias=True)
            return _walk_path(config, reference)

        source = self.workflow.get_node(reference.root)
        if source is None:
            raise ReferenceResolutionError(
                f"Referenced node '{reference.root}' was not found for '{{{{{reference.text}}}}}'.",
                node_id=reference.root
            )

        if source.data.last_execution is None:
            raise ReferenceResolutionError(
                f"Node '{reference.root}' must be executed before resolving '{{{{{reference.text}}}}}'.",
                node_id=reference.root
            )

        return _walk_path(source.data.last_execution.normalized, reference)


def _walk_path(value: Any, reference: Reference) -> Any:
    current = value
    for segment in reference.segments:
        # Arrays are not indexable by this path grammar
        if not isinstance(current, dict):
            raise ReferenceResolutionError(
                f"Reference '{{{{{reference.text}}}}}' could not be resolved at '{segment}'."
            )
        if segment not in current:
            raise ReferenceResolutionError(
                f"Reference '{{{{{reference.text}}}}}' does not exist on the executed output."
            )
        current = current[segment]
    return current
