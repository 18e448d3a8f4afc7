"""Skeleton of converted ``.main.py`` workflow modules."""

from __future__ import annotations

from dataclasses import dataclass

from workflow_converter.errors import TemplateError

DATA_PLACEHOLDER = "<<WORKFLOW_DATA>>"
COMMENTS_PLACEHOLDER = "<<WORKFLOW_COMMENTS>>"

WORKFLOW_TEMPLATE = f"""\
#!/usr/bin/env python3
from workflow_converter.authoring import lines, workflow
from workflow_converter.generation import generate_workflow_yaml

{COMMENTS_PLACEHOLDER}wf = workflow({DATA_PLACEHOLDER})


if __name__ == "__main__":
    generate_workflow_yaml(wf, __file__)
"""


@dataclass(frozen=True)
class TemplateSkeleton:
    """Source text split around the spot where the workflow payload goes.

    The split happens once, before any workflow data is rendered, so
    payload text can never be mistaken for a placeholder.
    """

    prefix: str
    suffix: str

    @classmethod
    def from_template(cls, template: str) -> TemplateSkeleton:
        """Split ``template`` at its single data placeholder."""
        count = template.count(DATA_PLACEHOLDER)
        if count != 1:
            raise TemplateError(
                f"Template must contain {DATA_PLACEHOLDER} exactly once, found {count}."
            )
        comments = template.count(COMMENTS_PLACEHOLDER)
        if comments > 1:
            raise TemplateError(
                f"Template may contain {COMMENTS_PLACEHOLDER} at most once, found {comments}."
            )
        prefix, suffix = template.split(DATA_PLACEHOLDER)
        return cls(prefix=prefix, suffix=suffix)

    def with_comments(self, comments: str) -> TemplateSkeleton:
        """Return a skeleton with the comment block substituted (or removed)."""
        return TemplateSkeleton(
            prefix=self.prefix.replace(COMMENTS_PLACEHOLDER, comments, 1),
            suffix=self.suffix.replace(COMMENTS_PLACEHOLDER, comments, 1),
        )

    def assemble(self, payload: str) -> str:
        """Join prefix, rendered payload and suffix."""
        return self.prefix + payload + self.suffix


def synthesize_template() -> TemplateSkeleton:
    """Build the skeleton used for every converted workflow."""
    return TemplateSkeleton.from_template(WORKFLOW_TEMPLATE)
