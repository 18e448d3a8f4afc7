"""Property-based checks that rendered modules and YAML reproduce documents."""

from __future__ import annotations

import os

from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st

from workflow_converter.adapters.renderers import ExpressionPrinter, format_literal
from workflow_converter.codec import parse, serialize
from workflow_converter.template import synthesize_template
from workflow_converter.types import StructuredDocument

_HYPOTHESIS_MAX_EXAMPLES = int(os.getenv("HYPOTHESIS_MAX_EXAMPLES", "60"))

_text = st.text(
    alphabet=st.characters(
        exclude_categories=("Cs", "Cc", "Zl", "Zp"),
        include_characters="\n\t",
    ),
    max_size=40,
)
_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(),
    st.floats(allow_nan=False),
    _text,
)
_documents = st.recursive(
    _scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(_text, children, max_size=4),
    ),
    max_leaves=20,
)
_workflows = st.dictionaries(_text, _documents, max_size=4)

_yaml_text = st.text(alphabet="abc xyz-_:#'\"\n019", max_size=30)
_yaml_keys = st.text(alphabet="abc xyz-_:#'\"019", max_size=12)
_yaml_documents = st.recursive(
    st.one_of(st.none(), st.booleans(), st.integers(), _yaml_text),
    lambda children: st.one_of(
        st.lists(children, max_size=3),
        st.dictionaries(_yaml_keys, children, min_size=1, max_size=3),
    ),
    max_leaves=15,
)
_yaml_workflows = st.dictionaries(_yaml_keys, _yaml_documents, max_size=3)


def _evaluate(source: str) -> object:
    namespace: dict[str, object] = {"__name__": "converted_workflow"}
    exec(compile(source, "workflow.main.py", "exec"), namespace)  # noqa: S102
    return namespace["wf"]


@settings(max_examples=_HYPOTHESIS_MAX_EXAMPLES, suppress_health_check=[HealthCheck.too_slow])
@given(document=_workflows)
def test_literal_payload_evaluates_to_document(document: StructuredDocument) -> None:
    source = synthesize_template().with_comments("").assemble(format_literal(document))

    assert _evaluate(source) == document


@settings(max_examples=_HYPOTHESIS_MAX_EXAMPLES, suppress_health_check=[HealthCheck.too_slow])
@given(document=_workflows, width=st.integers(min_value=20, max_value=120))
def test_expression_payload_evaluates_to_document(
    document: StructuredDocument, width: int
) -> None:
    skeleton = synthesize_template().with_comments("")
    payload = ExpressionPrinter(width).format(document, column=len("wf = workflow("))

    assert _evaluate(skeleton.assemble(payload)) == document


@settings(max_examples=_HYPOTHESIS_MAX_EXAMPLES, suppress_health_check=[HealthCheck.too_slow])
@given(document=_yaml_workflows, quote=st.sampled_from(['"', "'"]))
def test_serialized_yaml_parses_back(document: StructuredDocument, quote: str) -> None:
    assert parse(serialize(document, quote=quote)) == document  # type: ignore[arg-type]
