"""BDD step definitions for exposition rendering features."""

from dataclasses import dataclass, field
from typing import Any

import pytest
from pytest_bdd import given, parsers, then, when

from flbwire.core.conversion import to_metrics_document
from flbwire.core.decoder import ByteDecoder
from flbwire.core.encoding.prometheus import render
from flbwire.core.records import RecordStatus, get_record
from tests.helpers import pack


@dataclass
class RenderingScenarioContext:
    """State shared between the steps of one scenario."""

    series: list[dict[str, Any]] = field(default_factory=list)
    status: RecordStatus | None = None
    outputs: list[str] = field(default_factory=list)


@pytest.fixture
def ctx() -> RenderingScenarioContext:
    """Fresh scenario context for each test."""
    return RenderingScenarioContext()


def _series(metric_type: int, ns: str, ss: str, name: str, desc: str, label: str):
    return {
        "meta": {
            "ver": 2,
            "type": metric_type,
            "opts": {"ns": ns, "ss": ss, "name": name, "desc": desc},
            "labels": [label],
            "aggregation_type": 2,
        },
        "values": [],
    }


@given(
    parsers.parse(
        'a counter series "{ns}" "{ss}" "{name}" described as "{desc}"'
        ' with label "{label}"'
    )
)
def given_counter_series(
    ctx: RenderingScenarioContext, ns: str, ss: str, name: str, desc: str, label: str
) -> None:
    ctx.series.append(_series(0, ns, ss, name, desc, label))


@given(
    parsers.parse(
        'a series of type {code:d} "{ns}" "{ss}" "{name}" described as "{desc}"'
        ' with label "{label}"'
    )
)
def given_typed_series(
    ctx: RenderingScenarioContext,
    code: int,
    ns: str,
    ss: str,
    name: str,
    desc: str,
    label: str,
) -> None:
    ctx.series.append(_series(code, ns, ss, name, desc, label))


@given(parsers.parse('a sample with label value "{value}" and value {number:g}'))
def given_sample(ctx: RenderingScenarioContext, value: str, number: float) -> None:
    ctx.series[-1]["values"].append(
        {"ts": 1700000000000000000, "value": number, "labels": [value], "hash": 1}
    )


def _decode_and_render(ctx: RenderingScenarioContext) -> None:
    buffer = pack({"meta": {}, "metrics": ctx.series})
    status, _, record = get_record(ByteDecoder(buffer))
    ctx.status = status
    ctx.outputs.append(render(to_metrics_document(record)))


@when("the buffer is decoded and rendered")
def when_decoded_and_rendered(ctx: RenderingScenarioContext) -> None:
    _decode_and_render(ctx)


@when("the buffer is decoded and rendered twice")
def when_decoded_and_rendered_twice(ctx: RenderingScenarioContext) -> None:
    _decode_and_render(ctx)
    _decode_and_render(ctx)


@then("the record status is OK")
def then_status_ok(ctx: RenderingScenarioContext) -> None:
    assert ctx.status is RecordStatus.OK


@then(parsers.parse("the output has {count:d} lines"))
def then_output_line_count(ctx: RenderingScenarioContext, count: int) -> None:
    assert ctx.outputs[-1].endswith("\n")
    assert len(ctx.outputs[-1].splitlines()) == count


@then(parsers.parse('line {number:d} of the output is "{line}"'))
def then_output_line_is(ctx: RenderingScenarioContext, number: int, line: str) -> None:
    assert ctx.outputs[-1].splitlines()[number - 1] == line


@then(parsers.parse('the output contains the line "{line}"'))
def then_output_contains_line(ctx: RenderingScenarioContext, line: str) -> None:
    assert line in ctx.outputs[-1].splitlines()


@then("both renderings are identical")
def then_renderings_identical(ctx: RenderingScenarioContext) -> None:
    assert len(ctx.outputs) == 2
    assert ctx.outputs[0] == ctx.outputs[1]
