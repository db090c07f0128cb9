"""Tests for the chunked directive scanner and the dialect tables."""

from __future__ import annotations

import pytest

from wrsr_mt.errors import IniParseError
from wrsr_mt.ini import BUILDING, MATERIAL, RENDER, Point3f, Rect, parse, parse_strict, parse_tokens


def test_chunks_cover_the_whole_source_in_order() -> None:
    src = "header text\r\n$NAME 12\r\n-- comment\r\n$WORKERS_NEEDED 20\r\ntrailer"
    chunks = parse(BUILDING, src)

    assert "".join(c.text for c in chunks) == src
    for prev, nxt in zip(chunks, chunks[1:]):
        assert prev.span.end == nxt.span.start
    assert [c.token.keyword for c in chunks if c.token] == ["NAME", "WORKERS_NEEDED"]


def test_unknown_directive_is_passed_through() -> None:
    src = "$RESOURCE_VISUALIZATION 0 1 2\r\n$NAME 3\r\n"
    tokens = parse_tokens(BUILDING, src)

    assert [t.keyword for t in tokens] == ["NAME"]
    assert tokens[0].args == (3,)


def test_directive_must_start_its_line() -> None:
    tokens = parse_tokens(BUILDING, "-- $NAME 1\r\n  $NAME 2\r\n")
    assert [t.args for t in tokens] == [(2,)]


def test_points_and_rects_decode_across_lines() -> None:
    src = "$VEHICLE_STATION\r\n1.0 0.0 2.5\r\n3 0 -2.5\r\n$CONNECTIONS_SPACE\r\n-1 -2\r\n1 2\r\n"
    station, space = parse_tokens(BUILDING, src)

    assert station.args == (Point3f(1.0, 0.0, 2.5), Point3f(3.0, 0.0, -2.5))
    assert space.args == (Rect(-1.0, -2.0, 1.0, 2.0),)


def test_quoted_string_keeps_spaces() -> None:
    (token,) = parse_tokens(BUILDING, '$NAME_STR "Big panel house"\r\n')
    assert token.args == ("Big panel house",)


@pytest.mark.parametrize(
    ("line", "fused", "points"),
    [
        ("$CONNECTION_RAIL_DEADEND", "RAIL_DEADEND", 0),
        ("$CONNECTION_ROAD_DEAD 1 0 2", "ROAD_DEAD", 1),
        ("$CONNECTION_ROAD 0 0 0 1 0 0", "ROAD", 2),
    ],
    ids=["no-point", "one-point", "two-points"],
)
def test_fused_connection_keywords(line: str, fused: str, points: int) -> None:
    (token,) = parse_tokens(BUILDING, line + "\r\n")
    assert token.keyword == "CONNECTION_"
    assert token.fused_value == fused
    assert len(token.values) == points


def test_fused_value_outside_its_category_is_not_a_directive() -> None:
    assert parse_tokens(BUILDING, "$TYPE_SPACESHIP\r\n") == []


def test_choice_slot_rejects_unknown_value() -> None:
    chunks = parse(BUILDING, "$STORAGE RESOURCE_TRANSPORT_OIL 10.5\r\n$STORAGE RESOURCE_TRANSPORT_BOGUS 10\r\n")
    tokens = [c.token for c in chunks if c.token]
    failures = [c.failure for c in chunks if c.failure]

    assert tokens[0].args == ("RESOURCE_TRANSPORT_OIL", 10.5)
    assert len(failures) == 1
    assert "unknown transport type 'RESOURCE_TRANSPORT_BOGUS'" in failures[0].message


def test_missing_argument_at_end_of_line() -> None:
    src = "$WORKERS_NEEDED\r\n$NAME 1\r\n"
    chunks = parse(BUILDING, src)
    failures = [c.failure for c in chunks if c.failure]

    assert len(failures) == 1
    assert failures[0].message == "WORKERS_NEEDED: missing argument"
    assert failures[0].chunk == "$WORKERS_NEEDED"
    assert [c.token.keyword for c in chunks if c.token] == ["NAME"]


def test_scalar_argument_does_not_continue_on_the_next_line() -> None:
    src = "$COST_WORK_BUILDING_NODE\r\n-- todo\r\n$NAME 1\r\n"
    chunks = parse(BUILDING, src)
    failures = [c.failure for c in chunks if c.failure]

    assert [f.message for f in failures] == ["COST_WORK_BUILDING_NODE: missing argument"]
    assert [c.token.args for c in chunks if c.token] == [(1,)]
    assert "".join(c.text for c in chunks) == src


def test_point_cut_short_by_the_next_directive() -> None:
    chunks = parse(BUILDING, "$VEHICLE_STATION\r\n1 0 2\r\n$NAME 1\r\n")
    (failure,) = [c.failure for c in chunks if c.failure]

    assert failure.message == "VEHICLE_STATION: missing argument before next directive"
    assert failure.chunk == "$VEHICLE_STATION\r\n1 0 2"
    assert [c.token.keyword for c in chunks if c.token] == ["NAME"]


def test_byte_order_mark_does_not_hide_the_first_directive() -> None:
    src = "\ufeff$COST_WORK_BUILDING_NODE ghost\r\n"
    chunks = parse(BUILDING, src)

    assert [c.token.args for c in chunks if c.token] == [("ghost",)]
    assert "".join(c.text for c in chunks) == src


@pytest.mark.parametrize(
    "line",
    ["$WORKERS_NEEDED 1_000", "$WORKERS_NEEDED \uff15", "$CONSUMPTION steel nan", "$CONSUMPTION steel inf"],
    ids=["underscore-int", "fullwidth-digit", "nan", "inf"],
)
def test_python_only_number_spellings_are_rejected(line: str) -> None:
    chunks = parse(BUILDING, line + "\r\n")
    assert [c.failure is not None for c in chunks if c.result is not None] == [True]


def test_plain_number_spellings_are_accepted() -> None:
    (token,) = parse_tokens(BUILDING, "$VEHICLE_STATION_DETOUR_PID +3\r\n-1. .5 1e2\r\n")
    assert token.args == (3, Point3f(-1.0, 0.5, 100.0))


def test_non_numeric_argument_fails_with_the_offending_line() -> None:
    chunks = parse(BUILDING, "$WORKERS_NEEDED many\r\n$NAME 1\r\n")
    (failure,) = [c.failure for c in chunks if c.failure]

    assert "expected an integer, found 'many'" in failure.message
    assert failure.chunk == "$WORKERS_NEEDED many"


def test_strict_parse_reports_every_failure() -> None:
    src = "$WORKERS_NEEDED x\r\n$NAME 1\r\n$CITIZEN_ABLE_SERVE\r\n"
    with pytest.raises(IniParseError) as exc:
        parse_strict(BUILDING, src)

    assert len(exc.value.failures) == 2
    assert "Chunk: [$WORKERS_NEEDED x]" in exc.value.details()


def test_render_manifest_dialect() -> None:
    tokens = parse_tokens(RENDER, "$MODEL ~buildings/house.nmf\r\n$MODEL_LOD house_lod.nmf 250\r\n$MATERIAL m.mtl\r\n")
    assert [(t.keyword, t.args) for t in tokens] == [
        ("MODEL", ("~buildings/house.nmf",)),
        ("MODEL_LOD", ("house_lod.nmf", 250.0)),
        ("MATERIAL", ("m.mtl",)),
    ]


def test_material_dialect() -> None:
    src = "$SUBMATERIAL wall\r\n$TEXTURE 0 textures/wall.dds\r\n$TEXTURE_MTL 1 wall_n.dds\r\n"
    tokens = parse_tokens(MATERIAL, src)
    assert [t.keyword for t in tokens] == ["SUBMATERIAL", "TEXTURE", "TEXTURE_MTL"]
    assert tokens[2].args == (1, "wall_n.dds")
