from typing import List

from wincon.identity import SideIdentity, compute_side_identity
from wincon.normalize import MapSeriesRecord, RoundRecord, Side, TeamMapScore


def _map(map_name: str, attack: List[bool], defense: List[bool]) -> MapSeriesRecord:
    rounds = []
    for idx, won in enumerate(attack + defense):
        our_side = Side.ATTACK if idx < len(attack) else Side.DEFENSE
        their_side = Side.DEFENSE if our_side is Side.ATTACK else Side.ATTACK
        rounds.append(
            RoundRecord(
                round_number=idx + 1,
                map_name=map_name,
                winner_id="t1" if won else "t2",
                sides={"t1": our_side, "t2": their_side},
            )
        )
    wins = sum(attack) + sum(defense)
    return MapSeriesRecord(
        match_id=f"{map_name}-m",
        map_name=map_name,
        map_number=1,
        team_scores=(
            TeamMapScore("t1", wins),
            TeamMapScore("t2", len(rounds) - wins),
        ),
        rounds=tuple(rounds),
    )


def _record(wins: int, total: int) -> List[bool]:
    return [True] * wins + [False] * (total - wins)


def test_strong_attack_map_is_attack_sided() -> None:
    maps = [_map("Ascent", _record(18, 20), _record(4, 20))]
    rows = compute_side_identity(maps, "t1")
    assert len(rows) == 1
    row = rows[0]
    assert row.identity is SideIdentity.ATTACK_SIDED
    assert (row.attack.wins, row.attack.rounds) == (18, 20)
    assert (row.defense.wins, row.defense.rounds) == (4, 20)
    assert row.attack.mean > row.defense.mean
    assert row.prob_delta_gt > 0.8


def test_strong_defense_map_is_defense_sided() -> None:
    rows = compute_side_identity([_map("Bind", _record(3, 20), _record(17, 20))], "t1")
    assert rows[0].identity is SideIdentity.DEFENSE_SIDED


def test_even_map_is_balanced() -> None:
    rows = compute_side_identity([_map("Haven", _record(10, 20), _record(10, 20))], "t1")
    assert rows[0].identity is SideIdentity.BALANCED


def test_one_sided_data_is_not_applicable() -> None:
    rows = compute_side_identity([_map("Lotus", _record(6, 10), [])], "t1")
    row = rows[0]
    assert row.identity is SideIdentity.NOT_APPLICABLE
    assert row.defense.rounds == 0
    assert row.defense.ci_low is None
    assert row.prob_delta_gt is None


def test_side_filter_disables_identity() -> None:
    maps = [_map("Ascent", _record(18, 20), _record(4, 20))]
    row = compute_side_identity(maps, "t1", side_filter="attack")[0]
    assert row.identity is SideIdentity.NOT_APPLICABLE
    assert row.attack.rounds == 20
    assert row.defense.rounds == 0


def test_both_filter_behaves_like_no_filter() -> None:
    maps = [_map("Ascent", _record(18, 20), _record(4, 20))]
    assert compute_side_identity(maps, "t1", "both") == compute_side_identity(maps, "t1")


def test_rows_are_sorted_and_merged_per_map() -> None:
    maps = [
        _map("Split", _record(5, 10), _record(5, 10)),
        _map("Ascent", _record(5, 10), _record(5, 10)),
        _map("Split", _record(2, 4), _record(1, 4)),
    ]
    rows = compute_side_identity(maps, "t1")
    assert [r.map_name for r in rows] == ["Ascent", "Split"]
    assert rows[1].attack.rounds == 14


def test_rounds_without_team_side_are_ignored() -> None:
    mp = _map("Ascent", _record(1, 1), [])
    assert compute_side_identity([mp], "t9") == []


def test_map_order_ignores_case() -> None:
    maps = [
        _map("ascent", _record(5, 10), _record(5, 10)),
        _map("Bind", _record(5, 10), _record(5, 10)),
        _map("Ascent", _record(5, 10), _record(5, 10)),
    ]
    rows = compute_side_identity(maps, "t1")
    assert [r.map_name for r in rows] == ["Ascent", "ascent", "Bind"]
