"""
Cross-group selection of the best third-placed teams.
"""

from datetime import datetime, UTC
from typing import Dict, List, Tuple
from sqlmodel import Session, select

from ..models.third_place_rule import ThirdPlaceRule
from ..schemas import GroupStandingsRow, ThirdPlaceSelection


def rank_third_placed_teams(
    third_placed: List[Tuple[str, GroupStandingsRow]]
) -> List[Tuple[str, GroupStandingsRow]]:
    """Sort third-placed teams by Points > Goal Diff > Goals For (stable on input order)."""
    return sorted(
        third_placed,
        key=lambda item: (item[1].points, item[1].goal_difference, item[1].goals_for),
        reverse=True
    )


def select_third_place_qualifiers(
    third_placed: List[Tuple[str, GroupStandingsRow]],
    slots: int,
    rules: Dict[str, Dict[str, str]]
) -> ThirdPlaceSelection:
    """
    Pick the best `slots` third-placed teams and look up their bracket slots.

    Args:
        third_placed: (group letter, standings row) for the 3rd team of every group
        slots: How many third-placed teams advance
        rules: Combination key (sorted group letters) -> {bracket slot: group letter}

    Returns:
        ThirdPlaceSelection with the qualifying groups, team ids and slot assignment
    """
    if slots <= 0:
        return ThirdPlaceSelection(combination_key="", qualified_groups=[], qualified_team_ids=[])

    top = rank_third_placed_teams(third_placed)[:slots]
    qualified_groups = sorted(letter.upper() for letter, _ in top)
    combination_key = "".join(qualified_groups)

    return ThirdPlaceSelection(
        combination_key=combination_key,
        qualified_groups=qualified_groups,
        qualified_team_ids=[row.team_id for _, row in top],
        slot_assignment=dict(rules.get(combination_key, {})),
    )


def get_third_place_rules_map(db: Session, tournament_id: int) -> Dict[str, Dict[str, str]]:
    """All combination rules of a tournament keyed by combination key."""
    rules = db.exec(
        select(ThirdPlaceRule).where(ThirdPlaceRule.tournament_id == tournament_id)
    ).all()
    return {rule.combination_key: rule.rules for rule in rules}


def upsert_third_place_rule(
    db: Session,
    tournament_id: int,
    combination_key: str,
    rules: Dict[str, str]
) -> ThirdPlaceRule:
    """Create or replace the bracket mapping for one combination."""
    combination_key = "".join(sorted(combination_key.upper()))
    rule = db.exec(
        select(ThirdPlaceRule).where(
            ThirdPlaceRule.tournament_id == tournament_id,
            ThirdPlaceRule.combination_key == combination_key
        )
    ).first()

    if rule:
        rule.rules = dict(rules)
        rule.updated_at = datetime.now(UTC)
    else:
        rule = ThirdPlaceRule(
            tournament_id=tournament_id,
            combination_key=combination_key,
            rules=dict(rules)
        )
    db.add(rule)
    db.commit()
    db.refresh(rule)
    return rule
