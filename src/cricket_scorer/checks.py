"""Structural integrity checks for stored matches."""

import logging
from datetime import datetime
from typing import Any, Dict, List

from .models import Match

logger = logging.getLogger(__name__)


class MatchIntegrityChecker:
    """Integrity checking component.

    The command surface should never produce any of these issues; a
    non-empty report points at a bug or a hand-edited snapshot.
    """

    def __init__(self, enable_checks: bool = True):
        self.enable_checks = enable_checks

    def check_store(self, store) -> Dict[str, Any]:
        """Run all checks over every match in ``store``."""
        if not self.enable_checks:
            return {"status": "disabled", "checks": {}}

        results: Dict[str, Any] = {
            "timestamp": datetime.now().isoformat(),
            "checks": {},
        }
        for match in store.matches.values():
            issues = self.check_match(match)
            if issues:
                results["checks"][match.id] = issues

        results["matches_checked"] = len(store.matches)
        results["overall_score"] = self._calculate_score(len(store.matches), len(results["checks"]))
        logger.debug(f"Integrity check completed. Overall score: {results['overall_score']}")
        return results

    def check_match(self, match: Match) -> List[Dict[str, Any]]:
        issues: List[Dict[str, Any]] = []
        issues.extend(self._check_teams(match))
        issues.extend(self._check_innings_order(match))
        issues.extend(self._check_batters(match))
        issues.extend(self._check_player_references(match))
        issues.extend(self._check_result(match))
        return issues

    def _check_teams(self, match: Match) -> List[Dict[str, Any]]:
        issues = []
        if len(match.teams) != 2:
            issues.append({"type": "team_count", "detail": f"expected 2 teams, found {len(match.teams)}"})
        for team in match.teams:
            if not team.player_ids:
                issues.append({"type": "empty_team", "detail": f"team {team.id} has no players"})
        return issues

    def _check_innings_order(self, match: Match) -> List[Dict[str, Any]]:
        issues = []
        if len(match.innings) > match.scheduled_innings:
            issues.append({
                "type": "innings_count",
                "detail": f"{len(match.innings)} innings for a {match.scheduled_innings}-innings match",
            })
        team_ids = {team.id for team in match.teams}
        for number, innings in enumerate(match.innings, start=1):
            if innings.team_id not in team_ids:
                issues.append({"type": "unknown_team", "detail": f"innings {number} batted by {innings.team_id}"})
        for number, (previous, following) in enumerate(zip(match.innings, match.innings[1:]), start=2):
            if previous.team_id == following.team_id:
                issues.append({"type": "alternation", "detail": f"innings {number} repeats the previous batting team"})
            if not previous.is_complete:
                issues.append({"type": "premature_innings", "detail": f"innings {number} started before {number - 1} finished"})
        return issues

    def _check_batters(self, match: Match) -> List[Dict[str, Any]]:
        issues = []
        for number, innings in enumerate(match.innings, start=1):
            active = len(innings.active_scores)
            if active > 2:
                issues.append({"type": "too_many_batters", "detail": f"innings {number} has {active} batters at the crease"})
            seen = set()
            for score in innings.scores:
                if score.player_id in seen:
                    issues.append({"type": "duplicate_score", "detail": f"innings {number} lists {score.player_id} twice"})
                seen.add(score.player_id)
        return issues

    def _check_player_references(self, match: Match) -> List[Dict[str, Any]]:
        issues = []
        missing = set()
        for team in match.teams:
            missing.update(pid for pid in team.player_ids if match.lookup_player(pid) is None)
        for innings in match.innings:
            missing.update(b.player_id for b in innings.balls if match.lookup_player(b.player_id) is None)
        if missing:
            issues.append({
                "type": "dangling_players",
                "detail": f"{len(missing)} referenced player(s) no longer registered",
            })
        return issues

    def _check_result(self, match: Match) -> List[Dict[str, Any]]:
        if match.winner_id is not None and not match.is_complete:
            return [{"type": "premature_winner", "detail": "winner recorded while the match is unfinished"}]
        if match.winner_id is not None and match.winner is None:
            return [{"type": "unknown_winner", "detail": f"winner {match.winner_id} is not a match team"}]
        return []

    def _calculate_score(self, checked: int, failing: int) -> float:
        """Share of matches with no issues, as a percentage."""
        if checked == 0:
            return 100.0
        return round((checked - failing) / checked * 100, 2)
