"""
Team Report Script

Scores raw check-ins from a JSON export and prints one day's team statistics
and sudden changes.
Usage: python -m app.scripts.team_report --input checkins.json [--date 2025-11-08]

Input format (optionally gzip-compressed, *.gz):
    {
        "member_ids": ["u1", "u2"],
        "on_leave_ids": ["u2"],
        "checkins": [
            {"user_id": "u1", "checkin_id": "c1", "date": "2025-11-08",
             "mood": 7, "stress": 3, "sleep": 7, "physical_health": 7}
        ]
    }
"""
import argparse
import gzip
import json
import logging
import sys
from datetime import date, datetime
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from app.models.checkin import CheckinMetrics
from app.services.change_classifier import get_change_classifier
from app.services.readiness_scorer import get_readiness_scorer
from app.services.team_aggregator import get_team_aggregator

logger = logging.getLogger(__name__)


def load_export(input_file: str) -> Dict[str, Any]:
    """Read a JSON (or gzip JSON) check-in export"""
    if input_file.endswith(".gz"):
        with gzip.open(input_file, "rt", encoding="utf-8") as f:
            return json.load(f)
    with open(input_file, "r", encoding="utf-8") as f:
        return json.load(f)


def score_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Score raw check-in rows the way the check-in handler does at submission.

    Args:
        rows: Dicts with user_id, date and the four metrics

    Returns:
        list: Rows with checkin_date, score and status added

    Raises:
        ValidationError: If a metric is missing or outside 0-10
    """
    scorer = get_readiness_scorer()
    scored = []
    for row in rows:
        metrics = CheckinMetrics(
            mood=row["mood"],
            stress=row["stress"],
            sleep=row["sleep"],
            physical_health=row["physical_health"]
        )
        result = scorer.score_checkin(metrics)
        scored.append({
            "user_id": row["user_id"],
            "checkin_id": row.get("checkin_id"),
            "checkin_date": date.fromisoformat(row["date"]),
            "score": result.value,
            "status": result.status
        })
    return scored


def build_report(export: Dict[str, Any], report_date: Optional[date] = None) -> Dict[str, Any]:
    """
    Build the team report for one day.

    The report date defaults to the latest check-in date in the export.
    """
    scored = score_rows(export.get("checkins", []))

    if report_date is None:
        report_date = max((c["checkin_date"] for c in scored), default=datetime.utcnow().date())

    today = [c for c in scored if c["checkin_date"] == report_date]
    history = [c for c in scored if c["checkin_date"] < report_date]

    member_ids = export.get("member_ids") or sorted({c["user_id"] for c in scored})

    classifier = get_change_classifier()
    aggregator = get_team_aggregator()

    changes = classifier.detect_sudden_changes(today, history, report_date)
    daily_stats = aggregator.aggregate(today, len(set(member_ids)))
    monitoring = aggregator.build_monitoring_stats(
        member_ids=member_ids,
        today_checkins=today,
        on_leave_ids=export.get("on_leave_ids", []),
        sudden_changes=changes
    )

    return {
        "date": report_date.isoformat(),
        "daily_stats": daily_stats.model_dump(mode="json"),
        "monitoring": monitoring.model_dump(mode="json"),
        "sudden_changes": [c.model_dump(mode="json") for c in changes]
    }


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point"""
    parser = argparse.ArgumentParser(description="Print a team's daily readiness report")
    parser.add_argument(
        "--input",
        "-i",
        required=True,
        help="Check-in export file (.json or .json.gz)"
    )
    parser.add_argument(
        "--date",
        "-d",
        type=date.fromisoformat,
        default=None,
        help="Report date YYYY-MM-DD (default: latest check-in date)"
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write the report to this file instead of stdout"
    )

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    try:
        export = load_export(args.input)
        report = build_report(export, args.date)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read check-in export {args.input}: {e}")
        return 1
    except (KeyError, ValueError, ValidationError) as e:
        logger.error(f"Invalid check-in export {args.input}: {e}")
        return 1

    report_json = json.dumps(report, indent=2)

    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(report_json)
        logger.info(f"Report written to {args.output}")
    else:
        print(report_json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
