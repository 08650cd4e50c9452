import json
from pathlib import Path
from typing import Any, Dict, List

from .batch import BatchReport
from .errors import InvalidInputError
from .scoring import MatchResult


def load_batch(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise InvalidInputError(f"Input file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidInputError(f"Input file is not valid JSON ({path}): {e}") from e


def save_results(path: Path, report: BatchReport) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2, ensure_ascii=False)


def _fmt_list(items: List[Any]) -> str:
    return "[" + ", ".join(str(i) for i in items) + "]"


def format_result(result: MatchResult | Dict[str, Any]) -> List[str]:
    """Render one scored pair as console lines."""
    data = result.to_dict() if isinstance(result, MatchResult) else result
    lines = [
        f"Offer Skills: {_fmt_list(data['offer_skills'])}",
        f"Resume Skills: {_fmt_list(data['resume_skills'])}",
    ]
    for d in data["details"]:
        if d["kind"] == "exact":
            continue
        lines.append(f"{d['skill']} NOT Found in Resume")
        lines.append(f"\tSuperClasses: {_fmt_list(d['super_classes'])}")
        lines.append(f"\tSubClasses: {_fmt_list(d['sub_classes'])}")
        if d["matched_related"]:
            lines.append(f"\tRelated in Resume: {_fmt_list(d['matched_related'])}")
    lines.append(f"Matching per Skill: {_fmt_list(data['scores'])}")
    lines.append(f"Calculated Total Score: {data['total']:.4f}")
    return lines


def format_report(report: BatchReport) -> List[str]:
    lines: List[str] = []
    for entry in report.results:
        lines.append(f"== {entry['id']} ==")
        if entry["status"] == "ok":
            lines.extend(format_result(entry))
        else:
            lines.append("Invalid pair:")
            lines.extend(f" - {e}" for e in entry["errors"])
        lines.append("")

    mean = report.mean_total
    mean_txt = f"{mean:.4f}" if mean is not None else "n/a"
    lines.append(f"Done. pairs={len(report.results)} scored={report.scored} failed={report.failed} mean={mean_txt}")
    return lines
