import argparse
import json
from pathlib import Path

from . import __version__
from .batch import run_batch
from .env import Settings, load_env, parse_log_level
from .errors import InvalidInputError, OntologyUnavailableError
from .logger import get_logger
from .normalize import normalize_skill, parse_skill_csv
from .ontology import SkillOntology, load_ontology
from .report import format_report, format_result, load_batch, save_results
from .schema import validate_batch
from .scoring import POLICIES, match_skills


def _open_ontology(args: argparse.Namespace, settings: Settings) -> SkillOntology:
    source = args.ontology or settings.ontology
    namespace = settings.namespace or None
    try:
        return load_ontology(source, namespace=namespace, timeout=settings.fetch_timeout)
    except OntologyUnavailableError as e:
        raise SystemExit(f"Ontology unavailable: {e}")


def cmd_match(args: argparse.Namespace, settings: Settings) -> None:
    try:
        document = load_batch(Path(args.input))
    except InvalidInputError as e:
        raise SystemExit(str(e))

    ontology = _open_ontology(args, settings)
    try:
        report = run_batch(document, ontology, policy=args.policy or settings.policy, workers=args.workers)
    except InvalidInputError as e:
        raise SystemExit(str(e))

    if args.output:
        save_results(Path(args.output), report)
        get_logger().info("Wrote results", path=args.output)

    if args.json:
        print(json.dumps(report.to_dict(), indent=2, ensure_ascii=False))
    else:
        for line in format_report(report):
            print(line)
    get_logger().log_metrics_summary()


def cmd_score(args: argparse.Namespace, settings: Settings) -> None:
    offer = parse_skill_csv(args.offer)
    resume = parse_skill_csv(args.resume)
    ontology = _open_ontology(args, settings)
    try:
        result = match_skills(offer, resume, ontology, policy=args.policy or settings.policy)
    except InvalidInputError as e:
        raise SystemExit(str(e))
    for line in format_result(result):
        print(line)


def cmd_related(args: argparse.Namespace, settings: Settings) -> None:
    ontology = _open_ontology(args, settings)
    skill = normalize_skill(args.skill)
    if skill not in ontology:
        print(f"{skill} is not a class in the ontology")
        return
    print(f"Skill: {skill}")
    print(f"  SuperClasses: {', '.join(sorted(ontology.super_classes_of(skill))) or '-'}")
    print(f"  SubClasses: {', '.join(sorted(ontology.sub_classes_of(skill))) or '-'}")


def cmd_validate(args: argparse.Namespace, settings: Settings) -> None:
    try:
        document = load_batch(Path(args.input))
    except InvalidInputError as e:
        raise SystemExit(str(e))
    errors = validate_batch(document)
    if errors:
        print("Invalid:")
        for e in errors:
            print(f" - {e}")
        raise SystemExit(2)
    print("Valid")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="skillmatch", description="Ontology-aware skill matching for job offers")
    parser.add_argument("--version", action="store_true", help="Show version")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING, ERROR (or set SKILLMATCH_LOG_LEVEL)")

    subparsers = parser.add_subparsers(dest="command")

    mat = subparsers.add_parser("match", help="Score every offer/resume pair of a batch JSON file")
    mat.add_argument("--input", required=True, help="Batch JSON with an 'offersAndResumes' list")
    mat.add_argument("--ontology", help="OWL file or URL (or set SKILLMATCH_ONTOLOGY)")
    mat.add_argument("--output", help="Write results JSON to this path")
    mat.add_argument("--policy", choices=POLICIES, help="Related-match policy (default: accumulate)")
    mat.add_argument("--workers", type=int, default=1, help="Score pairs on N threads (default 1)")
    mat.add_argument("--json", action="store_true", help="Print results as JSON instead of text")
    mat.set_defaults(func=cmd_match)

    sco = subparsers.add_parser("score", help="Score a single offer against a single resume")
    sco.add_argument("--offer", required=True, help="Comma-separated required skills. Example: java,sql")
    sco.add_argument("--resume", default="", help="Comma-separated candidate skills")
    sco.add_argument("--ontology", help="OWL file or URL (or set SKILLMATCH_ONTOLOGY)")
    sco.add_argument("--policy", choices=POLICIES, help="Related-match policy (default: accumulate)")
    sco.set_defaults(func=cmd_score)

    rel = subparsers.add_parser("related", help="Show the direct super- and sub-classes of a skill")
    rel.add_argument("--skill", required=True, help="Skill name")
    rel.add_argument("--ontology", help="OWL file or URL (or set SKILLMATCH_ONTOLOGY)")
    rel.set_defaults(func=cmd_related)

    val = subparsers.add_parser("validate", help="Validate a batch JSON file")
    val.add_argument("--input", required=True, help="Batch JSON with an 'offersAndResumes' list")
    val.set_defaults(func=cmd_validate)

    return parser


def main(argv=None):
    # Load .env if present (SKILLMATCH_ONTOLOGY, SKILLMATCH_POLICY, etc.)
    load_env()
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    try:
        settings = Settings.from_env()
        level = parse_log_level(args.log_level) if args.log_level else settings.log_level
    except InvalidInputError as e:
        raise SystemExit(f"Invalid configuration: {e}")

    get_logger(level=level, log_dir=settings.log_dir)

    if hasattr(args, "func"):
        args.func(args, settings)
        return

    parser.print_help()


if __name__ == "__main__":
    main()
