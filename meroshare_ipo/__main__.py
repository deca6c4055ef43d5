import argparse
import json
import logging
import sys

from meroshare_ipo.config import settings
from meroshare_ipo.errors import MeroShareError
from meroshare_ipo.schemas import ApplyRequest
from meroshare_ipo.service import MeroShareService

logger = logging.getLogger("meroshare_ipo")


def _dump(value) -> None:
    if isinstance(value, list):
        value = [item.model_dump() for item in value]
    elif hasattr(value, "model_dump"):
        value = value.model_dump()
    print(json.dumps(value, indent=2, ensure_ascii=False))


def main(argv=None) -> int:
    p = argparse.ArgumentParser(prog="meroshare_ipo", description="MeroShare IPO apply runner")
    sub = p.add_subparsers(dest="command")
    apply_p = sub.add_parser("apply", help="Apply for the configured target IPO")
    apply_p.add_argument("--scrip", default=None, help="Scrip symbol (default: TARGET_SCRIPT)")
    apply_p.add_argument("--kitta", default=None, help="Units to apply for (default: APPLIED_KITTA)")
    sub.add_parser("ipos", help="List currently applicable issues")
    sub.add_parser("reports", help="List application reports")
    detail_p = sub.add_parser("detail", help="Show one application's status")
    detail_p.add_argument("applicant_form_id", type=int)
    sub.add_parser("capitals", help="List DP brokers and their client ids")
    args = p.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, settings.log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    service = MeroShareService.from_settings(settings)
    command = args.command or "apply"
    if command == "apply":
        try:
            request = ApplyRequest(
                target_script=getattr(args, "scrip", None) or settings.target_script,
                boid=settings.boid,
                crn_number=settings.crn_number,
                applied_kitta=getattr(args, "kitta", None) or settings.applied_kitta,
                pin=settings.pin,
            )
        except ValueError as exc:
            logger.error("Invalid configuration: %s", exc)
            return 2

    try:
        if command == "apply":
            _dump(service.apply_for_issue(request))
        elif command == "ipos":
            _dump(service.fetch_applicable_issues())
        elif command == "reports":
            _dump(service.fetch_application_reports())
        elif command == "detail":
            _dump(service.fetch_application_detail(args.applicant_form_id))
        elif command == "capitals":
            _dump(service.get_capitals())
    except MeroShareError as exc:
        logger.error("Operation failed: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
