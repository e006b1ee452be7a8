from __future__ import annotations

import argparse
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from contactlink.app import count_contacts, identify_contact, soft_delete_contact
from contactlink.config import ConfigurationError, configure_logging
from contactlink.ui.schema import IdentifyRequest, IdentifyResponse

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Reconcile contact identities")
    subparsers = parser.add_subparsers(dest="command", required=True)

    identify = subparsers.add_parser("identify", help="Resolve an email/phone pair")
    identify.add_argument(
        "--email",
        type=str,
        help="Email address of the incoming contact",
    )
    identify.add_argument(
        "--phone",
        type=str,
        help="Phone number of the incoming contact",
    )
    identify.add_argument(
        "--payload",
        type=str,
        help='Raw JSON request body, e.g. \'{"email": "a@b.c", "phoneNumber": 123}\'',
    )
    identify.add_argument(
        "--indent",
        type=int,
        default=None,
        help="Pretty-print the response with this indent",
    )

    delete = subparsers.add_parser("delete", help="Soft-delete one contact record")
    delete.add_argument(
        "--id",
        dest="contact_id",
        type=int,
        required=True,
        help="Id of the contact record to delete",
    )

    subparsers.add_parser("stats", help="Show the number of live contact records")

    return parser.parse_args(list(argv))


def _build_identify_request(args: argparse.Namespace) -> IdentifyRequest:
    if args.payload is not None:
        if args.email is not None or args.phone is not None:
            raise ValueError("Use either --payload or --email/--phone, not both")
        return IdentifyRequest.model_validate_json(args.payload)
    return IdentifyRequest.model_validate({"email": args.email, "phoneNumber": args.phone})


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    try:
        configure_logging()
    except ConfigurationError:
        configure_logging(level=logging.INFO)
        log.exception("Invalid logging configuration")
        sys.exit(1)

    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    request: IdentifyRequest | None = None
    try:
        parsed_args = _parse_args(args_list)
        if parsed_args.command == "identify":
            request = _build_identify_request(parsed_args)
        elif parsed_args.command == "delete" and parsed_args.contact_id < 1:
            raise ValueError("Contact id must be positive")  # noqa: TRY301
    except ValueError:
        log.exception("CLI validation error")
        sys.exit(2)

    try:
        if parsed_args.command == "identify" and request is not None:
            view = identify_contact(email=request.email, phone_number=request.phone_number)
            print(IdentifyResponse.from_view(view).to_json(indent=parsed_args.indent))  # noqa: T201
        elif parsed_args.command == "delete":
            if not soft_delete_contact(parsed_args.contact_id):
                raise LookupError(f"No live contact with id {parsed_args.contact_id}")  # noqa: TRY301
            print(f"Deleted contact {parsed_args.contact_id}")  # noqa: T201
        elif parsed_args.command == "stats":
            print(f"Total contacts in the database: {count_contacts()}")  # noqa: T201
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error during %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console-script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()
