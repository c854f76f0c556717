import argparse
import sys
from pathlib import Path

from docintake.config.settings import Settings
from docintake.database.connection import close_pool, init_pool
from docintake.database.repositories.document_repository import DocumentRepository
from docintake.logging.logger import Log
from docintake.processor.exceptions import ProcessorError
from docintake.processor.models import IngestionRequest, ProcessorResult
from docintake.processor.processor import build_processor
from docintake.processor.verifier import DocumentVerifier


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docintake",
        description="Ingest, classify and verify uploaded documents.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    ingest = subparsers.add_parser("ingest", help="ingest an uploaded file")
    ingest.add_argument("path", type=Path, help="path to the uploaded file")
    ingest.add_argument("--name", required=True, help="display name of the document")
    ingest.add_argument("--uploader", type=int, required=True, help="uploading user id")
    ingest.add_argument("--description", default=None)
    ingest.add_argument(
        "--original-filename",
        default=None,
        help="filename as uploaded by the user (defaults to the file's name)",
    )
    ingest.add_argument("--mime-type", default="application/octet-stream")

    verify = subparsers.add_parser("verify", help="check a file against stored documents")
    verify.add_argument("path", type=Path, help="path to the file to verify")
    return parser


def run(args: argparse.Namespace, settings: Settings) -> ProcessorResult:
    doc_repo = DocumentRepository()
    if args.command == "verify":
        return DocumentVerifier(doc_repo).verify(args.path.read_bytes())

    processor = build_processor(settings, doc_repo=doc_repo)
    request = IngestionRequest(
        file_path=args.path,
        original_filename=args.original_filename or args.path.name,
        uploaded_by=args.uploader,
        name=args.name,
        description=args.description,
        mime_type=args.mime_type,
    )
    return processor.process(request)


def main(argv: list[str] | None = None) -> int:
    """Entry point: parse args -> initialize pool -> run command."""
    args = build_parser().parse_args(argv)
    settings = Settings()
    Log.configure(settings.log_level)
    init_pool(settings)

    try:
        result = run(args, settings)
    except (ProcessorError, OSError) as exc:
        Log.error(str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return 1
    finally:
        close_pool()

    document = result.document
    print(result.message)
    print(
        f"id={document.id} category={document.category} "
        f"confidence={document.confidence:.2f} fraud_status={document.fraud_status}"
        + (f" reason={document.fraud_reason}" if document.fraud_reason else "")
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
