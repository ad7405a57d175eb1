"""CLI for iflow-parser."""

import argparse
import logging
import os
import sys

from iflow_parser.domain.enums import SecurityMechanismType
from iflow_parser.domain.errors import ArchiveError
from iflow_parser.domain.models import ExtractionOptions
from iflow_parser.output.json_dumper import JSONDumper
from iflow_parser.package_reader import read_archive_bytes
from iflow_parser.pipeline import ArtifactFailure, BatchResult, ExtractionPipeline

logger = logging.getLogger(__name__)


def extract_archives(archive_paths: list[str], output_dir: str, options: ExtractionOptions,
                     artifact_id: str | None = None, version: str = '') -> BatchResult:
    """Main orchestration: archives -> canonical records -> JSON output.

    Archives that cannot be read from disk are recorded as failures ahead of
    the failures of the extraction run.
    """
    artifacts = []
    read_failures = []
    for path in archive_paths:
        name = artifact_id if artifact_id and len(archive_paths) == 1 else None
        name = name or os.path.splitext(os.path.basename(path))[0]
        try:
            artifacts.append((name, version, read_archive_bytes(path, name)))
        except ArchiveError as e:
            logger.warning("Skipping artifact %s: %s", name, e)
            read_failures.append(ArtifactFailure(name, e.kind.value, str(e)))

    pipeline = ExtractionPipeline(options)
    batch = pipeline.run_batch(artifacts)
    batch.failures[:0] = read_failures

    dumper = JSONDumper(output_dir, pretty=options.pretty)
    for result in batch.results:
        dumper.write_result(result)
    dumper.write_errors(batch.failures)
    return batch


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog='iflow-parser', description='Integration flow archive parser')
    subparsers = parser.add_subparsers(dest='command')

    # extract command
    extract_parser = subparsers.add_parser('extract', help='Extract archives and dump JSON')
    extract_parser.add_argument('archives', nargs='+', help='Path(s) to integration flow archive files')
    extract_parser.add_argument('output', help='Output directory')
    extract_parser.add_argument('--artifact-id', help='Artifact id (single archive only; default: file stem)')
    extract_parser.add_argument('--version', default='', help='Artifact version recorded in the output')
    extract_parser.add_argument('--debug-dir', help='Directory receiving copies of each archive and definition')
    extract_parser.add_argument('--no-pretty', action='store_true', help='Disable pretty printing')
    extract_parser.add_argument('--log-level', default='WARNING',
                                choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Log level (default: WARNING)')

    # types command
    subparsers.add_parser('types', help='List canonical security mechanism types')

    args = parser.parse_args(argv)

    if args.command == 'extract':
        logging.basicConfig(level=args.log_level, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

        missing = [path for path in args.archives if not os.path.isfile(path)]
        if missing:
            for path in missing:
                print(f"Error: {path} not found", file=sys.stderr)
            return 1

        options = ExtractionOptions.from_env()
        options.pretty = not args.no_pretty
        if args.debug_dir:
            options.debug_dir = args.debug_dir

        print(f"Extracting {len(args.archives)} archive(s)...")
        batch = extract_archives(args.archives, args.output, options, args.artifact_id, args.version)
        print(f"Done! Extracted {len(batch.results)} artifacts ({len(batch.failures)} failed)")
        print(f"Output: {args.output}")
        return 1 if batch.failures and not batch.results else 0

    elif args.command == 'types':
        for t in SecurityMechanismType:
            print(f"  {t.value}")
        return 0

    else:
        parser.print_help()
        return 0


if __name__ == '__main__':
    sys.exit(main())
