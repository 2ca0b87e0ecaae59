#!/usr/bin/env python3
"""
ISHNE converter - export ISHNE Holter recordings as JSON, CSV or text.

Usage:
    ishne-convert recording.ecg -f csv -o recording.csv
    ishne-convert recording.ecg -f json --decimals 4 -o recording.json
    ishne-convert recording.ecg -f text --no-time > recording.txt
    ishne-convert recording.ecg --summary
"""

import argparse
import asyncio
import sys
from typing import List, Optional

from .._logging import set_log_level
from ..core.config import Config, ExportFormat, ExportOptions
from ..core.exceptions import IshneError
from ..export.sinks import FileSink, TextStreamSink
from ..reader import IshneReader


def build_config(args: argparse.Namespace) -> Config:
    """Create the configuration from parsed command line arguments."""
    return Config(
        export=ExportOptions(
            separator=args.separator,
            include_header=not args.no_header,
            time_column=not args.no_time,
            decimal_places=args.decimals,
            chunk_size=args.chunk_size,
        ),
        output_format=ExportFormat(args.format),
        log_level=args.log_level,
        enable_logging=not args.quiet,
    )


def print_summary(reader: IshneReader) -> None:
    """Print header and size diagnostics of a recording."""
    header = reader.header
    summary = reader.get_summary()

    print(f"Subject:        {header.first_name} {header.last_name} ({header.subject_id}), {header.sex_label}")
    print(f"Recorder:       {header.recorder}")
    print(f"Record date:    {header.record_date}  start {header.start_time}")
    print(f"Leads:          {header.n_leads} ({', '.join(header.lead_names)})")
    print(f"Lead quality:   {', '.join(header.quality_labels)}")
    print(f"Resolution:     {summary.resolution} nV")
    print(f"Pacemaker:      {header.pacemaker_label}")
    print(f"Sampling rate:  {summary.sampling_rate} Hz")
    print(f"Samples/lead:   declared {summary.declared_samples}, actual {summary.actual_samples}")
    print(f"Duration:       declared {summary.declared_duration:.1f}s, actual {summary.actual_duration:.1f}s")
    print(f"ECG bytes:      declared {summary.declared_bytes}, actual {summary.actual_bytes} "
          f"({summary.available_bytes} available)")
    if not summary.sample_count_matches:
        print("WARNING: declared sample count does not match the ECG block size")


async def convert(reader: IshneReader, config: Config, output: Optional[str]) -> int:
    """Stream the export selected by ``config`` to a file or stdout."""
    sink = FileSink(output) if output else TextStreamSink(sys.stdout)
    return await reader.export(sink, config.output_format, config.export)


def main(argv: Optional[List[str]] = None) -> int:
    """Main function with command line interface."""
    parser = argparse.ArgumentParser(description='Convert ISHNE Holter files to JSON, CSV or text')
    parser.add_argument('input', help='ISHNE file to convert')
    parser.add_argument('--format', '-f', choices=[f.value for f in ExportFormat], default='csv',
                        help='Output format (default: csv)')
    parser.add_argument('--output', '-o', help='Output file, stdout if omitted')
    parser.add_argument('--separator', help='Column separator for CSV output')
    parser.add_argument('--no-header', action='store_true', help='Omit the column header row')
    parser.add_argument('--no-time', action='store_true', help='Omit the time column')
    parser.add_argument('--decimals', type=int, default=2, help='Decimal places (default: 2)')
    parser.add_argument('--chunk-size', type=int, default=1000, help='Rows per written chunk')
    parser.add_argument('--summary', action='store_true', help='Print a summary instead of converting')
    parser.add_argument('--log-level', default='INFO',
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'])
    parser.add_argument('--quiet', '-q', action='store_true', help='Disable log output')

    args = parser.parse_args(argv)

    try:
        config = build_config(args)
    except ValueError as e:
        parser.error(str(e))
    set_log_level(config.log_level if config.enable_logging else "CRITICAL")

    try:
        reader = IshneReader.from_file(args.input)
        reader.parse_header()
        if args.summary:
            print_summary(reader)
        else:
            asyncio.run(convert(reader, config, args.output))
    except IshneError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
