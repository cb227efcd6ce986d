"""Main entry point for the faastrace cold start analyser."""

import argparse
import sys
from pathlib import Path

from faastrace.analysis.analyzer import TraceAnalyzer
from faastrace.core.records import event_timestamps
from faastrace.reports.csv_report import write_csv, write_summary
from faastrace.utils.logger import setup_logger
from faastrace.utils.visualization import plot_multiple_cold_starts
from faastrace.workload.trace_loader import TraceLoader
from configs import load_default_config, merge_configs

POSITIONAL_ARGS = {
    'azure2019': ['invocation_file', 'duration_file', 'output_file'],
    'azure2021': ['trace_file', 'output_file'],
}


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="faastrace: offline cold start analysis of serverless traces",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  faastrace --wrapper azure2021 AzureFunctionsInvocationTraceForTwoWeeksJan2021.txt out.csv

  faastrace --wrapper azure2019 --iat-distribution equidistant \\
    invocations_per_function_md.anon.d01.csv \\
    function_durations_percentiles.anon.d01.csv out.csv
        """
    )
    parser.add_argument(
        "--wrapper",
        choices=sorted(POSITIONAL_ARGS),
        required=True,
        help="Trace format",
    )
    parser.add_argument(
        "files",
        nargs="*",
        help="azure2019: <invocation_file> <duration_file> <output_file>; "
             "azure2021: <trace_file> <output_file>",
    )
    parser.add_argument(
        "--keepalive",
        type=float,
        default=None,
        help="Seconds an instance remains alive after invocation ends (default 60)",
    )
    parser.add_argument(
        "--tolerance",
        type=float,
        default=None,
        help="Tolerance in milliseconds for grouping intervals (default 100)",
    )
    parser.add_argument(
        "--iat-distribution",
        choices=["exponential", "uniform", "equidistant"],
        default=None,
        help="Inter-arrival distribution inside a bucket (azure2019)",
    )
    parser.add_argument(
        "--shift-iat",
        action="store_true",
        help="Randomly shift the arrivals of each bucket (azure2019)",
    )
    parser.add_argument(
        "--granularity",
        choices=["minute", "second"],
        default=None,
        help="Bucket width of the invocation counts (azure2019)",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="YAML file overriding the default configuration",
    )
    parser.add_argument(
        "--plot",
        action="store_true",
        help="Save a per-minute cold start chart next to the output",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    return parser


def parse_args(argv=None):
    """Parse command line arguments."""
    parser = build_parser()
    args = parser.parse_args(argv)

    expected = POSITIONAL_ARGS[args.wrapper]
    if len(args.files) != len(expected):
        parser.error(
            f"--wrapper={args.wrapper} needs {len(expected)} args: "
            + " ".join(f"<{name}>" for name in expected)
        )
    return args


def build_config(args) -> dict:
    """Merge the default config, the optional user config and CLI flags."""
    config = load_default_config(args.config)

    overrides = {'analysis': {}, 'trace': {'format': args.wrapper}, 'output': {}}
    if args.keepalive is not None:
        overrides['analysis']['keep_alive_seconds'] = args.keepalive
    if args.tolerance is not None:
        overrides['analysis']['tolerance_ms'] = args.tolerance
    if args.iat_distribution is not None:
        overrides['trace']['iat_distribution'] = args.iat_distribution
    if args.granularity is not None:
        overrides['trace']['granularity'] = args.granularity
    if args.shift_iat:
        overrides['trace']['shift_iat'] = True
    if args.plot:
        overrides['output']['plot'] = True

    return merge_configs(config, overrides)


def main(argv=None) -> int:
    """Main function."""
    args = parse_args(argv)

    logger = setup_logger("faastrace", verbose=args.verbose)
    logger.info("=== faastrace: serverless cold start analysis ===")

    try:
        config = build_config(args)
        trace_cfg = config['trace']

        if args.wrapper == 'azure2019':
            trace_path, duration_path, output_path = args.files
        else:
            trace_path, output_path = args.files
            duration_path = None

        logger.info(f"Loading {args.wrapper} trace from {trace_path}")
        loader = TraceLoader(
            trace_path,
            trace_format=args.wrapper,
            duration_path=duration_path,
            iat_distribution=trace_cfg.get('iat_distribution', 'exponential'),
            shift_iat=bool(trace_cfg.get('shift_iat', False)),
            granularity=trace_cfg.get('granularity', 'minute'),
            seed=trace_cfg.get('seed'),
            start_of_day_ms=trace_cfg.get('start_of_day_ms', 0),
            show_progress=True,
        )
        records = loader.load()

        analyzer = TraceAnalyzer(config)
        result = analyzer.run(records)

        output_path = Path(output_path)
        write_csv(result.rows, str(output_path))

        summary = result.summary()
        logger.info("\n=== Cold Start Summary ===")
        logger.info(f"Functions: {summary['num_functions']} "
                    f"({summary['num_periodic_functions']} periodic)")
        logger.info(f"Invocations: {summary['total_invocations']}")
        logger.info(f"Cold starts: {summary['cold_starts']} ({summary['cold_start_ratio']:.2%})")
        logger.info(f"Cold starts from 0: {summary['cold_starts_from_zero']}")
        logger.info(f"Periodic cold starts: {summary['periodic_cold_starts']}")

        if config['output'].get('summary', True):
            write_summary(summary, str(output_path.with_name(output_path.stem + "_summary.yaml")))

        if config['output'].get('plot', False):
            plot_path = output_path.with_name(output_path.stem + "_coldstarts.png")
            logger.info("Generating cold start chart...")
            plot_multiple_cold_starts(
                [event_timestamps(result.all_cold_starts),
                 event_timestamps(result.cold_starts_from_zero),
                 event_timestamps(result.periodic_cold_starts)],
                ["Cold Starts", "Cold Starts From 0", "Periodic Cold Starts"],
                [1.0, 0.6, 0.6],
                plot_path,
                start_of_day_ms=trace_cfg.get('start_of_day_ms', 0),
            )
            logger.info(f"Chart saved to {plot_path}")

        logger.info("Analysis completed successfully!")
        return 0

    except Exception as e:
        logger.error(f"Analysis failed: {str(e)}", exc_info=True)
        return 1


if __name__ == "__main__":
    sys.exit(main())
