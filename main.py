#!/usr/bin/env python3
"""
cellroute - Main Entry Point
Multi-layer maze router for placed IC cell layouts
"""

import sys
import logging
import argparse
from typing import Optional

from cellroute.shared.configuration import LoggingSettings, initialize_config
from cellroute.shared.exceptions import CellRouteException
from cellroute.shared.utils.logging_utils import setup_logging

EXIT_OK = 0
EXIT_INPUT_ERROR = 1
EXIT_UNROUTED = 2


def setup_environment(config_path: Optional[str] = None, verbose: bool = False):
    """Load configuration and configure logging."""
    config = initialize_config(config_path)
    if verbose:
        config.update_logging_settings(level="DEBUG")
    logging_settings = config.get_settings().logging
    logging_errors = logging_settings.validate()
    if logging_errors:
        logging_settings = LoggingSettings()
    setup_logging(logging_settings)
    for error in logging_errors:
        logging.warning(f"Ignoring logging settings: {error}")
    return config


def run_route(layout_file: str, output: Optional[str] = None,
              config_path: Optional[str] = None, optimize: bool = False,
              verbose: bool = False) -> int:
    """Route every net of a layout document and write the result."""
    from cellroute.domain.models.constraints import DEFAULT_TECHNOLOGY_RULES
    from cellroute.domain.services.drc_checker import DRCChecker
    from cellroute.domain.services.routing_engine import NetRouter
    from cellroute.infrastructure.serialization import (
        load_layout, load_rules, export_route_result, route_result_to_dict
    )

    try:
        config = setup_environment(config_path, verbose)
        if optimize:
            config.update_routing_settings(optimize=True)
        routing_config = config.get_routing_config()

        document = load_layout(layout_file)
        rules = list(document.rules)
        drc_settings = config.get_settings().drc
        if drc_settings.rules_file:
            rules.extend(load_rules(drc_settings.rules_file))
        if drc_settings.use_default_rules and not rules:
            rules = list(DEFAULT_TECHNOLOGY_RULES)

        router = NetRouter(routing_config, rules)
        result = router.route(document.nets, document.cells, document.wires)
    except CellRouteException as e:
        logging.error(f"Routing aborted: {e}")
        return EXIT_INPUT_ERROR

    stats = result.statistics
    print(f"Routed {stats.nets_routed}/{stats.nets_attempted} nets")
    print(f"  total length: {stats.total_length:.2f}")
    print(f"  vias: {stats.via_count}  bends: {stats.bend_count}  DRC violations: {stats.drc_violations}")
    print(f"  search expansions: {stats.iterations}")
    for error in result.errors:
        print(f"  ERROR: {error}")
    if result.violations:
        report = DRCChecker().generate_drc_report(result.violations)
        for line in report['violations']:
            print(f"  {line}")

    if output:
        if not export_route_result(result, output):
            return EXIT_INPUT_ERROR
    else:
        import json
        logging.debug(json.dumps(route_result_to_dict(result)['statistics']))

    return EXIT_OK if result.success else EXIT_UNROUTED


def run_check_config(config_path: Optional[str] = None) -> int:
    """Validate a configuration file and report problems."""
    config = setup_environment(config_path)
    errors = config.validate()
    problems = [(category, error) for category, error_list in errors.items() for error in error_list]
    for category, error in problems:
        print(f"{category}: {error}")
    if problems:
        return EXIT_INPUT_ERROR
    print("Configuration OK")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cellroute",
        description="cellroute - multi-layer maze router for IC cell layouts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s route layout.json                  # Route and print a summary
  %(prog)s route layout.json -o routes.json   # Route and save the result
  %(prog)s check-config -c cellroute.json     # Validate a configuration file
        """
    )
    parser.add_argument('--version', action='version', version='%(prog)s 1.0.0')

    subparsers = parser.add_subparsers(dest='mode', help='Operation mode')

    route_parser = subparsers.add_parser('route', help='Route the nets of a layout document')
    route_parser.add_argument('layout_file', help='Layout document (.json or gzipped JSON)')
    route_parser.add_argument('-o', '--output', help='Write routes to this JSON file')
    route_parser.add_argument('-c', '--config', help='Configuration file path')
    route_parser.add_argument('--optimize', action='store_true',
                              help='Remove redundant collinear points from routed paths')
    route_parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')

    check_parser = subparsers.add_parser('check-config', help='Validate a configuration file')
    check_parser.add_argument('-c', '--config', help='Configuration file path')

    return parser


def main(argv=None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode == 'route':
        return run_route(args.layout_file, args.output, args.config, args.optimize, args.verbose)
    if args.mode == 'check-config':
        return run_check_config(args.config)

    parser.print_help()
    return EXIT_INPUT_ERROR


if __name__ == '__main__':
    sys.exit(main())
