"""
csp-guard CLI
"""
import argparse
import json
import sys

import yaml

from csp_guard.config.loader import GuardSettings, load_settings
from csp_guard.csp.builder import build_csp_header
from csp_guard.headers import generate_security_headers
from csp_guard.logging_config import setup_logging
from csp_guard.models.csp_rule import SecurityOptions, coerce_rules
from csp_guard.nonce import generate_nonce


def load_rules(path):
    """Load a YAML list of CSP rule mappings."""
    with open(path) as f:
        data = yaml.safe_load(f) or []
    if isinstance(data, dict):
        data = data.get('rules', [])
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a list of rules")
    return coerce_rules(data)


def main(argv=None):
    """Main CLI entry point"""
    parser = argparse.ArgumentParser(
        prog='csp_guard',
        description="csp-guard - Build Content-Security-Policy headers from rules",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Baseline production policy
  python -m csp_guard build

  # Development policy with extra rules
  python -m csp_guard build rules.yaml --dev

  # Every security header, one "Name: value" per line, with a fresh nonce
  python -m csp_guard build rules.yaml --generate-nonce --all-headers

  # Every security header as JSON
  python -m csp_guard build rules.yaml --all-headers --format json
        """
    )

    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    build_parser = subparsers.add_parser('build', help='Build the CSP header')
    build_parser.add_argument('rules', nargs='?', help='YAML file with a list of CSP rules')
    build_parser.add_argument('--dev', action='store_true',
                              help='Use the development baseline (unsafe-eval, localhost websockets)')
    nonce_group = build_parser.add_mutually_exclusive_group()
    nonce_group.add_argument('--nonce', help='Nonce to embed in script-src')
    nonce_group.add_argument('--generate-nonce', action='store_true',
                             help='Generate a random nonce')
    build_parser.add_argument('--all-headers', action='store_true',
                              help='Print every security header instead of just CSP')
    build_parser.add_argument('--format', choices=['header', 'json'], default='header',
                              help='Output format: header lines or JSON')

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    # stdout is reserved for headers; logging must point at stderr before anything logs
    env = GuardSettings()
    setup_logging(log_level=env.log_level, json_format=env.log_json, stream=sys.stderr)
    settings = load_settings()

    try:
        rules = load_rules(args.rules) if args.rules else []
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error: could not load rules: {e}", file=sys.stderr)
        return 1

    nonce = args.nonce
    if args.generate_nonce:
        nonce = generate_nonce(settings.nonce_bytes)

    if args.all_headers:
        headers = generate_security_headers(rules, SecurityOptions(is_dev=args.dev, nonce=nonce))
        if args.format == 'json':
            print(json.dumps(headers, indent=2))
        else:
            for name, value in headers.items():
                print(f"{name}: {value}")
        return 0

    header = build_csp_header(rules, nonce, args.dev)
    if args.format == 'json':
        print(json.dumps({'Content-Security-Policy': header}, indent=2))
    else:
        print(header)
    return 0


if __name__ == '__main__':
    sys.exit(main())
