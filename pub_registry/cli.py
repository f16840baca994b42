# Copyright (c) 2025 adcl.io
# All Rights Reserved.
#
# This software is proprietary and confidential. Unauthorized copying,
# distribution, or use of this software is strictly prohibited.

"""
Command line entry point: pub-registry [BASE_URL] [options]
"""

import argparse
import dataclasses
import os
import sys

from pub_registry.core.config import load_config, set_config


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the pub package registry")
    parser.add_argument(
        "base_url",
        nargs="?",
        help="Public URL clients use to reach this registry (e.g. https://pub.example.com)"
    )
    parser.add_argument(
        "--config",
        default=os.getenv("PUB_REGISTRY_CONFIG", "pub_registry.yaml"),
        help="Path to YAML configuration file"
    )
    parser.add_argument("--host", help="Interface to bind")
    parser.add_argument("--port", type=int, help="Port to listen on")
    parser.add_argument("--repository", help="Directory holding package indexes and archives")
    parser.add_argument("--tokens", help="Path to the token file")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    overrides = {
        "base_url": args.base_url,
        "host": args.host,
        "port": args.port,
        "repository_path": args.repository,
        "tokens_path": args.tokens,
    }
    config = dataclasses.replace(config, **{k: v for k, v in overrides.items() if v is not None})
    set_config(config)

    # Imported after the config is installed so service loggers pick it up
    import uvicorn
    from pub_registry.core.errors import ConfigurationError
    from pub_registry.main import create_app

    try:
        app = create_app(config)
    except ConfigurationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    uvicorn.run(app, host=config.host, port=config.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
