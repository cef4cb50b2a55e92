"""
Command entry point: installs the pinned runtime and exits non-zero with a readable cause on failure.
"""

import logging
import os
import signal
import sys
from typing import Mapping, Optional

from runtimepin.runtimepin_config import RuntimePinConfig, load_config
from runtimepin.runtimepin_exceptions import (
    ConfigurationError,
    InstallInterrupted,
    RuntimePinException,
)
from runtimepin.runtimepin_logger import RuntimePinLogger
from runtimepin.runtimes.nodejs import create_installer

EXIT_FAILURE = 1
EXIT_CONFIGURATION = 2
EXIT_INTERRUPTED = 130


def _raise_interrupted(signum, frame):
    raise InstallInterrupted(f"Interrupted by signal {signal.Signals(signum).name}")


def run(config: RuntimePinConfig, logger: RuntimePinLogger) -> int:
    try:
        installer = create_installer(config, logger)
        outcome = installer.ensure_installed(trust_anchor=config.trust_anchor)
    except (InstallInterrupted, KeyboardInterrupt) as e:
        print(f"runtimepin: interrupted: {str(e) or 'keyboard interrupt'}", file=sys.stderr)
        return EXIT_INTERRUPTED
    except ConfigurationError as e:
        print(f"runtimepin: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION
    except RuntimePinException as e:
        print(f"runtimepin: {type(e).__name__}: {e}", file=sys.stderr)
        return EXIT_FAILURE

    if outcome.changed:
        print(f"runtimepin: installed node v{outcome.pinned_version} into {config.install_root}")
    else:
        print(f"runtimepin: node v{outcome.pinned_version} already installed")
    return 0


def main(environ: Optional[Mapping[str, str]] = None) -> int:
    environ = os.environ if environ is None else environ
    try:
        config = load_config(environ)
    except ConfigurationError as e:
        print(f"runtimepin: {e}", file=sys.stderr)
        return EXIT_CONFIGURATION

    logging.basicConfig(level=config.log_level.upper(), format="%(message)s", stream=sys.stderr)
    signal.signal(signal.SIGTERM, _raise_interrupted)

    return run(config, RuntimePinLogger())


def console_main() -> None:
    sys.exit(main())


if __name__ == "__main__":
    console_main()
