from __future__ import annotations

import argparse
import sys
from pathlib import Path

from distrobox_backup.config import load_settings
from distrobox_backup.exceptions import DependencyMissingError, ExternalCommandError
from distrobox_backup.logging import LoggerFactory, setup_logging
from distrobox_backup.services import CommandRunner, ContainerRegistry, detect_tool_config
from distrobox_backup.ui import ConsolePrompts, MainMenu, spinner_factory
from distrobox_backup.workflows import WorkflowEngine

EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Backup, restore, convert and delete Distrobox containers"
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Enable verbose debug output")
    parser.add_argument(
        "--trace", action="store_true", help="Log the output of every external command"
    )
    parser.add_argument("--log-dir", type=Path, default=None, help="Directory for log files")
    parser.add_argument(
        "--settings", type=Path, default=None, help="Path to settings.json"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the interactive tool and return the process exit code."""
    args = build_parser().parse_args(argv)
    setup_logging(debug=args.debug, trace=args.trace, log_dir=args.log_dir)
    log = LoggerFactory.for_system()

    settings = load_settings(args.settings)
    runner = CommandRunner()
    try:
        config = detect_tool_config(settings, runner=runner)
    except DependencyMissingError as error:
        log.error(f"FATAL: {error}")
        return 1

    prompts = ConsolePrompts(file_picker=config.file_picker)
    engine = WorkflowEngine.from_config(
        config,
        prompts,
        runner=runner,
        indicator=spinner_factory(interval=config.spinner_interval),
    )
    registry = ContainerRegistry(config, runner)
    menu = MainMenu(config, registry, engine.classifier, engine, prompts)

    try:
        menu.run()
    except ExternalCommandError as error:
        log.error(
            "Could not list Distrobox containers. "
            "Is distrobox installed and running correctly?"
        )
        log.error(str(error))
        return 1
    except KeyboardInterrupt:
        print()
        return EXIT_INTERRUPTED
    finally:
        for image in engine.temp_images.outstanding():
            log.warning(
                f"Temporary image '{image.name}' is still present. "
                "You may want to remove it manually."
            )
    return 0


if __name__ == "__main__":
    sys.exit(main())
