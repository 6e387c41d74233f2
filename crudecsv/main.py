#!/usr/bin/env python3
import sys
import os
import logging
import argparse

from .utils.config import Config
from .utils.csv_creator import CsvFileCreator
from .utils.template_resolver import TemplateResolver
from .utils.vault import Vault, VaultError

logger = logging.getLogger(__name__)


def parse_args(args):
    """Parse command line arguments"""
    parser = argparse.ArgumentParser(description='Crude CSV - Edit CSV files in a vault as a grid')
    parser.add_argument('vault', nargs='?', default=os.getcwd(),
                        help='Vault folder (default: current directory)')
    parser.add_argument('files', nargs='*', help='CSV files to open, relative to the vault')
    parser.add_argument('--new', '-n', nargs='?', const='', default=None, metavar='NAME',
                        help='Create a new CSV file (name relative to the vault)')
    parser.add_argument('--print-template', action='store_true',
                        help='Print the content a new CSV file would get and exit')
    parser.add_argument('--template-path', '-t',
                        help='Override the configured template file or folder')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable verbose logging')
    return parser.parse_args(args)


def setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )


def create_from_cli(vault: Vault, resolver: TemplateResolver, name: str) -> int:
    """Create a CSV without the GUI; name may include a folder"""
    folder, _, file_name = name.strip().strip('/').rpartition('/')
    path, message = CsvFileCreator(vault, resolver).create_new_csv(file_name, folder or '/')
    if path is None:
        print(f"Error: {message}", file=sys.stderr)
        return 1
    print(message)
    return 0


def main(args=None):
    """Main entry point for Crude CSV"""
    if args is None:
        args = sys.argv[1:]

    args = parse_args(args)
    setup_logging(args.verbose)

    try:
        vault = Vault(args.vault)
    except VaultError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    config = Config()
    template_path = args.template_path if args.template_path is not None else config.get_template_path()
    resolver = TemplateResolver.for_vault(vault, template_path)

    if args.print_template:
        print(resolver.resolve_template_content())
        return 0

    if args.new:
        return create_from_cli(vault, resolver, args.new)

    # GUI imports stay here so the command-line paths work without a display
    from PyQt6.QtWidgets import QApplication
    from PyQt6.QtGui import QIcon
    from .widgets.main_widget import MainWidget

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
        app.setApplicationName('Crude CSV')
        app.setStyle('Fusion')
        app.setWindowIcon(QIcon.fromTheme('x-office-spreadsheet'))

    widget = MainWidget(vault, config)
    widget.setWindowIcon(app.windowIcon())
    widget.show()

    for path in args.files:
        widget.open_file(vault.relative(os.path.abspath(path)) if os.path.isabs(path) else path)

    if args.new == '':
        widget.create_new_csv()

    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
