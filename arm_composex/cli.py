# SPDX-License-Identifier: MPL-2.0
# Copyright 2020-2022 John Mille <john@compose-x.io>

"""
Console script for arm_composex.
"""

import argparse
import sys

import jsonschema

from arm_composex import __version__
from arm_composex.arm_composex import generate_template
from arm_composex.common.files import FileArtifact
from arm_composex.common.logging import LOG, set_loglevel
from arm_composex.common.settings import ArmComposeXSettings
from arm_composex.exceptions import ArmComposeXException


class ArgparseHelper(argparse._HelpAction):
    """
    Used to help print top level '--help' arguments from argparse
    when used with subparsers
    """

    def __call__(self, parser, namespace, values, option_string=None):
        parser.print_help()
        print()
        subparsers_actions = [
            action
            for action in parser._actions
            if isinstance(action, argparse._SubParsersAction)
        ]
        for subparsers_action in subparsers_actions:
            for choice, subparser in list(subparsers_action.choices.items()):
                print(f"Command '{choice}'")
                print(subparser.format_usage())
        parser.exit()


def main_parser():
    """
    Console script for arm_composex.
    """
    parser = argparse.ArgumentParser(add_help=False)
    parser.add_argument(
        "-h",
        "--help",
        action=ArgparseHelper,
        help="show this help message and exit",
    )
    parser.add_argument(
        "--loglevel", type=str, help="Log level. Defaults to INFO", required=False
    )
    cmd_parsers = parser.add_subparsers(
        dest=ArmComposeXSettings.command_arg, help="Command to execute."
    )
    files_parser = argparse.ArgumentParser(add_help=False)
    files_parser.add_argument(
        "-f",
        "--file",
        dest=ArmComposeXSettings.input_file_arg,
        required=True,
        help="Path to the resources definition file. Can be repeated, later files override earlier ones.",
        action="append",
    )
    base_command_parser = argparse.ArgumentParser(add_help=False)
    base_command_parser.add_argument(
        "-n",
        "--name",
        help="Name of the deployment. Used for the template file name",
        required=True,
        type=str,
        dest=ArmComposeXSettings.name_arg,
    )
    base_command_parser.add_argument(
        "-d",
        "--output-dir",
        required=False,
        help="Output directory to write the template to.",
        type=str,
        dest=ArmComposeXSettings.output_dir_arg,
        default=ArmComposeXSettings.default_output_dir,
    )
    base_command_parser.add_argument(
        "--location",
        required=False,
        dest=ArmComposeXSettings.location_arg,
        help="Azure region to deploy the resources to. Overrides the input files location",
    )
    for command in ArmComposeXSettings.active_commands:
        cmd_parsers.add_parser(
            name=command["name"],
            help=command["help"],
            parents=[base_command_parser, files_parser],
        )
    for command in ArmComposeXSettings.validation_commands:
        cmd_parsers.add_parser(
            name=command["name"], help=command["help"], parents=[files_parser]
        )
    for command in ArmComposeXSettings.neutral_commands:
        cmd_parsers.add_parser(name=command["name"], help=command["help"])
    return parser


def main(argv: list = None) -> int:
    """
    Main entry point for CLI
    :return: status code
    """
    parser = main_parser()
    argv = sys.argv[1:] if argv is None else argv
    if not argv:
        parser.print_help()
        return 0
    args = parser.parse_args(argv)
    if args.loglevel:
        try:
            set_loglevel(args.loglevel)
        except ValueError as error:
            print(error, file=sys.stderr)
            return 2
    LOG.debug(args)
    command = getattr(args, ArmComposeXSettings.command_arg)
    if command == ArmComposeXSettings.version_arg:
        print("ARM Compose-X", __version__)
        return 0
    try:
        settings = ArmComposeXSettings(**vars(args))
        LOG.debug(settings)
        if command == ArmComposeXSettings.config_render_arg:
            print(settings.content_yaml())
            return 0
        if not settings.has_resources():
            LOG.warning(f"{settings.name} - no resources defined in the input files")
        document, template = generate_template(settings.arm_config)
        template_file = FileArtifact(settings.file_name, template, settings.output_dir)
        template_file.write()
    except (
        ArmComposeXException,
        jsonschema.exceptions.ValidationError,
        ValueError,
        TypeError,
        OSError,
    ) as error:
        LOG.error(error)
        return 1
    LOG.info(
        f"{settings.name} - {len(document.resources)} resources, {len(document.parameters)} parameters"
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())  # pragma: no cover
