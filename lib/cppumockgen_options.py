# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import argparse
import os

from cppumockgen_config import OptionError
from cppumockgen_config_file import process_config_files
from cppumockgen_string_helper import quotify_option


class CppUMockGenArgumentParser(argparse.ArgumentParser):
    """Raises instead of exiting, so that option errors map to an exit code."""

    def error(self, message):
        raise OptionError(message)


def build_argument_parser():
    parser = CppUMockGenArgumentParser(prog="CppUMockGen", description="Mock generator for CppUTest",
                                       add_help=False)
    parser.add_argument('input_positional', nargs='?', metavar='<input>', help="Input file")
    parser.add_argument('-i', '--input', metavar='<input>', help="Input file")
    parser.add_argument('-m', '--mock-output', nargs='?', const='', metavar='<mock-output>',
                        help="Mock output path ('@' for stdout)")
    parser.add_argument('-e', '--expect-output', nargs='?', const='', metavar='<expect-output>',
                        help="Expectation output path")
    parser.add_argument('-x', '--cpp', action='store_true',
                        help="Force interpretation of the input file as C++")
    parser.add_argument('-s', '--std', default='', metavar='<standard>',
                        help="Set language standard (c++14, c++17, etc.)")
    parser.add_argument('-u', '--underlying-typedef', action='store_true',
                        help="Use underlying typedef type")
    parser.add_argument('-I', '--include-path', action='append', default=[], metavar='<path>',
                        help="Include path")
    parser.add_argument('-B', '--base-directory', default='', metavar='<path>',
                        help="Base directory path")
    parser.add_argument('-t', '--type-override', action='append', default=[], metavar='<expr>',
                        help="Override generic type")
    parser.add_argument('-f', '--config-file', action='append', default=[], metavar='<file>',
                        help="Configuration file (YAML)")
    parser.add_argument('-r', '--regen', action='store_true',
                        help="Regenerate mocks and expectations from the options recorded in the mock output")
    parser.add_argument('--clang-library-file', default=os.environ.get('CLANG_LIBRARY_FILE', None),
                        metavar='<file>', help="Path to the libclang .dll/.so/.dylib")
    parser.add_argument('-v', '--version', action='store_true', help="Print version")
    parser.add_argument('-h', '--help', action='store_true', help="Print help")
    return parser


def tokenize_options(text):
    """
    Splits an option string into arguments on spaces. Arguments containing
    spaces can be enclosed in double quotes, and quotes inside them escaped
    with a backslash.
    """
    tokens = []
    pos = 0
    length = len(text)
    while pos < length:
        if text[pos] == ' ':
            pos += 1
        elif text[pos] == '"':
            start = pos
            pos += 1
            token = ""
            while True:
                if pos >= length:
                    raise OptionError(f"{start}: Ending quote was not found.")
                if text[pos] == '\\' and pos + 1 < length and text[pos + 1] == '"':
                    token += '"'
                    pos += 2
                elif text[pos] == '"':
                    pos += 1
                    break
                else:
                    token += text[pos]
                    pos += 1
            tokens.append(token)
        else:
            end = text.find(' ', pos)
            if end < 0:
                end = length
            tokens.append(text[pos:end])
            pos = end
    return tokens


def get_generation_options(args):
    """Options that affect the generated output, as recorded in its heading."""
    options = ""
    if args.cpp:
        options += "-x "
    if args.std:
        options += f"-s {args.std} "
    if args.underlying_typedef:
        options += "-u "
    for type_override in args.type_override:
        options += f"-t {quotify_option(type_override)} "
    return options.rstrip(' ')


class CppUMockGenOptions:
    def __init__(self):
        self.parser = build_argument_parser()

    def format_help(self):
        return self.parser.format_help()

    def parse(self, argv, recorded_options=""):
        """
        Parses the command line. ``recorded_options`` (from a previous
        generation) and the contents of configuration files come first, so
        the command line takes precedence over them.
        """
        prefix = []
        if recorded_options:
            try:
                prefix = tokenize_options(recorded_options)
            except OptionError as e:
                raise OptionError(f"In options '{recorded_options}':{e}")

        args = self.parser.parse_args(prefix + list(argv))
        if args.config_file:
            config_arguments = process_config_files(args.config_file, os.getcwd())
            args = self.parser.parse_args(prefix + config_arguments + list(argv))

        if args.input is None:
            args.input = args.input_positional
        return args
