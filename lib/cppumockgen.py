#!/usr/bin/env python3
# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import logging
import os
import sys

from clang.cindex import LibclangError

from cppumockgen_clang_helper import configure_library
from cppumockgen_config import CppUMockGenConfig, OptionError
from cppumockgen_console_colorizer import Color, ConsoleColorizer
from cppumockgen_file_writer import CppUMockGenFileWriter
from cppumockgen_options import CppUMockGenOptions, get_generation_options
from cppumockgen_output_file_parser import CppUMockGenOutputFileParser
from cppumockgen_parser import INPUT_ERROR, CppUMockGenParser
from cppumockgen_string_helper import get_filename_from_path, is_dir_path, remove_filename_extension
from cppumockgen_version import CPPUMOCKGEN_VERSION

log = logging.getLogger(__name__)

EXIT_SUCCESS = 0
EXIT_OPTIONS_ERROR = 1
EXIT_INPUT_ERROR = 2
EXIT_PARSE_ERROR = 3

STDOUT_PATH = "@"


class CppUMockGen:
    def __init__(self, out=None, err=None):
        self.out = out if out is not None else sys.stdout
        self.err = err if err is not None else sys.stderr
        self.err_colorizer = ConsoleColorizer(self.err)
        self.out_colorizer = ConsoleColorizer(self.out)
        self.options = CppUMockGenOptions()
        self.writer = CppUMockGenFileWriter()

    def print_error(self, message):
        self.err_colorizer.write("ERROR: ", Color.LIGHT_RED, message)

    def print_success(self, message):
        self.out_colorizer.write("SUCCESS: ", Color.LIGHT_GREEN, message)

    def execute(self, argv):
        try:
            return self._execute(argv)
        except OptionError as e:
            self.print_error(str(e))
            return EXIT_OPTIONS_ERROR
        except OSError as e:
            self.print_error(str(e))
            return EXIT_OPTIONS_ERROR
        except LibclangError as e:
            self.print_error(f"libclang could not be loaded: {e}")
            return EXIT_OPTIONS_ERROR

    def _execute(self, argv):
        args = self.options.parse(argv)

        if args.help:
            self.out.write(self.options.format_help())
            return EXIT_SUCCESS
        if args.version:
            self.out.write(f"CppUMockGen v{CPPUMOCKGEN_VERSION}\n")
            return EXIT_SUCCESS

        if args.mock_output is None and args.expect_output is None:
            raise OptionError("At least the mock generation option (-m) or the expectation generation "
                              "option (-e) must be specified.")

        if not args.input:
            raise OptionError("No input file specified.")

        user_code = ""
        if args.mock_output is not None and args.mock_output != STDOUT_PATH:
            output_parser = CppUMockGenOutputFileParser()
            output_parser.parse(self._mock_output_path(args))
            user_code = output_parser.user_code
            if args.regen and output_parser.generation_options:
                log.debug("regenerating with options: %s", output_parser.generation_options)
                args = self.options.parse(argv, output_parser.generation_options)
        elif args.regen:
            raise OptionError("Regeneration (-r) requires the mock output (-m) to be a file.")

        configure_library(args.clang_library_file)
        config = CppUMockGenConfig(args.underlying_typedef, args.type_override)

        parser = CppUMockGenParser(self.err)
        if not parser.parse(args.input, config, args.cpp, args.std, args.include_path):
            self.print_error(f"Output could not be generated due to errors parsing the input file '{args.input}'.")
            return EXIT_INPUT_ERROR if parser.error_kind == INPUT_ERROR else EXIT_PARSE_ERROR

        gen_opts = get_generation_options(args)

        if args.mock_output is not None:
            self._generate_mock(args, parser, gen_opts, user_code)
        if args.expect_output is not None:
            self._generate_expectations(args, parser, gen_opts)

        return EXIT_SUCCESS

    def _input_stem(self, args):
        return remove_filename_extension(get_filename_from_path(args.input or ""))

    def _mock_output_path(self, args):
        path = args.mock_output
        if not path or is_dir_path(path):
            path += f"{self._input_stem(args)}_mock.cpp"
        return path

    def _expectation_output_base(self, args):
        path = args.expect_output
        if not path or is_dir_path(path):
            return path + f"{self._input_stem(args)}_expect"
        return os.path.splitext(path)[0]

    def _generate_mock(self, args, parser, gen_opts, user_code):
        if args.mock_output == STDOUT_PATH:
            parser.generate_mock(gen_opts, user_code, args.base_directory, self.out)
            return

        path = self._mock_output_path(args)
        try:
            self.writer.create_file(path, lambda file: parser.generate_mock(gen_opts, user_code,
                                                                           args.base_directory, file))
        except OSError:
            raise OptionError(f"Mock output file '{path}' could not be opened.")
        self.print_success(f"Mock generated into '{path}'")

    def _generate_expectations(self, args, parser, gen_opts):
        base = self._expectation_output_base(args)
        header_path = f"{base}.hpp"
        impl_path = f"{base}.cpp"

        try:
            self.writer.create_file(header_path, lambda file: parser.generate_expectation_header(
                gen_opts, args.base_directory, file))
        except OSError:
            raise OptionError(f"Expectation header output file '{header_path}' could not be opened.")
        try:
            self.writer.create_file(impl_path, lambda file: parser.generate_expectation_impl(
                gen_opts, header_path, file))
        except OSError:
            raise OptionError(f"Expectation implementation output file '{impl_path}' could not be opened.")
        self.print_success(f"Expectations generated into '{header_path}' and '{impl_path}'")


def main():
    logging.basicConfig(level=os.environ.get("CPPUMOCKGEN_LOG_LEVEL", "WARNING").upper(),
                        format="%(name)s: %(levelname)s: %(message)s")
    sys.exit(CppUMockGen().execute(sys.argv[1:]))


if __name__ == "__main__":
    main()
