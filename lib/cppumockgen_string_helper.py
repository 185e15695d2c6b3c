# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import os

# Characters that force an option value to be quoted when it is recorded
QUOTABLE_CHARS = " \t=&|,;^%@$!#*?(){}[]<>`"


def trim_string(text):
    """Strips leading and trailing spaces (only spaces, tabs are kept)."""
    return text.strip(' ')


def to_lower(text):
    return text.lower()


def string_count(text, char):
    return text.count(char)


def is_dir_path(path):
    return bool(path) and path[-1] in ('/', os.sep)


def get_filename_from_path(filepath):
    sep_pos = max(filepath.rfind('/'), filepath.rfind(os.sep))
    return filepath if sep_pos < 0 else filepath[sep_pos + 1:]


def remove_filename_extension(filename):
    """Removes everything from the first dot on (``a.b.h`` -> ``a``)."""
    dot_pos = filename.find('.')
    return filename if dot_pos < 0 else filename[:dot_pos]


def get_extension(filepath):
    filename = get_filename_from_path(filepath)
    dot_pos = filename.rfind('.')
    return '' if dot_pos < 0 else filename[dot_pos + 1:]


def escape_quotes(text):
    return text.replace('"', '\\"')


def quotify_option(option):
    if any(c in QUOTABLE_CHARS for c in option):
        return f'"{escape_quotes(option)}"'
    return option
