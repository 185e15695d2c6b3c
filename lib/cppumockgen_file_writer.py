# =========================================================================
#   CppUMockGen - Mock generator for CppUTest
#   
#   Copyright (c) 2025 Christian Renzel
#   SPDX-License-Identifier: MIT
# =========================================================================

import filecmp
import os
import shutil


class CppUMockGenFileWriter:
    def create_file(self, filepath, callback, *args, **kwargs):
        """
        Create a file, writing its contents using the provided callback.
        Uses a temp file so that an unchanged file is not touched.
        Returns True if the file was (re)written.
        """
        if not callable(callback):
            raise ValueError("A callable must be provided to generate file contents.")

        temp_file = f"{filepath}.new"

        with open(temp_file, 'w') as file:
            callback(file, *args, **kwargs)

        # Avoid unnecessary file updates
        if os.path.exists(filepath) and filecmp.cmp(temp_file, filepath, shallow=False):
            os.remove(temp_file)
            return False

        shutil.move(temp_file, filepath)
        return True
