#!/usr/bin/env python
from __future__ import annotations

import os
import sys


DEFAULT_LOCAL_TEST_SETTINGS = "local_settings_example.py"


def get_local_test_settings_file(argv):
    """Find the settings file used by ``manage.py test``, given by
    ``--local_test_settings``. The production ``local_settings.py`` is
    refused.
    """
    from django.core.management import CommandError, CommandParser

    project_dir = os.path.dirname(os.path.abspath(argv[0]))

    parser = CommandParser(add_help=False)
    parser.add_argument("--local_test_settings",
                        dest="local_test_settings",
                        default=DEFAULT_LOCAL_TEST_SETTINGS)
    options, _args = parser.parse_known_args(argv)

    filename = options.local_test_settings
    if not os.path.dirname(filename):
        filename = os.path.join(project_dir, filename)
    filename = os.path.abspath(filename)

    if filename == os.path.join(project_dir, "local_settings.py"):
        raise CommandError(
            "Using production local_settings for tests is not "
            "allowed due to security reason.")

    if not os.path.isfile(filename):
        raise CommandError("file '%s' does not exist" % filename)

    return filename


if __name__ == "__main__":
    os.environ.setdefault("DJANGO_SETTINGS_MODULE", "examcenter.settings")

    from django.core.management import execute_from_command_line

    if sys.argv[1:2] == ["test"]:
        os.environ["EXAMCENTER_LOCAL_TEST_SETTINGS"] = (
                get_local_test_settings_file(sys.argv))

    execute_from_command_line(sys.argv)
