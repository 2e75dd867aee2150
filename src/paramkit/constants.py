"""Global constants for paramkit.

This module centralizes the names and formats shared by the store,
the loader and the CLI.
"""

import re

# Boolean parameter selecting OS-style path translation for file accessors
OS_FILEPATH_CONVERSION_PARAM: str = "os_filepath_conversion"

# Separator for list-valued parameters and for namespace segments
LIST_SEPARATOR: str = ","
NAMESPACE_SEPARATOR: str = "."

# strftime format of the leading comment written by Parameters.dump()
DUMP_TIMESTAMP_FORMAT: str = "%Y-%m-%d %H:%M:%S"

# Parameter file directives
INCLUDE_DIRECTIVE: str = "INCLUDE"
COMMENT_PREFIX: str = "#"

# Values reference other keys as %name%; a literal % is written %%
REFERENCE_MARKER: str = "%"

# Parameter names may not contain whitespace, assignment separators or the
# comment marker, so every name can be written to and read from a file
PARAMETER_NAME_PATTERN = re.compile(r"[^\s:=#]+")
